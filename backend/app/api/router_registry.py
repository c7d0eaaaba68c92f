from fastapi import FastAPI

from app.api.routers.article_router import router as article_router
from app.api.routers.auth_router import router as auth_router
from app.api.routers.category_router import router as category_router
from app.api.routers.comment_router import router as comment_router
from app.api.routers.payment_router import router as payment_router
from app.api.routers.settings_router import router as settings_router
from app.api.routers.tag_router import router as tag_router

BACKEND_PREFIX = "/backend"


def register_routers(app: FastAPI) -> None:
    prefix = BACKEND_PREFIX
    app.include_router(auth_router, prefix=prefix)
    app.include_router(settings_router, prefix=prefix)
    app.include_router(article_router, prefix=prefix)
    app.include_router(comment_router, prefix=prefix)
    app.include_router(tag_router, prefix=prefix)
    app.include_router(category_router, prefix=prefix)
    app.include_router(payment_router, prefix=prefix)

    @app.get(f"{prefix}/api/health")
    async def health_check():
        return {"status": "ok"}
