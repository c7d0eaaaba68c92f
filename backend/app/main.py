from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.http import configure_cors, configure_request_middleware
from app.core.settings import get_settings, validate_startup_settings


def create_app() -> FastAPI:
    settings = get_settings()
    validate_startup_settings(settings)

    from app.api.router_registry import register_routers
    from models import init_db

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        init_db()
        yield

    app = FastAPI(title="内容发布平台API", version="1.0.0", lifespan=lifespan)

    configure_request_middleware(app)
    configure_cors(app, settings)

    register_routers(app)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
