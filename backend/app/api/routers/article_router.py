from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.dependencies import build_pagination, normalize_pagination
from app.domain.article_command_service import ArticleCommandService
from app.domain.article_query_service import ArticleQueryService
from app.schemas import ArticleCreate, ArticleUpdate, TagPreviewRequest
from auth import get_current_admin
from models import Article, get_db
from slug_utils import generate_slug
from tag_utils import generate_tags

router = APIRouter()
article_query_service = ArticleQueryService()
article_command_service = ArticleCommandService()


def serialize_article(article: Article, comment_count: int | None = None) -> dict:
    data = {
        "id": article.id,
        "slug": article.slug,
        "title": article.title,
        "excerpt": article.excerpt,
        "status": article.status,
        "views": article.views or 0,
        "author_name": article.author_name,
        "category": {
            "id": article.category.id,
            "name": article.category.name,
            "color": article.category.color,
        }
        if article.category
        else None,
        "tags": article.tag_names,
        "published_at": article.published_at,
        "created_at": article.created_at,
        "updated_at": article.updated_at,
    }
    if comment_count is not None:
        data["comments"] = comment_count
    return data


@router.get("/api/articles")
async def get_articles(
    page: int = 1,
    limit: int = 10,
    category: Optional[str] = None,
    search: Optional[str] = None,
    tag: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
):
    page, limit = normalize_pagination(page, limit, default_size=10)
    items, total = article_query_service.get_articles(
        db=db,
        page=page,
        limit=limit,
        category_id=category,
        search=search,
        tag=tag,
        status=status,
    )
    return {
        "data": [serialize_article(article, count) for article, count in items],
        "pagination": build_pagination(page, limit, total),
    }


@router.post("/api/articles")
async def create_article(
    article: ArticleCreate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        created = article_command_service.create_article(article.model_dump(), db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_article(created)


@router.post("/api/articles/preview-meta")
async def preview_article_meta(
    payload: TagPreviewRequest,
    _: bool = Depends(get_current_admin),
):
    """编辑器中预览自动生成的slug和标签"""
    return {
        "slug": generate_slug(payload.title),
        "tags": generate_tags(payload.title, payload.content or ""),
    }


@router.get("/api/articles/{article_key}")
async def get_article(article_key: str, db: Session = Depends(get_db)):
    article = article_query_service.get_article(db, article_key)
    if not article:
        raise HTTPException(status_code=404, detail="文章不存在")

    article_query_service.increment_views(db, article)
    data = serialize_article(article)
    data["content"] = article.content
    return data


@router.put("/api/articles/{article_id}")
async def update_article(
    article_id: str,
    payload: ArticleUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        article = article_command_service.update_article(db, article_id, payload.model_dump())
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return serialize_article(article)


@router.delete("/api/articles/{article_id}")
async def delete_article(
    article_id: str,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        article_command_service.delete_article(db, article_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True}
