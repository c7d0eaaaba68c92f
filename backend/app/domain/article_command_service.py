import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.dependencies import sanitize_text, validate_string_length
from app.domain.tag_service import TagService
from models import ARTICLE_STATUSES, Article, ArticleTag, Category, generate_uuid, now_str
from slug_utils import SLUG_MAX_LENGTH, generate_article_slug, generate_slug
from tag_utils import generate_tags

logger = logging.getLogger("article_service")

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 50000
EXCERPT_LENGTH = 200

_SLUG_PATTERN = re.compile(r"[a-z0-9_-]+")


def _validate_article_fields(title: str | None, content: str | None) -> str:
    sanitized_title = sanitize_text(title)
    if not sanitized_title or not validate_string_length(sanitized_title, 1, TITLE_MAX_LENGTH):
        raise ValueError("标题不能为空且长度不超过200字符")
    if content and not validate_string_length(content, 0, CONTENT_MAX_LENGTH):
        raise ValueError("内容长度不能超过50000字符")
    return sanitized_title


def _normalize_status(status: str | None) -> str:
    if not status:
        return "DRAFT"
    normalized = status.strip().upper()
    if normalized not in ARTICLE_STATUSES:
        raise ValueError(f"无效的文章状态: {status}")
    return normalized


def _slug_taken(db: Session, slug: str, exclude_id: str | None = None) -> bool:
    query = db.query(Article.id).filter(Article.slug == slug)
    if exclude_id:
        query = query.filter(Article.id != exclude_id)
    return query.first() is not None


class ArticleCommandService:
    def __init__(self, tag_service: TagService | None = None):
        self.tag_service = tag_service or TagService()

    def resolve_slug(
        self,
        db: Session,
        title: str,
        article_id: str,
        requested_slug: str | None = None,
    ) -> str:
        requested_slug = (requested_slug or "").strip()
        if requested_slug:
            if len(requested_slug) <= SLUG_MAX_LENGTH and _SLUG_PATTERN.fullmatch(requested_slug):
                base = requested_slug
            else:
                base = generate_slug(requested_slug)
            if not _slug_taken(db, base, exclude_id=article_id):
                return base
            return f"{base}-{article_id.split('-')[0]}"

        base = generate_slug(title)
        if not _slug_taken(db, base, exclude_id=article_id):
            return base
        return generate_article_slug(title, article_id)

    def create_article(self, article_data: dict, db: Session) -> Article:
        content = article_data.get("content") or ""
        title = _validate_article_fields(article_data.get("title"), content)
        status = _normalize_status(article_data.get("status"))

        category_id = article_data.get("category_id") or None
        if category_id and not db.query(Category).filter(Category.id == category_id).first():
            raise ValueError("分类不存在")

        tag_names = article_data.get("auto_tags")
        if tag_names is None:
            tag_names = generate_tags(title, content)

        article_id = generate_uuid()
        excerpt = article_data.get("excerpt") or content[:EXCERPT_LENGTH]
        now = now_str()
        article = Article(
            id=article_id,
            title=title,
            slug=self.resolve_slug(db, title, article_id, article_data.get("slug")),
            content=content,
            excerpt=excerpt,
            status=status,
            views=0,
            category_id=category_id,
            author_name=article_data.get("author_name"),
            published_at=now if status == "PUBLISHED" else None,
            created_at=now,
            updated_at=now,
        )

        try:
            db.add(article)
            db.flush()
            for tag in self.tag_service.get_or_create_tags(db, tag_names):
                db.add(ArticleTag(article_id=article.id, tag_id=tag.id))
            db.commit()
            db.refresh(article)
        except IntegrityError as exc:
            db.rollback()
            logger.warning("article_create_integrity_error: %s", str(exc))
            raise ValueError(f"数据完整性错误: {str(exc)}")

        logger.info(
            "article_created: id=%s slug=%s tags=%s", article.id, article.slug, tag_names
        )
        return article

    def update_article(self, db: Session, article_id: str, article_data: dict) -> Article:
        article = db.query(Article).filter(Article.id == article_id).first()
        if not article:
            raise LookupError("文章不存在")

        content = article_data.get("content")
        title = _validate_article_fields(article_data.get("title"), content)
        status = _normalize_status(article_data.get("status"))

        article.title = title
        article.slug = self.resolve_slug(db, title, article.id, article_data.get("slug"))
        if content is not None:
            article.content = content
        if article_data.get("excerpt") is not None:
            article.excerpt = article_data["excerpt"]
        article.category_id = article_data.get("category_id") or None
        if status == "PUBLISHED" and not article.published_at:
            article.published_at = now_str()
        article.status = status
        article.updated_at = now_str()

        try:
            db.commit()
            db.refresh(article)
        except IntegrityError as exc:
            db.rollback()
            raise ValueError(f"数据完整性错误: {str(exc)}")
        return article

    def delete_article(self, db: Session, article_id: str) -> None:
        article = db.query(Article).filter(Article.id == article_id).first()
        if not article:
            raise LookupError("文章不存在")
        db.delete(article)
        db.commit()
        logger.info("article_deleted: id=%s", article_id)
