import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.dependencies import sanitize_text, validate_string_length
from models import ArticleTag, Tag, generate_uuid
from slug_utils import generate_slug

logger = logging.getLogger("tag_service")

DEFAULT_TAG_COLOR = "#3b82f6"
TAG_NAME_MIN_LENGTH = 1
TAG_NAME_MAX_LENGTH = 20


def _validate_tag_name(name: str | None) -> str:
    if not name or not validate_string_length(name, TAG_NAME_MIN_LENGTH, TAG_NAME_MAX_LENGTH):
        raise ValueError("标签名称长度必须在1-20字符之间")
    sanitized = sanitize_text(name)
    if not sanitized:
        raise ValueError("标签名称长度必须在1-20字符之间")
    return sanitized


class TagService:
    def list_tags(self, db: Session) -> list[tuple[Tag, int]]:
        counts = (
            db.query(
                ArticleTag.tag_id.label("tag_id"),
                func.count(ArticleTag.id).label("article_count"),
            )
            .group_by(ArticleTag.tag_id)
            .subquery()
        )
        rows = (
            db.query(Tag, func.coalesce(counts.c.article_count, 0))
            .outerjoin(counts, Tag.id == counts.c.tag_id)
            .order_by(Tag.created_at.desc())
            .all()
        )
        return [(tag, int(article_count)) for tag, article_count in rows]

    def create_tag(
        self,
        db: Session,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Tag:
        sanitized_name = _validate_tag_name(name)
        slug = generate_slug(sanitized_name)

        existing = (
            db.query(Tag)
            .filter(or_(Tag.name == sanitized_name, Tag.slug == slug))
            .first()
        )
        if existing:
            raise ValueError("标签名称已存在")

        tag = Tag(
            name=sanitized_name,
            slug=slug,
            description=sanitize_text(description) or None,
            color=color or DEFAULT_TAG_COLOR,
        )
        db.add(tag)
        db.commit()
        db.refresh(tag)
        logger.info("tag_created: %s (%s)", tag.name, tag.slug)
        return tag

    def update_tag(
        self,
        db: Session,
        tag_id: str,
        name: str,
        description: str | None = None,
        color: str | None = None,
    ) -> Tag:
        sanitized_name = _validate_tag_name(name)
        slug = generate_slug(sanitized_name)

        tag = db.query(Tag).filter(Tag.id == tag_id).first()
        if not tag:
            raise LookupError("标签不存在")

        duplicate = (
            db.query(Tag)
            .filter(Tag.id != tag_id)
            .filter(or_(Tag.name == sanitized_name, Tag.slug == slug))
            .first()
        )
        if duplicate:
            raise ValueError("标签名称已存在")

        tag.name = sanitized_name
        tag.slug = slug
        tag.description = sanitize_text(description) or None
        tag.color = color or DEFAULT_TAG_COLOR
        db.commit()
        db.refresh(tag)
        return tag

    def delete_tag(self, db: Session, tag_id: str) -> None:
        tag = db.query(Tag).filter(Tag.id == tag_id).first()
        if not tag:
            raise LookupError("标签不存在")

        article_count = db.query(ArticleTag).filter(ArticleTag.tag_id == tag_id).count()
        if article_count > 0:
            raise ValueError(f"无法删除标签，还有 {article_count} 篇文章使用此标签")

        db.delete(tag)
        db.commit()

    def get_or_create_tags(self, db: Session, names: list[str]) -> list[Tag]:
        """按名称查找标签，不存在则创建；不提交事务"""
        tags: list[Tag] = []
        seen: set[str] = set()
        for raw_name in names:
            name = sanitize_text(raw_name)
            if not name or name in seen:
                continue
            seen.add(name)

            tag = db.query(Tag).filter(Tag.name == name).first()
            if tag is None:
                slug = generate_slug(name)
                if db.query(Tag).filter(Tag.slug == slug).first() is not None:
                    # 不同名称可能转写出相同slug，例如都只含未收录的汉字
                    slug = f"{slug[:41]}-{generate_uuid()[:8]}"
                tag = Tag(name=name, slug=slug, color=DEFAULT_TAG_COLOR)
                db.add(tag)
                db.flush()
            tags.append(tag)
        return tags
