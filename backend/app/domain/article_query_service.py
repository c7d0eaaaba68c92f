from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.dependencies import sanitize_text, validate_string_length
from models import Article, ArticleComment, ArticleTag, Tag

SEARCH_MAX_LENGTH = 100


def _build_filtered_query(
    query,
    *,
    category_id: str | None = None,
    search: str | None = None,
    tag: str | None = None,
    status: str | None = None,
):
    if category_id:
        query = query.filter(Article.category_id == category_id)
    if status:
        query = query.filter(Article.status == status.strip().upper())
    if search:
        sanitized = sanitize_text(search)
        # 过长或清理后为空的搜索词直接忽略
        if sanitized and validate_string_length(sanitized, 1, SEARCH_MAX_LENGTH):
            query = query.filter(
                or_(Article.title.contains(sanitized), Article.excerpt.contains(sanitized))
            )
    if tag:
        tagged_ids = (
            select(ArticleTag.article_id)
            .join(Tag, Tag.id == ArticleTag.tag_id)
            .where(or_(Tag.slug == tag, Tag.name == tag))
        )
        query = query.filter(Article.id.in_(tagged_ids))
    return query


class ArticleQueryService:
    def get_articles(
        self,
        db: Session,
        page: int = 1,
        limit: int = 10,
        category_id: str | None = None,
        search: str | None = None,
        tag: str | None = None,
        status: str | None = None,
    ) -> tuple[list[tuple[Article, int]], int]:
        query = _build_filtered_query(
            db.query(Article),
            category_id=category_id,
            search=search,
            tag=tag,
            status=status,
        )
        total = query.count()

        articles = (
            query.options(
                joinedload(Article.category),
                selectinload(Article.tag_links).joinedload(ArticleTag.tag),
            )
            .order_by(
                Article.published_at.is_(None),
                Article.published_at.desc(),
                Article.created_at.desc(),
            )
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        comment_counts: dict[str, int] = {}
        article_ids = [article.id for article in articles]
        if article_ids:
            rows = (
                db.query(ArticleComment.article_id, func.count(ArticleComment.id))
                .filter(ArticleComment.article_id.in_(article_ids))
                .group_by(ArticleComment.article_id)
                .all()
            )
            comment_counts = {article_id: count for article_id, count in rows}

        return [(article, comment_counts.get(article.id, 0)) for article in articles], total

    def get_article(self, db: Session, id_or_slug: str) -> Article | None:
        return (
            db.query(Article)
            .options(
                joinedload(Article.category),
                selectinload(Article.tag_links).joinedload(ArticleTag.tag),
            )
            .filter(or_(Article.id == id_or_slug, Article.slug == id_or_slug))
            .first()
        )

    def increment_views(self, db: Session, article: Article) -> int:
        db.query(Article).filter(Article.id == article.id).update(
            {Article.views: func.coalesce(Article.views, 0) + 1},
            synchronize_session=False,
        )
        db.commit()
        db.refresh(article)
        return article.views
