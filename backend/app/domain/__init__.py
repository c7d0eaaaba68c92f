from app.domain.article_command_service import ArticleCommandService
from app.domain.article_query_service import ArticleQueryService
from app.domain.tag_service import TagService

__all__ = [
    "ArticleCommandService",
    "ArticleQueryService",
    "TagService",
]
