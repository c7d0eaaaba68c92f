from app.schemas.article import ArticleCreate, ArticleUpdate, TagPreviewRequest
from app.schemas.category import CategoryCreate, CategorySortItem, CategorySortRequest
from app.schemas.comment import CommentBatchAction, CommentCreate, CommentVisibilityUpdate
from app.schemas.payment import PaymentStatusUpdate
from app.schemas.settings import (
    CommentSettingsUpdate,
    PaymentChannelUpdate,
    PaymentSettingsPayload,
    PaymentSettingsUpdate,
    SiteSettingItem,
    SiteSettingsUpdate,
)
from app.schemas.tag import TagCreate

__all__ = [
    "ArticleCreate",
    "ArticleUpdate",
    "CategoryCreate",
    "CategorySortItem",
    "CategorySortRequest",
    "CommentBatchAction",
    "CommentCreate",
    "CommentSettingsUpdate",
    "CommentVisibilityUpdate",
    "PaymentChannelUpdate",
    "PaymentSettingsPayload",
    "PaymentSettingsUpdate",
    "PaymentStatusUpdate",
    "SiteSettingItem",
    "SiteSettingsUpdate",
    "TagCreate",
    "TagPreviewRequest",
]
