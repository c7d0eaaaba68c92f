from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    ForeignKey,
    Float,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from datetime import date, datetime, timezone
import os
import uuid
from app.core.settings import get_settings

Base = declarative_base()

settings = get_settings()
DATABASE_URL = settings.database_url

IS_SQLITE = DATABASE_URL.startswith("sqlite")
engine_connect_args = {}
if IS_SQLITE:
    engine_connect_args = {
        "check_same_thread": False,
        "timeout": max(settings.sqlite_busy_timeout_ms, 1000) / 1000,
    }

engine = create_engine(DATABASE_URL, connect_args=engine_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


if IS_SQLITE:

    @event.listens_for(engine, "connect")
    def _apply_sqlite_pragmas(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={settings.sqlite_busy_timeout_ms}")
        finally:
            cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def generate_uuid():
    return str(uuid.uuid4())


def today_str():
    return date.today().isoformat()


def now_str():
    return datetime.now(timezone.utc).isoformat()


ARTICLE_STATUSES = ("DRAFT", "PUBLISHED", "ARCHIVED")
PAYMENT_STATUSES = ("PENDING", "COMPLETED", "FAILED", "REFUNDED")


class Category(Base):
    __tablename__ = "categories"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text)
    color = Column(String)
    sort_order = Column(Integer, default=0)
    created_at = Column(String, default=today_str)

    articles = relationship("Article", back_populates="category")


class Article(Base):
    __tablename__ = "articles"

    id = Column(String, primary_key=True, default=generate_uuid)
    title = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)  # 拼音slug
    content = Column(Text, default="")
    excerpt = Column(Text, default="")
    status = Column(String, default="DRAFT")  # DRAFT, PUBLISHED, ARCHIVED
    views = Column(Integer, default=0)
    category_id = Column(String, ForeignKey("categories.id", ondelete="SET NULL"))
    author_name = Column(String, nullable=True)
    published_at = Column(String, nullable=True)
    created_at = Column(String, default=now_str)
    updated_at = Column(String, default=now_str)

    category = relationship("Category", back_populates="articles")
    tag_links = relationship(
        "ArticleTag", back_populates="article", cascade="all, delete-orphan"
    )
    comments = relationship(
        "ArticleComment", back_populates="article", cascade="all, delete-orphan"
    )
    payments = relationship(
        "Payment", back_populates="article", cascade="all, delete-orphan"
    )

    @property
    def tag_names(self) -> list[str]:
        return [link.tag.name for link in self.tag_links if link.tag is not None]


class Tag(Base):
    __tablename__ = "tags"

    id = Column(String, primary_key=True, default=generate_uuid)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    color = Column(String, default="#3b82f6")
    created_at = Column(String, default=now_str)

    article_links = relationship(
        "ArticleTag", back_populates="tag", cascade="all, delete-orphan"
    )


class ArticleTag(Base):
    __tablename__ = "article_tags"
    __table_args__ = (UniqueConstraint("article_id", "tag_id", name="uq_article_tag"),)

    id = Column(String, primary_key=True, default=generate_uuid)
    article_id = Column(
        String, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False
    )
    tag_id = Column(String, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(String, default=now_str)

    article = relationship("Article", back_populates="tag_links")
    tag = relationship("Tag", back_populates="article_links")


class ArticleComment(Base):
    __tablename__ = "article_comments"

    id = Column(String, primary_key=True, default=generate_uuid)
    article_id = Column(
        String, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(String, nullable=False)
    user_name = Column(String, nullable=False)
    user_avatar = Column(String, nullable=True)
    content = Column(Text, nullable=False)
    reply_to_id = Column(String, nullable=True)
    is_hidden = Column(Boolean, default=False)
    created_at = Column(String, default=now_str)
    updated_at = Column(String, default=now_str)

    article = relationship("Article", back_populates="comments")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, default=generate_uuid)
    article_id = Column(
        String, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(String, nullable=False)
    user_name = Column(String, nullable=False)
    user_email = Column(String, nullable=True)
    amount = Column(Float, nullable=False, default=0)
    method = Column(String, nullable=False, default="WECHAT")  # WECHAT, ALIPAY
    status = Column(String, nullable=False, default="PENDING")
    created_at = Column(String, default=now_str)
    updated_at = Column(String, default=now_str)

    article = relationship("Article", back_populates="payments")


class SiteSetting(Base):
    __tablename__ = "site_settings"

    id = Column(String, primary_key=True, default=generate_uuid)
    key = Column(String, unique=True, nullable=False)
    value = Column(Text, default="")
    label = Column(String, nullable=False)
    type = Column(String, default="text")
    group = Column(String, default="general")
    order = Column(Integer, default=0)
    updated_at = Column(String, default=now_str)


class AdminSettings(Base):
    """存储管理员认证信息，系统只有一个管理员账户"""

    __tablename__ = "admin_settings"

    id = Column(String, primary_key=True, default=generate_uuid)
    password_hash = Column(String, nullable=False)
    jwt_secret = Column(String, nullable=False)  # 用于签名 JWT token
    comments_enabled = Column(Boolean, default=True)
    sensitive_filter_enabled = Column(Boolean, default=True)
    sensitive_words = Column(Text, nullable=True)
    created_at = Column(String, default=now_str)
    updated_at = Column(String, default=now_str)


def init_db():
    if IS_SQLITE:
        database_path = make_url(DATABASE_URL).database
        if database_path and database_path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(database_path)), exist_ok=True)
    Base.metadata.create_all(bind=engine)
