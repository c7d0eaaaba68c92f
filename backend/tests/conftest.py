from __future__ import annotations

import os

os.environ["INTERNAL_API_TOKEN"] = "test-token"
os.environ.setdefault("DATABASE_URL", "sqlite:///./data/unit-tests.db")

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from models import Article, ArticleComment, Base, Category, Payment, Tag, now_str


@pytest.fixture()
def db_session(tmp_path) -> Iterator[Session]:
    db_path = tmp_path / "unit-tests.db"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    testing_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = testing_session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def make_category(db_session: Session) -> Callable[..., Category]:
    def _make_category(**overrides) -> Category:
        payload = {"name": "默认分类", "sort_order": 0}
        payload.update(overrides)
        category = Category(**payload)
        db_session.add(category)
        db_session.commit()
        db_session.refresh(category)
        return category

    return _make_category


@pytest.fixture()
def make_article(db_session: Session) -> Callable[..., Article]:
    counter = {"value": 0}

    def _make_article(**overrides) -> Article:
        counter["value"] += 1
        payload = {
            "title": f"article-{counter['value']}",
            "slug": f"article-{counter['value']}",
            "content": "",
            "excerpt": "",
            "status": "PUBLISHED",
            "views": 0,
            "published_at": now_str(),
            "created_at": now_str(),
            "updated_at": now_str(),
        }
        payload.update(overrides)
        article = Article(**payload)
        db_session.add(article)
        db_session.commit()
        db_session.refresh(article)
        return article

    return _make_article


@pytest.fixture()
def make_tag(db_session: Session) -> Callable[..., Tag]:
    def _make_tag(**overrides) -> Tag:
        payload = {"name": "赚钱", "slug": "zhuanqian", "color": "#3b82f6"}
        payload.update(overrides)
        tag = Tag(**payload)
        db_session.add(tag)
        db_session.commit()
        db_session.refresh(tag)
        return tag

    return _make_tag


@pytest.fixture()
def make_comment(
    db_session: Session, make_article: Callable[..., Article]
) -> Callable[..., ArticleComment]:
    def _make_comment(**overrides) -> ArticleComment:
        article_id = overrides.pop("article_id", None)
        if article_id is None:
            article_id = make_article().id
        payload = {
            "article_id": article_id,
            "user_id": "user-1",
            "user_name": "读者",
            "content": "写得很好",
            "is_hidden": False,
            "created_at": now_str(),
            "updated_at": now_str(),
        }
        payload.update(overrides)
        comment = ArticleComment(**payload)
        db_session.add(comment)
        db_session.commit()
        db_session.refresh(comment)
        return comment

    return _make_comment


@pytest.fixture()
def make_payment(
    db_session: Session, make_article: Callable[..., Article]
) -> Callable[..., Payment]:
    def _make_payment(**overrides) -> Payment:
        article_id = overrides.pop("article_id", None)
        if article_id is None:
            article_id = make_article().id
        payload = {
            "article_id": article_id,
            "user_id": "user-1",
            "user_name": "张三",
            "user_email": "zhangsan@example.com",
            "amount": 9.9,
            "method": "WECHAT",
            "status": "PENDING",
            "created_at": now_str(),
            "updated_at": now_str(),
        }
        payload.update(overrides)
        payment = Payment(**payload)
        db_session.add(payment)
        db_session.commit()
        db_session.refresh(payment)
        return payment

    return _make_payment


@pytest.fixture()
def api_client(db_session: Session):
    """管理员身份的 TestClient，数据库替换为测试会话"""
    from fastapi.testclient import TestClient

    from app.main import create_app
    from auth import get_current_admin
    from models import get_db

    app = create_app()

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_current_admin] = lambda: True
    return TestClient(app)
