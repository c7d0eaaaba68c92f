from __future__ import annotations

import pytest

from app.domain.tag_service import TagService
from models import ArticleTag, Tag


def test_create_tag_sanitizes_name_and_generates_slug(db_session):
    service = TagService()

    tag = service.create_tag(db_session, " <i>赚钱</i> ", description="副业相关")

    assert tag.name == "赚钱"
    assert tag.slug == "zhuanqian"
    assert tag.color == "#3b82f6"
    assert tag.description == "副业相关"


@pytest.mark.parametrize("name", ["", "x" * 21, "<b></b>"])
def test_create_tag_rejects_invalid_name(db_session, name):
    with pytest.raises(ValueError, match="标签名称长度必须在1-20字符之间"):
        TagService().create_tag(db_session, name)


def test_create_tag_rejects_duplicate_name_or_slug(db_session, make_tag):
    service = TagService()
    make_tag(name="投资", slug="hanzihanzi")

    with pytest.raises(ValueError, match="标签名称已存在"):
        service.create_tag(db_session, "投资")
    with pytest.raises(ValueError, match="标签名称已存在"):
        service.create_tag(db_session, "创业")


def test_update_tag_allows_keeping_own_name(db_session, make_tag):
    service = TagService()
    tag = make_tag(name="赚钱", slug="zhuanqian")

    updated = service.update_tag(db_session, tag.id, "赚钱", color="#ff0000")

    assert updated.slug == "zhuanqian"
    assert updated.color == "#ff0000"


def test_update_tag_rejects_other_tags_name(db_session, make_tag):
    service = TagService()
    make_tag(name="AI", slug="ai")
    tag = make_tag(name="赚钱", slug="zhuanqian")

    with pytest.raises(ValueError, match="标签名称已存在"):
        service.update_tag(db_session, tag.id, "AI")


def test_update_and_delete_missing_tag_raise_lookup_error(db_session):
    service = TagService()

    with pytest.raises(LookupError, match="标签不存在"):
        service.update_tag(db_session, "missing", "AI")
    with pytest.raises(LookupError, match="标签不存在"):
        service.delete_tag(db_session, "missing")


def test_delete_tag_refuses_when_articles_use_it(db_session, make_tag, make_article):
    service = TagService()
    tag = make_tag()
    article = make_article()
    db_session.add(ArticleTag(article_id=article.id, tag_id=tag.id))
    db_session.commit()

    with pytest.raises(ValueError, match="还有 1 篇文章使用此标签"):
        service.delete_tag(db_session, tag.id)

    db_session.query(ArticleTag).delete()
    db_session.commit()
    service.delete_tag(db_session, tag.id)
    assert db_session.query(Tag).count() == 0


def test_list_tags_includes_article_counts(db_session, make_tag, make_article):
    service = TagService()
    used = make_tag(name="赚钱", slug="zhuanqian", created_at="2026-01-01T00:00:00+00:00")
    make_tag(name="AI", slug="ai", created_at="2026-02-01T00:00:00+00:00")
    for _ in range(2):
        article = make_article()
        db_session.add(ArticleTag(article_id=article.id, tag_id=used.id))
    db_session.commit()

    rows = service.list_tags(db_session)

    assert [(tag.name, count) for tag, count in rows] == [("AI", 0), ("赚钱", 2)]


def test_get_or_create_tags_skips_blank_and_duplicate_names(db_session, make_tag):
    service = TagService()
    existing = make_tag(name="AI", slug="ai")

    tags = service.get_or_create_tags(db_session, ["AI", "", "赚钱", "赚钱"])

    assert [tag.name for tag in tags] == ["AI", "赚钱"]
    assert tags[0].id == existing.id
    assert tags[1].slug == "zhuanqian"
