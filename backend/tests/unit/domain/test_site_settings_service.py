from __future__ import annotations

import pytest

from app.domain import site_settings_service
from models import SiteSetting


def test_upsert_settings_creates_with_defaults_and_updates_existing(db_session):
    created = site_settings_service.upsert_settings(
        db_session,
        [
            {"key": "site_name", "value": "副业笔记"},
            {"key": "footer", "value": None, "group": "layout", "order": 2},
        ],
    )
    assert created == 2

    site_name = db_session.query(SiteSetting).filter(SiteSetting.key == "site_name").one()
    assert site_name.label == "site_name"
    assert site_name.type == "text"
    assert site_name.group == "general"

    site_settings_service.upsert_settings(db_session, [{"key": "site_name", "value": 42}])
    assert site_settings_service.get_setting(db_session, "site_name") == "42"
    assert site_settings_service.get_setting(db_session, "footer", "默认") == "默认"


def test_upsert_settings_rejects_empty_key(db_session):
    with pytest.raises(ValueError, match="无效的设置数据"):
        site_settings_service.upsert_settings(db_session, [{"key": " ", "value": "x"}])


def test_get_grouped_settings_orders_within_group(db_session):
    db_session.add_all(
        [
            SiteSetting(key="b", value="2", label="B", group="general", order=2),
            SiteSetting(key="a", value="1", label="A", group="general", order=1),
            SiteSetting(key="seo", value="", label="SEO", group="seo", order=0),
        ]
    )
    db_session.commit()

    grouped = site_settings_service.get_grouped_settings(db_session)

    assert list(grouped) == ["general", "seo"]
    assert [item["key"] for item in grouped["general"]] == ["a", "b"]


def test_get_settings_map_returns_only_requested_keys(db_session):
    site_settings_service.upsert_settings(
        db_session,
        [{"key": "a", "value": "1"}, {"key": "b", "value": "2"}],
    )

    assert site_settings_service.get_settings_map(db_session, ["a", "missing"]) == {"a": "1"}
    assert site_settings_service.get_settings_map(db_session, []) == {}


def test_upsert_settings_collapses_repeated_new_key(db_session):
    updated = site_settings_service.upsert_settings(
        db_session,
        [
            {"key": "site_name", "value": "a"},
            {"key": "site_name", "value": "b"},
        ],
    )

    assert updated == 1
    assert db_session.query(SiteSetting).count() == 1
    assert site_settings_service.get_setting(db_session, "site_name") == "b"


def test_upsert_settings_validates_before_writing(db_session):
    with pytest.raises(ValueError):
        site_settings_service.upsert_settings(
            db_session,
            [{"key": "site_name", "value": "a"}, {"key": "", "value": "b"}],
        )

    db_session.rollback()
    assert db_session.query(SiteSetting).count() == 0
