import logging

from sqlalchemy.orm import Session

from models import SiteSetting, now_str

logger = logging.getLogger("site_settings")


def get_setting(db: Session, key: str, default_value: str = "") -> str:
    setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
    if setting is None or not setting.value:
        return default_value
    return setting.value


def get_settings_map(db: Session, keys: list[str]) -> dict[str, str]:
    if not keys:
        return {}
    settings = db.query(SiteSetting).filter(SiteSetting.key.in_(keys)).all()
    return {setting.key: setting.value for setting in settings}


def get_grouped_settings(db: Session) -> dict[str, list[dict]]:
    settings = (
        db.query(SiteSetting)
        .order_by(SiteSetting.group.asc(), SiteSetting.order.asc())
        .all()
    )
    grouped: dict[str, list[dict]] = {}
    for setting in settings:
        grouped.setdefault(setting.group or "general", []).append(
            {
                "id": setting.id,
                "key": setting.key,
                "value": setting.value,
                "label": setting.label,
                "type": setting.type,
                "group": setting.group,
                "order": setting.order,
            }
        )
    return grouped


def upsert_settings(db: Session, items: list[dict]) -> int:
    """按key更新已有设置的值，不存在则按默认元数据创建"""
    # 同一个key出现多次时以最后一次为准
    latest: dict[str, dict] = {}
    for item in items:
        key = (item.get("key") or "").strip()
        if not key:
            raise ValueError("无效的设置数据")
        latest.pop(key, None)
        latest[key] = item

    updated = 0
    for key, item in latest.items():
        value = item.get("value")
        value = "" if value is None else str(value)

        setting = db.query(SiteSetting).filter(SiteSetting.key == key).first()
        if setting is None:
            setting = SiteSetting(
                key=key,
                value=value,
                label=item.get("label") or key,
                type=item.get("type") or "text",
                group=item.get("group") or "general",
                order=item.get("order") or 0,
            )
            db.add(setting)
        else:
            setting.value = value
            setting.updated_at = now_str()
        updated += 1
    db.commit()
    logger.info("site_settings_updated: %d", updated)
    return updated
