import re
import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.settings import get_settings
from auth import get_admin_settings, get_current_admin, security
from models import get_db

settings = get_settings()
security_settings = settings.security

MAX_PAGE_SIZE = 100

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_TAG_PATTERN = re.compile(r"<[^>]*>")


def is_internal_request(request: Request) -> bool:
    if not security_settings.internal_api_token:
        return False
    provided = request.headers.get("X-Internal-Token") or ""
    return secrets.compare_digest(provided, security_settings.internal_api_token)


def get_admin_or_internal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> bool:
    if is_internal_request(request):
        return True
    return get_current_admin(credentials=credentials, db=db)


def sanitize_text(value: Optional[str]) -> str:
    """去掉HTML标签和控制字符"""
    if not value:
        return ""
    cleaned = _TAG_PATTERN.sub("", value)
    cleaned = _CONTROL_CHARS.sub("", cleaned)
    return cleaned.strip()


def validate_string_length(value: Optional[str], min_length: int, max_length: int) -> bool:
    if value is None:
        return False
    return min_length <= len(value) <= max_length


def normalize_pagination(page: int, size: int, default_size: int = 20) -> tuple[int, int]:
    page = max(page, 1)
    if size <= 0:
        size = default_size
    return page, min(size, MAX_PAGE_SIZE)


def build_pagination(page: int, size: int, total: int) -> dict:
    return {
        "page": page,
        "size": size,
        "total": total,
        "total_pages": (total + size - 1) // size,
    }


def normalize_date_bound(value: Optional[str], is_end: bool) -> Optional[str]:
    if not value:
        return None
    raw = value.strip()
    if not raw:
        return None
    try:
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        dt = datetime.fromisoformat(raw)
        if "T" not in raw:
            if is_end:
                dt = dt.replace(hour=23, minute=59, second=59, microsecond=999999)
            else:
                dt = dt.replace(hour=0, minute=0, second=0, microsecond=0)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.isoformat()
    except ValueError:
        return None


def comments_enabled(db: Session) -> bool:
    admin = get_admin_settings(db)
    if admin is None:
        return True
    return bool(admin.comments_enabled)


def get_sensitive_words(db: Session) -> tuple[bool, list[str]]:
    admin = get_admin_settings(db)
    if admin is None:
        return False, []
    enabled = bool(admin.sensitive_filter_enabled)
    words_raw = admin.sensitive_words or ""
    words = [w.strip() for w in words_raw.replace(",", "\n").splitlines() if w.strip()]
    return enabled, words


def contains_sensitive_word(content: str, words: list[str]) -> bool:
    if not content:
        return False
    return any(word in content for word in words)
