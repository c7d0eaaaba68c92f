from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.dependencies import get_admin_or_internal
from app.domain.site_settings_service import get_grouped_settings, upsert_settings
from app.schemas import CommentSettingsUpdate, SiteSettingsUpdate
from auth import get_admin_settings, get_current_admin
from models import get_db, now_str

router = APIRouter()


@router.get("/api/admin/settings")
async def get_site_settings(
    _: bool = Depends(get_admin_or_internal),
    db: Session = Depends(get_db),
):
    return {"settings": get_grouped_settings(db)}


@router.post("/api/admin/settings")
async def update_site_settings(
    payload: SiteSettingsUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    try:
        upsert_settings(db, [item.model_dump() for item in payload.settings])
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="设置保存冲突，请刷新后重试")
    return {"success": True, "message": "设置更新成功"}


@router.get("/api/settings/comments/public")
async def get_comment_settings_public(db: Session = Depends(get_db)):
    admin = get_admin_settings(db)
    return {"comments_enabled": bool(admin.comments_enabled) if admin else True}


@router.get("/api/settings/comments")
async def get_comment_settings(
    _: bool = Depends(get_admin_or_internal),
    db: Session = Depends(get_db),
):
    admin = get_admin_settings(db)
    if admin is None:
        raise HTTPException(status_code=404, detail="未初始化管理员设置")
    return {
        "comments_enabled": bool(admin.comments_enabled),
        "sensitive_filter_enabled": bool(admin.sensitive_filter_enabled),
        "sensitive_words": admin.sensitive_words or "",
    }


@router.put("/api/settings/comments")
async def update_comment_settings(
    payload: CommentSettingsUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    admin = get_admin_settings(db)
    if admin is None:
        raise HTTPException(status_code=404, detail="未初始化管理员设置")
    if payload.comments_enabled is not None:
        admin.comments_enabled = payload.comments_enabled
    if payload.sensitive_filter_enabled is not None:
        admin.sensitive_filter_enabled = payload.sensitive_filter_enabled
    if payload.sensitive_words is not None:
        admin.sensitive_words = payload.sensitive_words
    admin.updated_at = now_str()
    db.commit()
    return {"success": True}
