import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    SetupRequest,
    check_is_admin,
    create_admin_settings,
    create_token,
    get_admin_settings,
    get_current_admin,
    update_admin_password,
    verify_password,
)
from models import AdminSettings, get_db

router = APIRouter()
logger = logging.getLogger("admin_auth")


def require_admin_settings(db: Session) -> AdminSettings:
    admin = get_admin_settings(db)
    if admin is None:
        raise HTTPException(status_code=400, detail="系统未初始化，请先设置管理员密码")
    return admin


@router.get("/api/auth/status")
async def get_auth_status(db: Session = Depends(get_db)):
    """后台首次打开时据此决定展示设置页还是登录页"""
    return {"initialized": get_admin_settings(db) is not None}


@router.post("/api/auth/setup", response_model=LoginResponse)
async def setup_admin(request: SetupRequest, db: Session = Depends(get_db)):
    if get_admin_settings(db) is not None:
        raise HTTPException(status_code=400, detail="管理员密码已设置")

    try:
        admin = create_admin_settings(db, request.password)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    logger.info("admin_initialized")
    return LoginResponse(token=create_token(admin.jwt_secret), message="管理员密码设置成功")


@router.post("/api/auth/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    admin = require_admin_settings(db)
    if not verify_password(request.password, admin.password_hash):
        logger.warning("admin_login_failed")
        raise HTTPException(status_code=401, detail="密码错误")
    return LoginResponse(token=create_token(admin.jwt_secret), message="登录成功")


@router.get("/api/auth/verify")
async def verify_auth(is_admin: bool = Depends(check_is_admin)):
    return {"valid": is_admin, "role": "admin" if is_admin else "guest"}


@router.put("/api/auth/password", response_model=LoginResponse)
async def change_password(
    request: ChangePasswordRequest,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    admin = require_admin_settings(db)
    if not verify_password(request.old_password, admin.password_hash):
        raise HTTPException(status_code=401, detail="原密码错误")

    try:
        update_admin_password(db, admin, request.new_password)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    # 新密钥签发后旧 token 全部失效
    logger.info("admin_password_rotated")
    return LoginResponse(token=create_token(admin.jwt_secret), message="密码修改成功，请使用新 token")
