"""
后台管理员认证：单一管理员账户，bcrypt 存储密码，JWT 作为登录凭据
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session

from models import AdminSettings, get_db, now_str

JWT_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(days=7)
TOKEN_SUBJECT = "content-admin"

MIN_PASSWORD_LENGTH = 6
MAX_BCRYPT_PASSWORD_BYTES = 72

security = HTTPBearer(auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class SetupRequest(BaseModel):
    password: str


class LoginRequest(BaseModel):
    password: str


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str


class LoginResponse(BaseModel):
    token: str
    message: str


def _password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_BCRYPT_PASSWORD_BYTES


def hash_password(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"密码至少需要{MIN_PASSWORD_LENGTH}个字符")
    # bcrypt 只使用前72字节，超长直接拒绝而不是静默截断
    if _password_too_long(password):
        raise ValueError("密码过长（最长72字节），请缩短后重试")
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash or _password_too_long(password):
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def generate_jwt_secret() -> str:
    return secrets.token_hex(32)


def create_token(jwt_secret: str) -> str:
    issued_at = datetime.now(timezone.utc)
    claims = {"sub": TOKEN_SUBJECT, "iat": issued_at, "exp": issued_at + TOKEN_TTL}
    return jwt.encode(claims, jwt_secret, algorithm=JWT_ALGORITHM)


def verify_token(token: str, jwt_secret: str) -> bool:
    try:
        claims = jwt.decode(token, jwt_secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return False
    return claims.get("sub") == TOKEN_SUBJECT


def get_admin_settings(db: Session) -> Optional[AdminSettings]:
    return db.query(AdminSettings).first()


def create_admin_settings(db: Session, password: str) -> AdminSettings:
    admin = AdminSettings(
        password_hash=hash_password(password),
        jwt_secret=generate_jwt_secret(),
        comments_enabled=True,
        sensitive_filter_enabled=True,
        sensitive_words="",
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


def update_admin_password(db: Session, admin: AdminSettings, new_password: str) -> None:
    admin.password_hash = hash_password(new_password)
    # 轮换签名密钥，已签发的 token 全部失效
    admin.jwt_secret = generate_jwt_secret()
    admin.updated_at = now_str()
    db.commit()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> bool:
    """管理接口的依赖：未登录、未初始化或 token 失效时返回 401"""
    if credentials is None:
        raise _unauthorized("未登录，请先登录")
    admin = get_admin_settings(db)
    if admin is None:
        raise _unauthorized("系统未初始化，请先设置管理员密码")
    if not verify_token(credentials.credentials, admin.jwt_secret):
        raise _unauthorized("登录已过期，请重新登录")
    return True


def check_is_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> bool:
    if credentials is None:
        return False
    admin = get_admin_settings(db)
    return admin is not None and verify_token(credentials.credentials, admin.jwt_secret)
