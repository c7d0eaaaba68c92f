from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_DIR = Path(__file__).resolve().parents[2]
ENV_FILE = BACKEND_DIR / ".env"


@dataclass(frozen=True)
class SecuritySettings:
    internal_api_token: str


@dataclass(frozen=True)
class PaymentChannelSettings:
    enabled: bool
    qr_code_url: str
    account_name: str

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "qrCodeUrl": self.qr_code_url,
            "accountName": self.account_name,
        }


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(default="sqlite:///./data/content.db", alias="DATABASE_URL")
    internal_api_token: str = Field(default="", alias="INTERNAL_API_TOKEN")
    sqlite_busy_timeout_ms: int = Field(default=5000, alias="SQLITE_BUSY_TIMEOUT_MS")

    allowed_origins: str = Field(default="", alias="ALLOWED_ORIGINS")

    wechat_pay_enabled: bool = Field(default=False, alias="WECHAT_PAY_ENABLED")
    wechat_qr_code_url: str = Field(default="", alias="WECHAT_QR_CODE_URL")
    wechat_account_name: str = Field(default="", alias="WECHAT_ACCOUNT_NAME")
    alipay_enabled: bool = Field(default=False, alias="ALIPAY_ENABLED")
    alipay_qr_code_url: str = Field(default="", alias="ALIPAY_QR_CODE_URL")
    alipay_account_name: str = Field(default="", alias="ALIPAY_ACCOUNT_NAME")

    @property
    def security(self) -> SecuritySettings:
        return SecuritySettings(internal_api_token=self.internal_api_token.strip())

    @property
    def wechat_pay(self) -> PaymentChannelSettings:
        return PaymentChannelSettings(
            enabled=self.wechat_pay_enabled,
            qr_code_url=self.wechat_qr_code_url.strip(),
            account_name=self.wechat_account_name.strip(),
        )

    @property
    def alipay(self) -> PaymentChannelSettings:
        return PaymentChannelSettings(
            enabled=self.alipay_enabled,
            qr_code_url=self.alipay_qr_code_url.strip(),
            account_name=self.alipay_account_name.strip(),
        )

    @property
    def cors_allow_origins(self) -> list[str]:
        raw = self.allowed_origins.strip()
        if not raw:
            return ["http://localhost:3000", "http://127.0.0.1:3000"]
        if raw == "*":
            return ["*"]

        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                return [str(origin).strip() for origin in parsed if str(origin).strip()]

        return [origin.strip() for origin in raw.split(",") if origin.strip()]


def validate_startup_settings(settings: AppSettings) -> None:
    errors: list[str] = []

    if not settings.database_url.strip():
        errors.append("DATABASE_URL 不能为空")

    if not settings.internal_api_token.strip():
        errors.append("INTERNAL_API_TOKEN 不能为空")

    if settings.sqlite_busy_timeout_ms <= 0:
        errors.append("SQLITE_BUSY_TIMEOUT_MS 必须大于 0")

    for name, channel in (("WECHAT", settings.wechat_pay), ("ALIPAY", settings.alipay)):
        if not channel.enabled:
            continue
        if not channel.qr_code_url:
            errors.append(f"{name}_QR_CODE_URL 不能为空")
        elif not channel.qr_code_url.startswith(("http://", "https://", "/")):
            errors.append(f"{name}_QR_CODE_URL 必须是站内路径或 http/https 地址")
        if not channel.account_name:
            errors.append(f"{name}_ACCOUNT_NAME 不能为空")

    if errors:
        detail = "\n".join(f"- {item}" for item in errors)
        raise RuntimeError(f"启动配置校验失败:\n{detail}")


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
