from typing import Optional

from pydantic import BaseModel


class SiteSettingItem(BaseModel):
    key: str
    value: Optional[str] = None
    label: Optional[str] = None
    type: Optional[str] = None
    group: Optional[str] = None
    order: Optional[int] = None


class SiteSettingsUpdate(BaseModel):
    settings: list[SiteSettingItem]


class PaymentChannelUpdate(BaseModel):
    enabled: bool = False
    qrCodeUrl: Optional[str] = None
    accountName: Optional[str] = None


class PaymentSettingsPayload(BaseModel):
    wechat: Optional[PaymentChannelUpdate] = None
    alipay: Optional[PaymentChannelUpdate] = None


class PaymentSettingsUpdate(BaseModel):
    settings: Optional[PaymentSettingsPayload] = None


class CommentSettingsUpdate(BaseModel):
    comments_enabled: Optional[bool] = None
    sensitive_filter_enabled: Optional[bool] = None
    sensitive_words: Optional[str] = None
