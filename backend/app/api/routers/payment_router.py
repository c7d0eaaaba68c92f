import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.dependencies import build_pagination, normalize_date_bound, normalize_pagination
from app.core.settings import get_settings
from app.schemas import PaymentSettingsUpdate, PaymentStatusUpdate
from auth import get_current_admin
from models import PAYMENT_STATUSES, Article, Payment, get_db, now_str

router = APIRouter()
logger = logging.getLogger("payment_settings")


def serialize_payment(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "amount": payment.amount,
        "method": payment.method,
        "status": payment.status,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
        "article": {"id": payment.article.id, "title": payment.article.title}
        if payment.article
        else None,
        "user": {
            "id": payment.user_id,
            "name": payment.user_name,
            "email": payment.user_email,
        },
    }


@router.get("/api/admin/payments")
async def list_payments(
    page: int = 1,
    limit: int = 20,
    status: Optional[str] = None,
    method: Optional[str] = None,
    search: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    page, limit = normalize_pagination(page, limit)
    query_stmt = db.query(Payment).join(Article, Article.id == Payment.article_id)

    if status and status != "all":
        query_stmt = query_stmt.filter(Payment.status == status)
    if method and method != "all":
        query_stmt = query_stmt.filter(Payment.method == method)
    if search:
        keyword = search.strip()
        if keyword:
            query_stmt = query_stmt.filter(
                or_(
                    Article.title.ilike(f"%{keyword}%"),
                    Payment.user_name.ilike(f"%{keyword}%"),
                    Payment.user_email.ilike(f"%{keyword}%"),
                )
            )

    start_bound = normalize_date_bound(start_date, is_end=False)
    if start_bound:
        query_stmt = query_stmt.filter(Payment.created_at >= start_bound)
    end_bound = normalize_date_bound(end_date, is_end=True)
    if end_bound:
        query_stmt = query_stmt.filter(Payment.created_at <= end_bound)

    total = query_stmt.count()
    payments = (
        query_stmt.order_by(Payment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "items": [serialize_payment(payment) for payment in payments],
        "pagination": build_pagination(page, limit, total),
    }


@router.put("/api/admin/payments")
async def update_payment_status(
    payload: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    if not payload.payment_id or not payload.status:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    if payload.status not in PAYMENT_STATUSES:
        raise HTTPException(status_code=400, detail="无效的状态")

    payment = db.query(Payment).filter(Payment.id == payload.payment_id).first()
    if not payment:
        raise HTTPException(status_code=404, detail="支付记录不存在")

    previous_status = payment.status
    payment.status = payload.status
    payment.updated_at = now_str()
    db.commit()
    db.refresh(payment)
    logger.info(
        "payment_status_updated: id=%s %s -> %s reason=%s",
        payment.id,
        previous_status,
        payment.status,
        payload.reason or "",
    )
    return {"payment": serialize_payment(payment), "message": "支付状态更新成功"}


@router.delete("/api/admin/payments/{payment_id}")
async def delete_payment(
    payment_id: str,
    db: Session = Depends(get_db),
    _: bool = Depends(get_current_admin),
):
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise HTTPException(status_code=404, detail="支付记录不存在")
    if payment.status != "FAILED":
        raise HTTPException(status_code=400, detail="只能删除失败的支付记录")

    db.delete(payment)
    db.commit()
    return {"message": "支付记录删除成功"}


@router.get("/api/admin/payment-settings")
async def get_payment_settings(_: bool = Depends(get_current_admin)):
    settings = get_settings()
    return {
        "settings": {
            "wechat": settings.wechat_pay.to_dict(),
            "alipay": settings.alipay.to_dict(),
        }
    }


@router.post("/api/admin/payment-settings")
async def save_payment_settings(
    payload: PaymentSettingsUpdate,
    _: bool = Depends(get_current_admin),
):
    if payload.settings is None:
        raise HTTPException(status_code=400, detail="缺少设置数据")

    wechat = payload.settings.wechat
    if wechat and wechat.enabled and not (wechat.qrCodeUrl and wechat.accountName):
        raise HTTPException(status_code=400, detail="微信收款码和收款人姓名不能为空")

    alipay = payload.settings.alipay
    if alipay and alipay.enabled and not (alipay.qrCodeUrl and alipay.accountName):
        raise HTTPException(status_code=400, detail="支付宝收款码和收款人姓名不能为空")

    # 收款配置来自环境变量，这里只记录提交内容
    logger.info(
        "payment_settings_submitted: %s",
        payload.settings.model_dump_json(exclude_none=True),
    )
    return {"success": True, "message": "个人收款设置保存成功"}
