from typing import Optional

from pydantic import BaseModel


class PaymentStatusUpdate(BaseModel):
    payment_id: str
    status: str
    reason: Optional[str] = None
