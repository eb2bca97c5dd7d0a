from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from typing import Optional
import logging
from bikehub.dependencies import get_payment_client
from bikehub.errors import PaymentError
from bikehub.utils.mpesa import MpesaClient, PAYMENT_FAILED

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Payments"])

class PaymentRequest(BaseModel):
    phone: str
    amount: Optional[int] = Field(default=None, gt=0)

    # Clients often send the MSISDN as a JSON number, e.g. 254712345678.
    @field_validator("phone", mode="before")
    @classmethod
    def phone_as_text(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, value: str) -> str:
        value = value.strip().lstrip("+")
        if not value.isdigit():
            raise ValueError("must contain only digits")
        return value

@router.post("/mpesa-pay")
def mpesa_pay(data: PaymentRequest, client: MpesaClient = Depends(get_payment_client)):
    """
    Trigger an M-Pesa STK push. The payment result arrives later on the
    configured callback URL, so the response only confirms the prompt was sent.
    """
    logger.info("M-Pesa payment request: phone=%s amount=%s", data.phone, data.amount)
    try:
        client.initiate_payment(data.phone, data.amount)
    except PaymentError:
        raise
    except Exception as e:
        logger.exception("Unexpected M-Pesa error")
        raise PaymentError(PAYMENT_FAILED) from e
    return {"message": "Check your phone for the M-Pesa prompt!"}
