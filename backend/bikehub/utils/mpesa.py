import base64
import logging
from datetime import datetime, timezone
from typing import Optional

import requests

from bikehub.config import Settings
from bikehub.errors import PaymentError

logger = logging.getLogger(__name__)

TRANSACTION_TYPE = "CustomerPayBillOnline"
PAYMENT_FAILED = "Payment processing failed"


def mpesa_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S")


def mpesa_password(short_code: str, passkey: str, timestamp: str) -> str:
    return base64.b64encode(f"{short_code}{passkey}{timestamp}".encode()).decode()


class MpesaClient:
    """
    Two-step STK push: fetch an OAuth token, then submit the payment request.

    Every failure is raised as PaymentError with a generic message. The
    upstream details only go to the log.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def _check_config(self):
        s = self.settings
        required = {
            "MPESA_CONSUMER_KEY": s.mpesa_consumer_key,
            "MPESA_CONSUMER_SECRET": s.mpesa_consumer_secret,
            "MPESA_SHORT_CODE": s.mpesa_short_code,
            "MPESA_PASSKEY": s.mpesa_passkey,
            "MPESA_CALLBACK_URL": s.mpesa_callback_url,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            logger.error("M-Pesa configuration is incomplete, missing: %s", ", ".join(missing))
            raise PaymentError(PAYMENT_FAILED)

    def get_access_token(self) -> str:
        self._check_config()
        s = self.settings
        auth = base64.b64encode(f"{s.mpesa_consumer_key}:{s.mpesa_consumer_secret}".encode()).decode()
        try:
            response = self.session.get(
                s.mpesa_oauth_url,
                headers={"Authorization": f"Basic {auth}"},
                timeout=s.mpesa_timeout,
            )
            response.raise_for_status()
            token = response.json().get("access_token")
        except (requests.RequestException, ValueError) as e:
            logger.error("M-Pesa token request failed: %s", e)
            raise PaymentError(PAYMENT_FAILED) from e

        if not token:
            logger.error("M-Pesa token response had no access_token")
            raise PaymentError(PAYMENT_FAILED)
        return token

    def build_payload(self, phone: str, amount: Optional[int], timestamp: str) -> dict:
        s = self.settings
        return {
            "BusinessShortCode": s.mpesa_short_code,
            "Password": mpesa_password(s.mpesa_short_code, s.mpesa_passkey, timestamp),
            "Timestamp": timestamp,
            "TransactionType": TRANSACTION_TYPE,
            "Amount": amount if amount is not None else s.mpesa_default_amount,
            "PartyA": phone,
            "PartyB": s.mpesa_short_code,
            "PhoneNumber": phone,
            "CallBackURL": s.mpesa_callback_url,
            "AccountReference": s.mpesa_account_reference,
            "TransactionDesc": s.mpesa_transaction_desc,
        }

    def initiate_payment(self, phone: str, amount: Optional[int] = None, now: Optional[datetime] = None) -> dict:
        token = self.get_access_token()
        payload = self.build_payload(phone, amount, mpesa_timestamp(now))
        try:
            response = self.session.post(
                self.settings.mpesa_stk_push_url,
                json=payload,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.settings.mpesa_timeout,
            )
            response.raise_for_status()
            ack = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("M-Pesa STK push failed: %s", e)
            raise PaymentError(PAYMENT_FAILED) from e

        logger.info("M-Pesa prompt sent to %s for %s", phone, payload["Amount"])
        return ack
