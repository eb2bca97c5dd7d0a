from pydantic import BaseModel
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()

MPESA_SANDBOX = "https://sandbox.safaricom.co.ke"
LISTING_STORES = ("sql", "memory")


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    listing_store: str = "sql"
    database_url: str = "sqlite:///bikeworld.db"

    upload_dir: str = "uploads"
    public_dir: str = "public"
    max_upload_bytes: int = 5 * 1024 * 1024

    mpesa_consumer_key: Optional[str] = None
    mpesa_consumer_secret: Optional[str] = None
    mpesa_short_code: Optional[str] = None
    mpesa_passkey: Optional[str] = None
    mpesa_oauth_url: str = f"{MPESA_SANDBOX}/oauth/v1/generate?grant_type=client_credentials"
    mpesa_stk_push_url: str = f"{MPESA_SANDBOX}/mpesa/stkpush/v1/processrequest"
    mpesa_callback_url: Optional[str] = None
    mpesa_account_reference: str = "BikeHub"
    mpesa_transaction_desc: str = "Bike Hub Payment"
    mpesa_default_amount: int = 13000
    mpesa_timeout: float = 30

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables (and a .env file, if any).
        Unset variables keep their defaults.
        """
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        settings = cls(**values)
        if settings.listing_store not in LISTING_STORES:
            raise ValueError(
                f"LISTING_STORE must be one of {', '.join(LISTING_STORES)}, got {settings.listing_store!r}"
            )
        return settings
