from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
from uuid import uuid4


class BikeRecord(SQLModel, table=True):
    __tablename__ = "bike"

    seq: Optional[int] = Field(default=None, primary_key=True)
    id: str = Field(default_factory=lambda: uuid4().hex, index=True, unique=True)
    name: str = Field(index=True)
    price: float
    desc: str
    image: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
