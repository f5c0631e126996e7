from datetime import date as date_type
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .quota import default_campaign


class ExtractionResponse(BaseModel):
    reference_id: Optional[str] = None
    date: Optional[str] = None
    amount: Optional[str] = None
    transaction_type: Optional[str] = None
    vendor: str = "unknown"
    image_url: Optional[str] = None
    meta: Dict[str, Any] = {}


class TextExtractionRequest(BaseModel):
    text: str


class ConfirmRequest(BaseModel):
    reference_id: str = Field(..., min_length=1)
    date: date_type
    amount: Decimal = Field(..., ge=Decimal("0.01"), le=Decimal("999999.99"))
    transaction_type: Optional[str] = None
    image_url: str

    @field_validator("reference_id")
    @classmethod
    def strip_reference(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reference_id is required")
        return v

    @field_validator("date")
    @classmethod
    def within_campaign_and_not_future(cls, v: date_type) -> date_type:
        start = default_campaign().start
        if v < start:
            raise ValueError(f"date must be on or after {start.isoformat()}")
        if v > date_type.today():
            raise ValueError("date must not be in the future")
        return v

    @field_validator("image_url")
    @classmethod
    def http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("image_url must be an http(s) URL")
        return v


class TransactionOut(BaseModel):
    id: str
    reference_id: str
    date: date_type
    amount: str
    transaction_type: Optional[str] = None
    image_url: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, txn) -> "TransactionOut":
        return cls(
            id=txn.id,
            reference_id=txn.reference_id,
            date=txn.date,
            amount=f"{Decimal(txn.amount):.2f}",
            transaction_type=txn.transaction_type,
            image_url=txn.image_url,
            created_at=txn.created_at.isoformat() if txn.created_at else None,
        )


class TransactionPage(BaseModel):
    items: List[TransactionOut]
    page: int
    per_page: int
    total: int
