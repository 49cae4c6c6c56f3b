"""Receipt schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ReceiptItemCreate(BaseModel):
    """A receipt line item as saved by the user.

    confirmed marks an item whose category the user changed or explicitly
    accepted; only those are learned from.
    """

    item_name: str = Field(..., min_length=1, max_length=500)
    quantity: float = Field(1, gt=0)
    unit_price: float | None = None
    total_price: float
    category_id: int | None = None
    confirmed: bool = False


class ReceiptCreate(BaseModel):
    """Save a receipt, usually after reviewing a scan."""

    merchant: str = Field(..., min_length=1, max_length=255)
    receipt_date: date
    total_amount: float
    category_id: int | None = None
    ocr_method: str | None = Field(None, max_length=50)
    raw_ocr_text: str | None = None
    confidence_score: float | None = None
    notes: str | None = None
    items: list[ReceiptItemCreate] = Field(default_factory=list)


class ReceiptItemResponse(BaseModel):
    """Receipt item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_name: str
    quantity: float
    unit_price: float | None
    total_price: float
    category_id: int | None
    line_number: int | None


class ReceiptResponse(BaseModel):
    """Receipt response with items."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    merchant: str
    receipt_date: date
    total_amount: float
    category_id: int | None
    ocr_method: str | None
    confidence_score: float | None
    notes: str | None
    items: list[ReceiptItemResponse]
    created_at: datetime
    updated_at: datetime


class ReceiptCreateResponse(ReceiptResponse):
    """Saved receipt plus how many item categories were learned."""

    learned_count: int = 0
