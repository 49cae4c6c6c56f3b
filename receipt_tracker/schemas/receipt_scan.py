"""Receipt scan schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ScannedItemResponse(BaseModel):
    """An item read from a receipt with its resolved category."""

    name: str
    quantity: float = 1
    unit_price: float | None = None
    total_price: float
    suggested_category: str = ""
    confidence: float = 0.0
    category_id: int | None = None
    source: str = "none"  # which resolution step chose category_id
    needs_review: bool = False


class ReceiptScanResponse(BaseModel):
    """Response for a receipt scan."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    status: str
    error_message: str | None = None
    merchant: str | None = None
    receipt_date: str | None = None
    total: float | None = None
    confidence: float | None = None
    parsed_items: list[ScannedItemResponse] | None = None
    processed_at: datetime | None = None
    created_at: datetime


class ReceiptScanCreateResponse(BaseModel):
    """Response when creating a receipt scan."""

    id: int
    status: str
    message: str
