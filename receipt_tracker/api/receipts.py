"""Receipt API endpoints: scanning, saving and browsing receipts."""

import base64
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session, selectinload

from receipt_tracker.api.dependencies import get_current_user, get_feedback_recorder
from receipt_tracker.config import get_settings
from receipt_tracker.database import get_db
from receipt_tracker.exceptions import DataAccessError
from receipt_tracker.models.receipt import Receipt, ReceiptItem
from receipt_tracker.models.receipt_scan import ReceiptScan
from receipt_tracker.models.user import User
from receipt_tracker.schemas.receipt import ReceiptCreate, ReceiptCreateResponse, ReceiptResponse
from receipt_tracker.schemas.receipt_scan import ReceiptScanCreateResponse, ReceiptScanResponse
from receipt_tracker.services.categories import get_active_categories
from receipt_tracker.services.categorization import FeedbackRecorder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/receipts", tags=["receipts"])

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


def get_user_receipt(db: Session, receipt_id: int, user: User) -> Receipt:
    """Get a receipt owned by the user, or 404."""
    receipt = (
        db.query(Receipt)
        .options(selectinload(Receipt.items))
        .filter(Receipt.id == receipt_id, Receipt.user_id == user.id)
        .first()
    )
    if not receipt:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Receipt not found")
    return receipt


# --- Receipt Scanning ---


@router.post("/scan", response_model=ReceiptScanCreateResponse)
async def scan_receipt(
    file: Annotated[UploadFile, File(description="Receipt image (JPEG, PNG, GIF, or WebP)")],
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Upload a receipt image for scanning.

    The receipt is read in the background by Claude Vision and every item
    gets a suggested category. Poll the status endpoint for the result.

    Note: This endpoint must remain async because UploadFile.read() is async.
    """
    from receipt_tracker.tasks.receipt_scan import process_receipt_scan

    media_type = "image/jpeg" if file.content_type == "image/jpg" else file.content_type
    if media_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Unsupported image format ({file.content_type}). "
                f"Allowed types: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}"
            ),
        )

    image_data = await file.read()

    max_bytes = get_settings().max_upload_bytes
    if len(image_data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.",
        )
    if not image_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image provided")

    scan = ReceiptScan(user_id=current_user.id, status="pending")
    db.add(scan)
    db.commit()
    db.refresh(scan)

    image_data_b64 = base64.b64encode(image_data).decode("utf-8")
    process_receipt_scan.delay(scan.id, image_data_b64, media_type)

    return ReceiptScanCreateResponse(
        id=scan.id,
        status="pending",
        message="Receipt uploaded successfully. Processing in background.",
    )


@router.get("/scan/{scan_id}", response_model=ReceiptScanResponse)
def get_receipt_scan(
    scan_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the status and resolved items of a receipt scan."""
    scan = (
        db.query(ReceiptScan)
        .filter(
            ReceiptScan.id == scan_id,
            ReceiptScan.user_id == current_user.id,
        )
        .first()
    )
    if not scan:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Receipt scan not found",
        )
    return scan


# --- Receipts ---


@router.post("", response_model=ReceiptCreateResponse, status_code=status.HTTP_201_CREATED)
def create_receipt(
    receipt_data: ReceiptCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    recorder: Annotated[FeedbackRecorder, Depends(get_feedback_recorder)],
):
    """Save a receipt and learn from the item categories the user confirmed."""
    category_ids = {category.id for category in get_active_categories(db, current_user.id)}
    referenced = {receipt_data.category_id} | {item.category_id for item in receipt_data.items}
    unknown = referenced - category_ids - {None}
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category: {', '.join(str(c) for c in sorted(unknown))}",
        )

    receipt = Receipt(
        user_id=current_user.id,
        merchant=receipt_data.merchant.strip(),
        receipt_date=receipt_data.receipt_date,
        total_amount=receipt_data.total_amount,
        category_id=receipt_data.category_id,
        ocr_method=receipt_data.ocr_method,
        raw_ocr_text=receipt_data.raw_ocr_text,
        confidence_score=receipt_data.confidence_score,
        notes=receipt_data.notes,
        items=[
            ReceiptItem(
                item_name=item.item_name.strip(),
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
                category_id=item.category_id,
                line_number=index,
            )
            for index, item in enumerate(receipt_data.items, start=1)
        ],
    )
    db.add(receipt)
    db.commit()

    learned_count = 0
    try:
        for item in receipt_data.items:
            if item.confirmed and item.category_id is not None:
                learned = recorder.learn(current_user.id, item.item_name, item.category_id)
                if learned is not None:
                    learned_count += 1
    except DataAccessError as e:
        # The receipt is already saved; corrections can be learned next time
        logger.warning(f"Could not learn categories for receipt {receipt.id}: {e}")
        db.rollback()

    receipt = get_user_receipt(db, receipt.id, current_user)
    response = ReceiptCreateResponse.model_validate(receipt)
    response.learned_count = learned_count
    return response


@router.get("", response_model=list[ReceiptResponse])
def list_receipts(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    limit: int = 50,
):
    """List the user's receipts, newest first."""
    return (
        db.query(Receipt)
        .options(selectinload(Receipt.items))
        .filter(Receipt.user_id == current_user.id)
        .order_by(Receipt.receipt_date.desc(), Receipt.id.desc())
        .limit(min(limit, 200))
        .all()
    )


@router.get("/{receipt_id}", response_model=ReceiptResponse)
def get_receipt(
    receipt_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a receipt with its items."""
    return get_user_receipt(db, receipt_id, current_user)


@router.delete("/{receipt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_receipt(
    receipt_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a receipt and its items. Learned categories are kept."""
    receipt = get_user_receipt(db, receipt_id, current_user)
    db.delete(receipt)
    db.commit()
