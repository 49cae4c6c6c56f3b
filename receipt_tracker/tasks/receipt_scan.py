"""Celery task for receipt scanning."""

import asyncio
import base64
import logging
from dataclasses import asdict
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from receipt_tracker.celery_app import app as celery_app
from receipt_tracker.database import SessionLocal
from receipt_tracker.exceptions import DataAccessError
from receipt_tracker.models.receipt_scan import ReceiptScan
from receipt_tracker.services.categories import get_active_categories
from receipt_tracker.services.categorization import CategoryResolver
from receipt_tracker.services.learned_patterns import LearnedPatternStore
from receipt_tracker.services.receipt_service import ReceiptService, ScannedReceipt

logger = logging.getLogger(__name__)

# Items below this confidence are flagged for the user to check
REVIEW_CONFIDENCE_THRESHOLD = 0.7


def _fail(db: Session, scan: ReceiptScan, message: str) -> dict:
    scan.status = "failed"
    scan.error_message = message
    db.commit()
    return {"error": message}


def resolve_scanned_items(db: Session, user_id: int, receipt: ScannedReceipt) -> list[dict]:
    """Attach a category to every scanned item.

    If learned patterns cannot be read, items fall back to the vision model's
    suggestion alone.
    """
    categories = get_active_categories(db, user_id)
    resolver = CategoryResolver(LearnedPatternStore(db))

    try:
        assignments = resolver.resolve_items(receipt.items, categories, user_id)
        resolved = [(a.category_id, a.source) for a in assignments]
    except DataAccessError as e:
        logger.warning(f"Learned categories unavailable, using AI suggestions only: {e}")
        db.rollback()
        resolved = []
        for item in receipt.items:
            category_id = resolver.resolve_suggestion(item.suggested_category, categories)
            resolved.append((category_id, "suggestion" if category_id is not None else "none"))

    items_data = []
    for item, (category_id, source) in zip(receipt.items, resolved, strict=True):
        item_data = asdict(item)
        item_data["category_id"] = category_id
        item_data["source"] = source
        item_data["needs_review"] = (
            category_id is None or item.confidence < REVIEW_CONFIDENCE_THRESHOLD
        )
        items_data.append(item_data)
    return items_data


def run_receipt_scan(
    db: Session,
    scan_id: int,
    image_data: bytes,
    media_type: str,
    service: ReceiptService | None = None,
) -> dict:
    """Read a receipt image and store resolved items on its scan record."""
    scan = db.query(ReceiptScan).filter(ReceiptScan.id == scan_id).first()
    if not scan:
        logger.error(f"ReceiptScan {scan_id} not found")
        return {"error": "Scan not found"}

    scan.status = "processing"
    db.commit()

    service = service or ReceiptService()
    if not service.is_configured:
        return _fail(db, scan, "Anthropic API not configured")

    try:
        # Run async function in sync context
        receipt = asyncio.run(service.parse_receipt_image(image_data, media_type))
    except Exception as e:
        logger.error(f"Failed to parse receipt: {e}")
        return _fail(db, scan, str(e))

    items_data = resolve_scanned_items(db, scan.user_id, receipt)

    scan.status = "completed"
    scan.merchant = receipt.merchant
    scan.receipt_date = receipt.date
    scan.total = receipt.total
    scan.confidence = receipt.confidence
    scan.raw_text = receipt.raw_text
    scan.parsed_items = items_data
    scan.processed_at = datetime.now(UTC)
    db.commit()

    needs_review = sum(1 for item in items_data if item["needs_review"])
    logger.info(
        f"Scan {scan_id} completed: {len(items_data)} items, {needs_review} need review"
    )
    return {
        "status": "completed",
        "items": len(items_data),
        "needs_review": needs_review,
    }


@celery_app.task(name="tasks.process_receipt_scan")
def process_receipt_scan(scan_id: int, image_data_b64: str, media_type: str) -> dict:
    """Process an uploaded receipt image in the background.

    Args:
        scan_id: ID of the ReceiptScan record
        image_data_b64: Base64-encoded image data
        media_type: MIME type of the image

    Returns:
        Dict with processing results
    """
    db = SessionLocal()
    try:
        return run_receipt_scan(db, scan_id, base64.b64decode(image_data_b64), media_type)
    except Exception as e:
        logger.exception(f"Error processing receipt scan {scan_id}")
        db.rollback()
        try:
            scan = db.query(ReceiptScan).filter(ReceiptScan.id == scan_id).first()
            if scan:
                return _fail(db, scan, str(e))
        except Exception as db_error:
            logger.error(f"Failed to update scan status: {db_error}")
        return {"error": str(e)}
    finally:
        db.close()
