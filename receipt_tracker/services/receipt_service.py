"""Receipt scanning service using Claude Vision."""

import base64
import json
import logging
from dataclasses import dataclass, field
from typing import Any

import anthropic

from receipt_tracker.config import get_settings
from receipt_tracker.exceptions import ReceiptParseError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a receipt OCR assistant for Norwegian grocery receipts. Analyze receipt images and extract structured data.

Use these Norwegian categories (use the exact Norwegian names):
- Kjøtt (kjøttprodukter: kylling, kjøttdeig, pølser, bacon)
- Fisk (fisk og sjømat: laks, torsk, reker, fiskegrateng)
- Grønnsaker (grønnsaker og poteter: tomat, agurk, paprika, salat, poteter)
- Frukt (frisk frukt: epler, bananer, appelsiner)
- Brød (brød og bakervarer: brød, rundstykker, tortilla, naan)
- Melk (melk, fløte, kremfløte)
- Ost (ost, revet ost, hvitost, brunost)
- Melkeprodukter (andre meieriprodukter: smør, rømme, yoghurt, kesam)
- Egg (egg i alle varianter)
- Godteri (sjokolade og godteri: smågodt, karamell)
- Snacks (chips og snacks: potetgull, nøtter)
- Drikke (brus, juice, vann)
- Krydder (krydderblandinger og sauser)
- Kaffe (kaffe og te - IKKE godteri)
- Pålegg (smørepålegg: leverpostei, syltetøy, nugatti)
- Mat (ferdigmat, pasta, hermetikk, tørrvarer)
- Husholdning (rengjøring, papir, plastposer)
- Personlig pleie (hygiene, kosmetikk)
- Annet (pant, diverse)

Important rules:
- Fiskegrateng → Fisk (not Mat)
- Leverpostei → Pålegg (not Mat)
- Kaffe products → Kaffe (not Godteri)

Always respond with valid JSON only, no markdown formatting."""

EXTRACTION_PROMPT = """Analyze this receipt image and extract:
1. Merchant/store name
2. Date (in YYYY-MM-DD format)
3. Total amount
4. Individual items with their prices and quantities
5. Suggest a category for each item

Respond with ONLY valid JSON in this exact format:
{
  "merchant": "Store Name",
  "date": "YYYY-MM-DD",
  "total": 123.45,
  "items": [
    {
      "name": "Item Name",
      "quantity": 1,
      "unit_price": 12.34,
      "total_price": 12.34,
      "suggested_category": "Melk",
      "confidence": 0.95
    }
  ],
  "raw_text": "Full text from receipt",
  "confidence": 0.90
}

If you cannot read something clearly, use your best guess and set a lower confidence score (0.0-1.0).
If you cannot determine the date, use today's date.
Norwegian kroner amounts should be parsed correctly (comma as decimal separator sometimes)."""


@dataclass
class ScannedReceiptItem:
    """An item read from a receipt, with the model's category guess."""

    name: str
    total_price: float
    quantity: float = 1
    unit_price: float | None = None
    suggested_category: str = ""
    confidence: float = 0.0


@dataclass
class ScannedReceipt:
    """Structured receipt returned by the vision model."""

    merchant: str
    date: str | None
    total: float
    items: list[ScannedReceiptItem] = field(default_factory=list)
    raw_text: str | None = None
    confidence: float = 0.0


def _to_float(value: Any, default: float | None = 0.0) -> float | None:
    """Parse a number that may use a decimal comma ("12,50")."""
    if value is None or value == "":
        return default
    if isinstance(value, int | float):
        return float(value)
    try:
        return float(str(value).replace(" ", "").replace(",", "."))
    except ValueError:
        return default


def extract_json(response_text: str) -> Any:
    """Parse a JSON payload, tolerating a surrounding markdown code block."""
    text = response_text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        json_lines = []
        in_json = False
        for line in lines:
            if line.startswith("```") and not in_json:
                in_json = True
                continue
            elif line.startswith("```") and in_json:
                break
            elif in_json:
                json_lines.append(line)
        text = "\n".join(json_lines)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse vision response as JSON: {e}")
        logger.error(f"Response was: {response_text}")
        raise ReceiptParseError(f"Failed to parse receipt: {e}") from e


def parse_receipt_data(data: Any) -> ScannedReceipt:
    """Build a ScannedReceipt from the decoded model output."""
    if not isinstance(data, dict):
        raise ReceiptParseError("Receipt data must be a JSON object")

    items = []
    for raw_item in data.get("items") or []:
        if not isinstance(raw_item, dict) or not raw_item.get("name"):
            continue
        items.append(
            ScannedReceiptItem(
                name=str(raw_item["name"]).strip(),
                quantity=_to_float(raw_item.get("quantity"), default=1.0),
                unit_price=_to_float(raw_item.get("unit_price"), default=None),
                total_price=_to_float(raw_item.get("total_price")),
                suggested_category=str(raw_item.get("suggested_category") or ""),
                confidence=_to_float(raw_item.get("confidence")),
            )
        )

    return ScannedReceipt(
        merchant=str(data.get("merchant") or "Ukjent butikk"),
        date=data.get("date"),
        total=_to_float(data.get("total")),
        items=items,
        raw_text=data.get("raw_text"),
        confidence=_to_float(data.get("confidence")),
    )


class ReceiptService:
    """Service for reading receipts with Claude Vision."""

    def __init__(self) -> None:
        """Initialize the receipt service."""
        settings = get_settings()
        self.api_key = settings.anthropic_api_key
        self.model = settings.vision_model
        self._configured = bool(self.api_key)

    @property
    def is_configured(self) -> bool:
        """Check if the Anthropic API is configured."""
        return self._configured

    async def parse_receipt_image(self, image_data: bytes, media_type: str) -> ScannedReceipt:
        """Extract merchant, date, total and items from a receipt image.

        Args:
            image_data: Raw bytes of the image
            media_type: MIME type (e.g., "image/jpeg", "image/png")

        Returns:
            The receipt with a suggested category for every item
        """
        if not self.is_configured:
            raise ReceiptParseError("Anthropic API not configured")

        image_base64 = base64.standard_b64encode(image_data).decode("utf-8")

        client = anthropic.AsyncAnthropic(api_key=self.api_key)
        message = await client.messages.create(
            model=self.model,
            max_tokens=4096,
            system=SYSTEM_PROMPT,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": image_base64,
                            },
                        },
                        {
                            "type": "text",
                            "text": EXTRACTION_PROMPT,
                        },
                    ],
                }
            ],
        )

        if not message.content:
            raise ReceiptParseError("No response from vision model")

        receipt = parse_receipt_data(extract_json(message.content[0].text))
        logger.info(f"Read {len(receipt.items)} items from receipt at '{receipt.merchant}'")
        return receipt
