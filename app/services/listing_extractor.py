import json
import logging
from dataclasses import dataclass, field

from app.errors import MalformedResponse
from app.schemas.product_search import (
    DEFAULT_LINK,
    DEFAULT_PRICE,
    DEFAULT_STORE,
    DEFAULT_TITLE,
    Product,
)

logger = logging.getLogger(__name__)

# required field -> placeholder used when the model omits or mistypes it
REQUIRED_FIELDS: dict[str, str] = {
    "title": DEFAULT_TITLE,
    "price": DEFAULT_PRICE,
    "store": DEFAULT_STORE,
    "link": DEFAULT_LINK,
}


@dataclass
class ExtractionResult:
    products: list[Product] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> list[Product]:
        """Return the products, raising MalformedResponse on a failed extraction."""
        if self.error is not None:
            raise MalformedResponse(self.error)
        return self.products


def isolate_array(text: str) -> str | None:
    """Cut the text down to the span between the first '[' and the last ']'."""
    text = text.strip()
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end < start:
        return None
    return text[start:end + 1]


def coerce_product(item: dict) -> Product:
    """Build a Product from a decoded object, defaulting each bad field on its own."""
    values = {}
    for name, placeholder in REQUIRED_FIELDS.items():
        value = item.get(name)
        values[name] = value if isinstance(value, str) and value else placeholder

    image = item.get("image")
    values["image"] = image if isinstance(image, str) and image else None
    return Product(**values)


def extract_products(text: str) -> ExtractionResult:
    """Parse the JSON array embedded in free-form model output.

    Anything before the first '[' or after the last ']' is discarded. The
    batch fails if the remainder is not a JSON array or any element is not
    an object. Objects with missing or mistyped fields are kept, with those
    fields set to their placeholders.
    """
    candidate = isolate_array(text or "")
    if candidate is None:
        return ExtractionResult(error="No JSON array found in model output")

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        return ExtractionResult(error=f"Model output is not valid JSON: {exc.msg}")

    if not isinstance(data, list):
        return ExtractionResult(error="Response is not an array")

    products = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            return ExtractionResult(error=f"Product at index {index} is not an object")
        defaulted = [
            name for name in REQUIRED_FIELDS
            if not (isinstance(item.get(name), str) and item.get(name))
        ]
        if defaulted:
            logger.debug("Product at index %d defaulted fields: %s", index, ", ".join(defaulted))
        products.append(coerce_product(item))

    return ExtractionResult(products=products)
