"""
Product records and the public catalog projection
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Tuple

from storefront.core.exceptions import ValidationError

# Stored attribute -> client-facing field
CATALOG_FIELD_MAP: Tuple[Tuple[str, str], ...] = (
    ("id", "productId"),
    ("name", "name"),
    ("price", "price"),
    ("image", "imageUrl"),
    ("category", "category"),
    ("brand", "brand"),
    ("description", "description"),
)

PRODUCT_KEY = "productId"

# DynamoDB numbers: up to 38 digits (boto3 refuses to round), magnitude 1E-130 to 9.99E+125
MAX_NUMBER_DIGITS = 38
MAX_NUMBER_EXPONENT = 125
MIN_NUMBER_EXPONENT = -130


def _fits_dynamodb_number(value: Decimal) -> bool:
    return (
        MIN_NUMBER_EXPONENT <= value.adjusted() <= MAX_NUMBER_EXPONENT
        and len(value.as_tuple().digits) <= MAX_NUMBER_DIGITS
    )


def parse_price(value: Any) -> Decimal:
    """
    Normalize a submitted price to a finite, non-negative Decimal.

    Accepts numbers and numeric strings ("19.99", " 5 ", "1e2").
    Rejects "19.99abc", "", NaN, Infinity, negatives and numbers DynamoDB
    cannot store ("1e400", more than 38 digits).
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Invalid price.")

    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid price.")

    if not price.is_finite() or price < 0:
        raise ValidationError("Invalid price.")
    if price and not _fits_dynamodb_number(price):
        raise ValidationError("Invalid price.")

    return price


def to_catalog_entry(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Project a stored product (admin or vendor) into the catalog shape.

    Fields absent from the record stay absent; nothing is defaulted.
    """
    return {
        target: item[source]
        for target, source in CATALOG_FIELD_MAP
        if source in item
    }


def product_key(product_id: str) -> Dict[str, str]:
    return {PRODUCT_KEY: product_id}
