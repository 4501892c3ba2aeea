from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from splitit.services.split import CENT, Money, SplitMode

# Largest value a Numeric(12, 2) column holds.
MAX_AMOUNT = Decimal("9999999999.99")

# Trailing price: "Pizza 12.50", "Pizza $12,50"
TRAILING_PRICE_RE = re.compile(r"^(?P<name>.+?)\s+(?P<price>\S?\d+(?:[.,]\d+)?)$")

SPLIT_MODE_ALIASES = {
    "even": SplitMode.EVEN,
    "evenly": SplitMode.EVEN,
    "shared": SplitMode.EVEN,
    "itemized": SplitMode.ITEMIZED,
    "itemised": SplitMode.ITEMIZED,
    "items": SplitMode.ITEMIZED,
}


def parse_money(text: str) -> Money:
    """
    Parse a user-entered amount into an exact Decimal.

    Supported forms:
    - 12
    - 12.50
    - 12,50
    - $12.50 (one leading non-digit symbol is ignored)
    """
    value = text.strip().replace(" ", "")
    if value and not (value[0].isdigit() or value[0] in "-.,"):
        value = value[1:]
    value = value.replace(",", ".")
    if not value:
        raise ValueError("Please enter a valid price")

    try:
        amount = Decimal(value)
    except InvalidOperation as exc:
        raise ValueError("Please enter a valid price") from exc

    if not amount.is_finite():
        raise ValueError("Please enter a valid price")
    if amount < 0:
        raise ValueError("Amount cannot be negative")
    if amount > MAX_AMOUNT:
        raise ValueError(f"Amount cannot exceed {MAX_AMOUNT}")
    try:
        cents = amount.quantize(CENT)
    except InvalidOperation as exc:
        raise ValueError("Please enter a valid price") from exc
    if amount != cents:
        raise ValueError("Use at most two decimal places")
    return amount


def parse_item_line(text: str) -> tuple[str, Money]:
    if "|" in text:
        name, _, price = text.partition("|")
    else:
        match = TRAILING_PRICE_RE.match(text.strip())
        if not match:
            raise ValueError("Usage: /additem <name> | <price>")
        name, price = match.group("name"), match.group("price")

    name = name.strip()
    if not name:
        raise ValueError("Please enter item name")
    return name, parse_money(price)


def parse_person_name(text: str) -> str:
    name = " ".join(text.split())
    if not name:
        raise ValueError("Please enter person name")
    return name


def parse_split_mode(text: str) -> SplitMode:
    mode = SPLIT_MODE_ALIASES.get(text.strip().lower())
    if mode is None:
        raise ValueError("Split mode must be 'even' or 'itemized'")
    return mode


def parse_index(text: str, size: int) -> int:
    """Convert a 1-based position from a numbered list into a list index."""
    try:
        position = int(text.strip())
    except ValueError as exc:
        raise ValueError("Enter the number from the list") from exc
    if not 1 <= position <= size:
        raise ValueError(f"Number must be between 1 and {size}" if size else "The list is empty")
    return position - 1
