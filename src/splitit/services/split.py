from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Sequence

Money = Decimal

CENT = Decimal("0.01")
ROUNDING = ROUND_HALF_UP
# Participant (or item assignee) that absorbs rounding drift.
REMAINDER_RECIPIENT_INDEX = 0


class SplitMode(str, Enum):
    EVEN = "even"
    ITEMIZED = "itemized"


@dataclass(slots=True)
class Person:
    id: str
    name: str


@dataclass(slots=True)
class BillItem:
    id: str
    name: str
    price: Money
    assigned_to: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Bill:
    items: Sequence[BillItem] = ()
    people: Sequence[Person] = ()
    tax: Money = Decimal("0")
    tip: Money = Decimal("0")
    split_mode: SplitMode = SplitMode.EVEN


def round_cents(amount: Money) -> Money:
    return amount.quantize(CENT, rounding=ROUNDING)


def _at_cents_scale(amount: Money) -> Money:
    # Pads 10 -> 10.00 without touching values that carry more precision.
    if amount.as_tuple().exponent > CENT.as_tuple().exponent:
        return amount.quantize(CENT)
    return amount


def divide(amount: Money, count: int) -> tuple[Money, Money]:
    """Split ``amount`` into ``count`` cent-rounded shares.

    Returns ``(share, remainder)`` where ``share * count + remainder == amount``
    exactly. The remainder may be negative when the share was rounded up.
    """
    if count <= 0:
        raise ValueError("count must be positive")
    share = round_cents(amount / Decimal(count))
    return share, amount - share * count


def total(bill: Bill) -> Money:
    items_total = sum((item.price for item in bill.items), Decimal("0"))
    return items_total + bill.tax + bill.tip


def _split_even(amount: Money, n: int) -> list[Money]:
    share, remainder = divide(amount, n)
    shares = [share] * n
    shares[REMAINDER_RECIPIENT_INDEX] += remainder
    return shares


def _split_itemized(bill: Bill) -> list[Money]:
    people = bill.people
    index_by_id: dict[str, int] = {}
    for index, person in enumerate(people):
        index_by_id.setdefault(person.id, index)

    accumulators = [Decimal("0")] * len(people)

    for item in bill.items:
        assignees = item.assigned_to
        if not assignees:
            continue
        share, remainder = divide(item.price, len(assignees))
        for position, person_id in enumerate(assignees):
            index = index_by_id.get(person_id)
            if index is None:
                continue
            accumulators[index] += share
            if position == REMAINDER_RECIPIENT_INDEX:
                accumulators[index] += remainder

    extras = _split_even(bill.tax + bill.tip, len(people))
    return [amount + extra for amount, extra in zip(accumulators, extras)]


def split_amounts(bill: Bill) -> list[Money]:
    """Per-person amounts owed, aligned with ``bill.people``.

    Even mode always sums to ``total(bill)``. Itemized mode sums to it only
    when every item is assigned to current people; unassigned items and
    assignees no longer on the bill contribute nothing.
    """
    n = len(bill.people)
    if n == 0:
        return []
    if n == 1:
        return [_at_cents_scale(total(bill))]

    if bill.split_mode == SplitMode.EVEN:
        shares = _split_even(total(bill), n)
    else:
        shares = _split_itemized(bill)
    return [_at_cents_scale(share) for share in shares]


def unassigned_items(bill: Bill) -> list[BillItem]:
    return [item for item in bill.items if not item.assigned_to]


def unassigned_total(bill: Bill) -> Money:
    return sum((item.price for item in unassigned_items(bill)), Decimal("0"))


def format_amount(amount: Money, currency_symbol: str) -> str:
    return f"{currency_symbol}{round_cents(amount):f}"
