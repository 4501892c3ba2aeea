from __future__ import annotations

from typing import Iterable, Sequence

from splitit.services.split import (
    Bill,
    BillItem,
    Money,
    Person,
    SplitMode,
    format_amount,
    total,
    unassigned_items,
    unassigned_total,
)


SPLIT_MODE_LABELS = {
    SplitMode.EVEN: "split evenly",
    SplitMode.ITEMIZED: "split by item",
}

SUMMARY_HEADER = "🧾 Bill Split Summary"
SUMMARY_FOOTER = "Split with SplitIt! 📱"


def assigned_names(item: BillItem, people: Iterable[Person]) -> list[str]:
    names = {person.id: person.name for person in people}
    return [names[person_id] for person_id in item.assigned_to if person_id in names]


def format_items(bill: Bill, symbol: str) -> str:
    if not bill.items:
        return "No items yet. Add one with /additem <name> | <price>"

    lines = []
    for position, item in enumerate(bill.items, start=1):
        line = f"{position}. {item.name} — {format_amount(item.price, symbol)}"
        if bill.split_mode == SplitMode.ITEMIZED:
            names = assigned_names(item, bill.people)
            line += f" ({', '.join(names)})" if names else " (unassigned)"
        lines.append(line)

    subtotal = sum((item.price for item in bill.items), Money("0"))
    lines.append("")
    lines.append(f"Subtotal: {format_amount(subtotal, symbol)}")
    return "\n".join(lines)


def format_people(bill: Bill) -> str:
    if not bill.people:
        return "Nobody added yet. Add someone with /addperson <name>"
    lines = [f"People ({len(bill.people)}):"]
    lines.extend(f"{position}. {person.name}" for position, person in enumerate(bill.people, start=1))
    return "\n".join(lines)


def format_split_summary(bill: Bill, amounts: Sequence[Money], symbol: str) -> str:
    lines = [SUMMARY_HEADER, ""]
    for index, person in enumerate(bill.people):
        amount = amounts[index] if index < len(amounts) else Money("0")
        lines.append(f"• {person.name}: {format_amount(amount, symbol)}")
    lines.append("")
    lines.append(f"💰 Total: {format_amount(total(bill), symbol)}")
    if bill.tax or bill.tip:
        lines.append(f"Tax: {format_amount(bill.tax, symbol)}, tip: {format_amount(bill.tip, symbol)}")
    lines.append("")
    lines.append(SUMMARY_FOOTER)
    return "\n".join(lines)


def format_unassigned_warning(bill: Bill, symbol: str) -> str:
    names = ", ".join(item.name for item in unassigned_items(bill))
    return (
        f"These items are not assigned to anyone yet: {names}.\n"
        f"{format_amount(unassigned_total(bill), symbol)} will not be included in the split. "
        "Do you want to continue?"
    )
