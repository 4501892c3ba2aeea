from decimal import Decimal

from splitit.services.split import Bill, BillItem, Person, SplitMode, split_amounts
from splitit.services.summary import (
    assigned_names,
    format_items,
    format_people,
    format_split_summary,
    format_unassigned_warning,
)


PEOPLE = [Person(id="a", name="Alice"), Person(id="b", name="Bob"), Person(id="c", name="Carol")]


def test_format_split_summary_even():
    bill = Bill(items=[BillItem(id="x", name="Dinner", price=Decimal("10.00"))], people=PEOPLE)

    text = format_split_summary(bill, split_amounts(bill), "$")

    assert text.startswith("🧾 Bill Split Summary")
    assert "• Alice: $3.34" in text
    assert "• Carol: $3.33" in text
    assert "💰 Total: $10.00" in text
    assert "Tax:" not in text
    assert text.endswith("Split with SplitIt! 📱")


def test_format_split_summary_with_extras():
    bill = Bill(
        items=[BillItem(id="x", name="Dinner", price=Decimal("10.00"))],
        people=PEOPLE[:2],
        tax=Decimal("0.80"),
        tip=Decimal("2"),
    )

    text = format_split_summary(bill, split_amounts(bill), "€")

    assert "• Bob: €6.40" in text
    assert "Tax: €0.80, tip: €2.00" in text


def test_format_items_itemized_shows_assignees():
    bill = Bill(
        items=[
            BillItem(id="x", name="Wine", price=Decimal("18.00"), assigned_to=["b", "gone", "a"]),
            BillItem(id="y", name="Bread", price=Decimal("3.50")),
        ],
        people=PEOPLE,
        split_mode=SplitMode.ITEMIZED,
    )

    text = format_items(bill, "$")

    assert "1. Wine — $18.00 (Bob, Alice)" in text
    assert "2. Bread — $3.50 (unassigned)" in text
    assert text.endswith("Subtotal: $21.50")


def test_format_items_even_mode_hides_assignees():
    bill = Bill(items=[BillItem(id="x", name="Wine", price=Decimal("18.00"), assigned_to=["a"])], people=PEOPLE)
    assert "Alice" not in format_items(bill, "$")


def test_format_empty_lists():
    assert format_items(Bill(), "$").startswith("No items yet")
    assert format_people(Bill()).startswith("Nobody added yet")


def test_format_people():
    text = format_people(Bill(people=PEOPLE))
    assert text.splitlines() == ["People (3):", "1. Alice", "2. Bob", "3. Carol"]


def test_format_unassigned_warning():
    bill = Bill(
        items=[
            BillItem(id="x", name="Fries", price=Decimal("4.00")),
            BillItem(id="y", name="Soda", price=Decimal("2.50")),
            BillItem(id="z", name="Burger", price=Decimal("9.00"), assigned_to=["a"]),
        ],
        people=PEOPLE,
        split_mode=SplitMode.ITEMIZED,
    )

    text = format_unassigned_warning(bill, "$")

    assert "Fries, Soda" in text
    assert "Burger" not in text
    assert "$6.50 will not be included" in text


def test_assigned_names_skips_removed_people():
    item = BillItem(id="x", name="Wine", price=Decimal("1"), assigned_to=["gone", "c"])
    assert assigned_names(item, PEOPLE) == ["Carol"]
