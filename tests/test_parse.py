from decimal import Decimal

import pytest

from splitit.services.split import SplitMode
from splitit.utils.parse import parse_index, parse_item_line, parse_money, parse_person_name, parse_split_mode


def test_parse_money_formats():
    assert parse_money("12") == Decimal("12")
    assert parse_money(" 7.5 ") == Decimal("7.50")
    assert parse_money("12,50") == Decimal("12.50")
    assert parse_money("$12.50") == Decimal("12.50")
    assert parse_money("€0,99") == Decimal("0.99")


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "valid price"),
        ("abc", "valid price"),
        ("-1", "negative"),
        ("1.234", "two decimal places"),
        ("-inf", "valid price"),
        ("1e30", "cannot exceed"),
        ("9" * 30, "cannot exceed"),
        ("10000000000", "cannot exceed"),
    ],
)
def test_parse_money_rejects(text, message):
    with pytest.raises(ValueError, match=message):
        parse_money(text)


def test_parse_item_line():
    assert parse_item_line("Pizza | 12.50") == ("Pizza", Decimal("12.50"))
    assert parse_item_line("Large fries 4,20") == ("Large fries", Decimal("4.20"))


def test_parse_item_line_errors():
    with pytest.raises(ValueError, match="item name"):
        parse_item_line(" | 3")
    with pytest.raises(ValueError, match="valid price"):
        parse_item_line("Pizza | abc")
    with pytest.raises(ValueError, match="Usage"):
        parse_item_line("Pizza")


def test_parse_person_name():
    assert parse_person_name("  Mary   Jane ") == "Mary Jane"
    with pytest.raises(ValueError):
        parse_person_name("   ")


def test_parse_split_mode():
    assert parse_split_mode("Even") is SplitMode.EVEN
    assert parse_split_mode("items") is SplitMode.ITEMIZED
    with pytest.raises(ValueError):
        parse_split_mode("random")


def test_parse_index():
    assert parse_index("2", 3) == 1
    with pytest.raises(ValueError, match="between 1 and 3"):
        parse_index("0", 3)
    with pytest.raises(ValueError, match="number from the list"):
        parse_index("x", 3)
    with pytest.raises(ValueError, match="empty"):
        parse_index("1", 0)


def test_parse_money_upper_bound():
    assert parse_money("9999999999.99") == Decimal("9999999999.99")
    assert parse_money("1e2") == Decimal("100")
