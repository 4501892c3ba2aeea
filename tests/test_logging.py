from decimal import Decimal

from structlog.testing import capture_logs

from splitit.handlers.split import _summary_text
from splitit.services.split import Bill, BillItem, Person, SplitMode


def test_summary_logs_split_with_uncovered_amount():
    bill = Bill(
        items=[
            BillItem(id="x", name="Burger", price=Decimal("8.00"), assigned_to=["a"]),
            BillItem(id="y", name="Fries", price=Decimal("5.00")),
        ],
        people=[Person(id="a", name="Alice"), Person(id="b", name="Bob")],
        split_mode=SplitMode.ITEMIZED,
    )

    with capture_logs() as logs:
        text = _summary_text("bill1", bill, "$")

    assert "• Alice: $8.00" in text
    assert logs == [
        {
            "event": "split.computed",
            "log_level": "info",
            "bill_id": "bill1",
            "mode": "itemized",
            "people": 2,
            "total": "13.00",
            "uncovered": "5.00",
        }
    ]
