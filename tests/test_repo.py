from decimal import Decimal

import pytest

from splitit.db import repo as repo_module
from splitit.db.repo import BillRepository, get_global_repository, set_global_repository
from splitit.services.split import Person, SplitMode, split_amounts


class DummyDB:
    def __init__(self) -> None:
        self.bills = {}
        self.items = []
        self.people = []
        self.assignments = set()
        self.executed = []

    async def fetchrow(self, query: str, *args):
        if query.lstrip().startswith("INSERT INTO bills"):
            bill_id, owner, title, symbol = args
            row = {"id": bill_id, "owner_tg_id": owner, "title": title, "currency_symbol": symbol}
            self.bills[bill_id] = row
            return row
        if query.lstrip().startswith("INSERT INTO bill_items"):
            return {"id": args[0], "bill_id": args[1], "name": args[2], "price": args[3]}
        if "FROM bills" in query:
            return self.bills.get(args[0])
        return None

    async def fetch(self, query: str, *args):
        if "FROM bill_items" in query:
            return self.items
        if "FROM bill_people" in query:
            return self.people
        return []

    async def fetchval(self, query: str, *args):
        if query.startswith("DELETE FROM item_assignments"):
            if args in self.assignments:
                self.assignments.discard(args)
                return args[1]
            return None
        return None

    async def execute(self, query: str, *args):
        self.executed.append((" ".join(query.split()), args))
        if "INSERT INTO item_assignments" in query:
            self.assignments.add(args)
        return "OK"


@pytest.mark.asyncio
async def test_create_bill_generates_id():
    db = DummyDB()
    repo = BillRepository(db)  # type: ignore[arg-type]

    row = await repo.create_bill(42, "Friday dinner", "€")

    assert len(row["id"]) == 9
    assert db.bills[row["id"]]["owner_tg_id"] == 42


@pytest.mark.asyncio
async def test_load_bill_assembles_engine_input():
    db = DummyDB()
    db.bills["b1"] = {
        "id": "b1",
        "owner_tg_id": 42,
        "tax": Decimal("1.00"),
        "tip": Decimal("2.00"),
        "split_mode": "itemized",
        "currency_symbol": "$",
    }
    db.items = [
        {"id": "i1", "name": "Platter", "price": Decimal("10.00"), "assigned_to": ["p1", "p2", "p3"]},
        {"id": "i2", "name": "Water", "price": Decimal("0.00"), "assigned_to": None},
    ]
    db.people = [{"id": "p1", "name": "A"}, {"id": "p2", "name": "B"}, {"id": "p3", "name": "C"}]
    repo = BillRepository(db)  # type: ignore[arg-type]

    bill = await repo.load_bill("b1")

    assert bill is not None
    assert bill.split_mode is SplitMode.ITEMIZED
    assert bill.people == [Person(id="p1", name="A"), Person(id="p2", name="B"), Person(id="p3", name="C")]
    assert bill.items[1].assigned_to == []
    assert split_amounts(bill) == [Decimal("4.34"), Decimal("4.33"), Decimal("4.33")]


@pytest.mark.asyncio
async def test_load_missing_bill():
    repo = BillRepository(DummyDB())  # type: ignore[arg-type]
    assert await repo.load_bill("missing") is None


@pytest.mark.asyncio
async def test_toggle_assignment():
    db = DummyDB()
    repo = BillRepository(db)  # type: ignore[arg-type]

    assert await repo.toggle_assignment("i1", "p1") is True
    assert ("i1", "p1") in db.assignments
    assert await repo.toggle_assignment("i1", "p1") is False
    assert ("i1", "p1") not in db.assignments


@pytest.mark.asyncio
async def test_update_bill_field_whitelist():
    db = DummyDB()
    repo = BillRepository(db)  # type: ignore[arg-type]

    await repo.set_split_mode("b1", SplitMode.ITEMIZED)
    await repo.set_tip("b1", Decimal("3.00"))

    assert db.executed == [
        ("UPDATE bills SET split_mode = $1 WHERE id = $2", ("itemized", "b1")),
        ("UPDATE bills SET tip = $1 WHERE id = $2", (Decimal("3.00"), "b1")),
    ]
    with pytest.raises(ValueError):
        await repo.update_bill_field("b1", "owner_tg_id", 1)


@pytest.mark.asyncio
async def test_reset_bill_clears_items_people_extras_and_mode():
    db = DummyDB()
    repo = BillRepository(db)  # type: ignore[arg-type]

    await repo.reset_bill("b1")

    statements = [statement for statement, _ in db.executed]
    assert "DELETE FROM bill_items WHERE bill_id = $1" in statements
    assert "DELETE FROM bill_people WHERE bill_id = $1" in statements
    assert "UPDATE bills SET tax = 0, tip = 0, split_mode = 'even' WHERE id = $1" in statements


def test_global_repository(monkeypatch):
    monkeypatch.setattr(repo_module, "_global_repo", None)
    with pytest.raises(RuntimeError):
        get_global_repository()

    repo = BillRepository(DummyDB())  # type: ignore[arg-type]
    set_global_repository(repo)
    assert get_global_repository() is repo
