from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

import asyncpg

from splitit.logging import get_logger, sql_logger
from splitit.services.split import Bill, BillItem, Person, SplitMode
from splitit.utils.ids import generate_id


class Database:
    def __init__(self, dsn: str) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None
        self._log = get_logger(__name__)

    async def connect(self) -> None:
        if self._pool is None:
            # asyncpg expects a plain postgresql:// scheme, without "+asyncpg"
            dsn = self._dsn.replace("+asyncpg", "")
            self._pool = await asyncpg.create_pool(dsn)
            self._log.info("db.pool.created")

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            self._log.info("db.pool.closed")

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetch", query=query, args=args)
        return await self._pool.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetchrow", query=query, args=args)
        return await self._pool.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.fetchval", query=query, args=args)
        return await self._pool.fetchval(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        await self._ensure_pool()
        assert self._pool
        sql_logger.info("sql.execute", query=query, args=args)
        return await self._pool.execute(query, *args)

    async def _ensure_pool(self) -> None:
        if self._pool is None:
            await self.connect()


class BillRepository:
    """Owns every read and write of bill state.

    The split engine never talks to storage; handlers load a ``Bill`` value
    through :meth:`load_bill` and pass it on.
    """

    def __init__(self, db: Database) -> None:
        self.db = db
        self._log = get_logger(__name__)

    async def create_bill(self, owner_tg_id: int, title: str, currency_symbol: str) -> asyncpg.Record:
        row = await self.db.fetchrow(
            """
            INSERT INTO bills (id, owner_tg_id, title, currency_symbol)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            generate_id(),
            owner_tg_id,
            title,
            currency_symbol,
        )
        assert row is not None
        self._log.info("bill.created", bill_id=row["id"], owner_tg_id=owner_tg_id)
        return row

    async def get_bill(self, bill_id: str) -> asyncpg.Record | None:
        return await self.db.fetchrow("SELECT * FROM bills WHERE id = $1", bill_id)

    async def list_owner_bills(self, owner_tg_id: int) -> list[asyncpg.Record]:
        return await self.db.fetch(
            """
            SELECT b.*, COALESCE(SUM(i.price), 0) AS items_total, COUNT(i.id) AS items_count
            FROM bills b
            LEFT JOIN bill_items i ON i.bill_id = b.id
            WHERE b.owner_tg_id = $1
            GROUP BY b.id
            ORDER BY b.created_at DESC
            """,
            owner_tg_id,
        )

    async def delete_bill(self, bill_id: str) -> None:
        await self.db.execute("DELETE FROM bills WHERE id = $1", bill_id)

    async def reset_bill(self, bill_id: str) -> None:
        await self.db.execute("DELETE FROM bill_items WHERE bill_id = $1", bill_id)
        await self.db.execute("DELETE FROM bill_people WHERE bill_id = $1", bill_id)
        await self.db.execute("UPDATE bills SET tax = 0, tip = 0, split_mode = 'even' WHERE id = $1", bill_id)
        self._log.info("bill.reset", bill_id=bill_id)

    async def add_item(self, bill_id: str, name: str, price: Decimal) -> asyncpg.Record:
        row = await self.db.fetchrow(
            """
            INSERT INTO bill_items (id, bill_id, name, price)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            generate_id(),
            bill_id,
            name,
            price,
        )
        assert row is not None
        self._log.info("bill.item.added", bill_id=bill_id, item_id=row["id"])
        return row

    async def remove_item(self, item_id: str) -> None:
        await self.db.execute("DELETE FROM bill_items WHERE id = $1", item_id)

    async def add_person(self, bill_id: str, name: str) -> asyncpg.Record:
        row = await self.db.fetchrow(
            """
            INSERT INTO bill_people (id, bill_id, name)
            VALUES ($1, $2, $3)
            RETURNING *
            """,
            generate_id(),
            bill_id,
            name,
        )
        assert row is not None
        return row

    async def remove_person(self, person_id: str) -> None:
        # Assignments are kept; the split ignores ids of people no longer on the bill.
        await self.db.execute("DELETE FROM bill_people WHERE id = $1", person_id)

    async def toggle_assignment(self, item_id: str, person_id: str) -> bool:
        """Assign or unassign a person. Returns True if now assigned."""
        deleted = await self.db.fetchval(
            "DELETE FROM item_assignments WHERE item_id = $1 AND person_id = $2 RETURNING person_id",
            item_id,
            person_id,
        )
        if deleted is not None:
            return False
        await self.db.execute(
            """
            INSERT INTO item_assignments (item_id, person_id)
            VALUES ($1, $2)
            ON CONFLICT DO NOTHING
            """,
            item_id,
            person_id,
        )
        return True

    async def update_bill_field(self, bill_id: str, field: str, value: Any) -> None:
        if field not in {"title", "tax", "tip", "split_mode", "currency_symbol"}:
            raise ValueError("Field cannot be updated")
        await self.db.execute(f"UPDATE bills SET {field} = $1 WHERE id = $2", value, bill_id)

    async def set_tax(self, bill_id: str, tax: Decimal) -> None:
        await self.update_bill_field(bill_id, "tax", tax)

    async def set_tip(self, bill_id: str, tip: Decimal) -> None:
        await self.update_bill_field(bill_id, "tip", tip)

    async def set_split_mode(self, bill_id: str, mode: SplitMode) -> None:
        await self.update_bill_field(bill_id, "split_mode", mode.value)

    async def load_bill(self, bill_id: str) -> Optional[Bill]:
        bill_row = await self.get_bill(bill_id)
        if bill_row is None:
            return None

        item_rows = await self.db.fetch(
            """
            SELECT i.id, i.name, i.price,
                   array_agg(a.person_id ORDER BY a.seq) FILTER (WHERE a.person_id IS NOT NULL) AS assigned_to
            FROM bill_items i
            LEFT JOIN item_assignments a ON a.item_id = i.id
            WHERE i.bill_id = $1
            GROUP BY i.id
            ORDER BY i.seq
            """,
            bill_id,
        )
        people_rows = await self.db.fetch(
            "SELECT id, name FROM bill_people WHERE bill_id = $1 ORDER BY seq",
            bill_id,
        )

        return Bill(
            items=[_item_from_row(row) for row in item_rows],
            people=[Person(id=row["id"], name=row["name"]) for row in people_rows],
            tax=Decimal(bill_row["tax"]),
            tip=Decimal(bill_row["tip"]),
            split_mode=SplitMode(bill_row["split_mode"]),
        )


def _item_from_row(row: Any) -> BillItem:
    return BillItem(
        id=row["id"],
        name=row["name"],
        price=Decimal(row["price"]),
        assigned_to=list(row["assigned_to"] or []),
    )


_global_repo: BillRepository | None = None


def set_global_repository(repo: BillRepository) -> None:
    global _global_repo
    _global_repo = repo


def get_global_repository() -> BillRepository:
    if _global_repo is None:
        raise RuntimeError("Repository is not initialized")
    return _global_repo
