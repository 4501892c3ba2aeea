from __future__ import annotations

from typing import Protocol


class Repository(Protocol):
    async def fetchval(self, query: str, *args: object) -> object: ...


class AuthorizationError(PermissionError):
    pass


async def is_bill_owner(repo: Repository, tg_id: int, bill_id: str) -> bool:
    owner_tg_id = await repo.fetchval(
        "SELECT owner_tg_id FROM bills WHERE id = $1",
        bill_id,
    )
    return owner_tg_id == tg_id


async def assert_bill_owner(repo: Repository, tg_id: int, bill_id: str) -> None:
    if not await is_bill_owner(repo, tg_id, bill_id):
        raise AuthorizationError("Only the person who created this bill can change it.")
