import pytest

from splitit.services.authz import AuthorizationError, assert_bill_owner, is_bill_owner


class StubRepo:
    def __init__(self, bills: dict[str, int]) -> None:
        self.bills = bills

    async def fetchval(self, query: str, *args: object) -> object:
        assert "owner_tg_id" in query
        return self.bills.get(args[0])  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_is_bill_owner():
    repo = StubRepo({"abc123xyz": 42})
    assert await is_bill_owner(repo, 42, "abc123xyz") is True
    assert await is_bill_owner(repo, 7, "abc123xyz") is False


@pytest.mark.asyncio
async def test_assert_bill_owner_denied():
    repo = StubRepo({"abc123xyz": 10})
    with pytest.raises(AuthorizationError):
        await assert_bill_owner(repo, 11, "abc123xyz")


@pytest.mark.asyncio
async def test_assert_bill_owner_missing_bill():
    repo = StubRepo({})
    with pytest.raises(PermissionError):
        await assert_bill_owner(repo, 10, "nope")


@pytest.mark.asyncio
async def test_assert_bill_owner_allowed():
    repo = StubRepo({"abc123xyz": 10})
    await assert_bill_owner(repo, 10, "abc123xyz")
