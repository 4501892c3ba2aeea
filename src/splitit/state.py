"""Per-user conversation state for the SplitIt bot."""

from __future__ import annotations

from typing import Optional


class UserStateManager:
    def __init__(self) -> None:
        self._current_bill: dict[int, str] = {}
        self._pending_split: dict[int, str] = {}

    def set_current_bill(self, user_id: int, bill_id: str) -> None:
        self._current_bill[user_id] = bill_id
        self._pending_split.pop(user_id, None)

    def get_current_bill(self, user_id: int) -> Optional[str]:
        return self._current_bill.get(user_id)

    def clear_current_bill(self, user_id: int) -> None:
        self._current_bill.pop(user_id, None)

    def set_pending_split(self, user_id: int, bill_id: str) -> None:
        self._pending_split[user_id] = bill_id

    def pop_pending_split(self, user_id: int) -> Optional[str]:
        return self._pending_split.pop(user_id, None)

    def clear_user(self, user_id: int) -> None:
        self._current_bill.pop(user_id, None)
        self._pending_split.pop(user_id, None)


state = UserStateManager()
