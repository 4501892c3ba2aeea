from __future__ import annotations

from html import escape

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from splitit.handlers.bills import current_bill_id, get_repo
from splitit.keyboards import confirm_split_keyboard
from splitit.logging import split_logger
from splitit.services.split import Bill, SplitMode, split_amounts, total, unassigned_items, unassigned_total
from splitit.services.summary import format_split_summary, format_unassigned_warning
from splitit.state import state

split_router = Router()


def _summary_text(bill_id: str, bill: Bill, symbol: str) -> str:
    amounts = split_amounts(bill)
    split_logger.info(
        "split.computed",
        bill_id=bill_id,
        mode=bill.split_mode.value,
        people=len(bill.people),
        total=str(total(bill)),
        uncovered=str(unassigned_total(bill)) if bill.split_mode == SplitMode.ITEMIZED else "0",
    )
    return escape(format_split_summary(bill, amounts, symbol))


@split_router.message(Command("split"))
async def cmd_split(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    row = await repo.get_bill(bill_id)
    assert bill is not None and row is not None
    symbol = row["currency_symbol"]

    if not bill.people:
        await message.answer("Please add at least one person with /addperson")
        return

    if bill.split_mode == SplitMode.ITEMIZED and unassigned_items(bill):
        state.set_pending_split(user.id, bill_id)
        await message.answer(
            escape(format_unassigned_warning(bill, symbol)),
            reply_markup=confirm_split_keyboard(bill_id),
        )
        return

    await message.answer(_summary_text(bill_id, bill, symbol))


@split_router.callback_query(F.data.startswith("split_confirm:"))
async def cb_split_confirm(callback: CallbackQuery) -> None:
    pending = state.pop_pending_split(callback.from_user.id)
    bill_id = callback.data.split(":", 1)[1]
    if pending != bill_id:
        await callback.answer("This confirmation has expired. Run /split again.")
        return

    if await current_bill_id(callback.message, callback.from_user.id) != bill_id:
        await callback.answer()
        return

    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    row = await repo.get_bill(bill_id)
    if bill is None or row is None:
        await callback.answer("Bill not found")
        return

    await callback.message.edit_text(_summary_text(bill_id, bill, row["currency_symbol"]))
    await callback.answer()


@split_router.callback_query(F.data == "split_cancel")
async def cb_split_cancel(callback: CallbackQuery) -> None:
    state.pop_pending_split(callback.from_user.id)
    await callback.message.edit_text("Split cancelled. Assign the remaining items with /assign")
    await callback.answer()


@split_router.message(Command("newsplit"))
async def cmd_newsplit(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return
    await get_repo().reset_bill(bill_id)
    state.pop_pending_split(user.id)
    await message.answer("The bill is cleared. Add new items with /additem")
