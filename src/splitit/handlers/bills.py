from __future__ import annotations

from html import escape
from typing import Optional

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message

from splitit.config import get_settings
from splitit.db.repo import BillRepository, get_global_repository
from splitit.keyboards import (
    assign_items_keyboard,
    assign_people_keyboard,
    bills_keyboard,
    split_mode_keyboard,
)
from splitit.logging import get_logger
from splitit.services.authz import AuthorizationError, assert_bill_owner
from splitit.services.split import SplitMode, format_amount
from splitit.services.summary import SPLIT_MODE_LABELS, format_items, format_people
from splitit.state import state
from splitit.utils.parse import (
    parse_index,
    parse_item_line,
    parse_money,
    parse_person_name,
    parse_split_mode,
)

bills_router = Router()
log = get_logger(__name__)

NO_BILL_TEXT = "You don't have an open bill. Start one with /newbill"


def get_repo() -> BillRepository:
    return get_global_repository()


async def current_bill_id(message: Message, tg_id: int) -> Optional[str]:
    """Current bill of the user, checked for ownership. Replies and returns None otherwise."""
    bill_id = state.get_current_bill(tg_id)
    if bill_id is None:
        await message.answer(NO_BILL_TEXT)
        return None
    try:
        await assert_bill_owner(get_repo().db, tg_id, bill_id)
    except AuthorizationError as exc:
        state.clear_current_bill(tg_id)
        await message.answer(str(exc))
        return None
    return bill_id


async def _bill_symbol(repo: BillRepository, bill_id: str) -> str:
    row = await repo.get_bill(bill_id)
    if row is None:
        return get_settings().currency_symbol
    return row["currency_symbol"]


async def _create_bill(message: Message, tg_id: int, title: Optional[str]) -> None:
    repo = get_repo()
    settings = get_settings()
    bill = await repo.create_bill(tg_id, title or "Bill", settings.currency_symbol)
    state.set_current_bill(tg_id, bill["id"])
    await message.answer(
        f"🧾 Bill <b>{escape(bill['title'])}</b> created (id <code>{bill['id']}</code>).\n\n"
        "Add items with /additem [name] | [price]\n"
        "and people with /addperson [name]."
    )


@bills_router.message(Command("newbill"))
async def cmd_newbill(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    title = (command.args or "").strip()
    await _create_bill(message, user.id, title)


@bills_router.callback_query(F.data == "menu:newbill")
async def cb_menu_newbill(callback: CallbackQuery) -> None:
    await _create_bill(callback.message, callback.from_user.id, None)
    await callback.answer()


async def _send_bills(message: Message, tg_id: int) -> None:
    rows = await get_repo().list_owner_bills(tg_id)
    if not rows:
        await message.answer("You have no bills yet. Start one with /newbill")
        return
    keyboard = bills_keyboard(rows, get_settings().currency_symbol)
    await message.answer("📂 <b>Your bills</b>\n\nPick one to open:", reply_markup=keyboard)


@bills_router.message(Command("bills"))
async def cmd_bills(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    await _send_bills(message, user.id)


@bills_router.callback_query(F.data == "menu:bills")
async def cb_menu_bills(callback: CallbackQuery) -> None:
    await _send_bills(callback.message, callback.from_user.id)
    await callback.answer()


async def _open_bill(message: Message, tg_id: int, bill_id: str) -> None:
    repo = get_repo()
    try:
        await assert_bill_owner(repo.db, tg_id, bill_id)
    except AuthorizationError as exc:
        await message.answer(str(exc))
        return
    state.set_current_bill(tg_id, bill_id)
    bill = await repo.load_bill(bill_id)
    symbol = await _bill_symbol(repo, bill_id)
    assert bill is not None
    await message.answer(
        f"Opened bill <code>{bill_id}</code> ({SPLIT_MODE_LABELS[bill.split_mode]}).\n\n"
        f"{escape(format_items(bill, symbol))}\n\n{escape(format_people(bill))}"
    )


@bills_router.message(Command("open"))
async def cmd_open(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    if not command.args:
        await message.answer("Usage: /open [bill id]")
        return
    await _open_bill(message, user.id, command.args.strip())


@bills_router.callback_query(F.data.startswith("open:"))
async def cb_open(callback: CallbackQuery) -> None:
    bill_id = callback.data.split(":", 1)[1]
    await _open_bill(callback.message, callback.from_user.id, bill_id)
    await callback.answer()


@bills_router.message(Command("additem"))
async def cmd_additem(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    try:
        name, price = parse_item_line(command.args or "")
    except ValueError as exc:
        await message.answer(str(exc))
        return

    repo = get_repo()
    await repo.add_item(bill_id, name, price)
    symbol = await _bill_symbol(repo, bill_id)
    await message.answer(f"Added: {escape(name)} — {escape(format_amount(price, symbol))}")


@bills_router.message(Command("removeitem"))
async def cmd_removeitem(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    try:
        index = parse_index(command.args or "", len(bill.items))
    except ValueError as exc:
        await message.answer(str(exc))
        return

    item = bill.items[index]
    await repo.remove_item(item.id)
    await message.answer(f"Removed: {escape(item.name)}")


@bills_router.message(Command("items"))
async def cmd_items(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return
    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    symbol = await _bill_symbol(repo, bill_id)
    await message.answer(escape(format_items(bill, symbol)))


@bills_router.message(Command("addperson"))
async def cmd_addperson(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    try:
        name = parse_person_name(command.args or "")
    except ValueError as exc:
        await message.answer(str(exc))
        return

    await get_repo().add_person(bill_id, name)
    await message.answer(f"Added {escape(name)} to the bill.")


@bills_router.message(Command("removeperson"))
async def cmd_removeperson(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    try:
        index = parse_index(command.args or "", len(bill.people))
    except ValueError as exc:
        await message.answer(str(exc))
        return

    person = bill.people[index]
    await repo.remove_person(person.id)
    await message.answer(f"Removed {escape(person.name)}.")


@bills_router.message(Command("people"))
async def cmd_people(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return
    bill = await get_repo().load_bill(bill_id)
    assert bill is not None
    await message.answer(escape(format_people(bill)))


async def _set_extra(message: Message, command: CommandObject, field: str) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    try:
        amount = parse_money(command.args or "")
    except ValueError as exc:
        await message.answer(str(exc))
        return

    repo = get_repo()
    if field == "tax":
        await repo.set_tax(bill_id, amount)
    else:
        await repo.set_tip(bill_id, amount)
    symbol = await _bill_symbol(repo, bill_id)
    await message.answer(f"{field.capitalize()} set to {escape(format_amount(amount, symbol))}")


@bills_router.message(Command("tax"))
async def cmd_tax(message: Message, command: CommandObject) -> None:
    await _set_extra(message, command, "tax")


@bills_router.message(Command("tip"))
async def cmd_tip(message: Message, command: CommandObject) -> None:
    await _set_extra(message, command, "tip")


@bills_router.message(Command("mode"))
async def cmd_mode(message: Message, command: CommandObject) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    repo = get_repo()
    if not command.args:
        bill = await repo.load_bill(bill_id)
        assert bill is not None
        await message.answer("How should the bill be split?", reply_markup=split_mode_keyboard(bill.split_mode))
        return

    try:
        mode = parse_split_mode(command.args)
    except ValueError as exc:
        await message.answer(str(exc))
        return
    await repo.set_split_mode(bill_id, mode)
    await message.answer(_mode_changed_text(mode))


def _mode_changed_text(mode: SplitMode) -> str:
    text = f"The bill will be {SPLIT_MODE_LABELS[mode]}."
    if mode == SplitMode.ITEMIZED:
        text += "\nChoose who shares each item with /assign"
    return text


@bills_router.callback_query(F.data.startswith("mode:"))
async def cb_mode(callback: CallbackQuery) -> None:
    bill_id = await current_bill_id(callback.message, callback.from_user.id)
    if bill_id is None:
        await callback.answer()
        return
    mode = SplitMode(callback.data.split(":", 1)[1])
    await get_repo().set_split_mode(bill_id, mode)
    await callback.message.edit_text(_mode_changed_text(mode), reply_markup=split_mode_keyboard(mode))
    await callback.answer()


@bills_router.message(Command("assign"))
async def cmd_assign(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return

    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    if not bill.items or not bill.people:
        await message.answer("Add at least one item and one person first.")
        return
    symbol = await _bill_symbol(repo, bill_id)
    await message.answer("Choose an item:", reply_markup=assign_items_keyboard(bill, symbol))


@bills_router.callback_query(F.data.startswith("assign_item:"))
async def cb_assign_item(callback: CallbackQuery) -> None:
    bill_id = await current_bill_id(callback.message, callback.from_user.id)
    if bill_id is None:
        await callback.answer()
        return

    item_id = callback.data.split(":", 1)[1]
    bill = await get_repo().load_bill(bill_id)
    assert bill is not None
    item = next((candidate for candidate in bill.items if candidate.id == item_id), None)
    if item is None:
        await callback.answer("Item not found")
        return

    await callback.message.edit_text(
        f"Who shares <b>{escape(item.name)}</b>?",
        reply_markup=assign_people_keyboard(bill, item),
    )
    await callback.answer()


@bills_router.callback_query(F.data.startswith("assign_toggle:"))
async def cb_assign_toggle(callback: CallbackQuery) -> None:
    bill_id = await current_bill_id(callback.message, callback.from_user.id)
    if bill_id is None:
        await callback.answer()
        return

    _, item_id, person_id = callback.data.split(":", 2)
    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    if not any(item.id == item_id for item in bill.items):
        await callback.answer("Item not found")
        return
    if not any(person.id == person_id for person in bill.people):
        await callback.answer("Person not found")
        return

    assigned = await repo.toggle_assignment(item_id, person_id)
    log.info("bill.assignment.toggled", bill_id=bill_id, item_id=item_id, person_id=person_id, assigned=assigned)

    bill = await repo.load_bill(bill_id)
    assert bill is not None
    item = next(candidate for candidate in bill.items if candidate.id == item_id)
    await callback.message.edit_reply_markup(reply_markup=assign_people_keyboard(bill, item))
    await callback.answer()


@bills_router.callback_query(F.data == "assign_back")
async def cb_assign_back(callback: CallbackQuery) -> None:
    bill_id = await current_bill_id(callback.message, callback.from_user.id)
    if bill_id is None:
        await callback.answer()
        return
    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    symbol = await _bill_symbol(repo, bill_id)
    await callback.message.edit_text("Choose an item:", reply_markup=assign_items_keyboard(bill, symbol))
    await callback.answer()


@bills_router.callback_query(F.data == "assign_done")
async def cb_assign_done(callback: CallbackQuery) -> None:
    bill_id = await current_bill_id(callback.message, callback.from_user.id)
    if bill_id is None:
        await callback.answer()
        return
    repo = get_repo()
    bill = await repo.load_bill(bill_id)
    assert bill is not None
    symbol = await _bill_symbol(repo, bill_id)
    await callback.message.edit_text(escape(format_items(bill, symbol)))
    await callback.answer("Saved")


@bills_router.message(Command("deletebill"))
async def cmd_deletebill(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    bill_id = await current_bill_id(message, user.id)
    if bill_id is None:
        return
    await get_repo().delete_bill(bill_id)
    state.clear_user(user.id)
    log.info("bill.deleted", bill_id=bill_id)
    await message.answer("Bill deleted. Start a new one with /newbill")
