from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, InlineKeyboardButton, InlineKeyboardMarkup, Message

from splitit.keyboards import main_menu_keyboard
from splitit.state import state

basic_router = Router()

HELP_TEXT = (
    "<b>📖 Commands</b>\n\n"
    "<b>Bills:</b>\n"
    "/newbill [title] - start a new bill\n"
    "/bills - your bills\n"
    "/open [id] - switch to a bill\n"
    "/deletebill - delete the current bill\n\n"
    "<b>Items:</b>\n"
    "/additem [name] | [price] - add a line item\n"
    "/removeitem [n] - remove item number n\n"
    "/items - list items\n\n"
    "<b>People:</b>\n"
    "/addperson [name] - add someone\n"
    "/removeperson [n] - remove person number n\n"
    "/people - list people\n\n"
    "<b>Splitting:</b>\n"
    "/mode even|itemized - how to split\n"
    "/assign - choose who shares each item\n"
    "/tax [amount], /tip [amount]\n"
    "/split - show who owes what\n"
    "/newsplit - clear the current bill and start over"
)


def _greeting(name: str) -> str:
    return (
        f"👋 Hi, {name}!\n\n"
        "I'm <b>SplitIt</b>. Add the items from your receipt, add your friends, "
        "and I'll work out who owes what to the cent.\n\n"
        "Choose an action:"
    )


@basic_router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    user = message.from_user
    if not user:
        return
    state.clear_user(user.id)
    await message.answer(_greeting(user.first_name), reply_markup=main_menu_keyboard())


@basic_router.callback_query(F.data == "menu:main")
async def cb_main_menu(callback: CallbackQuery) -> None:
    user = callback.from_user
    state.clear_user(user.id)
    await callback.message.edit_text(_greeting(user.first_name), reply_markup=main_menu_keyboard())
    await callback.answer()


@basic_router.callback_query(F.data == "menu:help")
async def cb_help_menu(callback: CallbackQuery) -> None:
    keyboard = InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="◀️ Back", callback_data="menu:main")]]
    )
    await callback.message.edit_text(HELP_TEXT, reply_markup=keyboard)
    await callback.answer()


@basic_router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)
