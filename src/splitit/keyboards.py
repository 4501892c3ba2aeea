from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from splitit.services.split import Bill, BillItem, SplitMode, format_amount


def main_menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="🧾 New bill", callback_data="menu:newbill")],
            [InlineKeyboardButton(text="📂 My bills", callback_data="menu:bills")],
            [InlineKeyboardButton(text="ℹ️ Help", callback_data="menu:help")],
        ]
    )


def split_mode_keyboard(current: SplitMode) -> InlineKeyboardMarkup:
    def label(mode: SplitMode, text: str) -> str:
        return f"· {text}" if mode == current else text

    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text=label(SplitMode.EVEN, "Split evenly"), callback_data="mode:even"),
                InlineKeyboardButton(text=label(SplitMode.ITEMIZED, "By item"), callback_data="mode:itemized"),
            ]
        ]
    )


def assign_items_keyboard(bill: Bill, symbol: str) -> InlineKeyboardMarkup:
    rows = [
        [
            InlineKeyboardButton(
                text=f"{item.name} — {format_amount(item.price, symbol)} ({len(item.assigned_to)})",
                callback_data=f"assign_item:{item.id}",
            )
        ]
        for item in bill.items
    ]
    rows.append([InlineKeyboardButton(text="Done", callback_data="assign_done")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def assign_people_keyboard(bill: Bill, item: BillItem) -> InlineKeyboardMarkup:
    rows = []
    for person in bill.people:
        mark = "✅" if person.id in item.assigned_to else "▫️"
        rows.append(
            [
                InlineKeyboardButton(
                    text=f"{mark} {person.name}",
                    callback_data=f"assign_toggle:{item.id}:{person.id}",
                )
            ]
        )
    rows.append([InlineKeyboardButton(text="« Items", callback_data="assign_back")])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def confirm_split_keyboard(bill_id: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="Cancel", callback_data="split_cancel"),
                InlineKeyboardButton(text="Continue", callback_data=f"split_confirm:{bill_id}"),
            ]
        ]
    )


def bills_keyboard(bill_rows: list, symbol_fallback: str) -> InlineKeyboardMarkup:
    rows = []
    for row in bill_rows:
        symbol = row.get("currency_symbol") or symbol_fallback
        total = format_amount(row["items_total"], symbol)
        rows.append([InlineKeyboardButton(text=f"{row['title']} · {total}", callback_data=f"open:{row['id']}")])
    rows.append([InlineKeyboardButton(text="🧾 New bill", callback_data="menu:newbill")])
    return InlineKeyboardMarkup(inline_keyboard=rows)
