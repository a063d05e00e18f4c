# modules/home/keyboards.py
from telebot.types import InlineKeyboardMarkup, InlineKeyboardButton

from modules.i18n import t


def main_menu(lang: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardMarkup()
    kb.row(InlineKeyboardButton(t("btn_video", lang), callback_data="home:video"))
    kb.row(
        InlineKeyboardButton(t("btn_help", lang), callback_data="home:help"),
        InlineKeyboardButton(t("btn_lang", lang), callback_data="home:lang"),
    )
    return kb


def _back_to_home_kb(lang: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardMarkup()
    kb.add(InlineKeyboardButton(t("home_back_to_menu", lang), callback_data="home:back"))
    return kb
