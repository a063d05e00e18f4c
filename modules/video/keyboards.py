"""Inline keyboards for the video generation module."""

from telebot.types import InlineKeyboardButton, InlineKeyboardMarkup

from modules.i18n import t


def menu_keyboard(lang: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardMarkup()
    kb.add(InlineKeyboardButton(t("back", lang), callback_data="video:back"))
    return kb


def prompt_keyboard(lang: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardMarkup()
    kb.row(InlineKeyboardButton(t("video_btn_sample", lang), callback_data="video:sample"))
    kb.row(
        InlineKeyboardButton(t("video_btn_forget_key", lang), callback_data="video:forget_key"),
        InlineKeyboardButton(t("back", lang), callback_data="video:back"),
    )
    return kb


def running_keyboard(lang: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardMarkup()
    kb.add(InlineKeyboardButton(t("video_btn_cancel", lang), callback_data="video:cancel"))
    return kb


def result_keyboard(lang: str) -> InlineKeyboardMarkup:
    kb = InlineKeyboardMarkup()
    kb.row(
        InlineKeyboardButton(t("video_btn_again", lang), callback_data="video:generate"),
        InlineKeyboardButton(t("video_btn_new_prompt", lang), callback_data="video:prompt"),
    )
    kb.row(InlineKeyboardButton(t("home_back_to_menu", lang), callback_data="video:back"))
    return kb
