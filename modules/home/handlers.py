# modules/home/handlers.py
from __future__ import annotations

from telebot.types import CallbackQuery, Message

from utils import edit_or_send
from modules.lang.handlers import lang_for
from .texts import MAIN, HELP
from .keyboards import main_menu, _back_to_home_kb


def register(bot):
    @bot.message_handler(commands=["start", "menu"])
    def start(msg: Message):
        lang = lang_for(msg.chat.id, msg.from_user)
        bot.send_message(msg.chat.id, MAIN(lang), reply_markup=main_menu(lang), parse_mode="HTML")

    @bot.message_handler(commands=["help"])
    def help_cmd(msg: Message):
        lang = lang_for(msg.chat.id, msg.from_user)
        bot.send_message(msg.chat.id, HELP(lang), reply_markup=_back_to_home_kb(lang), parse_mode="HTML")

    @bot.callback_query_handler(func=lambda c: c.data and c.data.startswith("home:"))
    def home_router(cq: CallbackQuery):
        chat_id = cq.message.chat.id
        lang = lang_for(chat_id, cq.from_user)
        route = cq.data.split(":", 1)[1] if ":" in cq.data else ""

        if route == "video":
            bot.answer_callback_query(cq.id)
            from modules.video.handlers import open_video

            open_video(bot, cq)
            return

        if route == "lang":
            bot.answer_callback_query(cq.id)
            from modules.lang.handlers import open_language

            open_language(bot, cq)
            return

        if route == "help":
            edit_or_send(bot, chat_id, cq.message.message_id, HELP(lang), _back_to_home_kb(lang))
            bot.answer_callback_query(cq.id)
            return

        edit_or_send(bot, chat_id, cq.message.message_id, MAIN(lang), main_menu(lang))
        bot.answer_callback_query(cq.id)
