# modules/lang/handlers.py
from typing import Optional

from config import DEFAULT_LANG
from utils import edit_or_send
from .texts import TITLE
from .keyboards import LANGS, lang_menu
from modules.home.texts import MAIN
from modules.home.keyboards import main_menu
from modules.i18n import t
from modules.video.session import sessions

SUPPORTED = {code for _, code in LANGS}


def lang_for(chat_id: int, from_user=None) -> str:
    """Chat language: the stored choice, else the Telegram client language."""
    session = sessions.get(chat_id)
    if session.lang:
        return session.lang

    code = (getattr(from_user, "language_code", None) or "").split("-")[0].lower()
    lang = code if code in SUPPORTED else DEFAULT_LANG
    sessions.set_lang(chat_id, lang)
    return lang


def send_language_menu(bot, chat_id, message_id=None, force_new: bool = False, display_lang: Optional[str] = None):
    current = lang_for(chat_id)
    render_lang = display_lang or current
    text, markup = TITLE(render_lang), lang_menu(current, render_lang)
    if force_new or message_id is None:
        bot.send_message(chat_id, text, reply_markup=markup, parse_mode="HTML")
    else:
        edit_or_send(bot, chat_id, message_id, text, markup)


def register(bot):
    @bot.message_handler(commands=["language"])
    def language_cmd(msg):
        lang_for(msg.chat.id, msg.from_user)
        send_language_menu(bot, msg.chat.id, force_new=True)

    @bot.callback_query_handler(func=lambda c: c.data and c.data.startswith("lang:"))
    def lang_router(cq):
        chat_id = cq.message.chat.id
        lang = lang_for(chat_id, cq.from_user)
        parts = cq.data.split(":")
        action = parts[1] if len(parts) > 1 else ""

        if action == "set" and len(parts) > 2 and parts[2] in SUPPORTED:
            lang = parts[2]
            sessions.set_lang(chat_id, lang)
            bot.answer_callback_query(cq.id, t("lang_saved", lang))
            edit_or_send(bot, chat_id, cq.message.message_id, MAIN(lang), main_menu(lang))
            return

        bot.answer_callback_query(cq.id)
        edit_or_send(bot, chat_id, cq.message.message_id, MAIN(lang), main_menu(lang))


def open_language(bot, cq):
    lang_for(cq.message.chat.id, cq.from_user)
    send_language_menu(bot, cq.message.chat.id, cq.message.message_id)
