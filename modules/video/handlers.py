"""Telegram handlers for the Veo video generation flow."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from telebot import TeleBot
from telebot.types import CallbackQuery, Message

from modules.home.keyboards import main_menu
from modules.home.texts import MAIN
from modules.i18n import t
from modules.lang.handlers import lang_for
from utils import edit_or_send, safe_delete
from . import texts
from .keyboards import menu_keyboard, prompt_keyboard, result_keyboard, running_keyboard
from .service import VideoGenerationError, VideoService
from .session import GenerationRequest, sessions
from .settings import SAMPLE_PROMPT, STATE_WAIT_KEY, STATE_WAIT_PROMPT

logger = logging.getLogger(__name__)


def _extract_prompt(message: Message) -> str:
    text = (message.text or "").strip()
    if text.startswith("/video"):
        parts = text.split(maxsplit=1)
        text = parts[1] if len(parts) > 1 else ""
    return text.strip()


def _start_flow(
    bot: TeleBot,
    chat_id: int,
    lang: str,
    *,
    message_id: int | None = None,
) -> None:
    session = sessions.get(chat_id)
    if session.running:
        bot.send_message(chat_id, t("video_busy", lang), parse_mode="HTML")
        return

    if not session.api_key:
        sessions.set_awaiting(chat_id, STATE_WAIT_KEY)
        text, markup = texts.need_key(lang), menu_keyboard(lang)
    else:
        sessions.set_awaiting(chat_id, STATE_WAIT_PROMPT)
        text, markup = texts.ask_prompt(lang), prompt_keyboard(lang)

    if message_id is not None:
        edit_or_send(bot, chat_id, message_id, text, markup)
    else:
        bot.send_message(chat_id, text, reply_markup=markup, parse_mode="HTML")


def _update_status(bot: TeleBot, chat_id: int, message_id: int, text: str, markup=None) -> None:
    try:
        bot.edit_message_text(
            text,
            chat_id=chat_id,
            message_id=message_id,
            reply_markup=markup,
            parse_mode="HTML",
        )
    except Exception as exc:
        logger.debug("Status message not updated: %s", exc)


def _run_generation(
    bot: TeleBot,
    request: GenerationRequest,
    lang: str,
    status_message_id: int,
    reply_to: Optional[int] = None,
) -> None:
    chat_id = request.chat_id

    def on_progress(message: str) -> None:
        with sessions.get(chat_id).status_lock:
            if not sessions.report_progress(request, message):
                return
            _update_status(
                bot,
                chat_id,
                status_message_id,
                texts.processing(lang, message),
                running_keyboard(lang),
            )

    try:
        artifact = VideoService(request.api_key).generate_video(request.prompt, on_progress)
    except VideoGenerationError as exc:
        if not sessions.fail(request, str(exc)):
            logger.info("Ignoring failure of a superseded video run", extra={"chat_id": chat_id})
            return
        edit_or_send(
            bot,
            chat_id,
            status_message_id,
            texts.error(lang, str(exc)),
            result_keyboard(lang),
        )
        return

    if not sessions.complete(request, artifact):
        logger.info("Dropping video of a superseded run", extra={"chat_id": chat_id})
        return

    try:
        bot.send_video(
            chat_id,
            artifact.open(),
            caption=texts.result_caption(lang),
            reply_to_message_id=reply_to,
            reply_markup=result_keyboard(lang),
            parse_mode="HTML",
            supports_streaming=True,
        )
    except Exception as exc:
        logger.exception("Failed to send generated video", exc_info=exc)
        edit_or_send(bot, chat_id, status_message_id, t("video_send_failed", lang), result_keyboard(lang))
        return

    safe_delete(bot, chat_id, status_message_id)


def start_generation(
    bot: TeleBot,
    chat_id: int,
    lang: str,
    *,
    reply_to: Optional[int] = None,
) -> Optional[threading.Thread]:
    """Start a background run for the chat; ``None`` if nothing was started."""

    session = sessions.get(chat_id)
    if session.running:
        bot.send_message(chat_id, t("video_busy", lang), parse_mode="HTML")
        return None

    if not session.prompt.strip() or not session.api_key.strip():
        bot.send_message(chat_id, t("video_empty", lang), parse_mode="HTML")
        _start_flow(bot, chat_id, lang)
        return None

    request = sessions.begin(chat_id)
    if request is None:
        bot.send_message(chat_id, t("video_busy", lang), parse_mode="HTML")
        return None

    try:
        status = bot.send_message(
            chat_id,
            texts.processing(lang),
            reply_markup=running_keyboard(lang),
            parse_mode="HTML",
        )
        session.status_message_id = status.message_id

        worker = threading.Thread(
            target=_run_generation,
            args=(bot, request, lang, status.message_id, reply_to),
            name=f"video-{chat_id}-{request.run_id}",
            daemon=True,
        )
        worker.start()
    except Exception as exc:
        # No worker owns the run, so give the chat back.
        sessions.fail(request, str(exc))
        logger.exception("Could not start video run", extra={"chat_id": chat_id})
        return None

    return worker


def cancel_generation(bot: TeleBot, chat_id: int, lang: str) -> bool:
    session = sessions.get(chat_id)
    # Held across the edit so a progress update cannot land after it.
    with session.status_lock:
        status_message_id = session.status_message_id
        if not sessions.cancel(chat_id):
            return False
        if status_message_id is not None:
            edit_or_send(bot, chat_id, status_message_id, t("video_cancelled", lang), result_keyboard(lang))
    return True


def _accept_key(bot: TeleBot, message: Message, lang: str) -> None:
    chat_id = message.chat.id
    api_key = (message.text or "").strip()
    safe_delete(bot, chat_id, message.message_id)

    if not api_key:
        bot.send_message(chat_id, texts.need_key(lang), reply_markup=menu_keyboard(lang), parse_mode="HTML")
        return

    sessions.set_api_key(chat_id, api_key)
    sessions.set_awaiting(chat_id, STATE_WAIT_PROMPT)
    bot.send_message(
        chat_id,
        f"{texts.key_saved(lang, api_key)}\n\n{texts.ask_prompt(lang)}",
        reply_markup=prompt_keyboard(lang),
        parse_mode="HTML",
    )


def _accept_prompt(bot: TeleBot, message: Message, lang: str) -> None:
    prompt = (message.text or "").strip()
    if not prompt:
        bot.send_message(message.chat.id, texts.ask_prompt(lang), reply_markup=prompt_keyboard(lang), parse_mode="HTML")
        return

    sessions.set_prompt(message.chat.id, prompt)
    start_generation(bot, message.chat.id, lang, reply_to=message.message_id)


def open_video(bot: TeleBot, call: CallbackQuery) -> None:
    lang = lang_for(call.message.chat.id, call.from_user)
    _start_flow(bot, call.message.chat.id, lang, message_id=call.message.message_id)


def handle_video(bot: TeleBot, message: Message) -> None:
    chat_id = message.chat.id
    lang = lang_for(chat_id, message.from_user)

    prompt = _extract_prompt(message)
    if prompt:
        sessions.set_prompt(chat_id, prompt)
        if sessions.get(chat_id).api_key:
            start_generation(bot, chat_id, lang, reply_to=message.message_id)
            return

    _start_flow(bot, chat_id, lang)


def register(bot: TeleBot) -> None:
    @bot.callback_query_handler(func=lambda c: c.data == "video:back")
    def on_back(cq: CallbackQuery):
        chat_id = cq.message.chat.id
        lang = lang_for(chat_id, cq.from_user)
        sessions.set_awaiting(chat_id, None)
        edit_or_send(bot, chat_id, cq.message.message_id, MAIN(lang), main_menu(lang))
        bot.answer_callback_query(cq.id)

    @bot.callback_query_handler(func=lambda c: c.data in ("video:generate", "video:sample"))
    def on_generate(cq: CallbackQuery):
        chat_id = cq.message.chat.id
        lang = lang_for(chat_id, cq.from_user)
        bot.answer_callback_query(cq.id)
        if cq.data == "video:sample":
            sessions.set_prompt(chat_id, SAMPLE_PROMPT)
        start_generation(bot, chat_id, lang)

    @bot.callback_query_handler(func=lambda c: c.data == "video:prompt")
    def on_new_prompt(cq: CallbackQuery):
        bot.answer_callback_query(cq.id)
        open_video(bot, cq)

    @bot.callback_query_handler(func=lambda c: c.data == "video:cancel")
    def on_cancel(cq: CallbackQuery):
        lang = lang_for(cq.message.chat.id, cq.from_user)
        if cancel_generation(bot, cq.message.chat.id, lang):
            bot.answer_callback_query(cq.id)
        else:
            bot.answer_callback_query(cq.id, t("video_nothing_running", lang))

    @bot.callback_query_handler(func=lambda c: c.data == "video:forget_key")
    def on_forget_key(cq: CallbackQuery):
        chat_id = cq.message.chat.id
        lang = lang_for(chat_id, cq.from_user)
        sessions.forget_api_key(chat_id)
        bot.answer_callback_query(cq.id, t("video_key_forgotten", lang))
        _start_flow(bot, chat_id, lang, message_id=cq.message.message_id)

    @bot.message_handler(commands=["video"])
    def on_video_command(message: Message):
        handle_video(bot, message)

    @bot.message_handler(commands=["cancel"])
    def on_cancel_command(message: Message):
        lang = lang_for(message.chat.id, message.from_user)
        if not cancel_generation(bot, message.chat.id, lang):
            bot.reply_to(message, t("video_nothing_running", lang))

    @bot.message_handler(commands=["reset"])
    def on_reset_command(message: Message):
        lang = lang_for(message.chat.id, message.from_user)
        cancel_generation(bot, message.chat.id, lang)
        sessions.drop(message.chat.id)
        sessions.set_lang(message.chat.id, lang)
        bot.reply_to(message, t("video_reset", lang))

    @bot.message_handler(commands=["forgetkey"])
    def on_forget_key_command(message: Message):
        lang = lang_for(message.chat.id, message.from_user)
        sessions.forget_api_key(message.chat.id)
        bot.reply_to(message, t("video_key_forgotten", lang))

    @bot.message_handler(
        func=lambda m: sessions.get(m.chat.id).awaiting in (STATE_WAIT_KEY, STATE_WAIT_PROMPT),
        content_types=["text"],
    )
    def on_text(message: Message):
        if message.text and message.text.startswith("/"):
            return
        lang = lang_for(message.chat.id, message.from_user)
        if sessions.get(message.chat.id).awaiting == STATE_WAIT_KEY:
            _accept_key(bot, message, lang)
        else:
            _accept_prompt(bot, message, lang)
