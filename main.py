"""Entry point for the Veo Studio Telegram bot."""
from __future__ import annotations

import logging

import telebot

from config import BOT_TOKEN, DEBUG

# ---- Telegram modules ----
from modules.home import handlers as home_handlers
from modules.lang import handlers as lang_handlers
from modules.video import handlers as video_handlers

logger = logging.getLogger(__name__)


# ========================= Telegram Bot Wiring =========================
def configure_logging() -> None:
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # urllib3 logs full request URLs at DEBUG, and the download link carries the key.
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_bot() -> telebot.TeleBot:
    if not BOT_TOKEN:
        raise RuntimeError("❌ BOT_TOKEN is not configured")
    return telebot.TeleBot(BOT_TOKEN, parse_mode="HTML")


def register_modules(bot: telebot.TeleBot) -> None:
    lang_handlers.register(bot)
    home_handlers.register(bot)
    video_handlers.register(bot)


def main() -> None:
    configure_logging()
    bot = create_bot()
    register_modules(bot)

    logger.info("Bot started")
    bot.infinity_polling(
        skip_pending=True,
        allowed_updates=["message", "callback_query"],
    )


if __name__ == "__main__":
    main()
