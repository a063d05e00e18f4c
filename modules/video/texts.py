"""Text helpers for the video generation module."""

from html import escape

from modules.i18n import t
from utils import mask_secret


def need_key(lang: str) -> str:
    return t("video_need_key", lang)


def key_saved(lang: str, api_key: str) -> str:
    return t("video_key_saved", lang).format(key=escape(mask_secret(api_key)))


def ask_prompt(lang: str) -> str:
    return t("video_ask_prompt", lang)


def processing(lang: str, progress: str = "") -> str:
    return t("video_processing", lang).format(progress=escape(progress or t("video_starting", lang)))


def error(lang: str, message: str) -> str:
    return f"{t('video_error', lang)}\n<code>{escape(message)}</code>"


def result_caption(lang: str) -> str:
    return t("video_result_caption", lang)
