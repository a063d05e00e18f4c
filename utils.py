import logging
from urllib.parse import quote

logger = logging.getLogger(__name__)


def edit_or_send(bot, chat_id, message_id, text, reply_markup=None, parse_mode="HTML"):
    try:
        bot.edit_message_text(chat_id=chat_id, message_id=message_id,
                              text=text, reply_markup=reply_markup, parse_mode=parse_mode)
    except Exception:
        return bot.send_message(chat_id, text, reply_markup=reply_markup, parse_mode=parse_mode)
    return None


def safe_delete(bot, chat_id, message_id) -> bool:
    if message_id is None:
        return False
    try:
        bot.delete_message(chat_id, message_id)
    except Exception as exc:
        logger.debug("Could not delete message %s in chat %s: %s", message_id, chat_id, exc)
        return False
    return True


def redact(text, *secrets, mask="***") -> str:
    """Replace every secret (raw or URL-encoded) in ``text`` with ``mask``."""
    result = "" if text is None else str(text)
    for secret in secrets:
        if not secret:
            continue
        for variant in {secret, quote(secret, safe="")}:
            result = result.replace(variant, mask)
    return result


def mask_secret(secret: str, visible: int = 4) -> str:
    """Short display form of a key, e.g. ``AIza…9xQk``."""
    secret = (secret or "").strip()
    if not secret:
        return ""
    if len(secret) <= visible * 2:
        return "•" * len(secret)
    return f"{secret[:visible]}…{secret[-visible:]}"
