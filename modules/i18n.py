# modules/i18n.py
LABELS = {
    # Home
    "home_title": {"en": "Veo Studio", "fa": "استودیو Veo"},
    "home_body": {
        "en": "Turn a text prompt into a short video. Choose an option:",
        "fa": "یک متن بنویس و ویدیوی کوتاه تحویل بگیر. یکی از گزینه‌ها را انتخاب کن:",
    },
    "help_title": {"en": "<b>How it works</b>", "fa": "<b>راهنما</b>"},
    "help_body": {
        "en": (
            "1. Open <b>Generate video</b> or send /video.\n"
            "2. Send your Veo API key. It is kept only for this chat and the message is deleted.\n"
            "3. Describe your scene.\n\n"
            "Generation can take several minutes; progress is shown in one message. "
            "Use /cancel to stop waiting, /forgetkey to drop your key and /reset to clear everything."
        ),
        "fa": (
            "۱. دکمهٔ <b>ساخت ویدیو</b> را بزن یا /video را بفرست.\n"
            "۲. کلید API خودت را بفرست. فقط برای همین چت نگه داشته می‌شود و پیامش پاک می‌شود.\n"
            "۳. صحنهٔ مورد نظرت را توصیف کن.\n\n"
            "ساخت ویدیو ممکن است چند دقیقه طول بکشد. برای توقف انتظار /cancel، برای حذف کلید /forgetkey و برای پاک کردن همه چیز /reset را بفرست."
        ),
    },
    "btn_video": {"en": "Generate video 🎬", "fa": "ساخت ویدیو 🎬"},
    "btn_help": {"en": "Help ❔", "fa": "راهنما ❔"},
    "btn_lang": {"en": "Language 📚", "fa": "Language 📚"},
    "back": {"en": "🔙 Back", "fa": "🔙 بازگشت"},
    "home_back_to_menu": {"en": "🏠 Main menu", "fa": "🏠 منوی اصلی"},

    # Language
    "lang_title": {"en": "Choose language", "fa": "انتخاب زبان"},
    "lang_saved": {"en": "✅ Language saved.", "fa": "✅ زبان ذخیره شد."},

    # Video
    "video_need_key": {
        "en": "🔑 <b>Send your Veo API key</b>\nIt stays in memory for this chat only and your message will be deleted.",
        "fa": "🔑 <b>کلید API مربوط به Veo را بفرست</b>\nفقط برای همین چت در حافظه می‌ماند و پیامت پاک می‌شود.",
    },
    "video_key_saved": {
        "en": "✅ Key <code>{key}</code> saved for this chat.",
        "fa": "✅ کلید <code>{key}</code> برای این چت ذخیره شد.",
    },
    "video_ask_prompt": {
        "en": "✍️ <b>Describe your scene</b>\ne.g. A majestic eagle soaring over snow-capped mountains",
        "fa": "✍️ <b>صحنهٔ ویدیو را توصیف کن</b>\nمثلاً: عقابی باشکوه بر فراز کوه‌های پوشیده از برف",
    },
    "video_empty": {
        "en": "⚠️ Both a prompt and an API key are needed.",
        "fa": "⚠️ هم متن و هم کلید API لازم است.",
    },
    "video_busy": {
        "en": "⏳ A video is already being generated in this chat. Please wait or /cancel.",
        "fa": "⏳ یک ویدیو در همین چت در حال ساخت است. صبر کن یا /cancel را بفرست.",
    },
    "video_processing": {
        "en": "🎬 <b>{progress}</b>\nVideo generation can take several minutes. Please be patient.",
        "fa": "🎬 <b>{progress}</b>\nساخت ویدیو ممکن است چند دقیقه طول بکشد. لطفاً صبور باش.",
    },
    "video_starting": {"en": "Warming up the studio...", "fa": "در حال آماده‌سازی استودیو..."},
    "video_result_caption": {"en": "🎬 Your video is ready.", "fa": "🎬 ویدیوی تو آماده است."},
    "video_error": {"en": "⚠️ <b>An error occurred</b>", "fa": "⚠️ <b>خطایی رخ داد</b>"},
    "video_send_failed": {
        "en": "⚠️ The video was generated but could not be sent to Telegram.",
        "fa": "⚠️ ویدیو ساخته شد اما ارسال آن به تلگرام ناموفق بود.",
    },
    "video_cancelled": {
        "en": "⏹ Stopped waiting for this video.",
        "fa": "⏹ انتظار برای این ویدیو متوقف شد.",
    },
    "video_nothing_running": {
        "en": "Nothing is being generated right now.",
        "fa": "در حال حاضر ویدیویی ساخته نمی‌شود.",
    },
    "video_key_forgotten": {
        "en": "🗑 Your API key was removed from this chat.",
        "fa": "🗑 کلید API از این چت حذف شد.",
    },
    "video_reset": {
        "en": "🧹 Session cleared: key, prompt and last video were removed.",
        "fa": "🧹 جلسه پاک شد: کلید، متن و آخرین ویدیو حذف شدند.",
    },
    "video_btn_sample": {"en": "Use sample prompt ✨", "fa": "استفاده از متن نمونه ✨"},
    "video_btn_again": {"en": "Generate again 🔁", "fa": "ساخت دوباره 🔁"},
    "video_btn_new_prompt": {"en": "New prompt ✍️", "fa": "متن جدید ✍️"},
    "video_btn_cancel": {"en": "Cancel ⏹", "fa": "لغو ⏹"},
    "video_btn_forget_key": {"en": "Forget key 🗑", "fa": "حذف کلید 🗑"},
}


def t(key: str, lang: str) -> str:
    return LABELS.get(key, {}).get(lang, LABELS.get(key, {}).get("en", key))
