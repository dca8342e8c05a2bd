"""
Telegram Notification Module - Post rating updates to Telegram.

Features:
- Markdown formatting with score band indicator
"""

import os
import requests

from ..config.settings import ALERT_CONFIG
from ..core.events import RatingUpdated
from ..core.scoring import score_band


# Telegram config from environment or config
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN") or ALERT_CONFIG.get("telegram_bot_token")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID") or ALERT_CONFIG.get("telegram_chat_id")

# Telegram API base URL
TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/{method}"

BAND_EMOJIS = {
    "A": "🟢",
    "B": "🟢",
    "C": "🟡",
    "D": "🟠",
    "F": "🔴",
}


# Legacy Markdown parse mode entities
MARKDOWN_SPECIAL_CHARS = ("_", "*", "`", "[")


def escape_markdown(text: str) -> str:
    """Escape special Markdown characters for Telegram."""
    if text is None:
        return ""
    text = str(text)
    for char in MARKDOWN_SPECIAL_CHARS:
        text = text.replace(char, "\\" + char)
    return text


def format_rating_update(event: RatingUpdated) -> str:
    """
    Format a rating update as Telegram message.

    Args:
        event: RatingUpdated event

    Returns:
        Formatted message string (Markdown)
    """
    band = score_band(event.overall_score)
    emoji = BAND_EMOJIS.get(band, "🔔")

    return f"""{emoji} *RATING UPDATED*

*Symbol:* {escape_markdown(event.symbol) or 'Unknown'}
*Chain:* {event.chain_id}
*Overall Score:* {event.overall_score} ({band})
*Identity:* `{event.to_dict()['identity']}`"""


def send_telegram_message(text: str, parse_mode: str = "Markdown") -> bool:
    """
    Send a message to Telegram.

    Args:
        text: Message text
        parse_mode: Telegram parse mode (Markdown or HTML)

    Returns:
        True if successful
    """
    if not TELEGRAM_BOT_TOKEN or not TELEGRAM_CHAT_ID:
        print("Warning: TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID not configured")
        return False

    url = TELEGRAM_API_URL.format(token=TELEGRAM_BOT_TOKEN, method="sendMessage")

    payload = {
        "chat_id": TELEGRAM_CHAT_ID,
        "text": text,
        "parse_mode": parse_mode
    }

    try:
        response = requests.post(url, json=payload, timeout=10)
        response.raise_for_status()

        result = response.json()
        if not result.get("ok"):
            print(f"Telegram API error: {result.get('description', 'Unknown error')}")
            return False

        return True
    except requests.exceptions.RequestException as e:
        print(f"Telegram send error: {e}")
        return False


def send_telegram_rating_update(event: RatingUpdated) -> bool:
    """
    Post a single rating update to Telegram.

    Args:
        event: RatingUpdated event

    Returns:
        True if successful
    """
    return send_telegram_message(format_rating_update(event))


def check_telegram_connection() -> bool:
    """
    Check that the bot token is valid.

    Returns:
        True if the Telegram API accepts the token
    """
    if not TELEGRAM_BOT_TOKEN:
        print("Warning: TELEGRAM_BOT_TOKEN not configured")
        return False

    try:
        response = requests.get(
            TELEGRAM_API_URL.format(token=TELEGRAM_BOT_TOKEN, method="getMe"),
            timeout=10
        )
        response.raise_for_status()
        return bool(response.json().get("ok"))
    except requests.exceptions.RequestException as e:
        print(f"Telegram connection error: {e}")
        return False
