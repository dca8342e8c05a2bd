"""
Rating update notifications.

Supports:
- Telegram (recommended)
- Slack

Each sender takes a RatingUpdated event and can be subscribed directly
to a registry's NotificationBus.
"""

from .telegram import (
    send_telegram_rating_update,
    send_telegram_message,
    check_telegram_connection,
)

from .slack import (
    send_slack_rating_update,
    send_slack_message,
)

__all__ = [
    # Telegram
    "send_telegram_rating_update",
    "send_telegram_message",
    "check_telegram_connection",
    # Slack
    "send_slack_rating_update",
    "send_slack_message",
]
