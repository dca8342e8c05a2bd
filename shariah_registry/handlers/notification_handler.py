"""
Notification wiring - subscribe chat senders to rating updates.

Channels:
- telegram: send_telegram_rating_update
- slack: send_slack_rating_update
"""

from typing import Iterable, List

from ..core.registry import RatingRegistry
from ..notifications import send_telegram_rating_update, send_slack_rating_update


NOTIFIERS = {
    "telegram": send_telegram_rating_update,
    "slack": send_slack_rating_update,
}


def attach_notifiers(registry: RatingRegistry, channels: Iterable[str] = ("telegram",)) -> List[str]:
    """
    Subscribe the senders for the given channels to the registry's bus.

    Args:
        registry: Registry whose RatingUpdated events should be forwarded
        channels: Channel names ("telegram", "slack")

    Returns:
        Channels that were attached
    """
    attached = []
    for channel in channels:
        sender = NOTIFIERS.get(channel)
        if sender is None:
            raise ValueError(f"Unknown notification channel: {channel}. Options: {list(NOTIFIERS)}")
        if sender in registry.bus.subscribers:
            continue
        registry.bus.subscribe(sender)
        attached.append(channel)
    return attached
