"""
Rating change notifications.

The registry publishes one RatingUpdated event per successful submission.
Subscribers are plain callables; the Slack and Telegram senders in
`shariah_registry.notifications` can be subscribed directly.
"""

from typing import Callable, Dict, Any, List
from dataclasses import dataclass
import threading

from .identity import identity_to_hex


@dataclass(frozen=True)
class RatingUpdated:
    """Emitted after a rating is stored."""
    identity: bytes
    symbol: str
    chain_id: int
    overall_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identity": identity_to_hex(self.identity),
            "symbol": self.symbol,
            "chain_id": self.chain_id,
            "overall_score": self.overall_score,
        }


Subscriber = Callable[[RatingUpdated], Any]


class NotificationBus:
    """
    In-process fan-out of rating events.

    Delivery is synchronous and in subscription order. A failing subscriber
    does not stop delivery to the others; its error is reported in the
    list returned by `publish`.
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []
        self._lock = threading.Lock()
        self.published = 0

    def subscribe(self, callback: Subscriber) -> Subscriber:
        with self._lock:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Subscriber) -> bool:
        with self._lock:
            try:
                self._subscribers.remove(callback)
                return True
            except ValueError:
                return False

    @property
    def subscribers(self) -> List[Subscriber]:
        with self._lock:
            return list(self._subscribers)

    def publish(self, event: RatingUpdated) -> List[str]:
        """
        Deliver an event to every subscriber.

        Returns:
            Error messages from subscribers that raised (empty on success)
        """
        errors = []
        self.published += 1

        for callback in self.subscribers:
            try:
                callback(event)
            except Exception as e:
                name = getattr(callback, "__name__", repr(callback))
                message = f"{name}: {e}"
                print(f"Notification subscriber error for {event.symbol}: {message}")
                errors.append(message)

        return errors
