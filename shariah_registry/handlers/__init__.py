"""
Service handlers for the Rating Registry.

- registry_handler: RPC-style entry point (submit, lookup, pagination)
- notification_handler: wires chat senders onto a registry's bus
"""

from .registry_handler import handler, build_handler, create_default_registry
from .notification_handler import attach_notifiers, NOTIFIERS

__all__ = [
    "handler",
    "build_handler",
    "create_default_registry",
    "attach_notifiers",
    "NOTIFIERS",
]
