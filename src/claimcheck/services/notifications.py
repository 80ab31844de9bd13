"""Fire-and-forget notification fan-out.

Delivery itself lives outside this service. Handlers are plain callables
registered at startup; a failing handler is logged and never affects the
operation that raised the event.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    CLAIM_SUBMITTED = "claim_submitted"
    CLAIM_APPROVED = "claim_approved"
    CLAIM_REJECTED = "claim_rejected"
    CLAIM_FLAGGED = "claim_flagged"
    NEW_CLAIM = "new_claim"
    NEW_REPLY = "new_reply"


@dataclass(frozen=True)
class NotificationEvent:
    """Event handed to every registered handler.

    ``user_id`` is None for broadcast events such as ``NEW_CLAIM``.
    """

    type: NotificationType
    title: str
    message: str
    link: str | None = None
    user_id: int | None = None
    data: dict[str, object] = field(default_factory=dict)


NotificationHandler = Callable[[NotificationEvent], None]


class NotificationDispatcher:
    """Fan notification events out to registered handlers."""

    def __init__(self) -> None:
        self._handlers: list[NotificationHandler] = []

    def register(self, handler: NotificationHandler) -> None:
        self._handlers.append(handler)

    def clear(self) -> None:
        self._handlers.clear()

    def notify(self, event: NotificationEvent) -> None:
        logger.info(
            "Notification %s for user=%s: %s", event.type.value, event.user_id, event.title
        )
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception as exc:  # noqa: BLE001 - delivery failures never propagate
                logger.error(
                    "Notification handler %r failed for %s: %s",
                    handler,
                    event.type.value,
                    exc,
                    exc_info=True,
                )


_dispatcher = NotificationDispatcher()


def get_notification_dispatcher() -> NotificationDispatcher:
    """Return the process-wide dispatcher."""
    return _dispatcher
