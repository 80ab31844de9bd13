"""Replies on evidence and perspectives."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import urlsplit

from sqlalchemy import select
from sqlalchemy.orm import Session

from claimcheck.core.errors import NotFoundError, ValidationError
from claimcheck.models import ContentStatus, Evidence, Perspective, Reply, ReplyTargetType
from claimcheck.models.reply import (
    REPLY_BODY_MAX_LENGTH,
    REPLY_BODY_MIN_LENGTH,
    REPLY_MAX_LINKS,
)
from claimcheck.services.notifications import (
    NotificationDispatcher,
    NotificationEvent,
    NotificationType,
    get_notification_dispatcher,
)

logger = logging.getLogger(__name__)


def normalize_links(links: Sequence[str] | None) -> list[str]:
    """Keep only the first link, adding ``https://`` when no scheme is given.

    Extra links are dropped with a warning.

    Raises:
        ValidationError: If the kept link has no usable hostname.
    """
    if not links:
        return []
    if len(links) > REPLY_MAX_LINKS:
        logger.warning(
            "Multiple links provided, only the first link will be saved. Provided: %d, saving: %d",
            len(links),
            REPLY_MAX_LINKS,
        )

    candidate = (links[0] or "").strip()
    if not candidate:
        return []
    if not candidate.startswith(("http://", "https://")):
        candidate = f"https://{candidate}"

    try:
        hostname = urlsplit(candidate).hostname
    except ValueError as err:
        raise ValidationError(f"Invalid URL format: {links[0].strip()}") from err
    if not hostname:
        raise ValidationError(f"Invalid URL format: {links[0].strip()}")
    return [candidate]


class ReplyService:
    """Creates and lists replies."""

    def __init__(self, db: Session, notifier: NotificationDispatcher | None = None) -> None:
        self.db = db
        self.notifier = notifier or get_notification_dispatcher()

    def _target(self, target_type: ReplyTargetType, target_id: int) -> Evidence | Perspective:
        model = Evidence if target_type == ReplyTargetType.EVIDENCE else Perspective
        target = self.db.get(model, target_id)
        if target is None:
            raise NotFoundError(f"{target_type.value} not found")
        return target

    def create_reply(
        self,
        *,
        user_id: int,
        target_type: ReplyTargetType,
        target_id: int,
        body: str,
        links: Sequence[str] | None = None,
    ) -> Reply:
        """Create an approved reply on an evidence or perspective item."""
        body = body.strip()
        if len(body) < REPLY_BODY_MIN_LENGTH:
            raise ValidationError(
                f"Reply must be at least {REPLY_BODY_MIN_LENGTH} characters"
            )
        if len(body) > REPLY_BODY_MAX_LENGTH:
            raise ValidationError(f"Reply must be at most {REPLY_BODY_MAX_LENGTH} characters")
        normalized = normalize_links(links)
        target = self._target(target_type, target_id)

        reply = Reply(
            target_type=target_type,
            target_id=target_id,
            user_id=user_id,
            body=body,
            links=normalized,
            status=ContentStatus.APPROVED,
        )
        self.db.add(reply)
        self.db.commit()
        self.db.refresh(reply)

        if target.user_id != user_id:
            self.notifier.notify(
                NotificationEvent(
                    type=NotificationType.NEW_REPLY,
                    user_id=target.user_id,
                    title="New reply to your content",
                    message=f"Someone replied to your {target_type.value}",
                    link=f"/claims/{target.claim_id}",
                    data={"reply_id": reply.id},
                )
            )
        return reply

    def list_replies(
        self,
        target_type: ReplyTargetType,
        target_id: int,
        *,
        sort: str = "score",
    ) -> list[Reply]:
        """Return approved replies, best first or most recent first."""
        self._target(target_type, target_id)
        stmt = select(Reply).where(
            Reply.target_type == target_type,
            Reply.target_id == target_id,
            Reply.status == ContentStatus.APPROVED,
        )
        if sort == "recent":
            stmt = stmt.order_by(Reply.created_at.desc(), Reply.id.desc())
        else:
            stmt = stmt.order_by(Reply.score.desc(), Reply.created_at.desc(), Reply.id.desc())
        return list(self.db.scalars(stmt))
