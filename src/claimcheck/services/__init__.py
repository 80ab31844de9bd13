# src/claimcheck/services/__init__.py
"""Business logic services for the Claimcheck application."""

from .content import ContentService
from .moderation import ClaimEdits, ModerationWorkflow
from .notifications import NotificationDispatcher, get_notification_dispatcher
from .replies import ReplyService
from .scoring import ClaimScoreAggregator
from .seo import SeoClient, SeoRegenerator, get_seo_regenerator
from .votes import TargetKind, VoteLedger

__all__ = [
    "ContentService",
    "ClaimEdits",
    "ModerationWorkflow",
    "NotificationDispatcher",
    "get_notification_dispatcher",
    "ReplyService",
    "ClaimScoreAggregator",
    "SeoClient",
    "SeoRegenerator",
    "get_seo_regenerator",
    "TargetKind",
    "VoteLedger",
]
