# src/claimcheck/db/time.py
"""Timestamp helper for column defaults and moderation audit fields."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)
