"""Claimcheck: community claim verification backend."""

__version__ = "0.1.0"
