"""Repositories wrapping database access per aggregate."""

from .claim_repo import ClaimRepository, ClaimSort, ContentSort

__all__ = ["ClaimRepository", "ClaimSort", "ContentSort"]
