"""Domain exceptions raised by the Claimcheck core services.

The HTTP layer maps each class to a status code via ``status_code``; services
never import FastAPI.
"""

from __future__ import annotations


class ClaimcheckError(RuntimeError):
    """Base exception for all domain failures."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(ClaimcheckError):
    """A required field is missing or malformed; nothing was mutated."""

    status_code = 400


class AuthRequiredError(ClaimcheckError):
    """The operation needs an authenticated caller."""

    status_code = 401


class PermissionDeniedError(ClaimcheckError):
    """The caller lacks the capability for the operation."""

    status_code = 403


class NotFoundError(ClaimcheckError):
    """The target claim, evidence, perspective or reply does not exist."""

    status_code = 404


class ConflictError(ClaimcheckError):
    """A concurrent write won the race for the same record."""

    status_code = 409


class DependencyError(ClaimcheckError):
    """An external collaborator failed.

    Always handled inside the core and degraded to a logged warning.
    """

    status_code = 502


class DependencyDisabledError(DependencyError):
    """Raised when an external collaborator is not configured."""
