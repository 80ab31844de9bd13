"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from claimcheck.core.errors import AuthRequiredError, PermissionDeniedError
from claimcheck.core.security import decode_access_token
from claimcheck.db.session import get_db
from claimcheck.models import User

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User | None:
    """Return the authenticated user, or None for anonymous requests.

    Raises:
        AuthRequiredError: If a token is supplied but invalid or unknown.
    """
    if credentials is None:
        return None
    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        raise AuthRequiredError("User not found")
    return user


OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_current_user(user: OptionalUserDep) -> User:
    """Get the current authenticated user from the bearer token."""
    if user is None:
        raise AuthRequiredError("Authentication required")
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_current_moderator(user: CurrentUserDep) -> User:
    """Require moderator capability before a moderation handler runs."""
    if not user.is_moderator:
        raise PermissionDeniedError("Moderator access required")
    return user


ModeratorDep = Annotated[User, Depends(get_current_moderator)]
