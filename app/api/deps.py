"""FastAPI dependency injection functions for authentication and database access."""

import logging
from typing import Any, Dict, Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.exceptions import AdminRequiredException, InvalidCredentialsException
from app.core.security import decode_token, is_admin_payload
from app.crud.user import crud_user
from app.database import SessionLocal
from app.models.user import User

logger = logging.getLogger(__name__)

# Bearer token scheme; missing credentials are handled per dependency
bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Dependency requiring a valid bearer token.

    Returns:
        Dict: Verified token claims

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None or not credentials.credentials:
        raise InvalidCredentialsException("Not authenticated")

    payload = decode_token(credentials.credentials)
    if not payload.get("sub"):
        logger.warning("[AUTH] Token has no subject")
        raise InvalidCredentialsException()
    return payload


def get_optional_token_payload(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Dict[str, Any]]:
    """
    Dependency to optionally read the bearer token.
    Returns None if no valid token is provided.

    Useful for endpoints that allow both authenticated and anonymous access.
    """
    if credentials is None or not credentials.credentials:
        return None

    try:
        payload = decode_token(credentials.credentials)
    except InvalidCredentialsException:
        return None
    return payload if payload.get("sub") else None


def get_current_user(
    payload: Dict[str, Any] = Depends(get_token_payload),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get the local user for the token subject, creating it on first use.
    """
    return crud_user.get_or_create(db, claims=payload, is_admin=is_admin_payload(payload))


def get_optional_user_id(
    payload: Optional[Dict[str, Any]] = Depends(get_optional_token_payload),
    db: Session = Depends(get_db),
) -> Optional[int]:
    """
    Dependency resolving an existing local user id for the token subject.

    Never creates a user; anonymous requests and unknown subjects yield None.
    """
    if not payload:
        return None
    return crud_user.get_id_by_auth0_id(db, payload.get("sub"))


def require_admin(
    payload: Dict[str, Any] = Depends(get_token_payload),
) -> Dict[str, Any]:
    """
    Dependency gating admin routes on the role claim.

    Raises:
        HTTPException: 403 if the token lacks the admin role
    """
    if not is_admin_payload(payload):
        raise AdminRequiredException()
    return payload


__all__ = [
    "bearer_scheme",
    "get_db",
    "get_token_payload",
    "get_optional_token_payload",
    "get_current_user",
    "get_optional_user_id",
    "require_admin",
]
