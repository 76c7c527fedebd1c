"""CRUD operations for `User` model."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[User, ProfileUpdate, ProfileUpdate]):
    def get_by_auth0_id(self, db: Session, auth0_id: Optional[str]) -> Optional[User]:
        if not auth0_id:
            return None
        stmt = select(User).where(User.auth0_id == auth0_id).limit(1)
        return db.scalars(stmt).first()

    def get_id_by_auth0_id(self, db: Session, auth0_id: Optional[str]) -> Optional[int]:
        """Resolve the local user id without creating a row."""
        if not auth0_id:
            return None
        return db.scalar(select(User.id).where(User.auth0_id == auth0_id).limit(1))

    def get_or_create(self, db: Session, *, claims: Dict[str, Any], is_admin: bool = False) -> User:
        """
        Return the local user for the token subject, creating it on first use.

        The admin flag follows the role claim of the current token.
        """
        auth0_id = claims["sub"]
        user = self.get_by_auth0_id(db, auth0_id)
        if user is not None:
            if bool(user.is_admin) != is_admin:
                user.is_admin = is_admin
                db.add(user)
                self.commit(db, user)
            return user

        user = User(
            auth0_id=auth0_id,
            email=claims.get("email") or "",
            first_name=claims.get("given_name"),
            last_name=claims.get("family_name"),
            avatar=claims.get("picture"),
            is_admin=is_admin,
            created_at=datetime.utcnow(),
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent first request for the same subject already inserted the row
            db.rollback()
            existing = self.get_by_auth0_id(db, auth0_id)
            if existing is None:
                raise
            return existing
        db.refresh(user)
        logger.info(f"Created local user id={user.id} for subject {auth0_id}")
        return user

    def update_profile(self, db: Session, *, user: User, profile_in: ProfileUpdate) -> User:
        user.first_name = profile_in.first_name.strip()
        user.last_name = profile_in.last_name.strip()
        if profile_in.picture is not None:
            user.avatar = profile_in.picture
        db.add(user)
        self.commit(db, user)
        return user


crud_user = CRUDUser(User)
