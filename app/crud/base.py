"""Generic CRUD base class for SQLAlchemy models."""

from __future__ import annotations

from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.database import Base


ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
	"""Reusable CRUD helper for SQLAlchemy models.

	All methods operate on model instances and return database objects, not schemas.
	"""

	def __init__(self, model: Type[ModelType]):
		self.model = model

	# ----- Read -----
	def get(self, db: Session, id: Any) -> Optional[ModelType]:
		"""Get one record by primary key (a dict for composite keys)."""
		return db.get(self.model, id)

	def count(self, db: Session, *criteria: Any) -> int:
		"""Count records matching the given WHERE criteria."""
		stmt = select(func.count()).select_from(self.model)
		if criteria:
			stmt = stmt.where(*criteria)
		return db.scalar(stmt) or 0

	# ----- Write helpers -----
	def commit(self, db: Session, *refresh: ModelType) -> None:
		"""Commit the session, rolling back and re-raising on failure."""
		try:
			db.commit()
		except Exception:
			db.rollback()
			raise
		for obj in refresh:
			db.refresh(obj)
