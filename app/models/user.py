from sqlalchemy import Column, Integer, String, Text, Boolean, TIMESTAMP
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    __tablename__ = "users"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True)

    # Identity provider subject (e.g. "auth0|abc123")
    auth0_id = Column(String(255), unique=True, nullable=False, index=True)

    # Profile
    email = Column(String(255), nullable=False, default="")
    first_name = Column(String(255))
    last_name = Column(String(255))
    avatar = Column(Text)

    # Role & Authorization
    is_admin = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)

    # Relationships
    subscription = relationship("Subscription", back_populates="user", uselist=False)
