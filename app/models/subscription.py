"""Subscription model mirroring billing state from the payment provider."""

from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base

ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    # Payment provider references
    stripe_customer_id = Column(String(255), nullable=True)
    stripe_subscription_id = Column(String(255), nullable=True)

    plan = Column(String(50), nullable=False, default="")  # monthly, yearly
    status = Column(String(50), nullable=False, default="", index=True)
    current_period_end = Column(TIMESTAMP, nullable=True)

    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="subscription")
