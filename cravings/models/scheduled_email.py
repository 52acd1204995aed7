"""Scheduled email model for deferred grocery list delivery."""

import enum
from datetime import datetime

from sqlalchemy import Integer, DateTime, Enum, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class ScheduledEmailStatus(str, enum.Enum):
    """Delivery status. PENDING moves to SENT or FAILED exactly once."""

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class EmailType(str, enum.Enum):
    """Kinds of email that can be scheduled."""

    GROCERY_LIST = "GROCERY_LIST"


class ScheduledEmail(Base, TimestampMixin):
    """An email to send at ``scheduled_for`` (naive UTC).

    Data structure (JSON):
    {
        "groceryList": "Produce:\\n- 2 onions\\n..."
    }
    """

    __tablename__ = "scheduled_emails"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    email_type: Mapped[EmailType] = mapped_column(
        Enum(EmailType), default=EmailType.GROCERY_LIST, nullable=False
    )
    scheduled_for: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[ScheduledEmailStatus] = mapped_column(
        Enum(ScheduledEmailStatus), default=ScheduledEmailStatus.PENDING, nullable=False
    )
    data: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="scheduled_emails")

    def __repr__(self) -> str:
        return f"<ScheduledEmail(id={self.id}, status={self.status.value})>"
