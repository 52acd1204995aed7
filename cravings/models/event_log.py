"""Event log model for audit trail and observability."""

import enum
from datetime import datetime

from sqlalchemy import Integer, DateTime, Enum, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ActionType(str, enum.Enum):
    """Types of actions that can be logged."""

    REGISTER = "register"
    CHANGE_PASSWORD = "change_password"
    DELETE_ACCOUNT = "delete_account"
    UPDATE_PREFERENCES = "update_preferences"
    SAVE_RECIPE = "save_recipe"
    UNSAVE_RECIPE = "unsave_recipe"
    ADD_TO_GROCERY_LIST = "add_to_grocery_list"
    UPDATE_GROCERY_LIST = "update_grocery_list"
    CLEAR_GROCERY_LIST = "clear_grocery_list"
    SEND_GROCERY_LIST = "send_grocery_list"
    SCHEDULE_EMAIL = "schedule_email"
    CANCEL_SCHEDULED_EMAIL = "cancel_scheduled_email"
    PROCESS_INVENTORY = "process_inventory"
    REMOVE_INVENTORY_ITEM = "remove_inventory_item"


class EventLog(Base):
    """Audit trail for write operations.

    user_id is not a foreign key so entries survive account deletion.
    """

    __tablename__ = "event_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    action_type: Mapped[ActionType] = mapped_column(
        Enum(ActionType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    related_ids: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<EventLog(id={self.id}, action={self.action_type.value})>"
