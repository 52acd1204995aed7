"""Grocery list model for managing a user's shopping text."""

from sqlalchemy import Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class GroceryList(Base, TimestampMixin):
    """One grocery list per user.

    Items are free text, one line per entry, usually grouped under category
    headers by the language model. NULL means the list is empty.
    """

    __tablename__ = "grocery_lists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    items: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="grocery_list")

    def __repr__(self) -> str:
        return f"<GroceryList(id={self.id}, user_id={self.user_id})>"
