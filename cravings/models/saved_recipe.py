"""Saved recipe model: a thin local reference to a provider recipe."""

from sqlalchemy import Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class SavedRecipe(Base, TimestampMixin):
    """A recipe a user chose to keep. Unique per (user_id, recipe_id)."""

    __tablename__ = "saved_recipes"
    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipes_user_recipe"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    image: Mapped[str] = mapped_column(String(1000), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="saved_recipes")

    def __repr__(self) -> str:
        return f"<SavedRecipe(id={self.id}, recipe_id={self.recipe_id})>"
