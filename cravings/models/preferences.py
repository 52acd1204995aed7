"""Preferences model for storing user dietary preferences."""

from sqlalchemy import Integer, Boolean, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class UserPreferences(Base, TimestampMixin):
    """Dietary flags, ingredient lists and nutrition targets for one user.

    Created lazily on the first preference save. List-valued fields are stored
    comma-joined (e.g. "nuts,soy").
    """

    __tablename__ = "user_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    is_vegan: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_vegetarian: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_pescatarian: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_keto: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_paleo: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_gluten_free: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_dairy_free: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_nut_free: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_halal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_kosher: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_low_carb: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_low_fat: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferred_cuisines: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferred_ingredients: Mapped[str | None] = mapped_column(Text, nullable=True)
    disliked_ingredients: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Diet labels outside the boolean set, e.g. "low fodmap"
    additional_diets: Mapped[str | None] = mapped_column(Text, nullable=True)

    calorie_target: Mapped[int | None] = mapped_column(Integer, nullable=True)
    protein_target: Mapped[int | None] = mapped_column(Integer, nullable=True)
    carb_target: Mapped[int | None] = mapped_column(Integer, nullable=True)
    fat_target: Mapped[int | None] = mapped_column(Integer, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="preferences")

    def __repr__(self) -> str:
        return f"<UserPreferences(id={self.id}, user_id={self.user_id})>"
