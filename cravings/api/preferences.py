"""Dietary preference read/update endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..database import get_db
from ..dietary_filter import profile_from_preferences, split_list
from ..events import log_event
from ..models import ActionType, User, UserPreferences
from ..schemas import PreferencesRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/preferences", tags=["preferences"])

DEFAULT_NUTRITIONAL_GOALS = {
    "calories": 2000,
    "protein": 50,
    "carbs": 250,
    "fats": 70,
}

LIST_FIELDS = (
    "allergies",
    "preferred_cuisines",
    "preferred_ingredients",
    "disliked_ingredients",
    "additional_diets",
)


def preferences_view(preferences: UserPreferences | None) -> dict:
    """Client-facing view of a preferences row (defaults when absent)."""
    profile = profile_from_preferences(preferences)
    goals = dict(DEFAULT_NUTRITIONAL_GOALS)
    if preferences is not None:
        goals = {
            "calories": preferences.calorie_target or goals["calories"],
            "protein": preferences.protein_target or goals["protein"],
            "carbs": preferences.carb_target or goals["carbs"],
            "fats": preferences.fat_target or goals["fats"],
        }

    return {
        "dietaryPreferences": profile.dietary_preferences,
        "allergies": profile.allergies,
        "nutritionalGoals": goals,
        "cuisines": profile.cuisines,
        "preferredIngredients": profile.preferred_ingredients,
        "dislikedIngredients": profile.disliked_ingredients,
    }


@router.get("")
def get_preferences(user: User = Depends(get_current_user)):
    return preferences_view(user.preferences)


@router.post("")
def save_preferences(
    body: PreferencesRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create or update the current user's preferences."""
    preferences = user.preferences
    if preferences is None:
        preferences = UserPreferences(user_id=user.id)
        db.add(preferences)

    values = body.model_dump(by_alias=False)
    for field_name in LIST_FIELDS:
        # "nuts , soy,," -> "nuts,soy"
        values[field_name] = ",".join(split_list(values[field_name])) or None
    for field_name, value in values.items():
        setattr(preferences, field_name, value)

    log_event(db, ActionType.UPDATE_PREFERENCES, "Preferences saved", user_id=user.id)
    db.commit()
    db.refresh(preferences)

    return {"success": True, "preferences": preferences_view(preferences)}
