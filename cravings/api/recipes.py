"""Recipe feed, details and saved recipes."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import spoonacular_service
from ..auth import get_current_user
from ..config import get_settings
from ..database import get_db
from ..dietary_filter import filter_recipes, profile_from_preferences
from ..events import log_event
from ..models import ActionType, SavedRecipe, User
from ..schemas import SaveRecipeRequest, UnsaveRecipeRequest
from ..spoonacular_service import RecipeProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("")
def list_recipes(
    query: str | None = None,
    strict: bool | None = None,
    user: User = Depends(get_current_user),
):
    """Recommend recipes that comply with the user's dietary preferences.

    Fetches a candidate pool from the provider, filters it locally and returns
    one page. ``strict`` overrides the configured policy for this request.
    """
    settings = get_settings()
    profile = profile_from_preferences(user.preferences)
    if strict is None:
        strict = settings.strict_dietary_filter

    try:
        if query:
            candidates = spoonacular_service.search_recipes(
                query, profile, number=settings.recipe_candidate_pool
            )
        else:
            candidates = spoonacular_service.get_random_recipes(
                settings.recipe_candidate_pool, profile
            )
    except RecipeProviderError as e:
        logger.error(f"Failed to fetch recipes for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch recipes")

    return filter_recipes(candidates, profile, strict=strict, limit=settings.recipe_page_size)


@router.get("/saved")
def list_saved_recipes(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Saved recipes, newest first, with provider ingredients when available."""
    saved = (
        db.query(SavedRecipe)
        .filter(SavedRecipe.user_id == user.id)
        .order_by(SavedRecipe.created_at.desc(), SavedRecipe.id.desc())
        .all()
    )

    recipes = []
    for row in saved:
        ingredients = []
        try:
            info = spoonacular_service.get_recipe_details(row.recipe_id)
            ingredients = [
                {
                    "name": ing.get("name"),
                    "amount": ing.get("amount"),
                    "unit": ing.get("unit"),
                    "original": ing.get("original"),
                }
                for ing in info.get("extendedIngredients") or []
            ]
        except RecipeProviderError as e:
            # 429s are common here; basic info is still useful
            logger.warning(f"Returning basic info for saved recipe {row.recipe_id}: {e}")

        recipes.append({
            "id": row.id,
            "recipeId": row.recipe_id,
            "title": row.title,
            "image": row.image,
            "ingredients": ingredients,
        })

    return {"recipes": recipes}


@router.post("/save")
def save_recipe(
    body: SaveRecipeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.recipe_id or not body.title or not body.image:
        raise HTTPException(status_code=400, detail="Missing required fields")

    existing = (
        db.query(SavedRecipe)
        .filter(SavedRecipe.user_id == user.id, SavedRecipe.recipe_id == body.recipe_id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="Recipe already saved")

    saved = SavedRecipe(
        user_id=user.id, recipe_id=body.recipe_id, title=body.title, image=body.image
    )
    db.add(saved)
    log_event(
        db, ActionType.SAVE_RECIPE, f"Saved '{body.title}'",
        user_id=user.id, related_ids={"recipe_id": body.recipe_id},
    )
    db.commit()

    return {
        "id": saved.id,
        "recipeId": saved.recipe_id,
        "title": saved.title,
        "image": saved.image,
    }


@router.delete("/save")
def unsave_recipe(
    body: UnsaveRecipeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.recipe_id:
        raise HTTPException(status_code=400, detail="Missing recipe ID")

    saved = (
        db.query(SavedRecipe)
        .filter(SavedRecipe.user_id == user.id, SavedRecipe.recipe_id == body.recipe_id)
        .first()
    )
    if not saved:
        raise HTTPException(status_code=404, detail="Saved recipe not found")

    db.delete(saved)
    log_event(
        db, ActionType.UNSAVE_RECIPE, f"Unsaved recipe {body.recipe_id}",
        user_id=user.id, related_ids={"recipe_id": body.recipe_id},
    )
    db.commit()
    return {"success": True}


@router.get("/{recipe_id}")
def get_recipe(recipe_id: int, user: User = Depends(get_current_user)):
    try:
        return spoonacular_service.get_recipe_details(recipe_id)
    except RecipeProviderError as e:
        raise HTTPException(
            status_code=e.status_code or 500, detail="Failed to fetch recipe details"
        )
