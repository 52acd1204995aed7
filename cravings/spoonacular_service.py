"""Spoonacular API client for recipe search and details.

Recipes are fetched per request and never cached. Dietary preferences are
forwarded as upstream query filters, but the provider's filtering is loose, so
callers still run the results through ``dietary_filter``.
"""

import logging

import requests

from .config import get_settings

logger = logging.getLogger(__name__)

SPOONACULAR_API_BASE = "https://api.spoonacular.com/recipes"


class RecipeProviderError(Exception):
    """Raised when the recipe provider fails or returns an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


# =============================================================================
# Request Helpers
# =============================================================================


def _get(path: str, params: dict | None = None) -> dict | list:
    """GET a provider endpoint and return the decoded JSON body."""
    settings = get_settings()

    try:
        response = requests.get(
            f"{SPOONACULAR_API_BASE}{path}",
            params=params,
            headers={"x-api-key": settings.spoonacular_api_key},
            timeout=settings.request_timeout,
        )
        response.raise_for_status()
        return response.json()

    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.error(f"Spoonacular API error on {path}: {e}")
        raise RecipeProviderError(f"Recipe provider returned {status}", status) from e

    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Spoonacular request failed on {path}: {e}")
        raise RecipeProviderError("Recipe provider request failed") from e


def build_filter_params(profile) -> dict:
    """Translate a DietaryProfile into provider query filters."""
    params = {}
    if profile is None:
        return params
    if profile.dietary_preferences:
        params["diet"] = ",".join(profile.dietary_preferences)
    if profile.allergies:
        params["intolerances"] = ",".join(profile.allergies)
    if profile.cuisines:
        params["cuisine"] = ",".join(profile.cuisines)
    return params


# =============================================================================
# Recipe Search
# =============================================================================


def search_recipes(query: str, profile=None, number: int = 10) -> list[dict]:
    """Search recipes by free text, with full recipe information."""
    params = {
        "query": query,
        "number": number,
        "addRecipeInformation": "true",
        "fillIngredients": "true",
        **build_filter_params(profile),
    }

    data = _get("/complexSearch", params)
    if not isinstance(data, dict):
        raise RecipeProviderError("Unexpected search response format")

    results = data.get("results") or []
    logger.info(f"Spoonacular search '{query}' returned {len(results)} results")
    return results


def get_random_recipes(count: int = 10, profile=None) -> list[dict]:
    """Fetch random recipes, tagged by the profile's diets and cuisines."""
    params = {"number": count}
    if profile is not None:
        tags = [*profile.dietary_preferences, *profile.cuisines]
        if tags:
            params["include-tags"] = ",".join(t.lower() for t in tags)

    data = _get("/random", params)
    recipes = data if isinstance(data, list) else data.get("recipes")
    if not isinstance(recipes, list):
        raise RecipeProviderError("Unexpected random recipes response format")

    logger.info(f"Spoonacular random returned {len(recipes)} recipes")
    return recipes


def get_recipe_details(recipe_id: int) -> dict:
    """Fetch full information for one recipe."""
    data = _get(f"/{recipe_id}/information")
    if not isinstance(data, dict):
        raise RecipeProviderError("Unexpected recipe details format")
    return data


def ingredient_lines(recipe: dict) -> list[str]:
    """Human-readable ingredient lines ("2 cups flour") of a recipe."""
    lines = []
    for ingredient in recipe.get("extendedIngredients") or []:
        line = ingredient.get("original") or ingredient.get("name")
        if line:
            lines.append(line)
    return lines
