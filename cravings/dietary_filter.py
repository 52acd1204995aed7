"""Dietary compliance filtering for recipe feeds.

Decides, per recipe, whether it is acceptable to show a user given their
dietary preferences. Pure functions only: no I/O, no database access. Callers
load the user's preferences, turn them into a ``DietaryProfile`` with
``profile_from_preferences`` and pass it in explicitly.

A recipe is accepted when:
  1. it satisfies the requested dietary tags (all of them under the strict
     policy; under best-effort, failed tags are only recorded),
  2. none of its ingredients match an allergy,
  3. none of its ingredients match a disliked ingredient,
  4. at least one ingredient matches a preferred ingredient, if any are set.

A miss on preferred cuisines is recorded on the report but never rejects.

Tag satisfaction uses the provider's boolean diet flags when present and falls
back to keyword denylists over the title and ingredient names otherwise.
Malformed recipe data never raises; it is logged and treated permissively.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


# =============================================================================
# Tag Tables
# =============================================================================

# UserPreferences boolean column -> canonical tag, in display order
PREFERENCE_FLAG_TAGS = {
    "is_vegan": "vegan",
    "is_vegetarian": "vegetarian",
    "is_pescatarian": "pescatarian",
    "is_keto": "ketogenic",
    "is_paleo": "paleo",
    "is_gluten_free": "gluten free",
    "is_dairy_free": "dairy free",
    "is_nut_free": "nut free",
    "is_halal": "halal",
    "is_kosher": "kosher",
    "is_low_carb": "low carb",
    "is_low_fat": "low fat",
}

# Canonical tag -> boolean field on a provider recipe
RECIPE_FLAG_FIELDS = {
    "vegan": "vegan",
    "vegetarian": "vegetarian",
    "gluten free": "glutenFree",
    "dairy free": "dairyFree",
    "ketogenic": "ketogenic",
    "paleo": "paleo",
    "low fodmap": "lowFodmap",
}

# Canonical tag -> ingredient keywords incompatible with it
DENYLISTS: dict[str, frozenset[str]] = {
    "vegan": frozenset({
        "meat", "chicken", "beef", "pork", "fish", "egg", "dairy",
        "milk", "cheese", "butter", "cream", "honey",
    }),
    "vegetarian": frozenset({"meat", "chicken", "beef", "pork", "fish"}),
    "pescatarian": frozenset({"meat", "chicken", "beef", "pork"}),
    "ketogenic": frozenset({"sugar", "flour", "bread", "pasta", "rice", "potato", "corn"}),
    "paleo": frozenset({
        "sugar", "flour", "bread", "pasta", "rice", "dairy", "milk",
        "cheese", "processed",
    }),
    "gluten free": frozenset({"flour", "bread", "pasta", "wheat", "barley", "rye", "gluten"}),
    "dairy free": frozenset({"dairy", "milk", "cheese", "butter", "cream", "yogurt"}),
    "nut free": frozenset({
        "peanut", "almond", "cashew", "walnut", "pecan", "hazelnut", "nut",
    }),
    "halal": frozenset({"pork", "alcohol", "gelatin"}),
    "kosher": frozenset({"pork", "shellfish"}),
}

TAG_ALIASES = {
    "keto": "ketogenic",
    "tree nuts": "nut free",
    "tree nut free": "nut free",
    "glutenfree": "gluten free",
    "dairyfree": "dairy free",
    "lowcarb": "low carb",
    "lowfat": "low fat",
}


# =============================================================================
# Types
# =============================================================================


@dataclass
class DietaryProfile:
    """A user's preferences, already split into lists.

    The empty profile requests no filtering at all.
    """

    dietary_preferences: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    cuisines: list[str] = field(default_factory=list)
    preferred_ingredients: list[str] = field(default_factory=list)
    disliked_ingredients: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.dietary_preferences
            or self.allergies
            or self.preferred_ingredients
            or self.disliked_ingredients
        )


@dataclass
class ComplianceReport:
    """Outcome of evaluating one recipe against a profile."""

    recipe_id: Any
    accepted: bool
    failed_tags: list[str] = field(default_factory=list)
    allergy_matches: list[str] = field(default_factory=list)
    disliked_matches: list[str] = field(default_factory=list)
    missing_preferred: bool = False
    # Recorded only; never affects ``accepted``
    cuisine_mismatch: bool = False

    @property
    def compliant(self) -> bool:
        """True when nothing at all was flagged, regardless of policy."""
        return not (
            self.failed_tags
            or self.allergy_matches
            or self.disliked_matches
            or self.missing_preferred
            or self.cuisine_mismatch
        )


@dataclass
class FilterResult:
    """Accepted recipes (input order) plus a report per evaluated recipe."""

    accepted: list = field(default_factory=list)
    reports: list[ComplianceReport] = field(default_factory=list)

    @property
    def non_compliant(self) -> list[ComplianceReport]:
        return [r for r in self.reports if not r.compliant]


# =============================================================================
# Normalization
# =============================================================================


def canonical_tag(tag: str) -> str:
    """Normalize a dietary tag label.

    "Gluten-Free", "gluten_free" and "gluten free" all become "gluten free";
    known aliases such as "keto" are resolved.
    """
    tag = tag.strip().lower().replace("-", " ").replace("_", " ")
    tag = re.sub(r"\s+", " ", tag)
    return TAG_ALIASES.get(tag, tag)


def split_list(value: str | None) -> list[str]:
    """Split comma-joined storage into trimmed, non-empty entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _normalize_terms(terms: Iterable[str]) -> list[str]:
    return [t.strip().lower() for t in terms if isinstance(t, str) and t.strip()]


def profile_from_preferences(preferences) -> DietaryProfile:
    """Build a DietaryProfile from a UserPreferences row.

    Args:
        preferences: A UserPreferences instance, or None.

    Returns:
        The profile; empty when preferences is None.
    """
    if preferences is None:
        return DietaryProfile()

    tags = []
    for column, tag in PREFERENCE_FLAG_TAGS.items():
        if getattr(preferences, column, False):
            tags.append(tag)
    for extra in split_list(getattr(preferences, "additional_diets", None)):
        tag = canonical_tag(extra)
        if tag not in tags:
            tags.append(tag)

    return DietaryProfile(
        dietary_preferences=tags,
        allergies=split_list(preferences.allergies),
        cuisines=split_list(preferences.preferred_cuisines),
        preferred_ingredients=split_list(preferences.preferred_ingredients),
        disliked_ingredients=split_list(preferences.disliked_ingredients),
    )


# =============================================================================
# Recipe Field Access
# =============================================================================


def _field(recipe, name: str):
    if isinstance(recipe, Mapping):
        return recipe.get(name)
    return getattr(recipe, name, None)


def _recipe_id(recipe):
    return _field(recipe, "id")


def recipe_ingredient_names(recipe) -> list[str]:
    """Lower-cased ingredient names of a recipe.

    Reads ``extendedIngredients`` (provider format, dicts with a ``name``) and
    falls back to ``ingredients`` (simplified format, strings or dicts).
    Malformed entries are skipped.
    """
    raw = _field(recipe, "extendedIngredients")
    if raw is None:
        raw = _field(recipe, "ingredients")
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        logger.warning(f"Recipe {_recipe_id(recipe)}: ingredient list is malformed, ignoring")
        return []

    names = []
    for entry in raw:
        name = entry if isinstance(entry, str) else _field(entry, "name")
        if isinstance(name, str) and name.strip():
            names.append(name.strip().lower())
    return names


def _recipe_title(recipe) -> str:
    title = _field(recipe, "title")
    return title.lower() if isinstance(title, str) else ""


# =============================================================================
# Predicates
# =============================================================================


def contains_denied_keyword(recipe, keywords: Iterable[str]) -> bool:
    """True if the title or any ingredient name contains one of the keywords."""
    texts = [_recipe_title(recipe), *recipe_ingredient_names(recipe)]
    return any(keyword in text for keyword in keywords for text in texts if text)


def satisfies_tag(recipe, tag: str, denylists: Mapping[str, Iterable[str]] = DENYLISTS) -> bool:
    """Check whether a recipe satisfies a single dietary tag.

    The provider's boolean flag is ground truth when present. Otherwise the
    recipe passes unless its text contains a denylisted keyword. Tags with
    neither a flag nor a denylist always pass.
    """
    tag = canonical_tag(tag)
    flag_field = RECIPE_FLAG_FIELDS.get(tag)
    if flag_field is not None:
        value = _field(recipe, flag_field)
        if isinstance(value, bool):
            return value
        if value is not None:
            logger.warning(
                f"Recipe {_recipe_id(recipe)}: non-boolean {flag_field}={value!r}, "
                f"falling back to keywords"
            )

    keywords = denylists.get(tag)
    if not keywords:
        logger.debug(f"No flag or denylist for tag '{tag}', passing")
        return True
    return not contains_denied_keyword(recipe, keywords)


def match_terms(ingredients: Iterable[str], terms: Iterable[str]) -> list[str]:
    """Return the terms that match at least one ingredient.

    Matching is bidirectional substring containment, so "egg" matches
    "eggs" and "egg noodles", and "green onions" matches "onion".
    """
    ingredients = _normalize_terms(ingredients)
    matched = []
    for term in _normalize_terms(terms):
        if any(term in ing or ing in term for ing in ingredients):
            matched.append(term)
    return matched


def misses_cuisines(recipe, cuisines: Iterable[str]) -> bool:
    """True if preferred cuisines are set and none appears in the recipe's cuisines.

    A recipe without a ``cuisines`` list misses every preference.
    """
    preferred = _normalize_terms(cuisines or [])
    if not preferred:
        return False
    raw = _field(recipe, "cuisines")
    if isinstance(raw, (str, bytes, Mapping)) or not isinstance(raw, Iterable):
        raw = []
    recipe_cuisines = _normalize_terms(raw)
    return not any(p in c for p in preferred for c in recipe_cuisines)


def _profile_tags(profile: DietaryProfile) -> list[str]:
    tags = []
    for tag in profile.dietary_preferences or []:
        if not isinstance(tag, str) or not tag.strip():
            logger.warning(f"Ignoring malformed dietary tag {tag!r}")
            continue
        tags.append(tag)
    return tags


# =============================================================================
# Aggregation
# =============================================================================


def evaluate_recipe(
    recipe,
    profile: DietaryProfile,
    strict: bool = True,
    denylists: Mapping[str, Iterable[str]] = DENYLISTS,
) -> ComplianceReport:
    """Evaluate one recipe against a profile.

    Args:
        recipe: Provider recipe dict (or any object exposing the same fields).
        profile: The user's dietary profile.
        strict: If True every tag must pass; if False failed tags are only
            recorded on the report.
        denylists: Keyword table used when a recipe lacks a boolean flag.

    Returns:
        A ComplianceReport; ``accepted`` is the final decision.
    """
    failed_tags = [
        tag for tag in _profile_tags(profile)
        if not satisfies_tag(recipe, tag, denylists)
    ]

    ingredients = recipe_ingredient_names(recipe)
    allergy_matches = match_terms(ingredients, profile.allergies)
    disliked_matches = match_terms(ingredients, profile.disliked_ingredients)

    missing_preferred = False
    if _normalize_terms(profile.preferred_ingredients):
        missing_preferred = not match_terms(ingredients, profile.preferred_ingredients)

    accepted = not (
        (strict and failed_tags)
        or allergy_matches
        or disliked_matches
        or missing_preferred
    )

    report = ComplianceReport(
        recipe_id=_recipe_id(recipe),
        accepted=accepted,
        failed_tags=failed_tags,
        allergy_matches=allergy_matches,
        disliked_matches=disliked_matches,
        missing_preferred=missing_preferred,
        cuisine_mismatch=misses_cuisines(recipe, profile.cuisines),
    )
    if not report.compliant:
        logger.debug(f"Recipe {report.recipe_id} flagged: {report}")
    return report


def screen_recipes(
    recipes: Iterable,
    profile: DietaryProfile | None,
    strict: bool = True,
    denylists: Mapping[str, Iterable[str]] = DENYLISTS,
) -> FilterResult:
    """Evaluate every recipe and collect the accepted ones in input order."""
    result = FilterResult()
    if recipes is None:
        return result
    if profile is None:
        profile = DietaryProfile()

    for recipe in recipes:
        report = evaluate_recipe(recipe, profile, strict=strict, denylists=denylists)
        result.reports.append(report)
        if report.accepted:
            result.accepted.append(recipe)
    return result


def filter_recipes(
    recipes: Iterable,
    profile: DietaryProfile | None,
    strict: bool = True,
    limit: int | None = DEFAULT_PAGE_SIZE,
    denylists: Mapping[str, Iterable[str]] = DENYLISTS,
) -> list:
    """Filter recipes for a profile and truncate to a page.

    Args:
        recipes: Candidate recipes, usually a provider page of up to 50.
        profile: The user's dietary profile; None means no filtering.
        strict: Strict (reject on any failed tag) or best-effort policy.
        limit: Maximum number of recipes returned; None for no limit.
        denylists: Keyword table for recipes lacking boolean flags.

    Returns:
        Accepted recipes in input order, at most ``limit`` of them.
    """
    result = screen_recipes(recipes, profile, strict=strict, denylists=denylists)
    if result.non_compliant:
        logger.info(
            f"Dietary filter: {len(result.accepted)}/{len(result.reports)} accepted, "
            f"{len(result.non_compliant)} flagged (strict={strict})"
        )
    if limit is None:
        return result.accepted
    return result.accepted[:limit]
