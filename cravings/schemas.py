"""Request bodies for the HTTP API.

Field names follow the camelCase JSON the web client sends.
"""

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Accounts ---


class RegisterRequest(CamelModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword", min_length=1)


# --- Preferences ---


class PreferencesRequest(CamelModel):
    is_vegan: bool = Field(False, alias="isVegan")
    is_vegetarian: bool = Field(False, alias="isVegetarian")
    is_pescatarian: bool = Field(False, alias="isPescatarian")
    is_keto: bool = Field(False, alias="isKeto")
    is_paleo: bool = Field(False, alias="isPaleo")
    is_gluten_free: bool = Field(False, alias="isGlutenFree")
    is_dairy_free: bool = Field(False, alias="isDairyFree")
    is_nut_free: bool = Field(False, alias="isNutFree")
    is_halal: bool = Field(False, alias="isHalal")
    is_kosher: bool = Field(False, alias="isKosher")
    is_low_carb: bool = Field(False, alias="isLowCarb")
    is_low_fat: bool = Field(False, alias="isLowFat")

    allergies: str = ""
    preferred_cuisines: str = Field("", alias="preferredCuisines")
    preferred_ingredients: str = Field("", alias="preferredIngredients")
    disliked_ingredients: str = Field("", alias="dislikedIngredients")
    additional_diets: str = Field("", alias="additionalDiets")

    calorie_target: int | None = Field(None, alias="calorieTarget")
    protein_target: int | None = Field(None, alias="proteinTarget")
    carb_target: int | None = Field(None, alias="carbTarget")
    fat_target: int | None = Field(None, alias="fatTarget")


# --- Recipes ---


class SaveRecipeRequest(CamelModel):
    recipe_id: int | None = Field(None, alias="recipeId")
    title: str | None = None
    image: str | None = None


class UnsaveRecipeRequest(CamelModel):
    recipe_id: int | None = Field(None, alias="recipeId")


# --- Grocery list ---


class AddRecipeToListRequest(CamelModel):
    recipe_id: int = Field(alias="recipeId")


class UpdateGroceryListRequest(CamelModel):
    items: str | None = None


class ScheduleEmailRequest(CamelModel):
    scheduled_date: str | None = Field(None, alias="scheduledDate")
    scheduled_time: str | None = Field(None, alias="scheduledTime")


# --- Inventory ---


class ProcessIngredientsRequest(CamelModel):
    ingredients: list[str] = Field(min_length=1)
