"""Database models for the Cravings service."""

from .base import Base, TimestampMixin, normalize_email
from .user import User, AuthToken
from .preferences import UserPreferences
from .saved_recipe import SavedRecipe
from .grocery_list import GroceryList
from .inventory import InventoryItem
from .scheduled_email import ScheduledEmail, ScheduledEmailStatus, EmailType
from .event_log import EventLog, ActionType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "normalize_email",
    # Accounts
    "User",
    "AuthToken",
    "UserPreferences",
    # Recipes & lists
    "SavedRecipe",
    "GroceryList",
    "InventoryItem",
    "ScheduledEmail",
    "ScheduledEmailStatus",
    "EmailType",
    # Audit
    "EventLog",
    "ActionType",
]
