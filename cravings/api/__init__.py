"""HTTP routers, one module per resource."""

from .accounts import router as accounts_router
from .preferences import router as preferences_router
from .recipes import router as recipes_router
from .grocery_list import router as grocery_list_router
from .inventory import router as inventory_router
from .cron import router as cron_router

__all__ = [
    "accounts_router",
    "preferences_router",
    "recipes_router",
    "grocery_list_router",
    "inventory_router",
    "cron_router",
]
