"""Kitchen inventory endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import claude_service
from ..auth import get_current_user
from ..claude_service import GroceryListOrganizerError
from ..database import get_db
from ..events import log_event
from ..models import ActionType, InventoryItem, User
from ..schemas import ProcessIngredientsRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def _item_payload(item: InventoryItem) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "unit": item.unit,
        "category": item.category,
    }


@router.get("")
def list_inventory(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    items = (
        db.query(InventoryItem)
        .filter(InventoryItem.user_id == user.id)
        .order_by(InventoryItem.category, InventoryItem.name)
        .all()
    )
    return {"items": [_item_payload(i) for i in items]}


@router.post("/process")
def process_ingredients(
    body: ProcessIngredientsRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Normalize raw ingredient lines and add them to the inventory."""
    try:
        processed = claude_service.process_inventory_ingredients(body.ingredients)
    except GroceryListOrganizerError as e:
        logger.error(f"Failed to process ingredients for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process ingredients")

    items = [InventoryItem(user_id=user.id, **fields) for fields in processed]
    db.add_all(items)
    log_event(
        db, ActionType.PROCESS_INVENTORY, f"Added {len(items)} inventory items",
        user_id=user.id,
    )
    db.commit()

    return {
        "success": True,
        "message": "Ingredients processed and added to inventory",
        "inventoryItems": [_item_payload(i) for i in items],
    }


@router.delete("/{item_id}")
def remove_inventory_item(
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = (
        db.query(InventoryItem)
        .filter(InventoryItem.id == item_id, InventoryItem.user_id == user.id)
        .first()
    )
    if not item:
        raise HTTPException(status_code=404, detail="Inventory item not found")

    db.delete(item)
    log_event(
        db, ActionType.REMOVE_INVENTORY_ITEM, f"Removed '{item.name}'",
        user_id=user.id, related_ids={"inventory_item_id": item_id},
    )
    db.commit()
    return {"success": True}
