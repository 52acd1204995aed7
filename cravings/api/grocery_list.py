"""Grocery list editing, emailing and scheduled delivery."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import claude_service, email_service, spoonacular_service
from ..auth import get_current_user
from ..claude_service import GroceryListOrganizerError
from ..config import get_settings
from ..database import get_db
from ..email_service import EmailDeliveryError, EmailNotConfiguredError
from ..events import log_event
from ..models import ActionType, EmailType, GroceryList, ScheduledEmail, User
from ..scheduler import process_due_emails, to_local, to_utc_naive
from ..schemas import AddRecipeToListRequest, ScheduleEmailRequest, UpdateGroceryListRequest
from ..spoonacular_service import RecipeProviderError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/grocery-list", tags=["grocery-list"])


def upsert_grocery_list(db: Session, user: User, items: str | None) -> GroceryList:
    """Set the user's grocery list text, creating the row on first use."""
    grocery_list = user.grocery_list
    if grocery_list is None:
        grocery_list = GroceryList(user_id=user.id, items=items)
        db.add(grocery_list)
        user.grocery_list = grocery_list
    else:
        grocery_list.items = items
    return grocery_list


def format_local_time(moment: datetime) -> str:
    """Display string such as "March 5, 2025 6:30 PM"."""
    hour = moment.hour % 12 or 12
    return f"{moment:%B} {moment.day}, {moment.year} {hour}:{moment:%M %p}"


def _current_items(user: User) -> str | None:
    return user.grocery_list.items if user.grocery_list else None


def _scheduled_payload(scheduled: ScheduledEmail, timezone: str) -> dict:
    return {
        "id": scheduled.id,
        "emailType": scheduled.email_type.value,
        "scheduledFor": scheduled.scheduled_for.isoformat(),
        "scheduledForLocal": to_local(scheduled.scheduled_for, timezone).isoformat(),
        "status": scheduled.status.value,
    }


@router.get("")
def get_grocery_list(user: User = Depends(get_current_user)):
    return {"items": _current_items(user) or ""}


@router.post("/add")
def add_recipe_to_list(
    body: AddRecipeToListRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Merge a recipe's ingredients into the list and reorganize it."""
    try:
        recipe = spoonacular_service.get_recipe_details(body.recipe_id)
    except RecipeProviderError as e:
        logger.error(f"Failed to fetch recipe {body.recipe_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process grocery list")

    existing = [line for line in (_current_items(user) or "").split("\n") if line.strip()]
    lines = existing + spoonacular_service.ingredient_lines(recipe)

    try:
        organized = claude_service.organize_grocery_list(lines)
    except GroceryListOrganizerError as e:
        logger.error(f"Failed to organize grocery list for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to process grocery list")

    upsert_grocery_list(db, user, organized)
    log_event(
        db, ActionType.ADD_TO_GROCERY_LIST, f"Added '{recipe.get('title', body.recipe_id)}'",
        user_id=user.id, related_ids={"recipe_id": body.recipe_id},
    )
    db.commit()

    return {
        "success": True,
        "message": "Grocery list updated successfully",
        "groceryList": organized,
    }


@router.post("/update")
def update_grocery_list(
    body: UpdateGroceryListRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not body.items:
        raise HTTPException(status_code=400, detail="Items are required")

    upsert_grocery_list(db, user, body.items)
    log_event(db, ActionType.UPDATE_GROCERY_LIST, "Grocery list edited", user_id=user.id)
    db.commit()

    return {
        "success": True,
        "message": "Grocery list updated successfully",
        "groceryList": body.items,
    }


@router.post("/clear")
def clear_grocery_list(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if user.grocery_list is not None:
        user.grocery_list.items = None
    log_event(db, ActionType.CLEAR_GROCERY_LIST, "Grocery list cleared", user_id=user.id)
    db.commit()
    return {"success": True, "message": "Grocery list cleared successfully"}


@router.post("/send")
def send_grocery_list(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Email the grocery list to the user, then clear it."""
    items = _current_items(user)
    if not items:
        raise HTTPException(status_code=400, detail="Grocery list is empty")

    try:
        email_service.send_grocery_list_email(
            to_email=user.email, grocery_list=items, recipe_name="Your Grocery List"
        )
    except (EmailNotConfiguredError, EmailDeliveryError) as e:
        logger.error(f"Failed to send grocery list for user {user.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to send grocery list")

    user.grocery_list.items = None
    log_event(db, ActionType.SEND_GROCERY_LIST, f"Sent to {user.email}", user_id=user.id)
    db.commit()
    return {"success": True, "message": "Grocery list sent and cleared successfully"}


@router.post("/schedule")
def schedule_grocery_list(
    body: ScheduleEmailRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Schedule the current list for delivery at a local date and time."""
    if not body.scheduled_date or not body.scheduled_time:
        raise HTTPException(status_code=400, detail="Date and time are required")

    items = _current_items(user)
    if user.grocery_list is None:
        raise HTTPException(status_code=404, detail="Grocery list not found")

    try:
        local = datetime.fromisoformat(f"{body.scheduled_date}T{body.scheduled_time}")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date or time")

    timezone = get_settings().user_timezone
    scheduled = ScheduledEmail(
        user_id=user.id,
        email_type=EmailType.GROCERY_LIST,
        scheduled_for=to_utc_naive(local, timezone),
        data={"groceryList": items},
    )
    db.add(scheduled)
    db.flush()
    log_event(
        db, ActionType.SCHEDULE_EMAIL, f"Scheduled for {local.isoformat()} {timezone}",
        user_id=user.id, related_ids={"scheduled_email_id": scheduled.id},
    )
    db.commit()

    return {
        "message": "Email scheduled successfully",
        "id": scheduled.id,
        "scheduledFor": format_local_time(local),
    }


@router.get("/scheduled")
def list_scheduled_emails(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    scheduled = (
        db.query(ScheduledEmail)
        .filter(ScheduledEmail.user_id == user.id)
        .order_by(ScheduledEmail.scheduled_for.desc())
        .all()
    )
    timezone = get_settings().user_timezone
    return {"scheduledEmails": [_scheduled_payload(s, timezone) for s in scheduled]}


@router.delete("/schedule/{schedule_id}")
def cancel_scheduled_email(
    schedule_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    scheduled = (
        db.query(ScheduledEmail)
        .filter(ScheduledEmail.id == schedule_id, ScheduledEmail.user_id == user.id)
        .first()
    )
    if not scheduled:
        raise HTTPException(status_code=404, detail="Scheduled email not found")

    db.delete(scheduled)
    log_event(
        db, ActionType.CANCEL_SCHEDULED_EMAIL, f"Cancelled scheduled email {schedule_id}",
        user_id=user.id, related_ids={"scheduled_email_id": schedule_id},
    )
    db.commit()
    return {"message": "Scheduled email cancelled successfully"}


@router.post("/process-scheduled")
def process_my_scheduled_emails(
    user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Send the caller's due emails now instead of waiting for the cron sweep."""
    results = process_due_emails(db, user_id=user.id)
    if not results:
        return {"message": "No scheduled emails to process", "results": []}
    return {"message": f"Processed {len(results)} scheduled emails", "results": results}
