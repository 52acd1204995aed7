"""Scheduled email sweep.

Finds PENDING emails that are due, sends each once and flips its status to
SENT or FAILED. There is no retry: a FAILED row stays FAILED.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from .email_service import send_grocery_list_email
from .models import EmailType, ScheduledEmail, ScheduledEmailStatus

logger = logging.getLogger(__name__)

SCHEDULED_EMAIL_SUBJECT = "Your Scheduled Grocery List"


def to_utc_naive(local: datetime, timezone: str) -> datetime:
    """Interpret a naive wall-clock time in ``timezone`` and convert to naive UTC."""
    aware = local.replace(tzinfo=ZoneInfo(timezone))
    return aware.astimezone(ZoneInfo("UTC")).replace(tzinfo=None)


def to_local(utc_naive: datetime, timezone: str) -> datetime:
    """Convert a stored naive UTC time to an aware time in ``timezone``."""
    return utc_naive.replace(tzinfo=ZoneInfo("UTC")).astimezone(ZoneInfo(timezone))


def due_emails(db: Session, now: datetime, user_id: int | None = None) -> list[ScheduledEmail]:
    """PENDING emails scheduled at or before ``now``, optionally for one user."""
    query = db.query(ScheduledEmail).filter(
        ScheduledEmail.status == ScheduledEmailStatus.PENDING,
        ScheduledEmail.scheduled_for <= now,
    )
    if user_id is not None:
        query = query.filter(ScheduledEmail.user_id == user_id)
    return query.order_by(ScheduledEmail.scheduled_for).all()


def _email_data(scheduled: ScheduledEmail) -> dict:
    data = scheduled.data
    if isinstance(data, dict):
        return data
    logger.warning(f"Scheduled email {scheduled.id} has malformed data: {data!r}")
    return {}


def process_due_emails(
    db: Session, now: datetime | None = None, user_id: int | None = None
) -> list[dict]:
    """Send every due email and record the outcome.

    Args:
        db: Database session; committed once all rows are processed.
        now: Current naive UTC time (defaults to utcnow).
        user_id: Restrict the sweep to one user's emails.

    Returns:
        One result dict per processed email.
    """
    now = now or datetime.utcnow()
    results = []

    for scheduled in due_emails(db, now, user_id=user_id):
        if scheduled.email_type != EmailType.GROCERY_LIST:
            logger.warning(f"Skipping scheduled email {scheduled.id}: unknown type")
            continue

        result = {
            "id": scheduled.id,
            "emailType": scheduled.email_type.value,
            "scheduledFor": scheduled.scheduled_for.isoformat(),
        }
        try:
            grocery_list = _email_data(scheduled).get("groceryList") or "No grocery list items"
            send_grocery_list_email(
                to_email=scheduled.user.email,
                grocery_list=grocery_list,
                recipe_name=SCHEDULED_EMAIL_SUBJECT,
            )
            scheduled.status = ScheduledEmailStatus.SENT
        except Exception as e:
            logger.exception(f"Error processing scheduled email {scheduled.id}: {e}")
            scheduled.status = ScheduledEmailStatus.FAILED
            result["error"] = str(e)

        result["status"] = scheduled.status.value
        results.append(result)

    db.commit()
    logger.info(f"Processed {len(results)} scheduled emails")
    return results
