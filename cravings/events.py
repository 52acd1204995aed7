"""Audit trail helper."""

import logging

from sqlalchemy.orm import Session

from .models import ActionType, EventLog

logger = logging.getLogger(__name__)


def log_event(
    db: Session,
    action: ActionType,
    summary: str,
    user_id: int | None = None,
    related_ids: dict | None = None,
) -> None:
    """Record a write action. Added to the caller's session, not committed."""
    db.add(
        EventLog(
            action_type=action,
            user_id=user_id,
            summary=summary,
            related_ids=related_ids,
        )
    )
    logger.info(f"[{action.value}] user={user_id} {summary}")
