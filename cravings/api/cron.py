"""Cron-triggered scheduled email sweep."""

import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_db
from ..scheduler import process_due_emails

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.get("/process-scheduled-emails")
def process_scheduled_emails(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
):
    """Send every due PENDING email. Caller must present the cron secret."""
    expected = f"Bearer {get_settings().cron_secret}"
    if not authorization or not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")

    results = process_due_emails(db)
    return {
        "success": True,
        "message": f"Processed {len(results)} scheduled emails",
        "results": results,
    }
