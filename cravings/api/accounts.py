"""Registration, login and account management."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth import get_current_user, hash_password, issue_token, verify_password
from ..database import get_db
from ..events import log_event
from ..models import ActionType, User, normalize_email
from ..schemas import ChangePasswordRequest, LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["accounts"])


def _user_payload(user: User) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name}


@router.post("/register", status_code=201)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account."""
    if not body.email or not body.password or not body.name:
        raise HTTPException(status_code=400, detail="Missing fields")

    email = normalize_email(body.email)
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=409, detail="Email already exists")

    user = User(email=email, name=body.name.strip(), password_hash=hash_password(body.password))
    db.add(user)
    db.flush()
    log_event(db, ActionType.REGISTER, f"Registered {email}", user_id=user.id)
    db.commit()

    return {"user": _user_payload(user)}


@router.post("/login")
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Missing fields")

    user = db.query(User).filter(User.email == normalize_email(body.email)).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not verify_password(body.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid password")

    token = issue_token(db, user)
    return {"token": token, "user": _user_payload(user)}


@router.post("/account")
def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change the current user's password."""
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password_hash = hash_password(body.new_password)
    log_event(db, ActionType.CHANGE_PASSWORD, "Password changed", user_id=user.id)
    db.commit()
    return {"message": "Password updated successfully"}


@router.delete("/account")
def delete_account(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete the current user and everything they own."""
    user_id, email = user.id, user.email
    db.delete(user)
    log_event(db, ActionType.DELETE_ACCOUNT, f"Deleted {email}", user_id=user_id)
    db.commit()
    return {"message": "Account deleted successfully"}
