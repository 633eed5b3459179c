"""Load and store planner profiles."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.profile import PlannerProfile
from app.db.models.user import User
from app.services.errors import ProfileNotFoundError
from app.services.profile_normalizer import normalize_profile
from app.services.scheduling.models import Profile

logger = logging.getLogger(__name__)


def get_or_create_user(db: Session, user_id: UUID) -> User:
    """Fetch an existing user or create the row, tolerating a concurrent insert."""
    user = db.get(User, user_id)
    if user:
        return user

    user = User(id=user_id)
    db.add(user)
    try:
        db.flush()
        return user
    except IntegrityError:
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise


def save_profile(db: Session, user_id: UUID, payload: Mapping[str, Any]) -> Profile:
    """Normalize a submitted (or legacy) payload and upsert it for the user."""
    profile = normalize_profile(payload)
    get_or_create_user(db, user_id)

    row = db.query(PlannerProfile).filter(PlannerProfile.user_id == user_id).one_or_none()
    if row is None:
        row = PlannerProfile(user_id=user_id)
        db.add(row)
    row.data = profile.model_dump(mode="json")
    db.commit()
    logger.info("Stored profile for user %s", user_id)
    return profile


def load_profile(db: Session, user_id: UUID) -> Optional[Profile]:
    row = db.query(PlannerProfile).filter(PlannerProfile.user_id == user_id).one_or_none()
    if row is None:
        return None
    # Rows written before normalization existed still pass through the migration.
    return normalize_profile(row.data or {})


def require_profile(db: Session, user_id: UUID) -> Profile:
    profile = load_profile(db, user_id)
    if profile is None:
        raise ProfileNotFoundError(f"No profile stored for user {user_id}")
    return profile
