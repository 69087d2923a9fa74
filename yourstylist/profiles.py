"""
Profile document storage.

A user's profile is kept as one record plus their closet items and is exposed
to clients as a single document with the same shape the web client renders.
Writes merge into the stored record, creating it on first write.
"""

import logging
import math
import re
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from .models import ClosetItem, User, UserProfile

logger = logging.getLogger(__name__)

CM_PER_INCH = 2.54
KG_PER_LB = 0.453592
LB_PER_KG = 2.20462

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")

# Document key -> column name
PROFILE_FIELDS = {
    "name": "name",
    "age": "age",
    "height": "height",
    "weight": "weight",
    "gender": "gender",
    "faceScan": "face_scan",
    "bodyScan": "body_scan",
}


def empty_document() -> Dict[str, Any]:
    return {
        "name": "",
        "age": "",
        "height": "",
        "weight": "",
        "gender": "",
        "faceScan": None,
        "bodyScan": None,
        "closetItems": [],
    }


def get_profile(db: Session, user: User) -> Optional[UserProfile]:
    return db.query(UserProfile).filter(UserProfile.user_id == user.id).first()


def has_profile(db: Session, user: User) -> bool:
    return get_profile(db, user) is not None


def closet_item_to_dict(item: ClosetItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "imageDataUri": item.image_data_uri,
        "description": item.description,
        "category": item.category,
    }


def list_closet_items(db: Session, user: User) -> List[ClosetItem]:
    return (
        db.query(ClosetItem)
        .filter(ClosetItem.user_id == user.id)
        .order_by(ClosetItem.created_at)
        .all()
    )


def profile_to_document(db: Session, user: User, profile: UserProfile) -> Dict[str, Any]:
    document = empty_document()
    for key, column in PROFILE_FIELDS.items():
        value = getattr(profile, column)
        if value is not None:
            document[key] = value
    document["closetItems"] = [
        closet_item_to_dict(item) for item in list_closet_items(db, user)
    ]
    return document


def read_profile_document(db: Session, user: User) -> Optional[Dict[str, Any]]:
    """Return the stored profile document, or None when the user has not onboarded"""
    profile = get_profile(db, user)
    if profile is None:
        return None
    return profile_to_document(db, user, profile)


def merge_profile(db: Session, user: User, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge document fields into the stored profile, creating it if needed.

    Keys outside the profile document are ignored; keys that are absent keep
    their stored value. Returns the merged document.
    """
    profile = get_profile(db, user)
    if profile is None:
        profile = UserProfile(user_id=user.id)
        db.add(profile)

    for key, value in updates.items():
        column = PROFILE_FIELDS.get(key)
        if column is None:
            continue
        if column in ("face_scan", "body_scan"):
            setattr(profile, column, value or None)
        else:
            setattr(profile, column, "" if value is None else str(value))

    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Failed to persist profile for user %s", user.id, exc_info=True)
        raise
    db.refresh(profile)
    return profile_to_document(db, user, profile)


def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """Integer a form value starts with ("29.5" -> 29), or None if there is none"""
    if value is None:
        return None
    match = LEADING_INT_PATTERN.match(str(value))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # More digits than int() will parse
        return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _scaled(value: int, factor: float) -> str:
    try:
        result = value * factor
    except OverflowError:
        return ""
    return f"{result:.2f}" if math.isfinite(result) else ""


def to_metric(
    height_ft: Optional[str] = None,
    height_in: Optional[str] = None,
    weight_lbs: Optional[str] = None,
) -> Dict[str, str]:
    """Convert imperial onboarding fields to metric strings with 2 decimals"""
    feet = parse_leading_int(height_ft)
    inches = parse_leading_int(height_in)
    lbs = parse_leading_int(weight_lbs)

    height = ""
    if feet is not None or inches is not None:
        total_inches = (feet or 0) * 12 + (inches or 0)
        height = _scaled(total_inches, CM_PER_INCH)

    weight = ""
    if lbs is not None:
        weight = _scaled(lbs, KG_PER_LB)

    return {"height": height, "weight": weight}


def to_imperial(height_cm: Optional[str], weight_kg: Optional[str]) -> Dict[str, str]:
    """Convert stored metric values to imperial form fields"""
    feet = inches = lbs = ""

    try:
        total_inches = float(height_cm) / CM_PER_INCH
    except (TypeError, ValueError):
        total_inches = None
    if total_inches is not None and math.isfinite(total_inches):
        whole_feet = math.floor(total_inches / 12)
        remainder = _round_half_up(total_inches % 12)
        feet = str(whole_feet) if whole_feet > 0 else ""
        inches = str(remainder) if remainder > 0 else ""

    try:
        pounds = float(weight_kg) * LB_PER_KG
    except (TypeError, ValueError):
        pounds = None
    if pounds is not None and math.isfinite(pounds) and pounds > 0:
        lbs = str(_round_half_up(pounds))

    return {"height_ft": feet, "height_in": inches, "weight_lbs": lbs}


def new_closet_item_id() -> str:
    return f"item-{uuid.uuid4().hex}"


def add_closet_item(
    db: Session,
    user: User,
    image_data_uri: str,
    description: Optional[str] = None,
    category: Optional[str] = None,
) -> ClosetItem:
    item = ClosetItem(
        id=new_closet_item_id(),
        user_id=user.id,
        image_data_uri=image_data_uri,
        description=description,
        category=category,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def remove_closet_item(db: Session, user: User, item_id: str) -> Dict[str, Any]:
    """Delete a closet item and return its last stored state"""
    item = (
        db.query(ClosetItem)
        .filter(ClosetItem.id == item_id, ClosetItem.user_id == user.id)
        .first()
    )
    if not item:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Closet item not found or you don't have permission to delete it",
        )
    deleted = closet_item_to_dict(item)
    db.delete(item)
    db.commit()
    return deleted
