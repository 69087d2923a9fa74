from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any
import json

from .models import User, UserActivity, StyleSuggestion


def log_user_activity(
    db: Session,
    user: User,
    activity_type: str,
    activity_data: Dict[Any, Any],
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> UserActivity:
    """Log a user activity to the database"""

    activity = UserActivity(
        user_id=user.id,
        activity_type=activity_type,
        activity_data=json.dumps(activity_data),
        ip_address=ip_address,
        user_agent=user_agent,
    )

    db.add(activity)
    db.commit()
    db.refresh(activity)

    return activity


def strip_images(payload: Any) -> Any:
    """Replace data URIs with a placeholder so history rows stay small"""
    if isinstance(payload, str):
        return "[image]" if payload.startswith("data:") else payload
    if isinstance(payload, list):
        return [strip_images(item) for item in payload]
    if isinstance(payload, dict):
        return {key: strip_images(value) for key, value in payload.items()}
    return payload


def save_style_suggestion(
    db: Session,
    user: User,
    suggestion_type: str,
    result: Dict[Any, Any],
    request_summary: Optional[Dict[Any, Any]] = None,
) -> StyleSuggestion:
    """Save a validated AI result to the user's history"""

    suggestion = StyleSuggestion(
        user_id=user.id,
        suggestion_type=suggestion_type,
        request_summary=json.dumps(strip_images(request_summary or {})),
        result=json.dumps(strip_images(result)),
    )

    db.add(suggestion)
    db.commit()
    db.refresh(suggestion)

    return suggestion


def get_user_activities(
    db: Session, user: User, activity_type: Optional[str] = None, limit: int = 50
) -> List[UserActivity]:
    """Get user activities, optionally filtered by type"""

    query = db.query(UserActivity).filter(UserActivity.user_id == user.id)

    if activity_type:
        query = query.filter(UserActivity.activity_type == activity_type)

    return query.order_by(UserActivity.id.desc()).limit(limit).all()


def get_style_suggestions(
    db: Session,
    user: User,
    suggestion_type: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
) -> Dict[str, Any]:
    """Page through a user's saved suggestions, newest first"""

    query = db.query(StyleSuggestion).filter(StyleSuggestion.user_id == user.id)

    if suggestion_type:
        query = query.filter(StyleSuggestion.suggestion_type == suggestion_type)

    total_count = query.count()
    rows = query.order_by(StyleSuggestion.id.desc()).offset(offset).limit(limit).all()

    history = [
        {
            "id": row.id,
            "type": row.suggestion_type,
            "request": json.loads(row.request_summary) if row.request_summary else {},
            "result": json.loads(row.result) if row.result else {},
            "created_at": row.created_at.isoformat() if row.created_at else None,
        }
        for row in rows
    ]

    return {
        "history": history,
        "total_count": total_count,
        "limit": limit,
        "offset": offset,
        "has_more": (offset + len(history)) < total_count,
    }
