import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from ..activity_tracker import log_user_activity
from ..auth import get_current_active_user
from ..dependencies import get_optional_openai_client, process_image
from ..flows import describe_item
from ..models import get_db
from ..navigation import DASHBOARD_PATH, ONBOARDING_PATH
from ..profiles import (
    add_closet_item,
    closet_item_to_dict,
    empty_document,
    list_closet_items,
    merge_profile,
    parse_leading_int,
    read_profile_document,
    remove_closet_item,
    to_imperial,
    to_metric,
)
from ..schemas import DataUri, PhotoInput

router = APIRouter(
    prefix="/profile",
    tags=["profile"],
    responses={404: {"description": "Not found"}},
)

SAVE_FAILED_MESSAGE = "Failed to save your profile."


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    age: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    gender: Optional[str] = None
    faceScan: Optional[DataUri] = None
    bodyScan: Optional[DataUri] = None


class OnboardingForm(BaseModel):
    name: str
    age: str
    gender: str
    units: Literal["metric", "imperial"] = "metric"
    # Metric fields
    height_cm: Optional[str] = None
    weight_kg: Optional[str] = None
    # Imperial fields
    height_ft: Optional[str] = None
    height_in: Optional[str] = None
    weight_lbs: Optional[str] = None
    # Scans
    face_scan: Optional[DataUri] = None
    body_scan: Optional[DataUri] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if len(value.strip()) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return value.strip()

    @field_validator("age")
    @classmethod
    def check_age(cls, value: str) -> str:
        age = parse_leading_int(value)
        if age is None or age <= 0:
            raise ValueError("Invalid age.")
        return str(age)

    @field_validator("gender")
    @classmethod
    def check_gender(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Gender is required.")
        return value.strip()

    def to_document(self) -> dict:
        if self.units == "imperial":
            measurements = to_metric(self.height_ft, self.height_in, self.weight_lbs)
        else:
            measurements = {
                "height": self.height_cm or "",
                "weight": self.weight_kg or "",
            }

        document = {
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            **measurements,
        }
        if "face_scan" in self.model_fields_set:
            document["faceScan"] = self.face_scan
        if "body_scan" in self.model_fields_set:
            document["bodyScan"] = self.body_scan
        return document


def _save(db: Session, user, updates: dict) -> dict:
    try:
        return merge_profile(db, user, updates)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=SAVE_FAILED_MESSAGE,
        )


@router.get("")
async def get_profile_document(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Get the signed-in user's profile document"""
    document = read_profile_document(db, current_user)
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "message": "No profile yet. Let's set up your profile.",
                "redirect": ONBOARDING_PATH,
            },
        )
    return {"success": True, "data": document, "message": "Profile retrieved"}


@router.put("")
async def update_profile_document(
    update: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Merge the given fields into the profile, creating it if needed"""
    updates = update.model_dump(exclude_unset=True)
    document = _save(db, current_user, updates)

    log_user_activity(
        db=db,
        user=current_user,
        activity_type="profile_update",
        activity_data={"updated_fields": sorted(updates.keys())},
    )

    return {"success": True, "data": document, "message": "Profile Updated"}


@router.get("/onboarding")
async def get_onboarding_form(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Onboarding form values prefilled from the stored profile"""
    document = read_profile_document(db, current_user) or empty_document()
    imperial = to_imperial(document["height"], document["weight"])
    return {
        "success": True,
        "data": {
            "name": document["name"],
            "age": document["age"],
            "gender": document["gender"],
            "height_cm": document["height"],
            "weight_kg": document["weight"],
            **imperial,
            "face_scan": document["faceScan"],
            "body_scan": document["bodyScan"],
        },
        "message": "Onboarding form values",
    }


@router.post("/onboarding")
async def submit_onboarding_form(
    form: OnboardingForm,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Save personal details and send the user to the dashboard"""
    document = _save(db, current_user, form.to_document())

    log_user_activity(
        db=db,
        user=current_user,
        activity_type="onboarding_completed",
        activity_data={"units": form.units},
    )

    return {
        "success": True,
        "data": {"profile": document, "redirect": DASHBOARD_PATH},
        "message": "Your personal details have been saved.",
    }


@router.get("/closet")
async def get_closet(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    items = [closet_item_to_dict(item) for item in list_closet_items(db, current_user)]
    return {
        "success": True,
        "data": {"closet": items, "total_count": len(items)},
        "message": f"Retrieved {len(items)} closet items",
    }


@router.post("/closet")
async def add_to_closet(
    file: UploadFile = File(...),
    describe: bool = True,
    client=Depends(get_optional_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Upload a clothing photo to the closet, describing it with AI when possible"""
    image_data_uri = process_image(file)

    description = None
    if describe and client is not None:
        try:
            description = describe_item(
                client, PhotoInput(photo_data_uri=image_data_uri)
            ).description
        except Exception as e:
            logging.error(f"Failed to describe closet item: {e}", exc_info=True)

    try:
        item = add_closet_item(db, current_user, image_data_uri, description)
    except Exception as e:
        db.rollback()
        logging.error(f"Error adding closet item: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add item to your closet.",
        )

    log_user_activity(
        db=db,
        user=current_user,
        activity_type="closet_item_added",
        activity_data={"item_id": item.id, "described": description is not None},
    )

    return {
        "success": True,
        "data": closet_item_to_dict(item),
        "message": "1 item(s) added to your closet.",
    }


@router.delete("/closet/{item_id}")
async def delete_from_closet(
    item_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    deleted = remove_closet_item(db, current_user, item_id)

    log_user_activity(
        db=db,
        user=current_user,
        activity_type="closet_item_deleted",
        activity_data={"item_id": item_id},
    )

    return {
        "success": True,
        "data": {"deleted_item": deleted, "item_id": item_id},
        "message": "Item removed from your closet.",
    }
