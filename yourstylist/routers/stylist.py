import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from .. import flows
from ..activity_tracker import (
    get_style_suggestions,
    log_user_activity,
    save_style_suggestion,
)
from ..auth import get_current_active_user
from ..dependencies import get_openai_client, process_image
from ..models import get_db
from ..profiles import get_profile, list_closet_items
from ..schemas import (
    ClosetOutfitItem,
    CreateOutfitInput,
    HairstyleImageInput,
    HairstylePreviewInput,
    PhotoInput,
    TryOnClothingItem,
    TryOnUserProfile,
    VirtualTryOnInput,
    WardrobeInput,
    WeatherOutfitInput,
)

router = APIRouter(
    prefix="/stylist",
    tags=["stylist"],
    responses={404: {"description": "Not found"}},
)

NO_FACE_SCAN_MESSAGE = "Please upload a face scan in your profile first."
NO_BODY_SCAN_MESSAGE = "Please upload a body scan in your profile first."
NOT_ENOUGH_ITEMS_MESSAGE = "Please add at least two items to your closet."
NO_OCCASION_MESSAGE = "Please specify an occasion for the outfit."
NO_CLOTHING_MESSAGE = "Please select or upload at least one clothing item."


class HairstyleImageRequest(BaseModel):
    hairstyle: str


class HairstylePreviewRequest(BaseModel):
    preview_count: int = 3


class WardrobeRequest(BaseModel):
    style: str
    color: str
    trend_data: Optional[str] = None


class ClosetOutfitRequest(BaseModel):
    occasion: str = ""


class WeatherOutfitRequest(BaseModel):
    city: str
    style_preference: Optional[str] = None


class TryOnRequest(BaseModel):
    clothing_items: List[TryOnClothingItem] = []
    occasion: str


def _build_input(model, **fields):
    """Validate flow input, turning schema errors into a 400"""
    try:
        return model(**fields)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=messages)


def _require_scan(db: Session, user, kind: str) -> str:
    profile = get_profile(db, user)
    if kind == "face":
        scan = profile.face_scan if profile else None
        message = NO_FACE_SCAN_MESSAGE
    else:
        scan = profile.body_scan if profile else None
        message = NO_BODY_SCAN_MESSAGE
    if not scan:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)
    return scan


async def _run_flow(flow, client, data, failure_message: str):
    """Run a blocking flow off the event loop with a generic failure message"""
    try:
        return await run_in_threadpool(flow, client, data)
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"{flow.__name__} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_message
        )


def _record(db: Session, user, suggestion_type: str, result: dict, request: dict = None):
    save_style_suggestion(
        db=db,
        user=user,
        suggestion_type=suggestion_type,
        result=result,
        request_summary=request,
    )
    log_user_activity(
        db=db,
        user=user,
        activity_type=suggestion_type,
        activity_data={"request": request or {}},
    )


@router.post("/hairstyles")
async def hairstyle_suggestions(
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Suggest hairstyles from the profile face scan"""
    scan = _require_scan(db, current_user, "face")
    data = _build_input(PhotoInput, photo_data_uri=scan)

    result = await _run_flow(
        flows.suggest_hairstyles,
        client,
        data,
        "Failed to get hairstyle suggestions.",
    )
    payload = result.model_dump()
    _record(db, current_user, "hairstyle_suggestions", payload)

    return {
        "success": True,
        "data": payload["suggestions"],
        "message": f"Found {len(payload['suggestions'])} hairstyles for you",
    }


@router.post("/hairstyles/image")
async def hairstyle_image(
    request: HairstyleImageRequest,
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Render the face scan with a chosen hairstyle"""
    scan = _require_scan(db, current_user, "face")
    data = _build_input(
        HairstyleImageInput, photo_data_uri=scan, hairstyle=request.hairstyle
    )

    result = await _run_flow(
        flows.generate_hairstyle_image,
        client,
        data,
        "Failed to generate hairstyle image.",
    )
    _record(
        db,
        current_user,
        "hairstyle_image",
        {"hairstyle": data.hairstyle},
        {"hairstyle": data.hairstyle},
    )

    return {"success": True, "data": result.model_dump(), "message": "Image generated"}


@router.post("/hairstyles/previews")
async def hairstyle_previews(
    request: HairstylePreviewRequest,
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Suggest hairstyles and render the top ones"""
    scan = _require_scan(db, current_user, "face")
    data = _build_input(
        HairstylePreviewInput, photo_data_uri=scan, preview_count=request.preview_count
    )

    try:
        result = await flows.suggest_hairstyles_with_previews(client, data)
    except Exception as e:
        logging.error(f"Hairstyle previews failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate hairstyle previews.",
        )

    payload = result.model_dump()
    _record(
        db,
        current_user,
        "hairstyle_previews",
        payload,
        {"preview_count": data.preview_count},
    )

    return {
        "success": True,
        "data": payload,
        "message": f"Generated {len(payload['previews'])} hairstyle previews",
    }


@router.post("/colors")
async def color_analysis(
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Analyse flattering colors from the face scan"""
    scan = _require_scan(db, current_user, "face")
    data = _build_input(PhotoInput, photo_data_uri=scan)

    result = await _run_flow(
        flows.analyze_colors, client, data, "Failed to analyze your colors."
    )
    payload = result.model_dump()
    _record(db, current_user, "color_analysis", payload)

    return {"success": True, "data": payload, "message": "Color analysis complete"}


@router.post("/wardrobe")
async def wardrobe_suggestions(
    request: WardrobeRequest,
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Suggest clothing items from style and color preferences"""
    scan = _require_scan(db, current_user, "body")
    data = _build_input(
        WardrobeInput,
        style=request.style,
        color=request.color,
        body_scan_data_uri=scan,
        trend_data=request.trend_data,
    )

    result = await _run_flow(
        flows.suggest_wardrobe, client, data, "Failed to get wardrobe suggestions."
    )
    payload = result.model_dump()
    _record(
        db,
        current_user,
        "wardrobe_suggestions",
        payload,
        request.model_dump(),
    )

    return {
        "success": True,
        "data": payload,
        "message": f"Found {len(payload['suggestions'])} items for you",
    }


@router.post("/ootd")
async def rate_outfit_of_the_day(
    file: UploadFile = File(...),
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Rate an uploaded outfit photo out of 10"""
    image_data_uri = process_image(file)
    data = _build_input(PhotoInput, photo_data_uri=image_data_uri)

    result = await _run_flow(flows.rate_outfit, client, data, "Failed to rate outfit.")
    payload = result.model_dump()
    _record(
        db, current_user, "outfit_rating", payload, {"file_type": file.content_type}
    )

    return {"success": True, "data": payload, "message": "Outfit rated"}


@router.post("/closet-outfit")
async def closet_outfit(
    request: ClosetOutfitRequest,
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Build an outfit for an occasion from described closet items"""
    items = [
        ClosetOutfitItem(id=item.id, description=item.description)
        for item in list_closet_items(db, current_user)
        if item.description
    ]
    if len(items) < 2:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=NOT_ENOUGH_ITEMS_MESSAGE
        )
    if not request.occasion.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=NO_OCCASION_MESSAGE
        )
    data = _build_input(CreateOutfitInput, clothing_items=items, occasion=request.occasion)

    result = await _run_flow(
        flows.create_outfit_from_closet, client, data, "Failed to create an outfit."
    )
    payload = result.model_dump()
    _record(
        db,
        current_user,
        "closet_outfit",
        payload,
        {"occasion": data.occasion, "item_count": len(items)},
    )

    return {"success": True, "data": payload, "message": "Outfit created"}


@router.post("/weather-outfit")
async def weather_outfit(
    request: WeatherOutfitRequest,
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Suggest an outfit for the current weather in a city"""
    data = _build_input(
        WeatherOutfitInput,
        city=request.city,
        style_preference=request.style_preference or "",
    )

    result = await _run_flow(
        flows.suggest_outfit_for_weather,
        client,
        data,
        "Failed to suggest an outfit for the weather.",
    )
    payload = result.model_dump()
    _record(db, current_user, "weather_outfit", payload, request.model_dump())

    return {"success": True, "data": payload, "message": "Outfit suggested"}


@router.post("/try-on")
async def try_on(
    request: TryOnRequest,
    client=Depends(get_openai_client),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Rate a combination of clothing items on the user's body scan"""
    scan = _require_scan(db, current_user, "body")
    if not request.clothing_items:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=NO_CLOTHING_MESSAGE
        )

    profile = get_profile(db, current_user)
    data = _build_input(
        VirtualTryOnInput,
        body_scan_data_uri=scan,
        clothing_items=request.clothing_items,
        user_profile=TryOnUserProfile(
            height=profile.height or "",
            weight=profile.weight or "",
            gender=profile.gender or "",
            age=profile.age or "",
        ),
        occasion=request.occasion,
    )

    result = await _run_flow(
        flows.virtual_try_on, client, data, "Failed to analyze the outfit."
    )
    payload = result.model_dump()
    _record(
        db,
        current_user,
        "virtual_try_on",
        payload,
        {
            "occasion": data.occasion,
            "categories": [item.category for item in data.clothing_items],
        },
    )

    return {"success": True, "data": payload, "message": "Try-on analysis complete"}


@router.get("/history")
async def suggestion_history(
    suggestion_type: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Saved suggestions, newest first"""
    data = get_style_suggestions(
        db, current_user, suggestion_type=suggestion_type, limit=limit, offset=offset
    )
    return {
        "success": True,
        "data": data,
        "message": f"Retrieved {len(data['history'])} suggestions",
    }
