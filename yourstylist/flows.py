"""
AI stylist flows.

Every flow takes an OpenAI client plus a validated input model, formats its
prompt, calls the model and returns a validated output model. Failures are
raised to the caller; the routers turn them into user-facing messages.
"""

import asyncio
import logging

from fastapi.concurrency import run_in_threadpool

from . import prompts
from .dependencies import AIResponseError, edit_image, run_structured_prompt
from .schemas import (
    ClosetOutfit,
    ColorAnalysis,
    CreateOutfitInput,
    HairstyleImage,
    HairstyleImageInput,
    HairstylePreview,
    HairstylePreviewInput,
    HairstylePreviews,
    HairstyleSuggestions,
    ItemDescription,
    OutfitRating,
    PhotoInput,
    VirtualTryOnInput,
    WardrobeInput,
    WardrobeSuggestions,
    WeatherOutfit,
    WeatherOutfitDraft,
    WeatherOutfitInput,
    WeatherSummary,
)
from .weather import get_current_weather

logger = logging.getLogger(__name__)

CLOSET_OUTFIT_FALLBACK = (
    "The AI stylist was unable to process the request. Please try again."
)


def suggest_hairstyles(client, data: PhotoInput) -> HairstyleSuggestions:
    """Hairstyles ranked by suitability for the face in the photo"""
    return run_structured_prompt(
        client,
        prompts.HAIRSTYLES_SYSTEM,
        prompts.HAIRSTYLES_USER,
        HairstyleSuggestions,
        images=[data.photo_data_uri],
    )


def generate_hairstyle_image(client, data: HairstyleImageInput) -> HairstyleImage:
    """Render the person in the photo with the given hairstyle"""
    image_url = edit_image(
        client,
        data.photo_data_uri,
        prompts.HAIRSTYLE_IMAGE.format(hairstyle=data.hairstyle),
    )
    if not image_url:
        raise AIResponseError("Image generation failed.")
    return HairstyleImage(image_url=image_url)


async def suggest_hairstyles_with_previews(
    client, data: HairstylePreviewInput
) -> HairstylePreviews:
    """Suggest hairstyles, then render the top ones concurrently.

    The previews are all-or-nothing: one failed render fails the batch.
    """
    ranked = await run_in_threadpool(
        suggest_hairstyles, client, PhotoInput(photo_data_uri=data.photo_data_uri)
    )
    top = ranked.suggestions[: data.preview_count]
    if not top:
        raise AIResponseError("No hairstyles were suggested to preview.")

    images = await asyncio.gather(
        *[
            run_in_threadpool(
                generate_hairstyle_image,
                client,
                HairstyleImageInput(
                    photo_data_uri=data.photo_data_uri,
                    hairstyle=suggestion.hairstyle,
                ),
            )
            for suggestion in top
        ]
    )

    previews = [
        HairstylePreview(**suggestion.model_dump(), image_url=image.image_url)
        for suggestion, image in zip(top, images)
    ]
    return HairstylePreviews(suggestions=ranked.suggestions, previews=previews)


def suggest_wardrobe(client, data: WardrobeInput) -> WardrobeSuggestions:
    return run_structured_prompt(
        client,
        prompts.WARDROBE_SYSTEM,
        prompts.WARDROBE_USER.format(
            style=data.style,
            color=data.color,
            trend_data=data.trend_data or "none provided",
        ),
        WardrobeSuggestions,
        images=[data.body_scan_data_uri],
    )


def rate_outfit(client, data: PhotoInput) -> OutfitRating:
    return run_structured_prompt(
        client,
        prompts.OUTFIT_RATING_SYSTEM,
        prompts.OUTFIT_RATING_USER,
        OutfitRating,
        images=[data.photo_data_uri],
    )


def analyze_colors(client, data: PhotoInput) -> ColorAnalysis:
    return run_structured_prompt(
        client,
        prompts.COLOR_ANALYSIS_SYSTEM,
        prompts.COLOR_ANALYSIS_USER,
        ColorAnalysis,
        images=[data.photo_data_uri],
    )


def describe_item(client, data: PhotoInput) -> ItemDescription:
    return run_structured_prompt(
        client,
        prompts.ITEM_DESCRIPTION_SYSTEM,
        prompts.ITEM_DESCRIPTION_USER,
        ItemDescription,
        images=[data.photo_data_uri],
    )


def create_outfit_from_closet(client, data: CreateOutfitInput) -> ClosetOutfit:
    """Pick 2-4 owned items for an occasion.

    Only ids from the input survive; an empty model answer becomes an empty
    outfit with an explanatory reasoning.
    """
    items = "\n".join(
        prompts.CLOSET_OUTFIT_LINE.format(id=item.id, description=item.description)
        for item in data.clothing_items
    )
    try:
        result = run_structured_prompt(
            client,
            prompts.CLOSET_OUTFIT_SYSTEM,
            prompts.CLOSET_OUTFIT_USER.format(occasion=data.occasion, items=items),
            ClosetOutfit,
        )
    except AIResponseError:
        logger.warning("Closet outfit request returned no output")
        return ClosetOutfit(outfit=[], reasoning=CLOSET_OUTFIT_FALLBACK)

    known_ids = {item.id for item in data.clothing_items}
    chosen = [item for item in result.outfit or [] if item.id in known_ids]
    dropped = len(result.outfit or []) - len(chosen)
    if dropped:
        logger.warning(f"Dropped {dropped} outfit item(s) with unknown ids")
    return ClosetOutfit(outfit=chosen, reasoning=result.reasoning)


def suggest_outfit_for_weather(client, data: WeatherOutfitInput) -> WeatherOutfit:
    """Fetch current weather for the city and dress for it"""
    weather = get_current_weather(data.city)

    draft = run_structured_prompt(
        client,
        prompts.WEATHER_OUTFIT_SYSTEM,
        prompts.WEATHER_OUTFIT_USER.format(
            city=data.city,
            temperature=weather["temperature"],
            condition=weather["condition"],
            wind_speed=weather["wind_speed"],
            style_preference=data.style_preference
            or prompts.DEFAULT_STYLE_PREFERENCE,
        ),
        WeatherOutfitDraft,
    )

    return WeatherOutfit(
        outfit=draft.outfit,
        reasoning=draft.reasoning,
        weather=WeatherSummary(
            temperature=weather["temperature"], condition=weather["condition"]
        ),
    )


def virtual_try_on(client, data: VirtualTryOnInput) -> OutfitRating:
    profile = data.user_profile
    return run_structured_prompt(
        client,
        prompts.VIRTUAL_TRY_ON_SYSTEM,
        prompts.VIRTUAL_TRY_ON_USER.format(
            age=profile.age or "unknown",
            height=profile.height or "unknown",
            weight=profile.weight or "unknown",
            gender=profile.gender or "unknown",
            occasion=data.occasion,
            categories=", ".join(item.category for item in data.clothing_items),
        ),
        OutfitRating,
        images=[data.body_scan_data_uri]
        + [item.image_data_uri for item in data.clothing_items],
    )
