"""Input and output schemas for the AI stylist flows.

Inputs are validated before a prompt is built. Outputs double as the
structured-output format handed to the model, so their range checks live in
validators rather than in the generated JSON schema.
"""

from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, field_validator, model_validator

from .dependencies import parse_data_uri


def _require_data_uri(value: str) -> str:
    parse_data_uri(value)
    return value


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


def _require_rating(value: float) -> float:
    if value < 0 or value > 10:
        raise ValueError("rating must be between 0 and 10")
    return value


def _require_unit_score(value: float) -> float:
    if value < 0 or value > 1:
        raise ValueError("score must be between 0 and 1")
    return value


DataUri = Annotated[str, AfterValidator(_require_data_uri)]
NonEmptyStr = Annotated[str, AfterValidator(_require_text)]
Rating = Annotated[float, AfterValidator(_require_rating)]
UnitScore = Annotated[float, AfterValidator(_require_unit_score)]


# Inputs


class PhotoInput(BaseModel):
    photo_data_uri: DataUri


class HairstyleImageInput(PhotoInput):
    hairstyle: NonEmptyStr


class HairstylePreviewInput(PhotoInput):
    preview_count: int = 3

    @field_validator("preview_count")
    @classmethod
    def check_preview_count(cls, value: int) -> int:
        if value < 1 or value > 5:
            raise ValueError("preview_count must be between 1 and 5")
        return value


class WardrobeInput(BaseModel):
    style: NonEmptyStr
    color: NonEmptyStr
    body_scan_data_uri: DataUri
    trend_data: Optional[str] = None


class ClosetOutfitItem(BaseModel):
    id: str
    description: str


class CreateOutfitInput(BaseModel):
    clothing_items: List[ClosetOutfitItem]
    occasion: NonEmptyStr

    @field_validator("clothing_items")
    @classmethod
    def check_item_count(cls, value: List[ClosetOutfitItem]) -> List[ClosetOutfitItem]:
        if len(value) < 2:
            raise ValueError("at least two clothing items are required")
        return value


class WeatherOutfitInput(BaseModel):
    city: NonEmptyStr
    style_preference: Optional[str] = None


class TryOnClothingItem(BaseModel):
    category: NonEmptyStr
    image_data_uri: DataUri


class TryOnUserProfile(BaseModel):
    height: str = ""
    weight: str = ""
    gender: str = ""
    age: str = ""


class VirtualTryOnInput(BaseModel):
    body_scan_data_uri: DataUri
    clothing_items: List[TryOnClothingItem]
    user_profile: TryOnUserProfile
    occasion: NonEmptyStr

    @field_validator("clothing_items")
    @classmethod
    def check_item_count(cls, value: List[TryOnClothingItem]) -> List[TryOnClothingItem]:
        if not value:
            raise ValueError("at least one clothing item is required")
        return value


# Outputs


class HairstyleSuggestion(BaseModel):
    hairstyle: str
    suitability_score: UnitScore
    description: str


class HairstyleSuggestions(BaseModel):
    suggestions: List[HairstyleSuggestion]

    @field_validator("suggestions")
    @classmethod
    def rank_by_score(cls, value: List[HairstyleSuggestion]) -> List[HairstyleSuggestion]:
        return sorted(value, key=lambda s: s.suitability_score, reverse=True)


class HairstyleImage(BaseModel):
    image_url: str


class HairstylePreview(HairstyleSuggestion):
    image_url: str


class HairstylePreviews(BaseModel):
    suggestions: List[HairstyleSuggestion]
    previews: List[HairstylePreview]


class WardrobeSuggestions(BaseModel):
    suggestions: List[str]
    suitability_scores: List[float]

    @model_validator(mode="after")
    def check_lengths(self):
        if len(self.suggestions) != len(self.suitability_scores):
            raise ValueError("each suggestion needs exactly one suitability score")
        return self


class OutfitRating(BaseModel):
    rating: Rating
    suggestions: str


class ColorAnalysis(BaseModel):
    analysis: str
    best_colors: List[str]
    colors_to_avoid: List[str]


class ItemDescription(BaseModel):
    description: NonEmptyStr


class ChosenItem(BaseModel):
    id: str
    category: str


class ClosetOutfit(BaseModel):
    outfit: Optional[List[ChosenItem]] = None
    reasoning: str


class OutfitPieces(BaseModel):
    top: str
    bottom: str
    outerwear: Optional[str] = None
    footwear: str


class WeatherOutfitDraft(BaseModel):
    outfit: OutfitPieces
    reasoning: str


class WeatherSummary(BaseModel):
    temperature: float
    condition: str


class WeatherOutfit(BaseModel):
    outfit: OutfitPieces
    reasoning: str
    weather: WeatherSummary
