import base64
import binascii
import io
import re
from typing import List, Optional, Tuple, Type, TypeVar

from fastapi import HTTPException, status
from openai import OpenAI
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel

from .config import OPENAI_API_KEY, OPENAI_MODEL, OPENAI_IMAGE_MODEL

MAX_IMAGE_SIZE = 1024
JPEG_QUALITY = 85

DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>[A-Za-z0-9+/=\s]+)$"
)

ModelT = TypeVar("ModelT", bound=BaseModel)


class AIResponseError(Exception):
    """The model answered without the content the flow needs"""


def get_openai_client():
    """Get OpenAI client instance"""
    if not OPENAI_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="OpenAI API key not configured",
        )
    return OpenAI(api_key=OPENAI_API_KEY)


def get_optional_openai_client():
    """OpenAI client for calls that can be skipped when no key is configured"""
    if not OPENAI_API_KEY:
        return None
    return OpenAI(api_key=OPENAI_API_KEY)


def parse_data_uri(value: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into its MIME type and raw bytes"""
    match = DATA_URI_PATTERN.match(value or "")
    if not match:
        raise ValueError(
            "expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'"
        )
    try:
        data = base64.b64decode(match.group("data"), validate=False)
    except (binascii.Error, ValueError):
        raise ValueError("data URI payload is not valid base64")
    if not data:
        raise ValueError("data URI payload is empty")
    return match.group("mime"), data


def to_data_uri(data: bytes, mime: str = "image/jpeg") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode()}"


def normalize_image(raw: bytes) -> str:
    """Re-encode image bytes as a bounded JPEG data URI"""
    image = Image.open(io.BytesIO(raw))

    # Convert to RGB if necessary
    if image.mode != "RGB":
        image = image.convert("RGB")

    # Keep the longest side within what the vision model accepts
    if max(image.size) > MAX_IMAGE_SIZE:
        ratio = MAX_IMAGE_SIZE / max(image.size)
        new_size = tuple(max(1, int(dim * ratio)) for dim in image.size)
        image = image.resize(new_size, Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return to_data_uri(buffer.getvalue())


def process_image(image_file) -> str:
    """Process uploaded image and convert to a base64 data URI"""
    if not image_file.content_type or not image_file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="File must be an image"
        )
    try:
        # FastAPI UploadFile has a .file attribute
        return normalize_image(image_file.file.read())
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Error processing image: {str(e)}",
        )


def run_structured_prompt(
    client: OpenAI,
    instructions: str,
    text: str,
    text_format: Type[ModelT],
    images: Optional[List[str]] = None,
) -> ModelT:
    """Send a prompt with optional images and parse the reply into text_format"""
    content = [{"type": "input_text", "text": text}]
    for image_url in images or []:
        content.append({"type": "input_image", "image_url": image_url})

    response = client.responses.parse(
        model=OPENAI_MODEL,
        input=[
            {"role": "system", "content": instructions},
            {"role": "user", "content": content},
        ],
        text_format=text_format,
    )

    parsed = response.output_parsed
    if parsed is None:
        raise AIResponseError("The model returned no structured output")
    if isinstance(parsed, text_format):
        return parsed
    # Some SDK versions hand back plain dicts; validate them the same way
    return text_format.model_validate(parsed)


def edit_image(client: OpenAI, photo_data_uri: str, prompt: str) -> Optional[str]:
    """Generate an edited version of a photo; returns a data URI or None"""
    mime, data = parse_data_uri(photo_data_uri)
    extension = mime.split("/")[-1]

    result = client.images.edit(
        model=OPENAI_IMAGE_MODEL,
        image=(f"photo.{extension}", data, mime),
        prompt=prompt,
    )

    if not result.data:
        return None
    b64_image = getattr(result.data[0], "b64_json", None)
    if not b64_image:
        return None
    return f"data:image/png;base64,{b64_image}"
