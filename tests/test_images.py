import base64
import io

import pytest
from PIL import Image

from yourstylist.activity_tracker import get_user_activities, strip_images
from yourstylist.dependencies import normalize_image, parse_data_uri
from yourstylist.models import SessionLocal, User


def decode(data_uri):
    mime, data = parse_data_uri(data_uri)
    return mime, Image.open(io.BytesIO(data))


def test_parse_data_uri(png_bytes, image_data_uri):
    assert parse_data_uri(image_data_uri) == ("image/png", png_bytes)


@pytest.mark.parametrize(
    "value",
    ["", "hello", "data:image/png,abc", "data:image/png;base64,", "image/png;base64,aGk="],
)
def test_parse_data_uri_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_data_uri(value)


def test_normalize_image_bounds_size_and_reencodes_as_jpeg():
    buffer = io.BytesIO()
    Image.new("RGBA", (2048, 1024), (10, 20, 30, 128)).save(buffer, format="PNG")

    mime, image = decode(normalize_image(buffer.getvalue()))

    assert mime == "image/jpeg"
    assert image.format == "JPEG"
    assert image.mode == "RGB"
    assert image.size == (1024, 512)


def test_normalize_image_keeps_small_images(png_bytes):
    _, image = decode(normalize_image(png_bytes))

    assert image.size == (8, 8)


def test_strip_images_replaces_data_uris():
    payload = {
        "image_url": "data:image/png;base64," + base64.b64encode(b"x").decode(),
        "previews": [{"hairstyle": "Bob", "image_url": "data:image/png;base64,eA=="}],
        "rating": 7,
    }

    assert strip_images(payload) == {
        "image_url": "[image]",
        "previews": [{"hairstyle": "Bob", "image_url": "[image]"}],
        "rating": 7,
    }


def test_account_activity_is_logged(api, register):
    headers = register()
    api.post("/auth/signin", json={"email": "ada@example.com", "password": "secret123"})
    api.post("/auth/logout", headers=headers)

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == "ada@example.com").first()
        activities = get_user_activities(db, user)
        signins = get_user_activities(db, user, activity_type="user_signin")
    finally:
        db.close()

    assert [a.activity_type for a in activities] == ["user_logout", "user_signin", "user_signup"]
    assert len(signins) == 1
