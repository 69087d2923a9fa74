"""Shared fixtures: in-memory database, fake OpenAI client and an API client."""

import base64
import io
import os
import threading
from types import SimpleNamespace

import pytest

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ["OPENWEATHERMAP_API_KEY"] = "test-weather-key"

from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402

from yourstylist.dependencies import (  # noqa: E402
    get_openai_client,
    get_optional_openai_client,
)
from yourstylist.main import app  # noqa: E402
from yourstylist.models import Base, engine  # noqa: E402


class FakeResponses:
    """Stands in for ``client.responses``; outputs are keyed by schema name."""

    def __init__(self):
        self.outputs = {}
        self.calls = []

    def parse(self, *, model, input, text_format):
        self.calls.append({"model": model, "input": input, "text_format": text_format})
        output = self.outputs.get(text_format.__name__)
        if isinstance(output, Exception):
            raise output
        parsed = None if output is None else text_format.model_validate(output)
        return SimpleNamespace(output_parsed=parsed)


class FakeImages:
    """Stands in for ``client.images``; prompts naming a style in fail_for get no image."""

    def __init__(self):
        self.calls = []
        self.fail_for = set()
        self._lock = threading.Lock()

    def edit(self, *, model, image, prompt):
        with self._lock:
            self.calls.append({"model": model, "image": image, "prompt": prompt})
        if any(style in prompt for style in self.fail_for):
            return SimpleNamespace(data=[SimpleNamespace(b64_json=None)])
        encoded = base64.b64encode(prompt.encode()).decode()
        return SimpleNamespace(data=[SimpleNamespace(b64_json=encoded)])


class FakeOpenAI:
    def __init__(self):
        self.responses = FakeResponses()
        self.images = FakeImages()


def make_image_bytes(size=(8, 8), fmt="PNG", color=(200, 40, 90)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture()
def png_bytes() -> bytes:
    return make_image_bytes()


@pytest.fixture()
def image_data_uri(png_bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode()


@pytest.fixture()
def api(fake_openai):
    app.dependency_overrides[get_openai_client] = lambda: fake_openai
    app.dependency_overrides[get_optional_openai_client] = lambda: fake_openai
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def register(api):
    """Sign up a user and return their auth headers."""

    def _register(email: str = "ada@example.com", password: str = "secret123") -> dict:
        response = api.post("/auth/signup", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture()
def onboarded(api, register, image_data_uri):
    """Auth headers for a user whose profile has both scans."""
    headers = register()
    response = api.put(
        "/profile",
        json={
            "name": "Ada",
            "age": "29",
            "height": "170",
            "weight": "62",
            "gender": "female",
            "faceScan": image_data_uri,
            "bodyScan": image_data_uri,
        },
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return headers
