"""Shared stubs: a fake Gemini client and a scripted image search."""

import json
import threading
import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from menu_decoder.image_search import get_image_search
from menu_decoder.main import app, get_allowed_origins
from menu_decoder.services import MenuExtractor, get_menu_extractor

ORIGIN = "https://menu.example"

SAMPLE_DISHES = [
    {
        "name": "Pad Thai",
        "price": "$12.50",
        "description": "Stir-fried rice noodles with tamarind sauce. Topped with peanuts.",
        "ingredients": ["rice noodles", "tamarind", "egg", "peanuts", "bean sprouts"],
    },
    {
        "name": "Green Curry",
        "price": None,
        "description": "Coconut curry with Thai basil. Served with jasmine rice.",
        "ingredients": ["green curry paste", "coconut milk", "chicken", "thai basil"],
    },
    {
        "name": "Mango Sticky Rice",
        "price": "$7.00",
        "description": "Sweet glutinous rice with fresh mango. A classic dessert.",
        "ingredients": ["glutinous rice", "mango", "coconut cream", "sugar"],
    },
]


class FakeModels:
    def __init__(self, owner):
        self.owner = owner

    def generate_content(self, **kwargs):
        self.owner.calls.append(kwargs)
        if self.owner.error is not None:
            raise self.owner.error
        return self.owner.response


class FakeGeminiClient:
    """Mimics ``genai.Client().models.generate_content`` returning fixed text."""

    def __init__(self, text=""):
        self.calls = []
        self.error = None
        self.response = None
        self.text = text
        self.models = FakeModels(self)

    @property
    def text(self):
        return self.response.text

    @text.setter
    def text(self, value):
        self.response = SimpleNamespace(
            candidates=[SimpleNamespace(finish_reason="STOP")],
            text=value,
            prompt_feedback=None,
        )


class StubImageSearch:
    def __init__(self, failing=(), delay=0.0):
        self.failing = set(failing)
        self.delay = delay
        self.queries = []
        self._lock = threading.Lock()

    def search(self, dish_name):
        with self._lock:
            self.queries.append(dish_name)
        if self.delay:
            time.sleep(self.delay)
        if dish_name in self.failing:
            raise RuntimeError(f"search failed for {dish_name}")
        slug = dish_name.lower().replace(" ", "-")
        return [f"https://images.example/{slug}/{i}.jpg" for i in range(4)]


@pytest.fixture
def gemini():
    return FakeGeminiClient(text=json.dumps(SAMPLE_DISHES))


@pytest.fixture
def image_search():
    return StubImageSearch()


@pytest.fixture
def client(gemini, image_search):
    extractor = MenuExtractor(client=gemini, model="gemini-test")
    app.dependency_overrides[get_menu_extractor] = lambda: extractor
    app.dependency_overrides[get_image_search] = lambda: image_search
    app.dependency_overrides[get_allowed_origins] = lambda: [ORIGIN]
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def upload(client, data=b"\xff\xd8\xff\xe0fake-jpeg", content_type="image/jpeg", origin=ORIGIN):
    headers = {"Origin": origin} if origin else {}
    return client.post(
        "/api/analyze-menu",
        headers=headers,
        files={"menu": ("menu.jpg", data, content_type)},
    )
