"""Shared fixtures: a stub Gemini model and a TestClient wired to it."""

import pytest
from fastapi.testclient import TestClient
from loguru import logger

from app.config import Settings
from app.main import app, get_image_model, get_settings
from factories import PNG_BYTES, StubModel, image_part, model_reply, text_part


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def stub_model():
    return StubModel(model_reply(image_part(PNG_BYTES), text_part("A red fox")))


@pytest.fixture
def client(settings, stub_model):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_image_model] = lambda: stub_model
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def loguru_messages():
    """Collects warnings and errors logged through loguru."""
    messages = []
    handler_id = logger.add(messages.append, level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)
