import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from travelbook.config import Settings
from travelbook.context import build_context
from travelbook.interfaces.document_store import DocumentStore
from travelbook.interfaces.session_store import SessionStore
from travelbook.main import create_app
from travelbook.schemas.travel_schemas import UserRole

from tests.factories import FakeLLM, generated_itinerary, make_package, photo_api, register


@pytest.fixture
def test_settings():
    settings = Settings()
    settings.API_ENV = "test"
    settings.USE_MEMORY_STORE = True
    settings.UNSPLASH_ACCESS_KEY = "test-key"
    settings.UNSPLASH_API_URL = "https://api.unsplash.test"
    settings.PUBLIC_BASE_URL = "https://utazz.test"
    settings.CORS_ORIGINS = "http://localhost:5173"
    return settings


@pytest.fixture
def fake_llm():
    return FakeLLM(json.dumps(generated_itinerary(3)))


@pytest.fixture
def http_client():
    return httpx.AsyncClient(transport=httpx.MockTransport(photo_api))


@pytest.fixture
def ctx(test_settings, fake_llm, http_client):
    """In-memory application context"""
    context = build_context(
        test_settings,
        store=DocumentStore(use_memory=True),
        sessions=SessionStore(None),
        llm=fake_llm,
        http_client=http_client,
    )
    yield context
    asyncio.run(context.close())


@pytest.fixture
def client(ctx, test_settings):
    return TestClient(create_app(test_settings, ctx))


@pytest.fixture
def package(ctx):
    return asyncio.run(ctx.packages.create(make_package()))


@pytest.fixture
def user(ctx):
    return asyncio.run(ctx.users.create_profile("user-anna", "anna@example.hu", "Kiss Anna"))


@pytest.fixture
def other_user(ctx):
    return asyncio.run(ctx.users.create_profile("user-bela", "bela@example.hu", "Nagy Béla"))


@pytest.fixture
def admin(ctx):
    return asyncio.run(ctx.users.create_profile("user-admin", "admin@example.hu", "Admin", UserRole.ADMIN))


@pytest.fixture
def user_headers(client):
    info = register(client, "utazo@example.hu", name="Utazó Ubul")
    return {"X-Session-Id": info["session_id"]}


@pytest.fixture
def admin_headers(client, ctx):
    info = register(client, "fonok@example.hu", name="Főnök")
    asyncio.run(ctx.users.update_role(info["user_id"], UserRole.ADMIN))
    return {"X-Session-Id": info["session_id"]}
