"""
Shared pytest fixtures available to every test file automatically.
No imports needed in test files, pytest discovers this by convention.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient
from tortoise import Tortoise

from app.deps import get_current_user
from app.errors import register_exception_handlers
from app.main import TORTOISE_MODULES, include_routers

from .factories import make_admin, make_customer, make_other_user

# ---------------------------------------------------------------------------
# Catalog cache: never talk to a real Redis in tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def no_redis():
    with (
        patch("app.inventory.get_item_cache", AsyncMock(return_value=None)),
        patch("app.inventory.set_item_cache", AsyncMock()),
        patch("app.routers.catalog.invalidate_item_cache", AsyncMock()),
    ):
        yield


# ---------------------------------------------------------------------------
# In-memory database for CRUD tests that exercise real queries
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture()
async def db():
    await Tortoise.init(db_url="sqlite://:memory:", modules=TORTOISE_MODULES)
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


# ---------------------------------------------------------------------------
# App builder, used by all client fixtures
# ---------------------------------------------------------------------------


def build_app(current_user) -> FastAPI:
    """
    Fresh FastAPI app with get_current_user overridden to return
    `current_user` unconditionally. Admin checks still run against it.
    """
    app = FastAPI()
    include_routers(app)
    register_exception_handlers(app)

    async def _user():
        return current_user

    app.dependency_overrides[get_current_user] = _user
    return app


# ---------------------------------------------------------------------------
# Reusable client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer_client():
    return TestClient(build_app(make_customer()), raise_server_exceptions=True)


@pytest.fixture()
def other_client():
    return TestClient(build_app(make_other_user()), raise_server_exceptions=True)


@pytest.fixture()
def admin_client():
    return TestClient(build_app(make_admin()), raise_server_exceptions=True)


@pytest.fixture()
def anon_app():
    """
    App with NO dependency overrides.
    Use this when you want the real identity dep to run so you can assert 401.
    """
    app = FastAPI()
    include_routers(app)
    register_exception_handlers(app)
    return app


@pytest.fixture()
def client_factory():
    def _make(current_user) -> TestClient:
        return TestClient(build_app(current_user), raise_server_exceptions=True)

    return _make
