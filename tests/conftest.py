# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# Every test gets its own file-backed SQLite database under tmp_path
# ==============================================================================

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from improved_api.core.settings import Settings, TokenConfiguration
from improved_api.database.unit_of_work import ImprovedUnitOfWork
from foreign_key_example.database import ExampleContext
from foreign_key_example.startup import Startup

TEST_SECRET_KEY = "test-secret-key-for-testing-only-32chars!"
TEST_AUDIENCE = "improved-api-tests"
TEST_ISSUER = "improved-api"


# ==============================================================================
# SETTINGS FIXTURES
# ==============================================================================

def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "DATABASE_URL": f"sqlite:///{tmp_path}/test.db",
        "DEBUG": False,
        "LOG_LEVEL": "INFO",
        "TOKEN_CONFIGURATION": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def token_configuration() -> TokenConfiguration:
    """Token section shared by the authenticated fixtures."""
    return TokenConfiguration(
        SECRET_KEY=TEST_SECRET_KEY,
        AUDIENCE=TEST_AUDIENCE,
        ISSUER=TEST_ISSUER,
        SECONDS=300,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings without a token section (authentication inactive)."""
    return make_settings(tmp_path)


@pytest.fixture
def auth_settings(tmp_path: Path, token_configuration: TokenConfiguration) -> Settings:
    """Settings with a token section (authentication active)."""
    return make_settings(tmp_path, TOKEN_CONFIGURATION=token_configuration)


# ==============================================================================
# APPLICATION FIXTURES
# ==============================================================================

async def _connected(app: FastAPI) -> FastAPI:
    # ASGITransport does not run the lifespan
    await app.state.context.connect()
    return app


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Example application with authentication inactive."""
    application = await _connected(Startup(settings).create_app())
    yield application
    await application.state.context.disconnect()


@pytest_asyncio.fixture
async def auth_app(auth_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Example application requiring bearer tokens."""
    application = await _connected(Startup(auth_settings).create_app())
    yield application
    await application.state.context.disconnect()


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def anonymous_client(auth_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client of the authenticated application without a token."""
    transport = ASGITransport(app=auth_app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest_asyncio.fixture
async def auth_client(auth_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client of the authenticated application sending a valid token."""
    token = auth_app.state.token_service.create_token("test-user")
    transport = ASGITransport(app=auth_app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {token.access_token}"},
    ) as async_client:
        yield async_client


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def context(settings: Settings) -> AsyncGenerator[ExampleContext, None]:
    """Connected example context."""
    db_context = ExampleContext(settings)
    await db_context.connect()
    yield db_context
    await db_context.disconnect()


@pytest.fixture
def unit_of_work(context: ExampleContext) -> ImprovedUnitOfWork:
    """Inactive unit of work over the example context."""
    return ImprovedUnitOfWork(context)


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_one_data() -> dict:
    return {"one_property01": "First One", "one_property02": 7}


@pytest.fixture
def sample_category_data() -> dict:
    return {"name": "Books", "description": "Printed and digital books"}
