"""
Test Configuration
==================

Pytest fixtures for the compliance engines tests.
"""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest_asyncio.fixture
async def compliance_engines_client() -> AsyncGenerator[AsyncClient, None]:
    """Create test client for Compliance Engines Service."""
    from services.compliance_engines.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture(autouse=True)
def _fresh_catalogs():
    """Reload catalogs around each test so overrides never leak."""
    from services.compliance_engines.catalogs import clear_catalog_cache

    clear_catalog_cache()
    yield
    clear_catalog_cache()
