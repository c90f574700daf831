"""
Pytest configuration and shared fixtures for backend tests.

This module provides test fixtures for:
- In-memory city repository (no MongoDB needed)
- FastAPI test client wired to that repository
- Mock MongoDB collection
- Test data factories
"""

import os
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from cities_api.core.dependencies import get_city_repository
from cities_api.infrastructure.persistence.repositories.in_memory_city_repository import (
    InMemoryCityRepository,
)
from cities_api.main import app


# ==============================================================================
# REPOSITORY FIXTURES
# ==============================================================================

@pytest.fixture(scope="function")
def city_repository() -> InMemoryCityRepository:
    """Fresh in-memory repository per test."""
    return InMemoryCityRepository()


@pytest.fixture
def mock_collection():
    """Mock async MongoDB collection.

    ``find`` returns a chainable cursor whose ``to_list`` yields no rows
    unless a test sets ``mock_collection.cursor.to_list.return_value``.
    """
    collection = MagicMock()
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])

    collection.cursor = cursor
    collection.find.return_value = cursor
    collection.count_documents = AsyncMock(return_value=0)
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.find_one_and_delete = AsyncMock(return_value=None)
    collection.create_index = AsyncMock(return_value="uniq_name")
    return collection


# ==============================================================================
# API FIXTURES
# ==============================================================================

@pytest.fixture(scope="function")
def client(city_repository) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client backed by the in-memory repository."""
    app.dependency_overrides[get_city_repository] = lambda: city_repository

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==============================================================================
# TEST DATA FACTORIES
# ==============================================================================

@pytest.fixture
def sample_city_data():
    """Sample city payload for testing."""
    return {
        "name": "Springfield",
        "population": 167882,
        "country": "US",
        "latitude": 39.7817,
        "longitude": -89.6501,
    }


@pytest.fixture
def sample_cities():
    """A small, mixed set of cities for list tests."""
    return [
        {"name": "Springfield", "population": 167882, "country": "US", "latitude": 39.7817, "longitude": -89.6501},
        {"name": "SPRINGER", "population": 1047, "country": "US", "latitude": 36.3628, "longitude": -104.5956},
        {"name": "Denver", "population": 715522, "country": "US", "latitude": 39.7392, "longitude": -104.9903},
        {"name": "San Jose", "population": 1013240, "country": "US", "latitude": 37.3382, "longitude": -121.8863},
        {"name": "Santiago", "population": 6257516, "country": "Chile", "latitude": -33.4489, "longitude": -70.6693},
    ]


# ==============================================================================
# UTILITY FIXTURES
# ==============================================================================

@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# ==============================================================================
# MARKERS
# ==============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: Mark test as an integration test"
    )
