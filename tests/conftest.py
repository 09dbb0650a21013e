"""Pytest configuration and shared fixtures."""

from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from pantryparse.collaborators.tables import (
    CategoryShelfLifeTable,
    KeywordFoodClassifier,
    KeywordStorageAdvisor,
)
from pantryparse.pipeline import FoodItemParser
from pantryparse.schemas import FoodCategory, StorageLocation

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "zh: tests for the Simplified Chinese locale")


# =============================================================================
# Clock Fixtures
# =============================================================================


@pytest.fixture
def now():
    """A fixed utterance time."""
    return datetime(2025, 3, 10, 9, 30)


@pytest.fixture
def today(now):
    """The utterance day."""
    return now.date()


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def mock_classifier():
    """Async classifier that labels every name as Dairy."""
    classifier = MagicMock()
    classifier.classify_batch = AsyncMock(
        side_effect=lambda names: [(FoodCategory.DAIRY, "🥛") for _ in names]
    )
    return classifier


@pytest.fixture
def mock_storage_advisor():
    """Async storage advisor that always recommends the refrigerator."""
    advisor = MagicMock()
    advisor.recommend_storage = AsyncMock(return_value=StorageLocation.REFRIGERATOR)
    return advisor


@pytest.fixture
def mock_shelf_life():
    """Async shelf-life table that always answers 5 days."""
    table = MagicMock()
    table.shelf_life_days = AsyncMock(return_value=5)
    return table


@pytest.fixture
def table_parser():
    """Parser wired to the table-backed default collaborators."""
    return FoodItemParser(
        classifier=KeywordFoodClassifier(),
        storage_advisor=KeywordStorageAdvisor(),
        shelf_life=CategoryShelfLifeTable(),
        default_locale="en",
    )


@pytest.fixture
def mocked_parser(mock_classifier, mock_storage_advisor, mock_shelf_life):
    """Parser wired to async mock collaborators."""
    return FoodItemParser(
        classifier=mock_classifier,
        storage_advisor=mock_storage_advisor,
        shelf_life=mock_shelf_life,
        default_locale="en",
    )


# =============================================================================
# Classification Service Fixtures
# =============================================================================


@pytest.fixture
def mock_classify_response():
    """Sample classification service response for milk and apple."""
    return {
        "items": [
            {"category": "Dairy", "emoji": "🥛"},
            {"category": "fruits", "emoji": "🍎"},
        ]
    }


@pytest.fixture
def purchase_day():
    """A purchase day used by enrichment tests."""
    return date(2025, 3, 10)
