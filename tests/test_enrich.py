"""Tests for concurrent enrichment through the collaborators."""

import asyncio
import logging
import threading
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from pantryparse.collaborators.base import CollaboratorError
from pantryparse.collaborators.tables import (
    CategoryShelfLifeTable,
    KeywordFoodClassifier,
    KeywordStorageAdvisor,
)
from pantryparse.enrich import EnrichmentOrchestrator, FinalizedComponent, call_collaborator
from pantryparse.pipeline import FoodItemParser
from pantryparse.schemas import CanonicalUnit, FoodCategory, Locale, StorageLocation


def component(index: int, name: str, **kwargs) -> FinalizedComponent:
    return FinalizedComponent(
        index=index,
        name=name,
        spoken_name=kwargs.pop("spoken_name", name),
        quantity=kwargs.pop("quantity", 1),
        unit=kwargs.pop("unit", CanonicalUnit.COUNT),
        **kwargs,
    )


@pytest.fixture
def orchestrator(mock_classifier, mock_storage_advisor, mock_shelf_life):
    """Orchestrator wired to async mocks."""
    return EnrichmentOrchestrator(mock_classifier, mock_storage_advisor, mock_shelf_life)


class TestCallCollaborator:
    """Tests for calling sync and async collaborator methods."""

    @pytest.mark.asyncio
    async def test_async_method(self):
        """Test coroutine functions are awaited."""

        async def double(x):
            return x * 2

        assert await call_collaborator(double, 4) == 8

    @pytest.mark.asyncio
    async def test_sync_method_runs_in_thread(self):
        """Test blocking functions run off the event loop."""
        loop_thread = []

        def blocking(x):
            loop_thread.append(threading.current_thread())
            return x + 1

        assert await call_collaborator(blocking, 1) == 2
        assert loop_thread[0] is not threading.current_thread()

    @pytest.mark.asyncio
    async def test_sync_method_returning_awaitable(self):
        """Test a plain callable that returns a coroutine is awaited too."""

        async def inner():
            return "done"

        assert await call_collaborator(lambda: inner()) == "done"


class TestEnrichmentOrchestrator:
    """Tests for EnrichmentOrchestrator."""

    @pytest.mark.asyncio
    async def test_enrich_fields(self, orchestrator, purchase_day):
        """Test every collaborator result lands on the item."""
        items = await orchestrator.enrich([component(0, "milk")], purchase_day, Locale.EN)

        assert len(items) == 1
        item = items[0]
        assert item.name == "milk"
        assert item.category is FoodCategory.DAIRY
        assert item.emoji == "🥛"
        assert item.recommended_storage is StorageLocation.REFRIGERATOR
        assert item.storage_location is StorageLocation.REFRIGERATOR
        assert item.purchase_date == purchase_day
        assert item.expiration_date == purchase_day + timedelta(days=5)
        assert item.display_unit == "pcs"

    @pytest.mark.asyncio
    async def test_single_batch_classification(self, orchestrator, mock_classifier, purchase_day):
        """Test all names are classified in one call."""
        await orchestrator.enrich(
            [component(0, "milk"), component(1, "apple")], purchase_day, Locale.EN
        )
        mock_classifier.classify_batch.assert_awaited_once_with(["milk", "apple"])

    @pytest.mark.asyncio
    async def test_stated_expiration_skips_shelf_life(self, orchestrator, mock_shelf_life, purchase_day):
        """Test a stated expiration is kept and no lookup is made."""
        stated = date(2025, 3, 13)
        items = await orchestrator.enrich(
            [component(0, "milk", expiration_date=stated)], purchase_day, Locale.EN
        )
        assert items[0].expiration_date == stated
        mock_shelf_life.shelf_life_days.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_days_is_purchase_day(self, orchestrator, mock_shelf_life, purchase_day):
        """Test a zero-day shelf life expires on the purchase day."""
        mock_shelf_life.shelf_life_days.return_value = 0
        items = await orchestrator.enrich([component(0, "milk")], purchase_day, Locale.EN)
        assert items[0].expiration_date == purchase_day

    @pytest.mark.asyncio
    async def test_order_preserved(self, mock_classifier, mock_shelf_life, purchase_day):
        """Test results follow spoken order even when later items finish first."""

        async def slow_first(name, category):
            await asyncio.sleep(0.05 if name == "milk" else 0)
            return StorageLocation.REFRIGERATOR

        advisor = MagicMock()
        advisor.recommend_storage = AsyncMock(side_effect=slow_first)
        orchestrator = EnrichmentOrchestrator(mock_classifier, advisor, mock_shelf_life)

        items = await orchestrator.enrich(
            [component(0, "milk"), component(1, "apple"), component(2, "beef")],
            purchase_day,
            Locale.EN,
        )
        assert [item.name for item in items] == ["milk", "apple", "beef"]

    @pytest.mark.asyncio
    async def test_empty(self, orchestrator, mock_classifier, purchase_day):
        """Test no components means no calls."""
        assert await orchestrator.enrich([], purchase_day, Locale.EN) == []
        mock_classifier.classify_batch.assert_not_awaited()


class TestFallbacks:
    """Tests for per-field degradation when collaborators fail."""

    @pytest.mark.asyncio
    async def test_classifier_failure(self, mock_storage_advisor, mock_shelf_life, purchase_day, caplog):
        """Test a failing classifier defaults every item to Other."""
        classifier = MagicMock()
        classifier.classify_batch = AsyncMock(side_effect=CollaboratorError("down"))
        orchestrator = EnrichmentOrchestrator(classifier, mock_storage_advisor, mock_shelf_life)

        with caplog.at_level(logging.WARNING):
            items = await orchestrator.enrich(
                [component(0, "milk"), component(1, "apple")], purchase_day, Locale.EN
            )

        assert [item.category for item in items] == [FoodCategory.OTHER, FoodCategory.OTHER]
        assert all(item.emoji is None for item in items)
        assert any("defaulting to Other" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_classifier_length_mismatch(self, mock_storage_advisor, mock_shelf_life, purchase_day):
        """Test a short classification result defaults every item to Other."""
        classifier = MagicMock()
        classifier.classify_batch = AsyncMock(return_value=[(FoodCategory.DAIRY, "🥛")])
        orchestrator = EnrichmentOrchestrator(classifier, mock_storage_advisor, mock_shelf_life)

        items = await orchestrator.enrich(
            [component(0, "milk"), component(1, "apple")], purchase_day, Locale.EN
        )
        assert [item.category for item in items] == [FoodCategory.OTHER, FoodCategory.OTHER]

    @pytest.mark.asyncio
    async def test_string_categories_accepted(self, mock_storage_advisor, mock_shelf_life, purchase_day):
        """Test category labels returned as strings are parsed."""
        classifier = MagicMock()
        classifier.classify_batch = AsyncMock(return_value=[("produce", None)])
        orchestrator = EnrichmentOrchestrator(classifier, mock_storage_advisor, mock_shelf_life)

        items = await orchestrator.enrich([component(0, "spinach")], purchase_day, Locale.EN)
        assert items[0].category is FoodCategory.VEGETABLES

    @pytest.mark.asyncio
    async def test_storage_failure(self, mock_classifier, mock_shelf_life, purchase_day):
        """Test a failing storage advisor falls back to the pantry for that item only."""

        async def flaky(name, category):
            if name == "milk":
                raise CollaboratorError("boom")
            return StorageLocation.FREEZER

        advisor = MagicMock()
        advisor.recommend_storage = AsyncMock(side_effect=flaky)
        orchestrator = EnrichmentOrchestrator(mock_classifier, advisor, mock_shelf_life)

        items = await orchestrator.enrich(
            [component(0, "milk"), component(1, "beef")], purchase_day, Locale.EN
        )
        assert items[0].recommended_storage is StorageLocation.PANTRY
        assert items[1].recommended_storage is StorageLocation.FREEZER

    @pytest.mark.asyncio
    async def test_shelf_life_failure(self, mock_classifier, mock_storage_advisor, purchase_day):
        """Test a failing shelf-life lookup leaves the expiration empty."""
        table = MagicMock()
        table.shelf_life_days = AsyncMock(side_effect=RuntimeError("no table"))
        orchestrator = EnrichmentOrchestrator(mock_classifier, mock_storage_advisor, table)

        items = await orchestrator.enrich([component(0, "milk")], purchase_day, Locale.EN)
        assert items[0].expiration_date is None
        assert items[0].category is FoodCategory.DAIRY

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, mock_classifier, mock_shelf_life, purchase_day):
        """Test cancelling the caller cancels enrichment instead of falling back."""
        started = asyncio.Event()

        async def hang(name, category):
            started.set()
            await asyncio.Event().wait()

        advisor = MagicMock()
        advisor.recommend_storage = AsyncMock(side_effect=hang)
        orchestrator = EnrichmentOrchestrator(mock_classifier, advisor, mock_shelf_life)

        task = asyncio.create_task(orchestrator.enrich([component(0, "milk")], purchase_day, Locale.EN))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_unknown_storage_value(self, mock_classifier, mock_shelf_life, purchase_day):
        """Test a storage value outside the enum falls back to the pantry."""
        advisor = MagicMock()
        advisor.recommend_storage = AsyncMock(return_value="fridge")
        orchestrator = EnrichmentOrchestrator(mock_classifier, advisor, mock_shelf_life)

        items = await orchestrator.enrich([component(0, "apple")], purchase_day, Locale.EN)
        assert items[0].recommended_storage is StorageLocation.PANTRY
        assert items[0].expiration_date == purchase_day + timedelta(days=5)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", ["soon", -3, object()])
    async def test_unusable_shelf_life(self, mock_classifier, mock_storage_advisor, purchase_day, days):
        """Test a shelf life that is not a day count leaves the expiration empty."""
        table = MagicMock()
        table.shelf_life_days = AsyncMock(return_value=days)
        orchestrator = EnrichmentOrchestrator(mock_classifier, mock_storage_advisor, table)

        items = await orchestrator.enrich([component(0, "milk")], purchase_day, Locale.EN)
        assert items[0].expiration_date is None
        assert items[0].recommended_storage is StorageLocation.REFRIGERATOR

    @pytest.mark.asyncio
    async def test_unusable_classification_entry(self, mock_storage_advisor, mock_shelf_life, purchase_day):
        """Test a malformed classification only degrades its own item."""
        classifier = MagicMock()
        classifier.classify_batch = AsyncMock(return_value=[(FoodCategory.DAIRY, "🥛"), "Fruits", ("Fruits", 7)])
        orchestrator = EnrichmentOrchestrator(classifier, mock_storage_advisor, mock_shelf_life)

        items = await orchestrator.enrich(
            [component(0, "milk"), component(1, "apple"), component(2, "pear")], purchase_day, Locale.EN
        )
        assert [item.category for item in items] == [FoodCategory.DAIRY, FoodCategory.OTHER, FoodCategory.OTHER]
        assert [item.emoji for item in items] == ["🥛", None, None]

    @pytest.mark.asyncio
    async def test_parse_survives_unusable_storage(self, mock_classifier, mock_shelf_life, now):
        """Test a bad collaborator value never aborts the whole parse."""
        advisor = MagicMock()
        advisor.recommend_storage = AsyncMock(return_value="fridge")
        parser = FoodItemParser(
            classifier=mock_classifier,
            storage_advisor=advisor,
            shelf_life=mock_shelf_life,
            default_locale="en",
        )

        items = await parser.parse("two apples", now=now)
        assert [(item.name, item.quantity) for item in items] == [("apple", 2)]
        assert items[0].recommended_storage is StorageLocation.PANTRY


class TestTableCollaborators:
    """Tests for enrichment with the synchronous table collaborators."""

    @pytest.mark.asyncio
    async def test_apple_and_milk(self, purchase_day):
        """Test the default tables end to end."""
        orchestrator = EnrichmentOrchestrator(
            KeywordFoodClassifier(), KeywordStorageAdvisor(), CategoryShelfLifeTable()
        )
        items = await orchestrator.enrich(
            [
                component(0, "apple", quantity=3),
                component(1, "milk", needs_volume_input=True),
            ],
            purchase_day,
            Locale.ZH_HANS,
        )

        apple, milk = items
        assert apple.category is FoodCategory.FRUITS
        assert apple.recommended_storage is StorageLocation.PANTRY
        assert apple.expiration_date == purchase_day + timedelta(days=14)
        assert apple.display_unit == "个"
        assert milk.recommended_storage is StorageLocation.REFRIGERATOR
        assert milk.expiration_date == purchase_day + timedelta(days=6)
        assert milk.needs_volume_input
