"""Concurrent enrichment of parsed components through the collaborators."""

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, TypeVar

from pantryparse.collaborators.base import (
    Classification,
    FoodClassifier,
    ShelfLifeTable,
    StorageAdvisor,
)
from pantryparse.logging_config import get_logger
from pantryparse.normalize.units import display_unit_for
from pantryparse.schemas import (
    CanonicalUnit,
    FoodCategory,
    Locale,
    ParsedFoodItem,
    StorageLocation,
)

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_CLASSIFICATION: Classification = (FoodCategory.OTHER, None)


@dataclass
class FinalizedComponent:
    """A validated component with its canonical unit, ready for enrichment."""

    index: int
    name: str
    spoken_name: str
    quantity: int
    unit: CanonicalUnit
    needs_volume_input: bool = False
    expiration_date: date | None = None


async def call_collaborator(method: Callable[..., Any], *args: Any) -> Any:
    """Await async collaborator methods; run blocking ones in a worker thread."""
    if inspect.iscoroutinefunction(method):
        return await method(*args)
    result = await asyncio.to_thread(method, *args)
    if inspect.isawaitable(result):
        return await result
    return result


async def _with_fallback(
    label: str,
    fallback: T,
    coerce: Callable[[Any], T],
    method: Callable[..., Any],
    *args: Any,
) -> T:
    """Call a collaborator and coerce its result; any failure yields the fallback."""
    try:
        return coerce(await call_collaborator(method, *args))
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.warning(f"{label} failed, using fallback {fallback!r}: {e}")
        return fallback


def _coerce_classification(result: Any) -> Classification:
    category, emoji = result
    if emoji is not None and not isinstance(emoji, str):
        raise TypeError(f"emoji must be a string, got {emoji!r}")
    return FoodCategory.from_label(category), emoji or None


def _coerce_days(days: Any) -> int | None:
    if days is None:
        return None
    days = int(days)
    if days < 0:
        raise ValueError(f"negative shelf life {days}")
    return days


class EnrichmentOrchestrator:
    """
    Attach category, storage and expiration to finalized components.

    One batched classification call is made up front, then every component
    is enriched in its own task. A failing collaborator only degrades the
    affected field; cancellation of the caller cancels every task.
    """

    def __init__(
        self,
        classifier: FoodClassifier,
        storage_advisor: StorageAdvisor,
        shelf_life: ShelfLifeTable,
    ):
        self.classifier = classifier
        self.storage_advisor = storage_advisor
        self.shelf_life = shelf_life

    async def _classify(self, names: list[str]) -> list[Classification]:
        try:
            results = list(await call_collaborator(self.classifier.classify_batch, names) or [])
            if len(results) != len(names):
                raise ValueError(f"classifier returned {len(results)} results for {len(names)} names")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Classification failed for {len(names)} item(s), defaulting to Other: {e}")
            return [DEFAULT_CLASSIFICATION] * len(names)

        classifications = []
        for name, result in zip(names, results):
            try:
                classifications.append(_coerce_classification(result))
            except (TypeError, ValueError) as e:
                logger.warning(f"Unusable classification {result!r} for '{name}', defaulting to Other: {e}")
                classifications.append(DEFAULT_CLASSIFICATION)
        return classifications

    async def _enrich_one(
        self,
        component: FinalizedComponent,
        classification: Classification,
        purchase_date: date,
        locale: Locale,
    ) -> tuple[int, ParsedFoodItem]:
        category, emoji = classification
        storage = await _with_fallback(
            f"Storage recommendation for '{component.name}'",
            StorageLocation.PANTRY,
            StorageLocation,
            self.storage_advisor.recommend_storage,
            component.name,
            category,
        )
        expiration = component.expiration_date
        if expiration is None:
            days = await _with_fallback(
                f"Shelf-life lookup for '{component.name}'",
                None,
                _coerce_days,
                self.shelf_life.shelf_life_days,
                component.name,
                category,
                storage,
            )
            if days is not None:
                expiration = purchase_date + timedelta(days=days)

        item = ParsedFoodItem(
            name=component.name,
            spoken_name=component.spoken_name,
            quantity=component.quantity,
            unit=component.unit,
            display_unit=display_unit_for(component.unit, locale),
            category=category,
            purchase_date=purchase_date,
            expiration_date=expiration,
            emoji=emoji,
            needs_volume_input=component.needs_volume_input,
            recommended_storage=storage,
        )
        return component.index, item

    async def enrich(
        self,
        components: list[FinalizedComponent],
        purchase_date: date,
        locale: Locale,
    ) -> list[ParsedFoodItem]:
        """
        Enrich every component concurrently.

        Returns:
            ParsedFoodItem list in the components' spoken order.
        """
        if not components:
            return []

        classifications = await self._classify([c.name for c in components])
        results = await asyncio.gather(
            *(
                self._enrich_one(component, classification, purchase_date, locale)
                for component, classification in zip(components, classifications)
            )
        )
        return [item for _, item in sorted(results, key=lambda pair: pair[0])]
