"""Collaborator interfaces consumed by the enrichment stage."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any

from pantryparse.schemas import FoodCategory, StorageLocation

Classification = tuple[FoodCategory, str | None]


class CollaboratorError(Exception):
    """Base exception for collaborator errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class FoodClassifier(ABC):
    """
    Assigns a category and an optional emoji to food names.

    Implementations may be synchronous or ``async``; the orchestrator
    awaits coroutines and runs plain callables in a worker thread.
    """

    @abstractmethod
    def classify_batch(
        self, names: list[str]
    ) -> list[Classification] | Awaitable[list[Classification]]:
        """
        Classify several names in one call.

        Args:
            names: Canonical food names, in spoken order.

        Returns:
            One (category, emoji) pair per name, in the same order.
        """
        pass


class StorageAdvisor(ABC):
    """Recommends where a food should be kept."""

    @abstractmethod
    def recommend_storage(
        self, name: str, category: FoodCategory
    ) -> StorageLocation | Awaitable[StorageLocation]:
        """
        Recommend a storage location.

        Args:
            name: Canonical food name.
            category: Category assigned by the classifier.

        Returns:
            The recommended StorageLocation.
        """
        pass


class ShelfLifeTable(ABC):
    """Estimates how long a food keeps."""

    @abstractmethod
    def shelf_life_days(
        self, name: str, category: FoodCategory, storage: StorageLocation
    ) -> int | Awaitable[int]:
        """
        Look up the expected shelf life.

        Args:
            name: Canonical food name.
            category: Category assigned by the classifier.
            storage: Where the food will be kept.

        Returns:
            Number of days the food keeps from the purchase date.
        """
        pass
