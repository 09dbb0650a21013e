"""Category, storage and shelf-life collaborators."""

from pantryparse.collaborators.base import (
    CollaboratorError,
    FoodClassifier,
    ShelfLifeTable,
    StorageAdvisor,
)
from pantryparse.collaborators.http import HttpFoodClassifier
from pantryparse.collaborators.tables import (
    CategoryShelfLifeTable,
    KeywordFoodClassifier,
    KeywordStorageAdvisor,
)

__all__ = [
    "CategoryShelfLifeTable",
    "CollaboratorError",
    "FoodClassifier",
    "HttpFoodClassifier",
    "KeywordFoodClassifier",
    "KeywordStorageAdvisor",
    "ShelfLifeTable",
    "StorageAdvisor",
]
