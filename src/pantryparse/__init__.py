"""Parse spoken or typed food purchases into structured inventory records."""

from pantryparse.logging_config import LoggingContext, configure_logging
from pantryparse.pipeline import FoodItemParser, parse
from pantryparse.schemas import (
    CanonicalUnit,
    FoodCategory,
    Locale,
    ParsedFoodItem,
    StorageLocation,
)

__version__ = "0.1.0"

__all__ = [
    "CanonicalUnit",
    "FoodCategory",
    "FoodItemParser",
    "Locale",
    "LoggingContext",
    "ParsedFoodItem",
    "StorageLocation",
    "configure_logging",
    "parse",
]
