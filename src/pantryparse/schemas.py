"""Common data schemas for the parsing pipeline."""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class Locale(str, Enum):
    """Supported utterance locales."""

    EN = "en"
    ZH_HANS = "zh-Hans"

    @classmethod
    def coerce(cls, value: "Locale | str | None", default: "Locale | None" = None) -> "Locale":
        """Map loose locale spellings ("zh", "zh_CN", "en-US") to a supported locale."""
        if isinstance(value, cls):
            return value
        if not value:
            return default or cls.EN
        tag = str(value).strip().lower().replace("_", "-")
        if tag.startswith("zh"):
            return cls.ZH_HANS
        if tag.startswith("en"):
            return cls.EN
        return default or cls.EN


class CanonicalUnit(str, Enum):
    """The three units every parsed quantity is expressed in."""

    GRAM = "g"
    MILLILITER = "mL"
    COUNT = "count"


class FoodCategory(str, Enum):
    """Food categories understood by the classification collaborator."""

    DAIRY = "Dairy"
    EGGS = "Eggs"
    MEAT = "Meat"
    SEAFOOD = "Seafood"
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    GRAINS = "Grains"
    BEVERAGES = "Beverages"
    CONDIMENTS = "Condiments"
    FROZEN = "Frozen"
    CANNED = "Canned"
    SNACKS = "Snacks"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: Any) -> "FoodCategory":
        """Parse a category label, tolerating legacy and lowercase values."""
        if isinstance(label, cls):
            return label
        text = str(label or "").strip().lower()
        legacy = {"produce": cls.VEGETABLES}
        if text in legacy:
            return legacy[text]
        for category in cls:
            if category.value.lower() == text:
                return category
        return cls.OTHER


class StorageLocation(str, Enum):
    """Where an item is kept at home."""

    FREEZER = "Freezer"
    REFRIGERATOR = "Refrigerator"
    PANTRY = "Pantry"


class ParsedFoodItem(BaseModel):
    """A structured inventory record produced from one spoken item."""

    name: str
    spoken_name: str = ""
    quantity: int = Field(ge=0)
    unit: CanonicalUnit
    display_unit: str
    category: FoodCategory = FoodCategory.OTHER
    purchase_date: date
    expiration_date: date | None = None
    emoji: str | None = None
    needs_volume_input: bool = False
    recommended_storage: StorageLocation = StorageLocation.PANTRY
    storage_location: StorageLocation | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> str:
        """Names are stored without surrounding whitespace."""
        return str(v or "").strip()

    @model_validator(mode="after")
    def default_storage_location(self) -> "ParsedFoodItem":
        """The chosen storage location starts out as the recommended one."""
        if self.storage_location is None:
            self.storage_location = self.recommended_storage
        if self.needs_volume_input and self.unit is not CanonicalUnit.COUNT:
            raise ValueError("needs_volume_input requires a count unit")
        return self
