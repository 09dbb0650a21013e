"""Unit registry and conversion to canonical units."""

import math
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from pantryparse.logging_config import get_logger
from pantryparse.schemas import CanonicalUnit, Locale

logger = get_logger(__name__)


# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Weight conversions (base unit: g)
WEIGHT_UNITS: dict[str, float] = {
    # Metric
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "gramme": 1.0,
    "grammes": 1.0,
    "kg": 1000.0,
    "kgs": 1000.0,
    "kilo": 1000.0,
    "kilos": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "mg": 0.001,
    "milligram": 0.001,
    "milligrams": 0.001,
    "ton": 1_000_000.0,
    "tons": 1_000_000.0,
    "tonne": 1_000_000.0,
    "tonnes": 1_000_000.0,
    # Imperial
    "oz": 28.3495,
    "ounce": 28.3495,
    "ounces": 28.3495,
    "lb": 453.592,
    "lbs": 453.592,
    "pound": 453.592,
    "pounds": 453.592,
    # Traditional Chinese weights, romanized
    "jin": 500.0,
    "catty": 500.0,
    "catties": 500.0,
    "liang": 50.0,
    "tael": 50.0,
    "taels": 50.0,
    # Chinese
    "公斤": 1000.0,
    "千克": 1000.0,
    "斤": 500.0,
    "两": 50.0,
    "钱": 5.0,
    "克": 1.0,
    "毫克": 0.001,
    "磅": 453.592,
    "盎司": 28.3495,
    "吨": 1_000_000.0,
}

# Volume conversions (base unit: ml)
VOLUME_UNITS: dict[str, float] = {
    # Metric
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "millilitre": 1.0,
    "millilitres": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "litre": 1000.0,
    "litres": 1000.0,
    "dl": 100.0,
    "cl": 10.0,
    "μl": 0.001,
    "microliter": 0.001,
    "microliters": 0.001,
    # US customary
    "cup": 236.588,
    "cups": 236.588,
    "tbsp": 14.7868,
    "tablespoon": 14.7868,
    "tablespoons": 14.7868,
    "tsp": 4.92892,
    "teaspoon": 4.92892,
    "teaspoons": 4.92892,
    "fl oz": 29.5735,
    "floz": 29.5735,
    "fluid ounce": 29.5735,
    "fluid ounces": 29.5735,
    "pint": 473.176,
    "pints": 473.176,
    "pt": 473.176,
    "quart": 946.353,
    "quarts": 946.353,
    "qt": 946.353,
    "gallon": 3785.41,
    "gallons": 3785.41,
    "gal": 3785.41,
    # Chinese
    "升": 1000.0,
    "公升": 1000.0,
    "毫升": 1.0,
    "微升": 0.001,
    "勺": 15.0,
    "汤勺": 15.0,
    "茶勺": 5.0,
    "加仑": 3785.41,
    "美加仑": 3785.41,
    "英加仑": 4546.09,
}

# Vessels whose content volume is unknown until the user tells us
CONTAINER_UNITS: frozenset[str] = frozenset(
    {
        # English
        "bottle",
        "bottles",
        "can",
        "cans",
        "box",
        "boxes",
        "jar",
        "jars",
        "package",
        "packages",
        "pack",
        "packs",
        "bag",
        "bags",
        "container",
        "containers",
        "carton",
        "cartons",
        "tube",
        "tubes",
        "pouch",
        "pouches",
        "tin",
        "tins",
        "glass",
        "glasses",
        # Chinese
        "瓶",
        "罐",
        "盒",
        "袋",
        "包",
        "大瓶",
        "小瓶",
        "听",
        "桶",
        "缸",
        "坛",
        "壶",
        "杯",
        "碗",
        "塑料瓶",
        "玻璃瓶",
        "铁罐",
        "纸盒",
        "塑料袋",
        "纸袋",
        "保鲜盒",
        "密封盒",
    }
)

# Count-based units that are not containers
COUNT_UNITS: frozenset[str] = frozenset(
    {
        # English
        "piece",
        "pieces",
        "pc",
        "pcs",
        "item",
        "items",
        "unit",
        "units",
        "dozen",
        "dozens",
        "pair",
        "pairs",
        "set",
        "sets",
        "bundle",
        "bundles",
        "bunch",
        "bunches",
        "head",
        "heads",
        "slice",
        "slices",
        "strip",
        "strips",
        "stick",
        "sticks",
        "sheet",
        "sheets",
        "loaf",
        "loaves",
        "clove",
        "cloves",
        # Chinese
        "个",
        "只",
        "条",
        "根",
        "片",
        "块",
        "段",
        "串",
        "把",
        "束",
        "朵",
        "头",
        "大包",
        "小包",
        "大盒",
        "小盒",
        "件",
        "打",
        "对",
        "双",
        "副",
        "支",
        "枝",
        "棵",
        "株",
        "颗",
        "粒",
        "张",
        "份",
        "盘",
        "碟",
    }
)

# Count units that stand for twelve pieces
DOZEN_UNITS: frozenset[str] = frozenset({"dozen", "dozens", "打"})

DOZEN_SIZE = 12

# Display unit for counted items, per locale
COUNT_DISPLAY_UNITS: dict[Locale, str] = {
    Locale.EN: "pcs",
    Locale.ZH_HANS: "个",
}


class UnitKind(str, Enum):
    """Coarse family a unit spelling belongs to."""

    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"
    CONTAINER = "container"


@dataclass(frozen=True)
class UnitClass:
    """Classification of a unit spelling with its conversion factor."""

    kind: UnitKind
    factor: float = 1.0

    @property
    def is_measure(self) -> bool:
        """True for weight and volume units."""
        return self.kind in (UnitKind.WEIGHT, UnitKind.VOLUME)

    @property
    def is_count(self) -> bool:
        """True for pure count units and containers."""
        return self.kind in (UnitKind.COUNT, UnitKind.CONTAINER)


@dataclass(frozen=True)
class FinalizedUnit:
    """A quantity expressed in one of the canonical units."""

    unit: CanonicalUnit
    quantity: int
    needs_volume_input: bool = False


# =============================================================================
# Registry Queries
# =============================================================================


def _key(token: str | None) -> str:
    return (token or "").strip().lower()


def classify(token: str | None) -> UnitClass | None:
    """
    Classify a unit spelling.

    Returns:
        UnitClass for known spellings, None otherwise.
    """
    key = _key(token)
    if not key:
        return None
    if key in WEIGHT_UNITS:
        return UnitClass(UnitKind.WEIGHT, WEIGHT_UNITS[key])
    if key in VOLUME_UNITS:
        return UnitClass(UnitKind.VOLUME, VOLUME_UNITS[key])
    if key in CONTAINER_UNITS:
        return UnitClass(UnitKind.CONTAINER)
    if key in COUNT_UNITS:
        return UnitClass(UnitKind.COUNT)
    return None


def weight_factor(token: str | None) -> float | None:
    """Grams per unit, or None when the token is not a weight unit."""
    return WEIGHT_UNITS.get(_key(token))


def volume_factor(token: str | None) -> float | None:
    """Milliliters per unit, or None when the token is not a volume unit."""
    return VOLUME_UNITS.get(_key(token))


def is_container(token: str | None) -> bool:
    """Check whether the unit names a vessel of unknown volume."""
    return _key(token) in CONTAINER_UNITS


def is_unit(token: str | None) -> bool:
    """Check whether the token is any registered unit spelling."""
    return classify(token) is not None


def is_measure_unit(token: str | None) -> bool:
    """Check whether the token is a weight or volume unit."""
    unit_class = classify(token)
    return unit_class is not None and unit_class.is_measure


def is_count_unit(token: str | None) -> bool:
    """Check whether the token is a count or container unit."""
    unit_class = classify(token)
    return unit_class is not None and unit_class.is_count


@lru_cache
def unit_spellings() -> tuple[str, ...]:
    """All registered spellings, longest first so "kilogram" wins over "gram"."""
    spellings = set(WEIGHT_UNITS) | set(VOLUME_UNITS) | CONTAINER_UNITS | COUNT_UNITS
    return tuple(sorted(spellings, key=lambda s: (-len(s), s)))


@lru_cache
def unit_alternation() -> str:
    """Regex alternation over every unit spelling, longest first."""
    return "(?:" + "|".join(re.escape(s) for s in unit_spellings()) + ")"


# =============================================================================
# Finalization
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def finalize_unit(
    raw_unit: str | None,
    quantity: float,
    food_name: str = "",
) -> FinalizedUnit:
    """
    Convert a raw quantity and unit spelling into a canonical unit.

    Args:
        raw_unit: The unit spelling as spoken, or None.
        quantity: The spoken quantity.
        food_name: Name of the food, used for the container+liquid check.

    Returns:
        FinalizedUnit with an integer quantity in g, mL or count.
    """
    from pantryparse.parse.lexicon import is_liquid

    quantity = max(quantity, 0.0)
    unit_class = classify(raw_unit)

    if unit_class is None:
        if raw_unit:
            logger.debug(f"Unknown unit '{raw_unit}', counting pieces")
        return FinalizedUnit(CanonicalUnit.COUNT, round_half_up(quantity))

    if unit_class.kind is UnitKind.WEIGHT:
        return FinalizedUnit(CanonicalUnit.GRAM, round_half_up(quantity * unit_class.factor))

    if unit_class.kind is UnitKind.VOLUME:
        return FinalizedUnit(CanonicalUnit.MILLILITER, round_half_up(quantity * unit_class.factor))

    if _key(raw_unit) in DOZEN_UNITS:
        return FinalizedUnit(CanonicalUnit.COUNT, round_half_up(quantity * DOZEN_SIZE))

    needs_volume = unit_class.kind is UnitKind.CONTAINER and is_liquid(food_name)
    return FinalizedUnit(CanonicalUnit.COUNT, round_half_up(quantity), needs_volume)


def display_unit_for(unit: CanonicalUnit, locale: Locale) -> str:
    """Unit label shown to the user."""
    if unit is CanonicalUnit.COUNT:
        return COUNT_DISPLAY_UNITS.get(locale, COUNT_DISPLAY_UNITS[Locale.EN])
    return unit.value
