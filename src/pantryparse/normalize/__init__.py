"""Text normalization: corrections, numerals, units and expanders."""

from pantryparse.normalize.corrections import apply_corrections, pre_clean
from pantryparse.normalize.expanders import (
    expand,
    expand_composite_weights,
    expand_container_volume,
    glue_number_units,
)
from pantryparse.normalize.numerals import parse_chinese_number, parse_english_number, parse_number
from pantryparse.normalize.units import (
    FinalizedUnit,
    UnitClass,
    UnitKind,
    classify,
    display_unit_for,
    finalize_unit,
    is_container,
    is_unit,
    unit_alternation,
    unit_spellings,
    volume_factor,
    weight_factor,
)

__all__ = [
    "FinalizedUnit",
    "UnitClass",
    "UnitKind",
    "apply_corrections",
    "classify",
    "display_unit_for",
    "expand",
    "expand_composite_weights",
    "expand_container_volume",
    "finalize_unit",
    "glue_number_units",
    "is_container",
    "is_unit",
    "parse_chinese_number",
    "parse_english_number",
    "parse_number",
    "pre_clean",
    "unit_alternation",
    "unit_spellings",
    "volume_factor",
    "weight_factor",
]
