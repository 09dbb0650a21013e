"""Tests for the unit registry and unit finalization."""

import re

import pytest

from pantryparse.normalize.units import (
    CONTAINER_UNITS,
    VOLUME_UNITS,
    WEIGHT_UNITS,
    UnitKind,
    classify,
    display_unit_for,
    finalize_unit,
    is_container,
    is_unit,
    round_half_up,
    unit_alternation,
    unit_spellings,
    volume_factor,
    weight_factor,
)
from pantryparse.schemas import CanonicalUnit, Locale


class TestClassify:
    """Tests for unit classification."""

    def test_weight_units(self):
        """Test weight spellings carry gram factors."""
        assert classify("kg").kind == UnitKind.WEIGHT
        assert classify("kg").factor == 1000.0
        assert classify("斤").factor == 500.0
        assert classify("两").factor == 50.0

    def test_case_insensitive(self):
        """Test lookup ignores case and surrounding whitespace."""
        assert classify(" KG ") == classify("kg")
        assert weight_factor("Pounds") == 453.592

    def test_volume_units(self):
        """Test volume spellings carry milliliter factors."""
        assert classify("ml").kind == UnitKind.VOLUME
        assert volume_factor("liter") == 1000.0
        assert volume_factor("毫升") == 1.0
        assert volume_factor("fl oz") == 29.5735

    def test_container_units(self):
        """Test containers classify as containers and count units."""
        unit_class = classify("bottle")
        assert unit_class.kind == UnitKind.CONTAINER
        assert unit_class.is_count
        assert not unit_class.is_measure
        assert is_container("瓶")

    def test_containers_are_never_volume_units(self):
        """Test no container spelling is also a volume unit."""
        assert not CONTAINER_UNITS & set(VOLUME_UNITS)
        assert classify("杯").kind == UnitKind.CONTAINER

    def test_count_units(self):
        """Test pure count spellings."""
        assert classify("个").kind == UnitKind.COUNT
        assert classify("dozen").kind == UnitKind.COUNT
        assert not is_container("个")

    def test_unknown(self):
        """Test unknown and empty tokens."""
        assert classify("banana") is None
        assert classify("") is None
        assert classify(None) is None
        assert not is_unit("apple")
        assert weight_factor("ml") is None


class TestSpellings:
    """Tests for the spelling list and regex fragment."""

    def test_longest_first(self):
        """Test spellings are ordered longest first."""
        spellings = unit_spellings()
        lengths = [len(s) for s in spellings]
        assert lengths == sorted(lengths, reverse=True)
        assert spellings.index("kilograms") < spellings.index("grams")

    def test_alternation_prefers_longest(self):
        """Test the alternation matches the longest spelling."""
        match = re.match(unit_alternation(), "kilograms")
        assert match.group() == "kilograms"


class TestFinalizeUnit:
    """Tests for conversion to canonical units."""

    def test_no_unit(self):
        """Test a bare quantity is a count."""
        result = finalize_unit(None, 3)
        assert result.unit == CanonicalUnit.COUNT
        assert result.quantity == 3
        assert not result.needs_volume_input

    def test_weight(self):
        """Test weights convert to grams."""
        assert finalize_unit("kg", 1.5).quantity == 1500
        assert finalize_unit("kg", 1.5).unit == CanonicalUnit.GRAM
        assert finalize_unit("lb", 1).quantity == 454

    def test_volume(self):
        """Test volumes convert to milliliters."""
        result = finalize_unit("l", 2)
        assert result.unit == CanonicalUnit.MILLILITER
        assert result.quantity == 2000

    def test_dozen(self):
        """Test dozens multiply by twelve."""
        assert finalize_unit("dozen", 0.5).quantity == 6
        assert finalize_unit("打", 2).quantity == 24

    def test_container_with_liquid(self):
        """Test a container of a liquid asks for the volume."""
        assert finalize_unit("bottles", 2, "milk").needs_volume_input
        assert finalize_unit("瓶", 1, "牛奶").needs_volume_input

    def test_container_with_solid(self):
        """Test a container of a solid does not ask for the volume."""
        assert not finalize_unit("bottles", 2, "apples").needs_volume_input

    def test_count_unit_with_liquid(self):
        """Test a non-container count unit never asks for the volume."""
        assert not finalize_unit("个", 1, "牛奶").needs_volume_input

    def test_unknown_unit_counts(self):
        """Test an unregistered unit falls back to a count."""
        result = finalize_unit("smidgen", 2)
        assert result.unit == CanonicalUnit.COUNT
        assert result.quantity == 2

    def test_negative_quantity_clamped(self):
        """Test quantities never go below zero."""
        assert finalize_unit(None, -2).quantity == 0

    def test_rounding_half_up(self):
        """Test halves round up."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(2.49) == 2
        assert finalize_unit(None, 2.5).quantity == 3

    @pytest.mark.parametrize("spelling", sorted(set(WEIGHT_UNITS) | set(VOLUME_UNITS)))
    def test_every_measure_unit_roundtrip(self, spelling):
        """Test one of every measure unit finalizes to its rounded factor."""
        factor = WEIGHT_UNITS.get(spelling) or VOLUME_UNITS[spelling]
        assert finalize_unit(spelling, 1.0, "").quantity == round_half_up(factor)


class TestDisplayUnit:
    """Tests for display units."""

    def test_count_per_locale(self):
        """Test counted items display per locale."""
        assert display_unit_for(CanonicalUnit.COUNT, Locale.EN) == "pcs"
        assert display_unit_for(CanonicalUnit.COUNT, Locale.ZH_HANS) == "个"

    def test_measures(self):
        """Test measured items display their canonical unit."""
        assert display_unit_for(CanonicalUnit.GRAM, Locale.ZH_HANS) == "g"
        assert display_unit_for(CanonicalUnit.MILLILITER, Locale.EN) == "mL"
