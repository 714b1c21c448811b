"""
Unit tests for the field classifier

Covers the three classification rules and their ordering, the shapes of raw
values and ranges, and unusable ranges.
"""

import pytest

from models.control import (
    ControlDescriptor,
    MinMax,
    MultiDimensionalValue,
    ScalarValue,
    SubField,
)
from models.enums import FieldType
from services.field_classifier import classify

MODES = (("manual", 0), ("auto", 1), ("daylight", 2))


def single(name="brightness", options=None, supports_range=True):
    return ControlDescriptor(
        name=name,
        fields=(SubField("value", options=options),),
        supports_range=supports_range,
    )


def pan_tilt(supports_range=True):
    return ControlDescriptor(
        name="absolute_pan_tilt",
        fields=(SubField("pan"), SubField("tilt")),
        supports_range=supports_range,
    )


# ============================================================================
# SELECT
# ============================================================================

class TestSelect:

    def test_options_make_select(self):
        field = classify(single("white_balance", options=MODES), ScalarValue(2), None)

        assert field.type == FieldType.SELECT
        assert field.value == 2
        assert field.options == MODES

    def test_options_win_over_range(self):
        field = classify(single("white_balance", options=MODES), ScalarValue(1), MinMax(0, 1))
        assert field.type == FieldType.SELECT

    def test_options_win_over_multiple_sub_fields(self):
        descriptor = ControlDescriptor(
            name="mode",
            fields=(SubField("mode", options=MODES), SubField("extra")),
        )
        value = MultiDimensionalValue.from_mapping({"mode": 1, "extra": 7})

        field = classify(descriptor, value, None)

        assert field.type == FieldType.SELECT
        assert field.value == 1

    @pytest.mark.parametrize("code", [0, 1, 2])
    def test_value_is_one_of_the_codes(self, code):
        field = classify(single("white_balance", options=MODES), ScalarValue(code), None)
        assert field.value in {c for _, c in field.options}

    def test_unknown_code_reads_as_first_option(self, quiet_logger):
        field = classify(single("white_balance", options=MODES), ScalarValue(9), None)

        assert field.value == 0
        assert "outside the declared options" in quiet_logger.getvalue()

    def test_bitmap_codes_keep_declaration_order(self):
        ae_modes = (("MANUAL", 1), ("AUTO", 2), ("SHUTTER_PRIORITY", 4), ("APERTURE_PRIORITY", 8))
        field = classify(single("auto_exposure_mode", options=ae_modes), ScalarValue(8), None)

        assert [code for _, code in field.options] == [1, 2, 4, 8]
        assert field.active_label == "APERTURE_PRIORITY"


# ============================================================================
# RANGE
# ============================================================================

class TestRange:

    def test_multiple_sub_fields_make_range(self):
        value = MultiDimensionalValue.from_mapping({"pan": 3600, "tilt": -3600})
        bounds = (MinMax(-36000, 36000), MinMax(-36000, 36000))

        field = classify(pan_tilt(), value, bounds)

        assert field.type == FieldType.RANGE
        assert field.value == (3600, -3600)
        assert field.range == bounds

    def test_values_follow_sub_field_order(self):
        # Mapping order differs from declaration order
        value = MultiDimensionalValue.from_mapping({"tilt": 5, "pan": 9})
        field = classify(pan_tilt(), value, None)
        assert field.value == (9, 5)

    def test_no_range_support_means_no_range(self):
        value = MultiDimensionalValue.from_mapping({"pan": 0, "tilt": 0})
        field = classify(pan_tilt(supports_range=False), value, None)

        assert field.type == FieldType.RANGE
        assert field.range is None

    def test_mismatched_range_shape_is_dropped(self):
        value = MultiDimensionalValue.from_mapping({"pan": 0, "tilt": 0})
        field = classify(pan_tilt(), value, (MinMax(0, 10),))

        assert field.range is None

    def test_range_length_matches_value_length(self):
        value = MultiDimensionalValue.from_mapping({"pan": 0, "tilt": 0})
        field = classify(pan_tilt(), value, (MinMax(0, 1), MinMax(0, 2)))
        assert len(field.range) == len(field.value)


# ============================================================================
# BOOLEAN / NUMBER
# ============================================================================

class TestScalar:

    def test_binary_range_makes_boolean(self):
        field = classify(single("auto_focus"), ScalarValue(1), MinMax(0, 1))

        assert field.type == FieldType.BOOLEAN
        assert field.value == 1

    def test_missing_range_makes_boolean(self):
        field = classify(single("privacy", supports_range=False), ScalarValue(0), None)

        assert field.type == FieldType.BOOLEAN
        assert field.value == 0

    def test_boolean_value_is_coerced(self):
        field = classify(single("auto_focus", supports_range=False), ScalarValue(5), None)
        assert field.value == 1

    @pytest.mark.parametrize("bounds", [MinMax(0, 255), MinMax(-64, 64), MinMax(1, 7), MinMax(0, 2)])
    def test_other_ranges_make_number_with_exact_range(self, bounds):
        field = classify(single(), ScalarValue(bounds.min), bounds)

        assert field.type == FieldType.NUMBER
        assert field.range == bounds
        assert field.value == bounds.min

    def test_inverted_range_counts_as_no_range(self):
        field = classify(single(), ScalarValue(1), MinMax(10, 0))
        assert field.type == FieldType.BOOLEAN

    def test_single_element_range_tuple_is_accepted(self):
        field = classify(single(), ScalarValue(128), (MinMax(0, 255),))

        assert field.type == FieldType.NUMBER
        assert field.range == MinMax(0, 255)

    def test_multi_dimensional_value_for_single_field(self):
        value = MultiDimensionalValue.from_mapping({"value": 42})
        field = classify(single(), value, MinMax(0, 100))

        assert field.type == FieldType.NUMBER
        assert field.value == 42

    def test_unsupported_raw_value_raises(self):
        with pytest.raises(TypeError):
            classify(single(), 42, MinMax(0, 100))

    def test_classification_is_deterministic(self):
        args = (single(), ScalarValue(100), MinMax(0, 255))
        assert classify(*args) == classify(*args)
