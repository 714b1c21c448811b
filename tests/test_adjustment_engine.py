"""
Tests for the adjustment engine

NUMBER clamping and convergence, BOOLEAN self-inverse, SELECT wrap-around,
neutral result for RANGE.
"""

import pytest

from models.control import MinMax
from models.field import BooleanField, NumberField, RangeField, SelectField
from services.adjustment_engine import STEP_RESOLUTION, step, to_device_value

MODES = (("manual", 0), ("auto", 1), ("daylight", 2))


# ============================================================================
# NUMBER
# ============================================================================

class TestNumberStep:

    def test_increase_by_one_24th_of_max(self):
        field = NumberField("brightness", 128, MinMax(0, 255))
        assert step(field, increase=True) == pytest.approx(128 + 255 / 24)

    def test_decrease_by_one_24th_of_max(self):
        field = NumberField("brightness", 128, MinMax(0, 255))
        assert step(field, increase=False) == pytest.approx(128 - 255 / 24)

    def test_clamped_at_max(self):
        field = NumberField("brightness", 250, MinMax(0, 255))
        assert step(field, increase=True) == 255

    def test_clamped_at_min(self):
        field = NumberField("brightness", 3, MinMax(0, 255))
        assert step(field, increase=False) == 0

    def test_negative_min(self):
        field = NumberField("hue", -60, MinMax(-64, 64))
        assert step(field, increase=False) == pytest.approx(-60 - 64 / 24)

    def test_negative_min_clamped(self):
        field = NumberField("hue", -63, MinMax(-64, 64))
        assert step(field, increase=False) == -64

    @pytest.mark.parametrize("start", [0, 1, 17.5, 100, 254])
    def test_converges_to_max_within_resolution_steps(self, start):
        bounds = MinMax(0, 255)
        value = start
        for _ in range(STEP_RESOLUTION):
            value = step(NumberField("brightness", value, bounds), increase=True)
            assert bounds.min <= value <= bounds.max
        assert value == bounds.max

    @pytest.mark.parametrize("start", [1, 99, 255])
    def test_repeated_decrease_stays_in_range(self, start):
        bounds = MinMax(1, 255)
        value = start
        for _ in range(STEP_RESOLUTION * 2):
            value = step(NumberField("brightness", value, bounds), increase=False)
            assert bounds.min <= value <= bounds.max
        assert value == bounds.min

    def test_float_error_snaps_to_bound(self):
        bounds = MinMax(0, 10)
        value = 0
        for _ in range(STEP_RESOLUTION):
            value = step(NumberField("sharpness", value, bounds), increase=True)
        assert value == 10


# ============================================================================
# BOOLEAN
# ============================================================================

class TestBooleanStep:

    @pytest.mark.parametrize("increase", [True, False])
    def test_flips(self, increase):
        assert step(BooleanField("auto_focus", 1), increase) == 0
        assert step(BooleanField("auto_focus", 0), increase) == 1

    @pytest.mark.parametrize("first,second", [(True, False), (False, True), (True, True), (False, False)])
    def test_two_steps_return_to_start(self, first, second):
        value = step(BooleanField("auto_focus", 1), first)
        value = step(BooleanField("auto_focus", value), second)
        assert value == 1


# ============================================================================
# SELECT
# ============================================================================

class TestSelectStep:

    def test_next_option(self):
        assert step(SelectField("white_balance", 0, MODES), increase=True) == 1

    def test_previous_option(self):
        assert step(SelectField("white_balance", 2, MODES), increase=False) == 1

    def test_increase_from_last_wraps_to_first(self):
        assert step(SelectField("white_balance", 2, MODES), increase=True) == 0

    def test_decrease_from_first_wraps_to_last(self):
        assert step(SelectField("white_balance", 0, MODES), increase=False) == 2

    def test_codes_not_indices(self):
        ae_modes = (("MANUAL", 1), ("AUTO", 2), ("SHUTTER_PRIORITY", 4), ("APERTURE_PRIORITY", 8))
        assert step(SelectField("auto_exposure_mode", 8, ae_modes), increase=True) == 1
        assert step(SelectField("auto_exposure_mode", 1, ae_modes), increase=False) == 8

    def test_unknown_code_falls_back_to_first_option(self, quiet_logger):
        assert step(SelectField("white_balance", 7, MODES), increase=True) == 0
        assert "using first option" in quiet_logger.getvalue()

    def test_single_option_stays(self):
        assert step(SelectField("mode", 3, (("only", 3),)), increase=True) == 3


# ============================================================================
# Other kinds
# ============================================================================

class TestNeutralStep:

    def test_range_field_yields_zero(self):
        field = RangeField("absolute_pan_tilt", (0, 0), (MinMax(-10, 10), MinMax(-10, 10)))
        assert step(field, increase=True) == 0
        assert step(field, increase=False) == 0

    def test_step_does_not_modify_field(self):
        field = NumberField("brightness", 128, MinMax(0, 255))
        step(field, increase=True)
        assert field.value == 128


# ============================================================================
# Device values
# ============================================================================

class TestDeviceValue:

    def test_rounds_towards_step_direction(self):
        field = NumberField("brightness", 128, MinMax(0, 255))
        assert to_device_value(field, 138.625, increase=True) == 139
        assert to_device_value(field, 117.375, increase=False) == 117

    def test_sub_unit_step_still_moves(self):
        field = NumberField("sharpness", 3, MinMax(1, 7))
        assert to_device_value(field, step(field, increase=True), increase=True) == 4
        assert to_device_value(field, step(field, increase=False), increase=False) == 2

    def test_float_error_not_rounded_away(self):
        field = NumberField("gain", 10, MinMax(0, 100))
        assert to_device_value(field, 10.000000000001, increase=True) == 10

    def test_stays_in_range(self):
        field = NumberField("gain", 0, MinMax(0.5, 9.5))
        assert to_device_value(field, 9.4, increase=True) == 9.5
        assert to_device_value(field, 0.6, increase=False) == 0.5

    @pytest.mark.parametrize("start", [0, 1, 3, 6])
    def test_small_range_converges_within_resolution_steps(self, start):
        bounds = MinMax(0, 7)
        value = start
        for _ in range(STEP_RESOLUTION):
            field = NumberField("sharpness", value, bounds)
            value = to_device_value(field, step(field, increase=True), increase=True)
        assert value == 7

    def test_other_kinds_unchanged(self):
        assert to_device_value(BooleanField("auto_focus", 1), 0, increase=True) == 0
        assert to_device_value(SelectField("white_balance", 0, MODES), 2, increase=False) == 2
