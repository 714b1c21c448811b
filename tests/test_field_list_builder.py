"""
Tests for FieldListBuilder and build_field_list

Sort order, RANGE filtering, range fetching only where supported, and
per-control fetch failures.
"""

from unittest.mock import AsyncMock

import pytest

from hardware.uvc.virtual_camera import VirtualCamera, multi, scalar
from models.control import ControlDescriptor, MinMax, RawEntry, ScalarValue, SubField
from models.enums import FieldType
from models.errors import ControlFetchError, DeviceError
from services.field_list_builder import FieldListBuilder, build_field_list


def entry(name, value=1, bounds=None):
    return RawEntry(
        descriptor=ControlDescriptor(name=name, fields=(SubField("value"),), supports_range=bounds is not None),
        value=ScalarValue(value),
        range=bounds,
    )


class TestBuildFieldList:

    def test_sorted_by_name(self):
        field_list = build_field_list([entry("zoom"), entry("brightness"), entry("auto_focus")])
        assert [f.name for f in field_list.navigable] == ["auto_focus", "brightness", "zoom"]

    def test_sort_is_case_sensitive(self):
        field_list = build_field_list([entry("b"), entry("B"), entry("a")])
        # Upper case sorts before lower case
        assert [f.name for f in field_list.navigable] == ["B", "a", "b"]

    def test_range_fields_not_navigable(self):
        pan_tilt = RawEntry(
            descriptor=ControlDescriptor("absolute_pan_tilt", (SubField("pan"), SubField("tilt"))),
            value=ScalarValue(0),
        )
        field_list = build_field_list([entry("brightness", 5, MinMax(0, 10)), pan_tilt])

        assert [f.name for f in field_list.navigable] == ["brightness"]
        assert field_list.get("absolute_pan_tilt").type == FieldType.RANGE
        assert len(field_list.all_fields) == 2

    def test_empty(self):
        field_list = build_field_list([])
        assert field_list.navigable == []
        assert field_list.get("anything") is None

    def test_skipped_names_carried(self):
        field_list = build_field_list([entry("a")], skipped=["gain"])
        assert field_list.skipped == ["gain"]


class TestFieldListBuilder:

    @pytest.mark.asyncio
    async def test_rebuild_from_virtual_camera(self, camera):
        field_list = await FieldListBuilder(camera).rebuild()

        names = [f.name for f in field_list.navigable]
        assert names == sorted(names)
        assert "absolute_pan_tilt" not in names
        assert field_list.get("brightness").type == FieldType.NUMBER
        assert field_list.get("auto_focus").type == FieldType.BOOLEAN
        assert field_list.get("absolute_focus").type == FieldType.BOOLEAN
        assert field_list.get("power_line_frequency").type == FieldType.SELECT

    @pytest.mark.asyncio
    async def test_fetch_failure_skips_only_that_control(self, camera):
        camera.fail_fetch.add("gain")

        field_list = await FieldListBuilder(camera).rebuild()

        assert field_list.get("gain") is None
        assert field_list.get("brightness") is not None
        assert field_list.skipped == ["gain"]

    @pytest.mark.asyncio
    async def test_skip_is_logged(self, camera, quiet_logger):
        camera.fail_fetch.add("contrast")
        await FieldListBuilder(camera).rebuild()

        assert "Could not fetch control, skipping" in quiet_logger.getvalue()
        assert "contrast" in quiet_logger.getvalue()

    @pytest.mark.asyncio
    async def test_range_only_fetched_when_supported(self):
        camera = VirtualCamera([scalar("auto_focus", 1, type_hint="boolean"), scalar("brightness", 1, 0, 10)])
        camera.get_range = AsyncMock(return_value=MinMax(0, 10))

        await FieldListBuilder(camera).rebuild()

        camera.get_range.assert_awaited_once_with("brightness")

    @pytest.mark.asyncio
    async def test_range_fetch_failure_skips_control(self):
        camera = VirtualCamera([scalar("brightness", 1, 0, 10), scalar("contrast", 1, 0, 10)])
        camera.get_range = AsyncMock(side_effect=ControlFetchError("brightness", "stall"))

        field_list = await FieldListBuilder(camera).rebuild()

        assert field_list.all_fields == []
        assert field_list.skipped == ["brightness", "contrast"]

    @pytest.mark.asyncio
    async def test_multi_dimensional_control_gets_per_field_range(self):
        camera = VirtualCamera([
            multi("absolute_pan_tilt", {"pan": 0, "tilt": 10}, {"pan": MinMax(-10, 10), "tilt": MinMax(0, 20)}),
        ])

        field_list = await FieldListBuilder(camera).rebuild()

        field = field_list.get("absolute_pan_tilt")
        assert field.value == (0, 10)
        assert field.range == (MinMax(-10, 10), MinMax(0, 20))

    @pytest.mark.asyncio
    async def test_enumeration_failure_propagates(self, camera):
        camera.supported_controls = AsyncMock(side_effect=DeviceError("unplugged"))

        with pytest.raises(DeviceError):
            await FieldListBuilder(camera).rebuild()

    @pytest.mark.asyncio
    async def test_rebuild_reflects_device_changes(self, camera):
        builder = FieldListBuilder(camera)
        await camera.set_value("brightness", 200)

        field_list = await builder.rebuild()

        assert field_list.get("brightness").value == 200
