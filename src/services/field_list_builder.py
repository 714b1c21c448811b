"""
Field List Builder - fetch every control and turn it into the display list

Rebuild = full re-fetch + re-classify + re-sort. The list is never patched
incrementally: the device is the single source of truth and the list is a
cache that is valid until the next rebuild or the next successful write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from models.control import RawEntry
from models.errors import DomainError
from models.field import Field, NAVIGABLE_TYPES
from services.field_classifier import classify
from utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from hardware.uvc.descriptor_source import IDescriptorSource

log = get_logger().for_category(LogCategory.DEVICE)


@dataclass(frozen=True)
class FieldList:
    """
    Result of one rebuild

    Attributes:
        all_fields: Every classified control (RANGE included), sorted by name
        navigable: What the session navigates and the renderer draws
        skipped: Names of controls that could not be fetched this time
    """
    all_fields: List[Field] = field(default_factory=list)
    navigable: List[Field] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def get(self, name: str) -> Optional[Field]:
        for f in self.all_fields:
            if f.name == name:
                return f
        return None


def build_field_list(entries: List[RawEntry], skipped: Optional[List[str]] = None) -> FieldList:
    """
    Classify entries and produce the display-ready list

    Sort is stable, ascending, case-sensitive on name. RANGE fields stay in
    all_fields but are left out of navigable: the renderer can't draw them.
    """
    classified = [classify(e.descriptor, e.value, e.range) for e in entries]
    ordered = sorted(classified, key=lambda f: f.name)

    return FieldList(
        all_fields=ordered,
        navigable=[f for f in ordered if f.type in NAVIGABLE_TYPES],
        skipped=list(skipped or []),
    )


class FieldListBuilder:
    """
    Builds FieldLists from a descriptor source

    Example:
        builder = FieldListBuilder(camera)
        field_list = await builder.rebuild()
        for f in field_list.navigable:
            print(f.name, f.type.name)
    """

    def __init__(self, source: "IDescriptorSource"):
        self.source = source

    async def fetch_entries(self) -> tuple[List[RawEntry], List[str]]:
        """
        Fetch descriptor, value and range of every supported control

        A failure on one control is logged and that control skipped; the
        others are still fetched. Errors from enumerating the controls
        themselves propagate.

        Returns:
            (entries, skipped control names)
        """
        entries: List[RawEntry] = []
        skipped: List[str] = []

        for name in await self.source.supported_controls():
            try:
                descriptor = await self.source.get_descriptor(name)
                value = await self.source.get_value(name)
                raw_range = None
                if descriptor.supports_range:
                    raw_range = await self.source.get_range(name)
            except DomainError as e:
                log.warn("Could not fetch control, skipping", control=name, reason=e.message)
                skipped.append(name)
                continue

            entries.append(RawEntry(descriptor=descriptor, value=value, range=raw_range))

        return entries, skipped

    async def rebuild(self) -> FieldList:
        entries, skipped = await self.fetch_entries()
        field_list = build_field_list(entries, skipped)

        log.debug(
            "Field list rebuilt",
            controls=len(field_list.all_fields),
            navigable=len(field_list.navigable),
            skipped=len(skipped)
        )
        return field_list
