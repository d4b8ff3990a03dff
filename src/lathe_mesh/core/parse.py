import logging
from collections.abc import Sequence
from typing import BinaryIO, TypeVar

from lathe_mesh.config import Settings
from lathe_mesh.core.build import build_model
from lathe_mesh.core.tokenize import iter_line_items
from lathe_mesh.errors import ParseFailure, ParseStage
from lathe_mesh.models import (
    Disk,
    DiskVertex,
    FloatItem,
    IntItem,
    LineItem,
    Model,
    ModelTables,
    RawBodySegment,
    RawDiskInformation,
    TagItem,
)

logger = logging.getLogger(__name__)

_ItemT = TypeVar("_ItemT", IntItem, FloatItem)

_BODY_FIELDS = 6
_DISK_INFO_ARRAY_LEN = 4


def _take(items: Sequence[LineItem], idx: int, kind: type[_ItemT], stage: ParseStage) -> _ItemT:
    item = items[idx] if 0 <= idx < len(items) else None
    if not isinstance(item, kind):
        raise ParseFailure(stage, idx + 1)
    return item


def _take_int(items: Sequence[LineItem], idx: int, stage: ParseStage) -> int:
    return _take(items, idx, IntItem, stage).value


def _take_float(items: Sequence[LineItem], idx: int, stage: ParseStage) -> float:
    return _take(items, idx, FloatItem, stage).value


# ---------------------------------------------------------------------------
# Start of data
# ---------------------------------------------------------------------------


def find_parse_start(items: Sequence[LineItem]) -> int:
    """Return the last position that directly follows a tag line, or 0."""
    idx = len(items) - 1
    while idx > 0:
        if isinstance(items[idx - 1], TagItem):
            break
        idx -= 1
    return max(idx, 0)


# ---------------------------------------------------------------------------
# Disks
# ---------------------------------------------------------------------------


def _parse_vertex(items: Sequence[LineItem], idx: int) -> tuple[DiskVertex, int]:
    stage = ParseStage.DISKS
    x = _take_float(items, idx, stage)
    y = _take_float(items, idx + 1, stage)
    z = _take_float(items, idx + 2, stage)
    tag = _take_int(items, idx + 3, stage)
    return DiskVertex(position=(x, y, z), tag=tag), idx + 4


def _parse_disk(items: Sequence[LineItem], idx: int, expected_size: int | None) -> tuple[Disk, int]:
    vertex_count = _take_int(items, idx, ParseStage.DISKS)
    if vertex_count < 1 or (expected_size is not None and vertex_count != expected_size):
        raise ParseFailure(ParseStage.DISKS, idx + 1)
    idx += 1

    vertices: list[DiskVertex] = []
    for _ in range(vertex_count):
        vertex, idx = _parse_vertex(items, idx)
        vertices.append(vertex)
    return tuple(vertices), idx


def parse_disks(items: Sequence[LineItem], start: int) -> tuple[list[Disk], int]:
    """Find the first disk group that parses cleanly, scanning forward from ``start``.

    Any integer >= 1 is tried as a group's disk count. Every disk in a group
    must have the same vertex count. A broken group is discarded and the scan
    resumes after what it consumed.
    """
    idx = start
    while idx < len(items):
        item = items[idx]
        disk_count = item.value if isinstance(item, IntItem) else 0
        idx += 1
        if disk_count < 1:
            continue

        disks: list[Disk] = []
        expected_size: int | None = None
        try:
            for _ in range(disk_count):
                disk, idx = _parse_disk(items, idx, expected_size)
                expected_size = len(disk)
                disks.append(disk)
        except ParseFailure:
            logger.debug("Disk group of %d at line %d is broken, scanning on", disk_count, idx)
            continue

        return disks, idx

    raise ParseFailure(ParseStage.DISKS, idx + 1)


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def parse_body(items: Sequence[LineItem], start: int) -> tuple[list[RawBodySegment], int]:
    stage = ParseStage.BODY
    idx = start

    count = _take_int(items, idx, stage)
    idx += 1
    if count < 0:
        # Negative count: a float follows, then the real count.
        _take_float(items, idx, stage)
        count = _take_int(items, idx + 1, stage)
        idx += 2
        if count < 0:
            raise ParseFailure(stage, idx)

    segments: list[RawBodySegment] = []
    for _ in range(count):
        segments.append(
            RawBodySegment(
                disk_info_index=_take_int(items, idx, stage),
                action=_take_int(items, idx + 1, stage),
                value=_take_float(items, idx + 2, stage),
                color=_take_int(items, idx + 3, stage),
                left=_take_int(items, idx + 4, stage),
                right=_take_int(items, idx + 5, stage),
            )
        )
        idx += _BODY_FIELDS

    return segments, idx


# ---------------------------------------------------------------------------
# Disk information
# ---------------------------------------------------------------------------


def _parse_disk_info_record(items: Sequence[LineItem], idx: int) -> tuple[RawDiskInformation, int]:
    stage = ParseStage.DISK_INFO
    shift = (_take_float(items, idx, stage), _take_float(items, idx + 1, stage))
    scale = (_take_float(items, idx + 2, stage), _take_float(items, idx + 3, stage))
    disk_index = _take_int(items, idx + 4, stage)
    info_id = _take_int(items, idx + 5, stage)
    flags = _take_int(items, idx + 6, stage)
    idx += 7

    # The two arrays are stored interleaved: arr1[0], arr2[0], arr1[1], ...
    arr1: list[float] = []
    arr2: list[float] = []
    for _ in range(_DISK_INFO_ARRAY_LEN):
        arr1.append(_take_float(items, idx, stage))
        arr2.append(_take_float(items, idx + 1, stage))
        idx += 2

    record = RawDiskInformation(
        shift=shift,
        scale=scale,
        disk_index=disk_index,
        id=info_id,
        flags=flags,
        arr1=tuple(arr1),
        arr2=tuple(arr2),
    )
    return record, idx


def parse_disk_info(items: Sequence[LineItem], start: int) -> tuple[list[RawDiskInformation], int]:
    idx = start
    count = _take_int(items, idx, ParseStage.DISK_INFO)
    idx += 1

    records: list[RawDiskInformation] = []
    for _ in range(count):
        record, idx = _parse_disk_info_record(items, idx)
        records.append(record)
    return records, idx


# ---------------------------------------------------------------------------
# Whole model
# ---------------------------------------------------------------------------


def parse_tables(items: Sequence[LineItem], header_skip: int = 0) -> ModelTables:
    start = find_parse_start(items) + header_skip
    logger.debug("Parsing %d line items from line %d", len(items), start + 1)

    disks, idx = parse_disks(items, start)
    body, idx = parse_body(items, idx)
    disk_info, _ = parse_disk_info(items, idx)

    logger.debug(
        "Parsed %d disks, %d body segments, %d disk information records",
        len(disks),
        len(body),
        len(disk_info),
    )
    return ModelTables(disks=tuple(disks), disk_info=tuple(disk_info), body=tuple(body))


def parse_model(stream: BinaryIO, settings: Settings | None = None) -> Model:
    settings = settings or Settings()
    items = list(iter_line_items(stream, settings.line_buffer_size))
    tables = parse_tables(items, settings.header_skip)
    return build_model(tables)
