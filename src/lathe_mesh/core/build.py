import logging
from collections.abc import Sequence

from lathe_mesh.errors import BodyCycleError
from lathe_mesh.models import (
    PLACE_ACTIONS,
    BodySegment,
    Disk,
    DiskInformation,
    Model,
    ModelTables,
    RawBodySegment,
    RawDiskInformation,
)

logger = logging.getLogger(__name__)


def _resolve(index: int, size: int) -> int | None:
    return index if 0 <= index < size else None


def cook_disk_info(raw: RawDiskInformation, index: int, disks: Sequence[Disk]) -> DiskInformation:
    disk_idx = _resolve(raw.disk_index, len(disks))
    return DiskInformation(
        index=index,
        shift=raw.shift,
        scale=raw.scale,
        disk=disks[disk_idx] if disk_idx is not None else None,
        id=raw.id,
        flags=raw.flags,
        arr1=raw.arr1,
        arr2=raw.arr2,
    )


def body_from_raw(
    raw_body: Sequence[RawBodySegment],
    disk_info: Sequence[DiskInformation],
) -> BodySegment | None:
    """Rebuild the segment tree rooted at row 0 of the flat body table.

    Rows are visited in pre-order with an explicit stack; any row reached a
    second time raises :class:`BodyCycleError`. Nodes are then built in
    reverse visit order so every child exists before its parent.
    """
    if not raw_body:
        return None

    size = len(raw_body)
    visited: set[int] = set()
    order: list[int] = []
    stack = [0]

    while stack:
        idx = stack.pop()
        if idx in visited:
            raise BodyCycleError(idx)
        visited.add(idx)
        order.append(idx)

        row = raw_body[idx]
        for child in (row.right, row.left):
            if _resolve(child, size) is not None:
                stack.append(child)

    built: dict[int, BodySegment] = {}
    for idx in reversed(order):
        row = raw_body[idx]

        info: DiskInformation | None = None
        info_idx = _resolve(row.disk_info_index, len(disk_info))
        if row.action in PLACE_ACTIONS and info_idx is not None:
            info = disk_info[info_idx]

        built[idx] = BodySegment(
            index=idx,
            disk_info=info,
            action=row.action,
            value=row.value,
            color=row.color if row.color >= 0 else None,
            left=built.pop(row.left) if _resolve(row.left, size) is not None else None,
            right=built.pop(row.right) if _resolve(row.right, size) is not None else None,
        )

    return built.pop(0)


def build_model(tables: ModelTables) -> Model:
    disks = tables.disks
    disk_info = tuple(cook_disk_info(raw, idx, disks) for idx, raw in enumerate(tables.disk_info))
    body = body_from_raw(tables.body, disk_info)

    logger.debug("Built body tree with root %s", "present" if body is not None else "absent")
    return Model(disks=disks, disk_info=disk_info, body=body)
