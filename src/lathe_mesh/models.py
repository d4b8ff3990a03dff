from enum import IntEnum, StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, SkipValidation

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------


class TagItem(_Frozen):
    kind: Literal["tag"] = "tag"
    value: str


class IntItem(_Frozen):
    kind: Literal["int"] = "int"
    value: int


class FloatItem(_Frozen):
    kind: Literal["float"] = "float"
    value: float


class EmptyItem(_Frozen):
    kind: Literal["empty"] = "empty"


class BinaryItem(_Frozen):
    kind: Literal["binary"] = "binary"
    value: bytes

    def __repr__(self) -> str:
        return f"BinaryItem(<{len(self.value)} bytes>)"


LineItem = Annotated[TagItem | IntItem | FloatItem | EmptyItem | BinaryItem, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Raw tables
# ---------------------------------------------------------------------------


class DiskVertex(_Frozen):
    position: Vec3
    tag: int


Disk = tuple[DiskVertex, ...]


class RawDiskInformation(_Frozen):
    shift: Vec2
    scale: Vec2
    disk_index: int
    id: int
    flags: int
    arr1: Vec4
    arr2: Vec4


class RawBodySegment(_Frozen):
    disk_info_index: int
    action: int
    value: float
    color: int
    left: int
    right: int


class ModelTables(_Frozen):
    disks: tuple[Disk, ...]
    disk_info: tuple[RawDiskInformation, ...]
    body: tuple[RawBodySegment, ...]


# ---------------------------------------------------------------------------
# Cooked model
# ---------------------------------------------------------------------------


class SegmentAction(IntEnum):
    SHIFT = 0
    SHIFT_ALT = 1
    ROTATE_X = 2
    ROTATE_Y = 3
    ROTATE_Z = 4


PLACE_ACTIONS = frozenset({SegmentAction.SHIFT, SegmentAction.SHIFT_ALT})


class DefaultCrossSection(StrEnum):
    NONE = "none"
    ZERO_FILLED = "zero-filled"


class DiskInformation(_Frozen):
    index: int
    shift: Vec2
    scale: Vec2
    disk: SkipValidation[Disk | None] = None
    id: int
    flags: int
    arr1: Vec4
    arr2: Vec4


class BodySegment(_Frozen):
    index: int
    disk_info: DiskInformation | None = None
    action: int
    value: float
    color: int | None = None
    left: "BodySegment | None" = None
    right: "BodySegment | None" = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


BodySegment.model_rebuild()  # necessary for recursive types


class ModelStats(_Frozen):
    disk_count: int
    disk_info_count: int
    body_segment_count: int
    disk_size: int


class Model(_Frozen):
    disks: SkipValidation[tuple[Disk, ...]]
    disk_info: tuple[DiskInformation, ...]
    body: BodySegment | None = None

    @property
    def disk_size(self) -> int:
        return len(self.disks[0]) if self.disks else 0

    def stats(self) -> ModelStats:
        count = 0
        pending = [self.body] if self.body is not None else []
        while pending:
            segment = pending.pop()
            count += 1
            pending.extend(child for child in (segment.left, segment.right) if child is not None)

        return ModelStats(
            disk_count=len(self.disks),
            disk_info_count=len(self.disk_info),
            body_segment_count=count,
            disk_size=self.disk_size,
        )
