import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshGroup:
    """Origin of a stitched loop: the body segment and disk information that placed it."""

    body_index: int
    disk_info_index: int

    def __str__(self) -> str:
        return f"g body_idx={self.body_index} disk_info_idx={self.disk_info_index}"


class Mesh:
    """Append-only vertex buffer with a flat list of quad indices (four per face)."""

    def __init__(self) -> None:
        self._chunks: list[npt.NDArray[np.float64]] = []
        self._vertex_count = 0
        self.indices: list[int] = []
        self.groups: dict[int, MeshGroup] = {}

    @property
    def vertex_count(self) -> int:
        return self._vertex_count

    @property
    def face_count(self) -> int:
        return len(self.indices) // 4

    @property
    def is_empty(self) -> bool:
        return self._vertex_count == 0 and not self.indices

    @property
    def vertices(self) -> npt.NDArray[np.float64]:
        if not self._chunks:
            return np.empty((0, 3), dtype=np.float64)
        return np.concatenate(self._chunks)

    @property
    def faces(self) -> npt.NDArray[np.int64]:
        return np.array(self.indices, dtype=np.int64).reshape(-1, 4)

    def _append(self, ring: npt.ArrayLike) -> int:
        points = np.array(ring, dtype=np.float64).reshape(-1, 3)
        start = self._vertex_count
        self._chunks.append(points)
        self._vertex_count += len(points)
        return start

    def add_loop(self, start_ring: npt.ArrayLike, end_ring: npt.ArrayLike, group: MeshGroup | None = None) -> None:
        """Append two rings and connect them with one quad per vertex pair."""
        start = np.asarray(start_ring, dtype=np.float64).reshape(-1, 3)
        end = np.asarray(end_ring, dtype=np.float64).reshape(-1, 3)
        size = len(end)
        if len(start) != size:
            logger.warning("Cannot stitch rings of %d and %d vertices", len(start), size)
            return

        start_idx = self._append(start)
        end_idx = self._append(end)

        if group is not None:
            self.groups[self.face_count] = group

        for i in range(size):
            nxt = (i + 1) % size
            self.indices.extend((start_idx + i, start_idx + nxt, end_idx + nxt, end_idx + i))

    def to_obj_lines(self, include_groups: bool = False) -> Iterator[str]:
        # Internal space is Z-up; OBJ consumers expect Y-up.
        for x, y, z in self.vertices:
            yield f"v {x:.9f} {z:.9f} {y:.9f}"

        # Face winding flips along with the handedness.
        for face_idx, (i1, i2, i3, i4) in enumerate(self.faces):
            if include_groups and face_idx in self.groups:
                yield str(self.groups[face_idx])
            yield f"f {i1 + 1} {i4 + 1} {i3 + 1} {i2 + 1}"


def write_obj(mesh: Mesh, out: TextIO, include_groups: bool = False) -> None:
    for line in mesh.to_obj_lines(include_groups=include_groups):
        out.write(line + "\n")
