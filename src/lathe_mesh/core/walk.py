import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from lathe_mesh.core.mesh import Mesh, MeshGroup
from lathe_mesh.core.transform import Matrix, action_transform, identity, scale_xy, transform_points, translation
from lathe_mesh.models import BodySegment, DefaultCrossSection, Disk, DiskVertex, Model

logger = logging.getLogger(__name__)

NULL_VERTEX_TAG = -1


@dataclass(frozen=True)
class _Frame:
    node: BodySegment
    xform: Matrix
    prev_disk: Disk | None
    prev_ring: npt.NDArray[np.float32] | None


def null_disk(size: int) -> Disk:
    return tuple(DiskVertex(position=(0.0, 0.0, 0.0), tag=NULL_VERTEX_TAG) for _ in range(size))


def _disk_positions(disk: Disk) -> npt.NDArray[np.float32]:
    return np.array([vertex.position for vertex in disk], dtype=np.float32).reshape(-1, 3)


def build_mesh(model: Model, default_cross_section: DefaultCrossSection = DefaultCrossSection.NONE) -> Mesh:
    """Sweep the body tree and stitch consecutive cross-sections into quads.

    The walk is pre-order, left before right. Each child starts from its
    parent's transform and active cross-section; siblings never see each
    other's changes.
    """
    mesh = Mesh()
    if model.body is None:
        return mesh

    disk_size = model.disk_size
    stack = [_Frame(model.body, identity(), None, None)]

    while stack:
        frame = stack.pop()
        node = frame.node
        xform = frame.xform
        prev_disk = frame.prev_disk
        prev_ring = frame.prev_ring

        local = action_transform(node.action, node.value)
        if local is None:
            logger.warning("Unrecognized action %d at body segment %d", node.action, node.index)
        else:
            xform = xform @ local

        info = node.disk_info
        if info is not None:
            xform = xform @ translation(info.shift[0], info.shift[1], 0.0)

            disk = info.disk
            if disk is None:
                if default_cross_section is DefaultCrossSection.ZERO_FILLED and node.is_leaf:
                    disk = null_disk(disk_size)
                else:
                    disk = prev_disk

            if disk is not None:
                ring = transform_points(xform, scale_xy(_disk_positions(disk), info.scale))
                if prev_ring is not None:
                    mesh.add_loop(prev_ring, ring, MeshGroup(node.index, info.index))
                prev_ring = ring
                prev_disk = disk

        for child in (node.right, node.left):
            if child is not None:
                stack.append(_Frame(child, xform, prev_disk, prev_ring))

    logger.debug("Built mesh with %d vertices and %d faces", mesh.vertex_count, mesh.face_count)
    return mesh
