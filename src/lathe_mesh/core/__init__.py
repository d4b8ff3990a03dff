from lathe_mesh.core.build import body_from_raw, build_model, cook_disk_info
from lathe_mesh.core.convert import convert_file, load_model
from lathe_mesh.core.mesh import Mesh, MeshGroup, write_obj
from lathe_mesh.core.parse import (
    find_parse_start,
    parse_body,
    parse_disk_info,
    parse_disks,
    parse_model,
    parse_tables,
)
from lathe_mesh.core.tokenize import classify_line, iter_line_items
from lathe_mesh.core.walk import build_mesh

__all__ = [
    "Mesh",
    "MeshGroup",
    "body_from_raw",
    "build_mesh",
    "build_model",
    "classify_line",
    "convert_file",
    "cook_disk_info",
    "find_parse_start",
    "iter_line_items",
    "load_model",
    "parse_body",
    "parse_disk_info",
    "parse_disks",
    "parse_model",
    "parse_tables",
    "write_obj",
]
