import io
import logging
from pathlib import Path

from lathe_mesh.config import Settings
from lathe_mesh.core.mesh import Mesh
from lathe_mesh.core.parse import parse_model
from lathe_mesh.core.walk import build_mesh
from lathe_mesh.errors import FileOpenFailure
from lathe_mesh.models import Model

logger = logging.getLogger(__name__)


def load_model(path: str | Path, settings: Settings | None = None) -> Model:
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise FileOpenFailure(str(path), exc.strerror or str(exc)) from None

    logger.debug("Read %d bytes from %s", len(data), file_path)
    return parse_model(io.BytesIO(data), settings)


def convert_file(path: str | Path, settings: Settings | None = None) -> tuple[Model, Mesh]:
    """Parse a model file and sweep it into a mesh.

    Returns (model, mesh).
    """
    settings = settings or Settings()
    model = load_model(path, settings)
    mesh = build_mesh(model, settings.default_cross_section)
    return model, mesh
