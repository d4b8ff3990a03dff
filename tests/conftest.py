"""Shared fixtures and helpers for tests."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from factories import SQUARE_DISK, TWO_RING_BODY, UNIT_DISK_INFO, model_bytes, model_lines

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Logging: undo setup_logging so caplog sees package records
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("lathe_mesh")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Model file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def two_ring_bytes() -> bytes:
    """A square disk placed twice, 10 units apart, followed by a binary trailer."""
    lines = model_lines([SQUARE_DISK], TWO_RING_BODY, UNIT_DISK_INFO)
    return model_bytes(lines, trailer=b"\x89BIN\x00\x01\x02")


@pytest.fixture
def write_model(tmp_path: Path) -> Callable[..., Path]:
    def _write(data: bytes, name: str = "model.txt") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def two_ring_file(write_model: Callable[..., Path], two_ring_bytes: bytes) -> Path:
    return write_model(two_ring_bytes)
