import logging
import os

from pydantic import BaseModel, Field

from lathe_mesh.errors import ConfigError
from lathe_mesh.models import DefaultCrossSection

LINE_BUFFER_SIZE = 256

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    line_buffer_size: int = Field(default=LINE_BUFFER_SIZE, ge=1)
    header_skip: int = Field(default=0, ge=0)
    default_cross_section: DefaultCrossSection = DefaultCrossSection.NONE
    emit_groups: bool = False
    log_level: str = "WARNING"


def _env_int(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(name, raw, "expected an integer") from None
    if value < minimum:
        raise ConfigError(name, raw, f"must be at least {minimum}")
    return value


def _env_cross_section() -> DefaultCrossSection:
    name = "LATHE_MESH_DEFAULT_CROSS_SECTION"
    raw = os.getenv(name, DefaultCrossSection.NONE.value)
    try:
        return DefaultCrossSection(raw.strip().lower())
    except ValueError:
        choices = ", ".join(policy.value for policy in DefaultCrossSection)
        raise ConfigError(name, raw, f"expected one of {choices}") from None


def _env_log_level() -> str:
    name = "LATHE_MESH_LOG_LEVEL"
    raw = os.getenv(name, "WARNING")
    level = raw.strip().upper()
    if level not in logging.getLevelNamesMapping():
        raise ConfigError(name, raw, "unknown log level")
    return level


def get_settings() -> Settings:
    """Build settings from ``LATHE_MESH_*`` environment variables.

    Raises :class:`ConfigError` when a variable holds a value that cannot be used.
    """
    return Settings(
        line_buffer_size=_env_int("LATHE_MESH_LINE_BUFFER_SIZE", LINE_BUFFER_SIZE, 1),
        header_skip=_env_int("LATHE_MESH_HEADER_SKIP", 0, 0),
        default_cross_section=_env_cross_section(),
        emit_groups=os.getenv("LATHE_MESH_EMIT_GROUPS", "").strip().lower() in _TRUTHY,
        log_level=_env_log_level(),
    )
