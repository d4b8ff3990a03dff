import logging

from rich.console import Console
from rich.logging import RichHandler

_PACKAGE_LOGGER = "lathe_mesh"


def setup_logging(level: int | str = logging.WARNING) -> None:
    """Send ``lathe_mesh`` log records to stderr through rich.

    Safe to call more than once; previously installed handlers are replaced.
    Records stop at the package logger so a configured root logger does not
    print them a second time.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
