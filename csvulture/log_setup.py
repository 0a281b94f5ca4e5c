import logging
import sys

from csvulture.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the root logger from settings: one stdout handler, no duplicates."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(settings.log_level)

    if root.hasHandlers():
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(settings.log_level)
    handler.setFormatter(logging.Formatter(settings.log_format))
    root.addHandler(handler)

    logging.getLogger(__name__).debug("[logging] configured at %s", settings.log_level)
