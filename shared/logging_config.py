import logging
import sys

from shared.config import settings

LOG_FORMAT = "%(levelname)-9s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a single stdout handler to the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    if any(getattr(h, "_coaching_handler", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._coaching_handler = True
    root.addHandler(handler)
