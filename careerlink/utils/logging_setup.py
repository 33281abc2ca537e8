from __future__ import annotations

import logging

from careerlink.config import Settings


_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Set the level for the application loggers.

    uvicorn installs its own handlers; we only attach one when the root logger has none
    (plain `python -m`, tests, scripts).
    """

    level = logging.getLevelName((settings.log_level or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT)
    logging.getLogger("careerlink").setLevel(level)
