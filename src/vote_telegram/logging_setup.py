from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)
    if numeric > logging.DEBUG:
        # aiogram logs every handled update at INFO
        logging.getLogger("aiogram.event").setLevel(logging.WARNING)
