from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_HANDLER_NAME = "shiftmate-console"


def configure_logging(level: str = "INFO") -> logging.Logger:
    root = logging.getLogger("shiftmate_client")
    root.setLevel(level.upper())

    if not any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    # urllib3 logs every connection at DEBUG, including request lines.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return root
