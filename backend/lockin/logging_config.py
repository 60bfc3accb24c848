from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_HANDLER_NAME = "lockin-console"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the root logger; safe to call repeatedly."""
    resolved = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(resolved)

    if any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        return

    console = logging.StreamHandler(sys.stdout)
    console.set_name(_HANDLER_NAME)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    root.addHandler(console)

    logging.getLogger("httpx").setLevel(logging.WARNING)
