from __future__ import annotations

import logging

from fit import config

_HANDLER_NAME = "fitbounds"


def configure_logging(level: str | int | None = None) -> None:
    # Idempotent: re-importing `main` (tests, reloads) must not stack handlers.
    root = logging.getLogger()
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(level or config.log_level())
