"""Logging setup for services that embed zone placement.

Placement decisions are logged under the ``zone_placer`` logger: the chosen
zone for each claim at INFO, topology cache fills and resolved zone sets at
DEBUG, and the random-zone fallback for unnamed claims at WARNING.
"""

from __future__ import annotations

import logging
import os
import sys

_LOG_FORMAT = "%(asctime)s zone-placer %(levelname)s [%(name)s] %(message)s"
_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_ENV_VAR = "ZONE_PLACER_LOG"


def configure_logging(verbose: int = 0) -> None:
    """Route placement logs to stderr.

    ``ZONE_PLACER_LOG`` (a level name) wins over *verbose*; ``1`` shows the
    chosen zones, ``2`` also shows how the eligible set was built. With
    neither, the host application's logging is left alone.
    """
    env_level = os.environ.get(LOG_ENV_VAR, "").upper()
    if env_level:
        level = _LEVELS.get(env_level)
        if level is None:
            print(
                f"WARNING: invalid {LOG_ENV_VAR} level '{env_level}', "
                f"expected one of {', '.join(sorted(_LEVELS))}; defaulting to INFO",
                file=sys.stderr,
            )
            level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        return
    logging.basicConfig(
        level=logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("zone_placer").setLevel(level)
