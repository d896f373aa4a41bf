"""Settings that are shared by the whole package. Kept as simple module level constants."""

import logging
import os
from typing import Optional

LOG_LEVEL = os.environ.get("CHESS_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Route the package's loggers to stderr. Meant to be called once by whatever embeds the engine."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
