"""Process-wide logging for the API server and its task workers."""

import logging
import sys

from panai_sage.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# SDK transport logs every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai")


def setup_logging(settings: Settings) -> None:
    """Attach one stdout handler to the root logger at settings.log_level."""
    root = logging.getLogger()
    if root.handlers:
        return  # uvicorn or pytest already configured logging
    root.setLevel(settings.log_level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    if settings.log_level.upper() != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
