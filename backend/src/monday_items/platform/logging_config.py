import logging
import os
import sys
from typing import Mapping, Optional

LOG_LEVEL_ENV = "MONDAY_LOG_LEVEL"

# Noisy per-request loggers of the outbound GraphQL client
QUIET_LOGGERS = ("httpx", "httpcore")


def log_level_from_env(environ: Optional[Mapping[str, str]] = None) -> int:
    """Level named by MONDAY_LOG_LEVEL ("DEBUG", "warning", "10"); INFO when unset or unknown."""
    env = os.environ if environ is None else environ
    raw = (env.get(LOG_LEVEL_ENV) or "").strip()
    if not raw:
        return logging.INFO
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: Optional[int] = None):
    if level is None:
        level = log_level_from_env()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    if not root_logger.hasHandlers():
        root_logger.addHandler(console_handler)

    # One line per GraphQL request otherwise
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
