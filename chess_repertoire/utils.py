import logging
import os
import sys
from typing import Optional
from dotenv import load_dotenv

LOGGER_NAME = "chess_repertoire"


def get_setting(name: str, default: str) -> str:
    """Reads an optional setting from the environment (or .env), falling back to default."""
    load_dotenv()
    return os.getenv(name) or default


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configures root logging once for the command line entry points.

    `level` overrides LOG_LEVEL; unknown level names fall back to INFO.
    """
    level_name = (level or get_setting("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return logging.getLogger(LOGGER_NAME)


def check_env_var(name: str) -> str:
    """Value of a required setting. Logs and exits with status 1 when it is unset or empty."""
    value = get_setting(name, "")
    if value:
        return value
    logging.getLogger(LOGGER_NAME).error(f"Required setting {name} is missing (environment or .env)")
    sys.exit(1)
