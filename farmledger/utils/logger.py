"""
Loguru sinks for Farm Ledger

Every module logs through ``get_logger(__name__)``; ``setup_logging`` is
called once by the API with the level and directory from settings.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"
LOG_FILE = "farmledger.log"


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None):
    """
    Replace loguru's default sink with the console sink, plus a rotating
    ``farmledger.log`` under ``log_dir`` when one is given
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if not log_dir:
        logger.info(f"Logging initialized - Level: {level}, console only")
        return logger

    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_path = Path(log_dir) / LOG_FILE
    logger.add(
        str(log_path),
        format=FILE_FORMAT,
        level=level,
        rotation="10 MB",
        retention="30 days",
        compression="zip",
    )
    logger.info(f"Logging initialized - Level: {level}, Log file: {log_path}")
    return logger


def get_logger(name: Optional[str] = None):
    """Logger bound to a module name for the ``extra[name]`` column"""
    return logger.bind(name=name) if name else logger


# Records logged without a bound name still render in the formats above
logger.configure(extra={"name": "farmledger"})

setup_logging()
