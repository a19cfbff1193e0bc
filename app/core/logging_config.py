"""
Logging configuration.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def setup_logging():
    """Configure application logging (stdout plus a rotating file under logs/)."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # setup_logging runs on import of app.main; avoid stacking handlers on reload
    if any(getattr(h, "_safety_audits", False) for h in logger.handlers):
        return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    file_handler = RotatingFileHandler(
        log_dir / "safety_audits.log",
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))

    for handler in (console_handler, file_handler):
        handler._safety_audits = True
        logger.addHandler(handler)

    # SQL echo is controlled by DEBUG on the engine, keep the logger itself quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
