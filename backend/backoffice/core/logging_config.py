"""
Logging configuration for the application.

Three rotating files are written next to the console output:

    app.log        everything at the configured level
    errors.log     ERROR and above
    rendering.log  the document rendering round trip (dispatch + callbacks)
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUPS = 5

RENDERING_LOGGERS = (
    "backoffice.services.render_webhook",
    "backoffice.services.document_workflow",
    "backoffice.api.routes.webhooks",
)


def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = None):
    """
    Configure application-wide logging.

    Safe to call more than once: handlers installed by a previous call are
    replaced, not duplicated.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating log files (defaults to backend/logs)
    """
    log_path = Path(log_dir) if log_dir else Path(__file__).parent.parent.parent / "logs"
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(_rotating_handler(log_path / "app.log", logging.DEBUG))
    root_logger.addHandler(_rotating_handler(log_path / "errors.log", logging.ERROR))

    rendering_handler = _rotating_handler(log_path / "rendering.log", logging.INFO)
    for name in RENDERING_LOGGERS:
        rendering_logger = logging.getLogger(name)
        rendering_logger.handlers = [
            h for h in rendering_logger.handlers if not isinstance(h, RotatingFileHandler)
        ]
        rendering_logger.addHandler(rendering_handler)

    # Third-party noise
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized - Level: {log_level}")
    root_logger.info(f"Log directory: {log_path.resolve()}")

    return root_logger
