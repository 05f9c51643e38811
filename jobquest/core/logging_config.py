"""
Root logger setup for the job board, plus the redaction helper used when
the startup configuration is logged.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "jobquest.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Third-party loggers that drown request logs at INFO
NOISY_LOGGERS = ("uvicorn", "uvicorn.access", "urllib3", "sqlalchemy.engine")

REDACTED = "***REDACTED***"
SENSITIVE_KEY_FRAGMENTS = (
    "password", "token", "secret", "key", "api_key",
    "imgbb_api_key", "smtp_password", "database_url",
)


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """Send job board logs to stdout and to a rotating file under ``log_dir``.

    Unknown level names fall back to INFO. Calling this again replaces the
    root handlers instead of stacking new ones.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    root.addHandler(_handler(logging.StreamHandler(sys.stdout), level, CONSOLE_FORMAT))
    root.addHandler(_handler(
        RotatingFileHandler(
            log_path / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        ),
        level,
        FILE_FORMAT,
    ))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def sanitize_log_data(data: dict) -> dict:
    """Copy of a settings dict with credential-like entries masked."""
    return {
        key: REDACTED if any(fragment in key.lower() for fragment in SENSITIVE_KEY_FRAGMENTS) else value
        for key, value in data.items()
    }
