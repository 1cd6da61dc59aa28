"""Centralized logging configuration for golinks.

Provides structured logging with console and file output.
Call setup_logging() once at application startup.

Usage:
    # At startup (app.py, cli.py)
    from golinks.utilities.logging import setup_logging
    setup_logging()

    # In any module (standard Python pattern)
    import logging
    logger = logging.getLogger(__name__)
    logger.info("[MODULE] Something happened: %s", value)

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    LOG_DIR: Directory for log files (default: ./logs or /app/data/logs in Docker)
    LOG_FORMAT: "text" or "json" (default: text)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Track if logging has been configured
_configured = False

NOISY_LOGGERS = [
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "httpcore.connection",
    "httpcore.http11",
    "watchfiles",
]


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Useful for log aggregation systems (ELK, Loki, etc.)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _get_log_dir() -> Path:
    """Determine log directory with Docker awareness."""
    if env_dir := os.getenv("LOG_DIR"):
        return Path(env_dir)

    docker_path = Path("/app/data/logs")
    if docker_path.parent.exists():
        return docker_path

    # Local development: project root/logs (where pyproject.toml is)
    current = Path(__file__).parent
    for _ in range(5):
        if (current / "pyproject.toml").exists():
            return current / "logs"
        current = current.parent

    return Path("logs")


def _get_log_level() -> int:
    """Get log level from environment."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _get_formatter(use_json: bool = False) -> logging.Formatter:
    if use_json:
        return JSONFormatter()

    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(
    log_level: str | None = None,
    log_dir: str | Path | None = None,
    use_json: bool | None = None,
    log_to_file: bool = True,
) -> None:
    """Initialize the logging system.

    Call this once at application startup. Safe to call multiple times
    (subsequent calls are no-ops).

    Args:
        log_level: Override LOG_LEVEL env var
        log_dir: Override LOG_DIR env var
        use_json: Override LOG_FORMAT env var (True for JSON output)
        log_to_file: Attach the rotating file handlers (the CLI passes False)
    """
    global _configured
    if _configured:
        return

    level = getattr(logging, (log_level or "").upper(), None) or _get_log_level()

    if use_json is None:
        use_json = os.getenv("LOG_FORMAT", "text").lower() == "json"

    formatter = _get_formatter(use_json)

    # === Console Handler ===
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Handlers filter from here
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    log_path = Path(log_dir) if log_dir else _get_log_dir()
    if log_to_file:
        log_path.mkdir(parents=True, exist_ok=True)

        # === Main Log File (rotating) ===
        file_handler = RotatingFileHandler(
            log_path / "golinks.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)

        # === Error Log File (errors only) ===
        error_handler = RotatingFileHandler(
            log_path / "golinks_errors.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)

        root_logger.addHandler(file_handler)
        root_logger.addHandler(error_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Keep uvicorn.error at INFO for startup messages
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)

    _configured = True

    from golinks.config import VERSION

    logger = logging.getLogger("golinks")
    logger.info("[STARTUP] golinks %s", VERSION)
    logger.info("[STARTUP] Log level: %s", logging.getLevelName(level))
    if log_to_file:
        logger.info("[STARTUP] Log directory: %s", log_path)
    logger.info("[STARTUP] Log format: %s", "JSON" if use_json else "text")

