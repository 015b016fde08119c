import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure logging for the Bajeti API.

    Args:
        app_log_level: Level for application logs (default: INFO, or APP_LOG_LEVEL)
        third_party_log_level: Level for library logs (default: WARNING, or THIRD_PARTY_LOG_LEVEL)
        log_file: Optional log file path (or LOG_FILE). Console only when unset
        max_file_size: Size in bytes at which the log file is rotated
        backup_count: Number of rotated files to keep

    Returns:
        The application root logger
    """
    app_log_level = app_log_level or os.getenv("APP_LOG_LEVEL", "INFO")
    third_party_log_level = third_party_log_level or os.getenv("THIRD_PARTY_LOG_LEVEL", "WARNING")
    log_file = log_file or os.getenv("LOG_FILE")

    app_level = getattr(logging, app_log_level.upper(), logging.INFO)
    third_party_level = getattr(logging, third_party_log_level.upper(), logging.WARNING)

    app_logger = logging.getLogger("bajeti")
    app_logger.setLevel(app_level)

    # Avoid duplicate handlers when called more than once (reload, tests)
    app_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(app_level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count
        )
        file_handler.setLevel(app_level)
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    third_party_loggers = [
        "sqlalchemy.engine",
        "sqlalchemy.engine.Engine",
        "sqlalchemy.dialects",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "uvicorn.access",
        "uvicorn.error",
        "httpx",
        "faker",
    ]

    for logger_name in third_party_loggers:
        logging.getLogger(logger_name).setLevel(third_party_level)

    app_logger.propagate = False

    return app_logger


def get_logger(name: str = "bajeti") -> logging.Logger:
    """
    Get a logger namespaced under the application logger.

    Args:
        name: Logger name (typically ``__name__``)

    Returns:
        Logger instance
    """
    if name == "bajeti" or name.startswith("bajeti."):
        return logging.getLogger(name)
    return logging.getLogger(f"bajeti.{name}")
