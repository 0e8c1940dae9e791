"""
Logging Setup Module.

Builds the application logger used across the pipeline. Log calls pass either a
plain string or a dict with a ``message`` key plus context fields (company id,
repository, commit sha, contributor). Records are emitted as JSON lines so the
context stays machine readable.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class LogManager:
    """
    Configure and expose the application logger.

    Attributes:
        logger (logging.Logger): Configured logger instance
    """

    def __init__(
        self,
        app_name: str,
        log_dir: Optional[str] = None,
        development: bool = False,
        level: int = logging.INFO,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ):
        """
        Initialize the logger with console and optional file output.

        Args:
            app_name (str): Logger name, also used for the log file name.
            log_dir (Optional[str]): Directory for the rotating log file. No
                file handler is attached when empty.
            development (bool): Use a human readable console format.
            level (int): Logging level.
            max_bytes (int): Size at which the log file rotates.
            backup_count (int): Number of rotated files to keep.
        """
        self.logger = logging.getLogger(app_name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Reset handlers so repeated construction does not duplicate output
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)

        console = logging.StreamHandler()
        console.setLevel(level)
        if development:
            console.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            )
        else:
            console.setFormatter(JsonFormatter())
        self.logger.addHandler(console)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, f"{app_name}.log"),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JsonFormatter())
            self.logger.addHandler(file_handler)
