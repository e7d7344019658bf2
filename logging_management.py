"""
Logging configuration for the gateway.
"""
import os
import re
import sys
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Union


class CredentialRedactionFilter(logging.Filter):
    """Masks anything that looks like a credential assignment in a log message."""

    PATTERN = re.compile(
        r"(x-api-key|parallel_api_key|access_token|code_verifier)([\"']?\s*[:=]\s*[\"']?)([^\s;,&\"']+)",
        re.IGNORECASE,
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.PATTERN.sub(r"\1\2***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class LoggingManager:
    """Class to manage logging configuration for the service."""
    @staticmethod
    def setup_logging(
            service_name: str,
            log_file_path: Optional[str] = None,
            log_level: Union[int, str] = logging.INFO,
            enable_console: bool = True,
            enable_file: bool = True,
            max_bytes: int = 10 * 1024 * 1024,  # 10MB
            backup_count: int = 5
    ) -> logging.Logger:
        """
        Setup logging for the service.

        Args:
            service_name: Name of the service logger
            log_file_path: Path to log file (None for no file logging)
            log_level: Logging level, as an int or a level name such as "DEBUG"
            enable_console: Whether to log to console
            enable_file: Whether to log to file
            max_bytes: Max log file size before rotation
            backup_count: Number of backup files to keep

        Returns:
            Configured service logger
        """
        if isinstance(log_level, str):
            log_level = logging.getLevelName(log_level.upper())
            if not isinstance(log_level, int):
                log_level = logging.INFO

        logging.getLogger().handlers.clear()

        detailed_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        simple_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S"
        )
        redaction_filter = CredentialRedactionFilter()

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(simple_formatter)
            console_handler.setLevel(log_level)
            console_handler.addFilter(redaction_filter)
            root_logger.addHandler(console_handler)

        # File handler with rotation
        if enable_file and log_file_path:
            os.makedirs(os.path.dirname(log_file_path), exist_ok=True)

            file_handler = RotatingFileHandler(
                filename=log_file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(detailed_formatter)
            file_handler.setLevel(logging.DEBUG)  # File gets all details
            file_handler.addFilter(redaction_filter)
            root_logger.addHandler(file_handler)

        # Reduce noise from third-party libraries
        logging.getLogger("uvicorn").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

        return logging.getLogger(service_name)
