"""
Logging setup with automatic masking of personal data

Delivery addresses travel with phone numbers, e-mails and bearer tokens, so
every handler installed here runs them through SensitiveDataFilter first.
"""

import logging
import re
import json
from datetime import datetime
import os


class SensitiveDataFilter(logging.Filter):
    """
    Masks personal data in log records
    """

    SENSITIVE_PATTERNS = {
        # "token": "eyJ..." -> "token": "***"
        "token": (
            r'"(token|access_token|refresh_token|apikey)"\s*:\s*"[^"]*"',
            r'"\1": "***"',
        ),
        # Authorization: Bearer eyJ... -> Bearer ***
        "bearer": (
            r"\bBearer\s+[A-Za-z0-9\-_\.]+",
            "Bearer ***",
        ),
        # user@example.com -> u***@example.com
        "email": (
            r"\b([a-zA-Z0-9._%+-])[a-zA-Z0-9._%+-]*@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b",
            r"\1***@\2",
        ),
        # +91 98470 12345 -> +91 *****12345
        "phone": (
            r"(\+91[\s\-]?)?\b[6-9]\d{4}[\s\-]?(\d{5})\b",
            r"\1*****\2",
        ),
    }

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.mask_sensitive_data(record.msg)

        if record.args:
            record.args = tuple(
                self.mask_sensitive_data(str(arg)) for arg in record.args
            )

        return True

    def mask_sensitive_data(self, text: str) -> str:
        """
        Apply every masking pattern to text

        Args:
            text: raw text

        Returns:
            str: masked text
        """
        for pattern, replacement in self.SENSITIVE_PATTERNS.values():
            text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)

        return text


# Attributes every LogRecord carries; anything else came in through extra=
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per log line
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str = None,
    log_format: str = None,
    log_file: str = None,
) -> None:
    """
    Configure the root logger

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_format: "json" or "text"
        log_file: optional log file path (console only when None)
    """
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
    log_format = log_format or os.getenv("LOG_FORMAT", "json")
    log_file = log_file or os.getenv("LOG_FILE")

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(SensitiveDataFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.addFilter(SensitiveDataFilter())
        root_logger.addHandler(file_handler)

    # Quiet third-party loggers
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Address saved", extra={"address_id": "..."})
        ```
    """
    return logging.getLogger(name)


class AuditLogger:
    """
    Audit trail for address mutations
    """

    def __init__(self):
        self.logger = get_logger("audit")

    def log_event(
        self,
        event_type: str,
        user_id: str = None,
        resource_type: str = None,
        resource_id: str = None,
        action: str = None,
        details: dict = None,
    ):
        """
        Record an audit event

        Args:
            event_type: event name (address.created, address.deleted, ...)
            user_id: owner id
            resource_type: resource kind (address)
            resource_id: resource id
            action: create, update, delete, set_default
            details: extra payload
        """
        self.logger.info(
            f"[AUDIT] {event_type}",
            extra={
                "event_type": event_type,
                "user_id": user_id,
                "resource_type": resource_type,
                "resource_id": resource_id,
                "action": action,
                "details": details or {},
            },
        )


audit_logger = AuditLogger()
