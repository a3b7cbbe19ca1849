"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from bull_wallet.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_operation(
    operation: str,
    user_id: str,
    outcome: str,
    **fields: Any,
) -> None:
    """Log a wallet operation outcome; amounts are logged as strings to keep Decimal precision"""
    extra = {
        "user_id": user_id,
        "step": operation,
        "outcome": outcome,
    }
    extra.update({key: str(value) if value is not None else None for key, value in fields.items()})

    if outcome == "success":
        logging.info(f"{operation} completed", extra=extra)
    else:
        logging.warning(f"{operation} rejected: {outcome}", extra=extra)
