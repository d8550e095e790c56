"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from budget_ledger.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_ingestion(account: str, processed: int, inserted: int, skipped: int, duration_ms: float) -> None:
    """Log structured outcome of one ingestion batch"""
    logging.info(
        "Ingestion batch completed",
        extra={
            "account": account,
            "step": "ingestion_complete",
            "processed": processed,
            "inserted": inserted,
            "updated": processed - inserted,
            "skipped": skipped,
            "duration_ms": duration_ms,
        },
    )


def log_budget(request_id: str, year: int, month: int, available_for_variable: int, remaining_for_variable: int) -> None:
    """Log derived budget; negative availability is reported, not raised"""
    logging.info(
        "Budget derived",
        extra={
            "request_id": request_id,
            "step": "budget_complete",
            "period": f"{year}-{month:02d}",
            "available_for_variable": available_for_variable,
            "remaining_for_variable": remaining_for_variable,
            "over_committed": available_for_variable < 0,
        },
    )
