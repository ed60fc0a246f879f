"""Structured JSON logging for engine computations"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from household_timeline.config import settings


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
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_timeline_computed(
    selected_month: str,
    month_count: int,
    inferred_months: int,
    event_count: int,
    duration_ms: float,
    owner_id: Optional[str] = None,
) -> None:
    """Log one owner timeline recomputation"""
    logging.getLogger("household_timeline.engine").info(
        "Timeline computed",
        extra={
            "owner_id": owner_id,
            "step": "timeline_complete",
            "selected_month": selected_month,
            "month_count": month_count,
            "inferred_months": inferred_months,
            "event_count": event_count,
            "duration_ms": duration_ms,
        },
    )


def log_debt_simulation(strategy: str, months_to_debt_free: Optional[int], card_count: int, duration_ms: float) -> None:
    """Log a debt payoff simulation outcome"""
    logging.getLogger("household_timeline.engine").info(
        "Debt simulation completed",
        extra={
            "step": "debt_simulation_complete",
            "strategy": strategy,
            "outcome": "debt_free" if months_to_debt_free is not None else "not_converged",
            "months_to_debt_free": months_to_debt_free,
            "card_count": card_count,
            "duration_ms": duration_ms,
        },
    )


def log_scenario_evaluated(month: str, money_left_delta: str, net_worth_delta: str, duration_ms: float) -> None:
    """Log a what-if scenario evaluation"""
    logging.getLogger("household_timeline.engine").info(
        "Scenario evaluated",
        extra={
            "step": "scenario_complete",
            "month": month,
            "money_left_delta": money_left_delta,
            "net_worth_delta": net_worth_delta,
            "duration_ms": duration_ms,
        },
    )
