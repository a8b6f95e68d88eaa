"""
Logging configuration for the mulligan advisor.
Structured JSON logging for evaluated hands, search results and decisions.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

LOGS_DIR = Path("logs")

# JSON lines file, one record per evaluated hand/decision
ML_LOG_FILE_NAME = "ml_training_data.jsonl"

_HANDLER_NAMES = ("advisor-console", "advisor-file", "advisor-jsonl")


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add any extra fields passed to the logger
        if hasattr(record, "data"):
            log_data.update(record.data)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", logs_dir: Optional[Path] = None) -> None:
    """Setup logging configuration for the advisor. Safe to call more than once."""
    logs_dir = Path(logs_dir) if logs_dir is not None else LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        if handler.get_name() in _HANDLER_NAMES:
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler (human-readable)
    console_handler = logging.StreamHandler()
    console_handler.set_name("advisor-console")
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(console_formatter)

    # File handler (human-readable)
    file_handler = logging.FileHandler(logs_dir / "advisor.log")
    file_handler.set_name("advisor-file")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(console_formatter)

    # Training data handler (JSON lines format)
    ml_handler = logging.FileHandler(logs_dir / ML_LOG_FILE_NAME, mode="a")
    ml_handler.set_name("advisor-jsonl")
    ml_handler.setLevel(logging.INFO)
    ml_handler.setFormatter(JSONFormatter())

    # Add handlers
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(ml_handler)


def log_hand_evaluation(
    logger: logging.Logger,
    hand: Any,
    source: str,
    **extra_data: Any
) -> None:
    """Log the opener being evaluated."""
    log_data = {
        "event_type": "hand_evaluation",
        "source": source,
        "hand": [getattr(card, "name", str(card)) for card in hand],
        **extra_data
    }
    logger.info("Hand evaluation logged", extra={"data": log_data})


def log_search_result(
    logger: logging.Logger,
    result: Any,
    **extra_data: Any
) -> None:
    """Log the best line the search found."""
    log_data = {
        "event_type": "search_result",
        "tier": result.tier,
        "score": result.score,
        "fired": list(result.fired),
        "visited": result.visited,
        "line": result.line,
        **extra_data
    }
    logger.debug("Search result logged", extra={"data": log_data})


def log_advisor_decision(
    logger: logging.Logger,
    hand: Any,
    advice: Any,
    **extra_data: Any
) -> None:
    """Log advisor decisions for later analysis."""
    log_data = {
        "event_type": "advisor_decision",
        "hand": [getattr(card, "name", str(card)) for card in hand],
        "advice": _serialize(advice),
        **extra_data
    }
    logger.info("Advisor decision logged", extra={"data": log_data})


def _serialize(value: Any) -> Dict[str, Any]:
    """Serialize a model to dict for logging."""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    elif isinstance(value, dict):
        return value
    else:
        return {"raw": str(value)}


# Initialize logger for advisor module
advisor_logger = logging.getLogger("advisor")
