"""
Generation Logger (v1.2.0)
One structured JSON line per outfit generation.
"""
import json
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional

from closet_ai.config.settings import get_settings

generation_logger = logging.getLogger("closet.generations")
generation_logger.setLevel(logging.INFO)

# Prevent propagation to root logger
generation_logger.propagate = False


def _ensure_file_handler():
    """Attach the file handler on first use (logs dir from settings)."""
    if generation_logger.handlers:
        return
    
    logs_dir = Path(get_settings().logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    
    file_handler = logging.FileHandler(logs_dir / "generations.log", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    generation_logger.addHandler(file_handler)


def log_generation(
    source: str,
    attempts: int,
    latency_ms: int,
    status: str,
    user_id: Optional[str] = None,
    provider: Optional[str] = None,
    fallback_reason: Optional[str] = None,
    error: Optional[str] = None
):
    """
    Log a structured generation entry.
    
    Args:
        source: advisory or random
        attempts: Attempts used by the selector that produced the outfit
        latency_ms: Generation latency in milliseconds
        status: success or fail
        user_id: Caller's user id, if known
        provider: Stylist provider, if one was configured
        fallback_reason: Why the stylist path was abandoned
        error: Error message if failed
    """
    if not is_logging_enabled():
        return
    
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "user_id": user_id,
        "source": source,
        "provider": provider,
        "attempts": attempts,
        "latency_ms": latency_ms,
        "status": status,
    }
    
    if fallback_reason:
        entry["fallback_reason"] = fallback_reason
    if error:
        entry["error"] = error
    
    _ensure_file_handler()
    generation_logger.info(json.dumps(entry))


def is_logging_enabled() -> bool:
    """Check if generation logging is enabled."""
    return get_settings().logging_enabled
