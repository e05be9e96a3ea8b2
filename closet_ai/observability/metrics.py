"""
Metrics Module (v1.2.0)
Track outfit generations, stylist fallbacks and integrity violations.
"""
import threading
from typing import Dict, Any, Optional


def _empty_metrics() -> Dict[str, Any]:
    return {
        "total_generations": 0,
        "advisory_generations": 0,
        "random_generations": 0,
        "advisory_fallbacks": {},
        "integrity_violations": 0,
        "stale_outfits": 0,
        "errors": 0
    }


# Thread-safe metrics storage
_lock = threading.Lock()
_metrics = _empty_metrics()


def record_generation(
    source: str,
    fallback_reason: Optional[str] = None,
    integrity_violations: int = 0,
    fresh: bool = True,
    error: bool = False
):
    """
    Record one generation in metrics.
    
    Args:
        source: "advisory" or "random"
        fallback_reason: Why the stylist path was abandoned, if it was
        integrity_violations: Misplaced items discarded during generation
        fresh: False when the outfit repeats a recent one
        error: Whether the generation failed outright
    """
    with _lock:
        _metrics["total_generations"] += 1
        
        if source == "advisory":
            _metrics["advisory_generations"] += 1
        else:
            _metrics["random_generations"] += 1
        
        if fallback_reason:
            fallbacks = _metrics["advisory_fallbacks"]
            fallbacks[fallback_reason] = fallbacks.get(fallback_reason, 0) + 1
        
        _metrics["integrity_violations"] += integrity_violations
        
        if not fresh:
            _metrics["stale_outfits"] += 1
        
        if error:
            _metrics["errors"] += 1


def get_metrics() -> Dict[str, Any]:
    """Get current metrics snapshot."""
    with _lock:
        total = _metrics["total_generations"]
        advisory = _metrics["advisory_generations"]
        
        return {
            "total_generations": total,
            "advisory_generations": advisory,
            "random_generations": _metrics["random_generations"],
            "advisory_ratio": round(advisory / total, 3) if total > 0 else 0.0,
            "advisory_fallbacks": dict(_metrics["advisory_fallbacks"]),
            "integrity_violations": _metrics["integrity_violations"],
            "stale_outfits": _metrics["stale_outfits"],
            "errors": _metrics["errors"]
        }


def reset_metrics():
    """Reset all metrics (for testing)."""
    global _metrics
    with _lock:
        _metrics = _empty_metrics()
