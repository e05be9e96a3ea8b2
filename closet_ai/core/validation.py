"""
Validation Module (v1.2.0)
Input checks and the category-integrity pass applied after every selection step.
"""
import logging
from typing import Dict, Optional, Tuple

from closet_ai.core.categories import get_category, is_known_slot, slot_ids

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def validate_category_id(category_id: str) -> str:
    """
    Check that a category id names an outfit slot.
    
    Raises:
        ValidationError: If the id is unknown or is the `all` pseudo-category
    """
    if not is_known_slot(category_id):
        raise ValidationError(f"Unknown category: {category_id!r}")
    return category_id


def validate_item_id(item_id: Optional[str]) -> str:
    if not item_id or not str(item_id).strip():
        raise ValidationError("Item id must be a non-empty string")
    return str(item_id)


def validate_enabled_categories(enabled_categories: Optional[Dict[str, bool]]) -> Dict[str, bool]:
    """
    Normalize an enabled-categories map.
    
    Unknown ids are dropped with a warning; values are coerced to bool.
    """
    if not enabled_categories:
        return {}
    
    normalized = {}
    for category_id, enabled in enabled_categories.items():
        if get_category(category_id) is None:
            logger.warning(f"Ignoring unknown category in settings: {category_id}")
            continue
        normalized[category_id] = bool(enabled)
    return normalized


def validate_pinned_items(pinned_items: Optional[Dict[str, str]]) -> Dict[str, str]:
    """
    Check a pinned-items map (category id -> item id).
    
    Raises:
        ValidationError: If a pin names an unknown slot or an empty item id
    """
    if not pinned_items:
        return {}
    return {
        validate_category_id(category_id): validate_item_id(item_id)
        for category_id, item_id in pinned_items.items()
    }


# ==================== CATEGORY INTEGRITY ====================

def enforce_category_integrity(items: Dict[str, object], context: str = "outfit") -> Tuple[Dict[str, object], int]:
    """
    Keep a slot's item only if it belongs to that slot's category.
    
    Every slot of the schema is present in the result; misplaced items are
    nulled and logged, never raised.
    
    Args:
        items: Slot id -> item (or None)
        context: Label used in diagnostics (e.g. "random", "advisory")
    
    Returns:
        Tuple of (validated slot map, number of discarded items)
    """
    validated: Dict[str, object] = {}
    violations = 0
    
    for category_id in slot_ids():
        item = items.get(category_id)
        if item is not None and getattr(item, "category_id", None) == category_id:
            validated[category_id] = item
            continue
        
        validated[category_id] = None
        if item is not None:
            violations += 1
            logger.warning(
                f"[{context}] Removed misplaced item: {getattr(item, 'name', '?')} "
                f"({getattr(item, 'category_id', '?')}) from {category_id} slot"
            )
    
    return validated, violations
