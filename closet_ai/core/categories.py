"""
Category Schema (v1.2.0)
Static definition of the clothing slots an outfit is made of.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional

# Synthetic pseudo-category used by the closet browser; never an outfit slot
ALL_CATEGORY_ID = "all"


@dataclass(frozen=True)
class Category:
    """A clothing slot."""
    id: str
    display_name: str
    grid_position: int
    required: bool
    closet_group: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "gridPosition": self.grid_position,
            "required": self.required,
            "closetGroup": self.closet_group,
        }


# ==================== SCHEMA ====================

CLOTHING_CATEGORIES: List[Category] = [
    Category(ALL_CATEGORY_ID, "ALL", -1, required=False),
    Category("hats", "HATS", 1, required=False),
    Category("shirts", "SHIRTS", 4, required=True),
    Category("jackets", "COATS", 5, required=False),
    Category("accessories", "ACCESSORIES", 3, required=False, closet_group="accessories"),
    Category("pants", "PANTS", 7, required=True),
    Category("belts", "BELTS", 8, required=True),
    Category("shoes", "SHOES", 10, required=True),
]

_BY_ID: Dict[str, Category] = {category.id: category for category in CLOTHING_CATEGORIES}


def get_category(category_id: str) -> Optional[Category]:
    """Look up a category by id."""
    return _BY_ID.get(category_id)


def is_known_slot(category_id: str) -> bool:
    return category_id in _BY_ID and category_id != ALL_CATEGORY_ID


def slot_categories() -> List[Category]:
    """Every category that is an outfit slot (schema order, `all` excluded)."""
    return [category for category in CLOTHING_CATEGORIES if category.id != ALL_CATEGORY_ID]


def slot_ids() -> List[str]:
    return [category.id for category in slot_categories()]


def required_category_ids() -> List[str]:
    return [category.id for category in slot_categories() if category.required]


def default_enabled_categories() -> Dict[str, bool]:
    """Settings default: every category enabled."""
    return {category.id: True for category in CLOTHING_CATEGORIES}


def is_category_enabled(enabled_categories: Dict[str, bool], category_id: str) -> bool:
    """A category missing from the settings map counts as enabled."""
    return bool(enabled_categories.get(category_id, True))


def empty_outfit_items() -> Dict[str, None]:
    """An outfit map with every slot empty."""
    return {category_id: None for category_id in slot_ids()}


def closet_groups() -> Dict[str, List[str]]:
    """
    Closet browsing buckets.
    
    Sub-categories sharing a closet_group fold into one bucket; a category
    without a group is its own bucket.
    
    Returns:
        Dict of bucket id -> member category ids (schema order)
    """
    groups: Dict[str, List[str]] = {}
    for category in slot_categories():
        key = category.closet_group or category.id
        groups.setdefault(key, []).append(category.id)
    return groups


def categories_by_grid_position() -> List[Category]:
    return sorted(slot_categories(), key=lambda category: category.grid_position)
