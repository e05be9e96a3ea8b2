# Core module
from closet_ai.core.categories import (
    Category,
    CLOTHING_CATEGORIES,
    get_category,
    slot_ids,
    required_category_ids,
    default_enabled_categories,
    closet_groups,
)
from closet_ai.core.models import ClothingItem, Outfit
from closet_ai.core.validation import ValidationError, enforce_category_integrity
from closet_ai.core.variety import outfit_similarity, recently_used_item_ids, is_too_similar
