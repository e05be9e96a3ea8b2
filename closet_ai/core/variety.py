"""
Outfit Variety (v1.2.0)
Slot-match similarity, recently-used items and the too-similar check.

History is always newest-first. Similarity is slot based: the same item
moved to a different slot does not count as a repeat.
"""
from typing import Dict, List, Optional, Sequence, Set, Union

from closet_ai.core.categories import slot_ids
from closet_ai.core.models import ClothingItem, Outfit

# Outfit or a bare slot map (Outfit.items)
OutfitLike = Union[Outfit, Dict[str, Optional[ClothingItem]]]

DEFAULT_LOOKBACK = 3


def _slot_map(outfit: OutfitLike) -> Dict[str, Optional[ClothingItem]]:
    return outfit.items if isinstance(outfit, Outfit) else outfit


def outfit_similarity(outfit_a: OutfitLike, outfit_b: OutfitLike) -> float:
    """
    Fraction of slots holding the same item in both outfits.
    
    Every schema slot except `all` counts toward the total, filled or not.
    
    Returns:
        Score in [0, 1]
    """
    items_a = _slot_map(outfit_a)
    items_b = _slot_map(outfit_b)
    
    matches = 0
    total_slots = 0
    for category_id in slot_ids():
        total_slots += 1
        item_a = items_a.get(category_id)
        item_b = items_b.get(category_id)
        if item_a is not None and item_b is not None and item_a.id == item_b.id:
            matches += 1
    
    return matches / total_slots if total_slots > 0 else 0.0


def recently_used_item_ids(history: Sequence[OutfitLike], lookback_count: int = DEFAULT_LOOKBACK) -> Set[str]:
    """Ids of every item worn in the `lookback_count` most recent outfits."""
    recently_used: Set[str] = set()
    for outfit in list(history)[:lookback_count]:
        for item in _slot_map(outfit).values():
            if item is not None:
                recently_used.add(item.id)
    return recently_used


def is_too_similar(
    candidate: OutfitLike,
    history: Sequence[OutfitLike],
    threshold: float,
    lookback_count: int = DEFAULT_LOOKBACK
) -> bool:
    """True if the candidate scores >= threshold against any recent outfit."""
    return any(
        outfit_similarity(candidate, recent) >= threshold
        for recent in list(history)[:lookback_count]
    )


def recent_outfit_summaries(history: Sequence[OutfitLike], lookback_count: int = DEFAULT_LOOKBACK) -> List[str]:
    """One line per recent outfit listing its item names, for the stylist prompt."""
    summaries = []
    for index, outfit in enumerate(list(history)[:lookback_count]):
        names = [item.name for item in _slot_map(outfit).values() if item is not None]
        summaries.append(f"Recent outfit {index + 1}: {', '.join(names)}")
    return summaries
