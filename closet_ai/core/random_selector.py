"""
Random Outfit Selector (v1.2.0)
Constraint-based random selection biased away from recently worn items.

Each attempt fills every enabled slot from its own category, re-validates
category integrity and checks the result against recent history. When the
closet is too small to produce variety the last attempt is returned anyway:
some valid outfit beats none.
"""
import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from closet_ai.config.settings import GenerationConfig
from closet_ai.core.categories import empty_outfit_items, is_category_enabled, slot_categories
from closet_ai.core.models import ClothingItem
from closet_ai.core.validation import enforce_category_integrity
from closet_ai.core.variety import OutfitLike, is_too_similar, recently_used_item_ids

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    """Outcome of one selector run."""
    items: Dict[str, Optional[ClothingItem]]
    attempts: int
    integrity_violations: int = 0
    fresh: bool = True
    source: str = "random"
    reasoning: Optional[str] = None
    fallback_reason: Optional[str] = None
    fixed_slots: List[str] = field(default_factory=list)


# ==================== HELPERS ====================

def filter_enabled_items(
    items: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool]
) -> List[ClothingItem]:
    """Items whose category is enabled."""
    return [item for item in items if is_category_enabled(enabled_categories, item.category_id)]


def group_by_category(items: Sequence[ClothingItem]) -> Dict[str, List[ClothingItem]]:
    grouped: Dict[str, List[ClothingItem]] = {}
    for item in items:
        grouped.setdefault(item.category_id, []).append(item)
    return grouped


def pick_with_freshness(
    candidates: Sequence[ClothingItem],
    recently_used: Set[str],
    rng: random.Random,
    fresh_pick_probability: float
) -> ClothingItem:
    """
    Pick one candidate, preferring items not worn recently.
    
    Fresh items win with `fresh_pick_probability` (always, when every
    candidate is fresh); with no fresh items the pick is uniform.
    """
    fresh = [item for item in candidates if item.id not in recently_used]
    used = [item for item in candidates if item.id in recently_used]
    
    if fresh:
        if not used or rng.random() < fresh_pick_probability:
            return rng.choice(fresh)
        return rng.choice(used)
    
    return rng.choice(list(candidates))


def build_random_attempt(
    items_by_category: Dict[str, List[ClothingItem]],
    enabled_categories: Dict[str, bool],
    recently_used: Set[str],
    rng: random.Random,
    config: GenerationConfig,
    fixed: Optional[Dict[str, ClothingItem]] = None
) -> Dict[str, Optional[ClothingItem]]:
    """Build one unvalidated candidate outfit."""
    fixed = fixed or {}
    outfit: Dict[str, Optional[ClothingItem]] = empty_outfit_items()
    
    for category in slot_categories():
        if not is_category_enabled(enabled_categories, category.id):
            continue
        
        if category.id in fixed:
            outfit[category.id] = fixed[category.id]
            continue
        
        candidates = items_by_category.get(category.id, [])
        if not candidates:
            continue
        
        if not category.required and rng.random() >= config.optional_pick_probability:
            continue
        
        outfit[category.id] = pick_with_freshness(
            candidates, recently_used, rng, config.fresh_pick_probability
        )
    
    return outfit


# ==================== SELECTOR ====================

def pick_random_outfit(
    items: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool],
    history: Sequence[OutfitLike],
    rng: Optional[random.Random] = None,
    config: Optional[GenerationConfig] = None,
    fixed: Optional[Dict[str, ClothingItem]] = None
) -> SelectionResult:
    """
    Run the random selection attempts synchronously.
    
    Args:
        items: Full item pool
        enabled_categories: Category id -> enabled flag
        history: Previous outfits, newest-first
        rng: Seedable random source
        config: Tuning constants
        fixed: Pre-validated pinned items (slot id -> item), never re-picked
    
    Returns:
        SelectionResult; `fresh` is False when attempts ran out
    """
    rng = rng or random.Random()
    config = config or GenerationConfig()
    fixed = fixed or {}
    
    available = filter_enabled_items(items, enabled_categories)
    items_by_category = group_by_category(available)
    recently_used = recently_used_item_ids(history, config.lookback_count)
    
    max_attempts = max(1, config.max_random_attempts)
    validated: Dict[str, Optional[ClothingItem]] = empty_outfit_items()
    total_violations = 0
    
    for attempt in range(1, max_attempts + 1):
        candidate = build_random_attempt(
            items_by_category, enabled_categories, recently_used, rng, config, fixed
        )
        validated, violations = enforce_category_integrity(candidate, context="random")
        total_violations += violations
        
        if not is_too_similar(validated, history, config.random_similarity_threshold, config.lookback_count):
            logger.info(f"Random outfit accepted on attempt {attempt}")
            return SelectionResult(
                items=validated,
                attempts=attempt,
                integrity_violations=total_violations,
                fresh=True,
                fixed_slots=sorted(fixed),
            )
        
        logger.info(f"Random attempt {attempt} too similar to recent outfits, retrying...")
    
    logger.info(f"No sufficiently different outfit after {max_attempts} attempts, returning last attempt")
    return SelectionResult(
        items=validated,
        attempts=max_attempts,
        integrity_violations=total_violations,
        fresh=False,
        fixed_slots=sorted(fixed),
    )


async def select_random(
    items: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool],
    history: Sequence[OutfitLike],
    rng: Optional[random.Random] = None,
    config: Optional[GenerationConfig] = None,
    fixed: Optional[Dict[str, ClothingItem]] = None
) -> SelectionResult:
    """Random selection with the perceptible "thinking" delay of the client."""
    config = config or GenerationConfig()
    result = pick_random_outfit(items, enabled_categories, history, rng, config, fixed)
    
    if config.thinking_delay_seconds > 0:
        await asyncio.sleep(config.thinking_delay_seconds)
    
    return result
