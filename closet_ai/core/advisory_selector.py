"""
Advisory Outfit Selector (v1.2.0)
Stylist-assisted selection with strict category checks and random fallback.

The stylist proposes one item id per slot. A proposal is only trusted for
ids that exist in the available pool and belong to the exact slot they were
proposed for; required slots the stylist left empty are backfilled at
random. Any stylist failure, or no fresh-enough result after the allowed
attempts, hands the whole generation to the random selector. Nothing in
this path raises to the caller.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence, Tuple

from closet_ai.config.settings import GenerationConfig
from closet_ai.core.categories import empty_outfit_items, is_category_enabled, slot_categories
from closet_ai.core.models import ClothingItem
from closet_ai.core.random_selector import (
    SelectionResult,
    filter_enabled_items,
    group_by_category,
    select_random,
)
from closet_ai.core.validation import enforce_category_integrity
from closet_ai.core.variety import (
    OutfitLike,
    is_too_similar,
    recent_outfit_summaries,
    recently_used_item_ids,
)
from closet_ai.llm.stylist import (
    AdvisoryClient,
    AdvisoryError,
    AdvisoryRequest,
    category_requirements_for,
)

logger = logging.getLogger(__name__)


# ==================== REQUEST ====================

def describe_items(items: Sequence[ClothingItem], recently_used: set) -> List[dict]:
    """Compact item descriptions for the stylist."""
    return [
        {
            "id": item.id,
            "name": item.name,
            "category": item.category_id,
            "tags": list(item.tags),
            "recentlyUsed": item.id in recently_used,
        }
        for item in items
    ]


def build_advisory_request(
    available: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool],
    history: Sequence[OutfitLike],
    theme: Optional[str],
    fixed: Dict[str, ClothingItem],
    config: GenerationConfig
) -> AdvisoryRequest:
    recently_used = recently_used_item_ids(history, config.lookback_count)
    enabled_slots = [
        category.id for category in slot_categories()
        if is_category_enabled(enabled_categories, category.id)
    ]
    
    return AdvisoryRequest(
        item_descriptions=describe_items(available, recently_used),
        category_requirements=category_requirements_for(enabled_slots),
        recent_outfits=recent_outfit_summaries(history, config.lookback_count),
        theme=theme.strip() if theme and theme.strip() else None,
        pinned_items={category_id: item.id for category_id, item in fixed.items()},
    )


# ==================== PROPOSAL HANDLING ====================

def apply_selection(
    selection: Dict[str, Optional[str]],
    available_by_id: Dict[str, ClothingItem],
    enabled_categories: Dict[str, bool],
    fixed: Dict[str, ClothingItem]
) -> Tuple[Dict[str, Optional[ClothingItem]], int]:
    """
    Place proposed ids into slots, keeping only exact category matches.
    
    Pinned slots keep their pinned item whatever the stylist proposed.
    Unknown ids and misplaced items leave the slot empty; no substitute is
    picked here.
    
    Returns:
        Tuple of (slot map, number of misplaced proposals discarded)
    """
    outfit: Dict[str, Optional[ClothingItem]] = empty_outfit_items()
    violations = 0
    
    for category in slot_categories():
        if not is_category_enabled(enabled_categories, category.id):
            continue
        
        if category.id in fixed:
            outfit[category.id] = fixed[category.id]
            continue
        
        item_id = selection.get(category.id)
        if not item_id:
            continue
        if not isinstance(item_id, str):
            logger.warning(f"Stylist proposed a non-string id for {category.id}: {item_id!r}, ignoring")
            continue
        
        item = available_by_id.get(item_id)
        if item is None:
            logger.warning(f"Stylist proposed unknown item {item_id!r} for {category.id}, ignoring")
            continue
        
        if item.category_id != category.id:
            violations += 1
            logger.warning(
                f"Stylist tried to place {item.name} ({item.category_id}) in {category.id} slot. "
                f"Ignoring invalid placement."
            )
            continue
        
        outfit[category.id] = item
    
    return outfit, violations


def backfill_required(
    outfit: Dict[str, Optional[ClothingItem]],
    items_by_category: Dict[str, List[ClothingItem]],
    enabled_categories: Dict[str, bool],
    rng: random.Random
) -> List[str]:
    """
    Fill empty required slots uniformly from their own category.
    
    Returns:
        Slot ids that were backfilled
    """
    filled = []
    for category in slot_categories():
        if not category.required or outfit.get(category.id) is not None:
            continue
        if not is_category_enabled(enabled_categories, category.id):
            continue
        
        candidates = [
            item for item in items_by_category.get(category.id, [])
            if item.category_id == category.id
        ]
        if candidates:
            outfit[category.id] = rng.choice(candidates)
            filled.append(category.id)
    
    if filled:
        logger.info(f"Backfilled required slots the stylist left empty: {filled}")
    return filled


# ==================== SELECTOR ====================

async def _fallback(
    reason: str,
    items: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool],
    history: Sequence[OutfitLike],
    rng: random.Random,
    config: GenerationConfig,
    fixed: Dict[str, ClothingItem],
    integrity_violations: int = 0
) -> SelectionResult:
    logger.info(f"Falling back to random generation with variety logic (reason={reason})")
    result = await select_random(items, enabled_categories, history, rng, config, fixed)
    result.fallback_reason = reason
    result.integrity_violations += integrity_violations
    return result


async def select_with_advisory(
    items: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool],
    history: Sequence[OutfitLike],
    theme: Optional[str] = None,
    advisory_client: Optional[AdvisoryClient] = None,
    rng: Optional[random.Random] = None,
    config: Optional[GenerationConfig] = None,
    fixed: Optional[Dict[str, ClothingItem]] = None
) -> SelectionResult:
    """
    Generate an outfit with the stylist, degrading to random selection.
    
    Args:
        items: Full item pool
        enabled_categories: Category id -> enabled flag
        history: Previous outfits, newest-first
        theme: Optional free-text styling theme (e.g. "smart casual")
        advisory_client: Styling service; None skips straight to random
        rng: Seedable random source (backfill and fallback)
        config: Tuning constants
        fixed: Pre-validated pinned items (slot id -> item)
    
    Returns:
        SelectionResult with source "advisory", or the random selector's
        result with `fallback_reason` set
    """
    rng = rng or random.Random()
    config = config or GenerationConfig()
    fixed = fixed or {}
    
    available = filter_enabled_items(items, enabled_categories)
    
    if len(available) < config.min_advisory_items:
        return await _fallback("too_few_items", items, enabled_categories, history, rng, config, fixed)
    
    if advisory_client is None:
        return await _fallback("no_client", items, enabled_categories, history, rng, config, fixed)
    
    request = build_advisory_request(available, enabled_categories, history, theme, fixed, config)
    available_by_id = {item.id: item for item in available}
    items_by_category = group_by_category(available)
    
    max_attempts = max(1, config.max_advisory_attempts)
    total_violations = 0
    
    for attempt in range(1, max_attempts + 1):
        try:
            proposal = await advisory_client.propose_outfit(request)
        except AdvisoryError as e:
            logger.warning(f"Stylist attempt {attempt} failed: {e.message}")
            return await _fallback(
                e.reason, items, enabled_categories, history, rng, config, fixed, total_violations
            )
        except Exception as e:
            logger.warning(f"Stylist attempt {attempt} raised unexpectedly: {e}")
            return await _fallback(
                "error", items, enabled_categories, history, rng, config, fixed, total_violations
            )
        
        if not isinstance(getattr(proposal, "selection", None), dict):
            logger.warning(f"Stylist attempt {attempt} returned no selection mapping")
            return await _fallback(
                "unparseable", items, enabled_categories, history, rng, config, fixed, total_violations
            )
        
        outfit, violations = apply_selection(proposal.selection, available_by_id, enabled_categories, fixed)
        backfill_required(outfit, items_by_category, enabled_categories, rng)
        validated, late_violations = enforce_category_integrity(outfit, context="advisory")
        total_violations += violations + late_violations
        
        if not is_too_similar(validated, history, config.advisory_similarity_threshold, config.lookback_count):
            logger.info(f"Stylist outfit accepted on attempt {attempt}")
            return SelectionResult(
                items=validated,
                attempts=attempt,
                integrity_violations=total_violations,
                fresh=True,
                source="advisory",
                reasoning=proposal.reasoning or None,
                fixed_slots=sorted(fixed),
            )
        
        logger.info(f"Stylist attempt {attempt} was too similar to recent outfits, trying again...")
    
    return await _fallback(
        "no_variety", items, enabled_categories, history, rng, config, fixed, total_violations
    )
