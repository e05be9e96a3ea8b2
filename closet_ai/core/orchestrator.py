"""
Outfit Generation Orchestrator (v1.2.0)
Single entry point for generating an outfit.

Pins are resolved first and seeded into their slots, then the stylist path
runs (it defers to the random selector by itself when it cannot help). The
orchestrator holds no state: inputs come in as arguments and the caller
owns persisting the result.
"""
import time
import random
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from closet_ai.config.settings import GenerationConfig
from closet_ai.core.categories import default_enabled_categories, is_category_enabled, is_known_slot
from closet_ai.core.models import ClothingItem, Outfit, outfit_items_to_dict
from closet_ai.core.advisory_selector import select_with_advisory
from closet_ai.core.variety import OutfitLike
from closet_ai.llm.stylist import AdvisoryClient
from closet_ai.observability import log_generation, record_generation

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A generated outfit plus how it was produced."""
    items: Dict[str, Optional[ClothingItem]]
    source: str
    attempts: int
    reasoning: Optional[str] = None
    fallback_reason: Optional[str] = None
    integrity_violations: int = 0
    fresh: bool = True
    
    def to_outfit(self, name: Optional[str] = None) -> Outfit:
        return Outfit.create(self.items, name=name)
    
    def to_dict(self) -> dict:
        return {
            "items": outfit_items_to_dict(self.items),
            "source": self.source,
            "attempts": self.attempts,
            "reasoning": self.reasoning,
            "fallback_reason": self.fallback_reason,
            "integrity_violations": self.integrity_violations,
            "fresh": self.fresh,
        }


def resolve_pinned_items(
    items: Sequence[ClothingItem],
    enabled_categories: Dict[str, bool],
    pinned_items: Optional[Dict[str, str]]
) -> Dict[str, ClothingItem]:
    """
    Turn a pin map (slot id -> item id) into slot id -> item.
    
    A pin is honored only when the item exists, belongs to the pinned slot
    and the slot is enabled; anything else is dropped with a warning.
    """
    if not pinned_items:
        return {}
    
    by_id = {item.id: item for item in items}
    resolved: Dict[str, ClothingItem] = {}
    
    for category_id, item_id in pinned_items.items():
        if not is_known_slot(category_id):
            logger.warning(f"Ignoring pin for unknown category: {category_id}")
            continue
        if not is_category_enabled(enabled_categories, category_id):
            logger.info(f"Ignoring pin for disabled category: {category_id}")
            continue
        
        item = by_id.get(item_id)
        if item is None:
            logger.warning(f"Ignoring pin {category_id}={item_id}: item not in closet")
            continue
        if item.category_id != category_id:
            logger.warning(
                f"Ignoring pin {category_id}={item_id}: item belongs to {item.category_id}"
            )
            continue
        
        resolved[category_id] = item
    
    return resolved


async def generate_outfit(
    items: Sequence[ClothingItem],
    enabled_categories: Optional[Dict[str, bool]] = None,
    history: Optional[Sequence[OutfitLike]] = None,
    theme: Optional[str] = None,
    pinned_items: Optional[Dict[str, str]] = None,
    advisory_client: Optional[AdvisoryClient] = None,
    rng: Optional[random.Random] = None,
    config: Optional[GenerationConfig] = None,
    user_id: Optional[str] = None,
    provider: Optional[str] = None
) -> GenerationResult:
    """
    Generate one outfit.
    
    Args:
        items: Closet items
        enabled_categories: Category id -> enabled flag (default: all enabled)
        history: Previous outfits, newest-first
        theme: Optional styling theme
        pinned_items: Slot id -> item id the user pinned
        advisory_client: Styling service (None: random selection only)
        rng: Seedable random source
        config: Tuning constants
        user_id: Only used for logging
        provider: Stylist provider name, only used for logging
    
    Returns:
        GenerationResult whose `items` holds every schema slot
    """
    start_time = time.time()
    enabled = dict(enabled_categories) if enabled_categories is not None else default_enabled_categories()
    history = list(history or [])
    config = config or GenerationConfig()
    
    fixed = resolve_pinned_items(items, enabled, pinned_items)
    if fixed:
        logger.info(f"Pinned slots: {sorted(fixed)}")
    
    try:
        selection = await select_with_advisory(
            items,
            enabled,
            history,
            theme=theme,
            advisory_client=advisory_client,
            rng=rng,
            config=config,
            fixed=fixed,
        )
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.error(f"Outfit generation failed: {e}")
        record_generation("random", error=True)
        log_generation("none", 0, latency_ms, "fail", user_id=user_id, provider=provider, error=str(e))
        raise
    
    result = GenerationResult(
        items=selection.items,
        source=selection.source,
        attempts=selection.attempts,
        reasoning=selection.reasoning,
        fallback_reason=selection.fallback_reason,
        integrity_violations=selection.integrity_violations,
        fresh=selection.fresh,
    )
    
    latency_ms = int((time.time() - start_time) * 1000)
    record_generation(
        result.source,
        fallback_reason=result.fallback_reason,
        integrity_violations=result.integrity_violations,
        fresh=result.fresh,
    )
    log_generation(
        result.source,
        result.attempts,
        latency_ms,
        "success",
        user_id=user_id,
        provider=provider,
        fallback_reason=result.fallback_reason,
    )
    
    filled = [category_id for category_id, item in result.items.items() if item is not None]
    logger.info(f"Outfit generated via {result.source} in {latency_ms}ms: {filled}")
    return result


async def generate_outfit_items(
    items: Sequence[ClothingItem],
    enabled_categories: Optional[Dict[str, bool]] = None,
    history: Optional[Sequence[OutfitLike]] = None,
    theme: Optional[str] = None,
    pinned_items: Optional[Dict[str, str]] = None,
    **kwargs
) -> Dict[str, Optional[ClothingItem]]:
    """Same as generate_outfit, returning only the slot map."""
    result = await generate_outfit(items, enabled_categories, history, theme, pinned_items, **kwargs)
    return result.items
