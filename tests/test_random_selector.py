"""
Tests for the constraint-based random selector.
"""
import asyncio
import random

from closet_ai.config.settings import GenerationConfig
from closet_ai.core.categories import required_category_ids, slot_ids
from closet_ai.core.random_selector import (
    pick_random_outfit,
    pick_with_freshness,
    select_random,
)
from closet_ai.core.variety import is_too_similar

REQUIRED = ["shirts", "pants", "belts", "shoes"]


def assert_category_integrity(items):
    assert set(items) == set(slot_ids())
    for category_id, item in items.items():
        assert item is None or item.category_id == category_id


class TestScenarios:
    """End-to-end selector behavior on small closets."""
    
    def test_empty_catalog(self, config):
        result = pick_random_outfit([], {}, [], random.Random(1), config)
        assert result.items == {category_id: None for category_id in slot_ids()}
    
    def test_minimal_wardrobe(self, build_closet, config):
        items = build_closet(1, REQUIRED)
        
        for seed in range(20):
            result = pick_random_outfit(items, {}, [], random.Random(seed), config)
            assert {k: v.id for k, v in result.items.items() if v} == {
                "shirts": "shirt_1", "pants": "pants_1", "belts": "belt_1", "shoes": "shoe_1",
            }
            assert result.items["hats"] is None
            assert result.items["jackets"] is None
            assert result.items["accessories"] is None
    
    def test_disabled_category_always_empty(self, closet, config):
        enabled = {"hats": False}
        for seed in range(50):
            result = pick_random_outfit(closet, enabled, [], random.Random(seed), config)
            assert result.items["hats"] is None
    
    def test_single_item_category_always_chosen(self, build_closet, make_item, config):
        items = build_closet(3, ["pants", "belts", "shoes"]) + [make_item("shirts", 9)]
        for seed in range(20):
            result = pick_random_outfit(items, {}, [], random.Random(seed), config)
            assert result.items["shirts"].id == "shirt_9"


class TestInvariants:
    """Properties that hold for every generation."""
    
    def test_category_integrity(self, closet, config):
        for seed in range(50):
            result = pick_random_outfit(closet, {}, [], random.Random(seed), config)
            assert_category_integrity(result.items)
            assert result.integrity_violations == 0
    
    def test_required_slots_filled(self, closet, config):
        for seed in range(50):
            result = pick_random_outfit(closet, {}, [], random.Random(seed), config)
            for category_id in required_category_ids():
                assert result.items[category_id] is not None
    
    def test_optional_slots_skipped_at_zero_probability(self, closet):
        config = GenerationConfig(optional_pick_probability=0.0, thinking_delay_seconds=0)
        result = pick_random_outfit(closet, {}, [], random.Random(3), config)
        
        assert result.items["hats"] is None
        assert result.items["jackets"] is None
        assert result.items["accessories"] is None
    
    def test_fixed_slot_never_repicked(self, closet, make_item, config):
        pinned = make_item("shirts", 3)
        for seed in range(20):
            result = pick_random_outfit(closet, {}, [], random.Random(seed), config, fixed={"shirts": pinned})
            assert result.items["shirts"] is pinned
            assert result.fixed_slots == ["shirts"]
    
    def test_seeded_rng_is_deterministic(self, closet, config):
        first = pick_random_outfit(closet, {}, [], random.Random(11), config)
        second = pick_random_outfit(closet, {}, [], random.Random(11), config)
        assert first.items == second.items


class TestVariety:
    """Freshness bias and retry budget."""
    
    def test_fresh_item_preferred(self, make_item):
        used, fresh = make_item("shirts", 1), make_item("shirts", 2)
        rng = random.Random(5)
        
        picks = {pick_with_freshness([used, fresh], {used.id}, rng, 1.0).id for _ in range(20)}
        assert picks == {"shirt_2"}
        
        picks = {pick_with_freshness([used, fresh], {used.id}, rng, 0.0).id for _ in range(20)}
        assert picks == {"shirt_1"}
    
    def test_all_used_picks_uniformly(self, make_item):
        candidates = [make_item("shirts", n) for n in range(1, 4)]
        rng = random.Random(5)
        
        picks = {
            pick_with_freshness(candidates, {item.id for item in candidates}, rng, 0.8).id
            for _ in range(100)
        }
        assert picks == {"shirt_1", "shirt_2", "shirt_3"}
    
    def test_exhausted_attempts_return_last_outfit(self, build_closet):
        items = build_closet(1)
        config = GenerationConfig(optional_pick_probability=1.0, thinking_delay_seconds=0)
        only_outfit = {item.category_id: item for item in items}
        
        result = pick_random_outfit(items, {}, [only_outfit], random.Random(1), config)
        
        assert result.attempts == config.max_random_attempts
        assert result.fresh is False
        assert {k: v.id for k, v in result.items.items()} == {k: v.id for k, v in only_outfit.items()}
    
    def test_variety_tendency(self, closet, make_item, config):
        history = [
            {category_id: make_item(category_id, number) for category_id in slot_ids()}
            for number in (1, 2, 3)
        ]
        
        first_try = 0
        for seed in range(100):
            result = pick_random_outfit(closet, {}, history, random.Random(seed), config)
            assert not is_too_similar(result.items, history, 0.6) or not result.fresh
            if result.attempts == 1:
                first_try += 1
        
        assert first_try >= 70


class TestAsyncSelector:
    """Awaitable wrapper."""
    
    def test_select_random(self, closet, config):
        result = asyncio.run(select_random(closet, {}, [], random.Random(2), config))
        assert result.source == "random"
        assert result.fallback_reason is None
        assert_category_integrity(result.items)
