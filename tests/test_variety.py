"""
Tests for outfit similarity, recently-used items and the too-similar check.
"""
import random

import pytest

from closet_ai.core.categories import slot_ids
from closet_ai.core.models import Outfit
from closet_ai.core.variety import (
    is_too_similar,
    outfit_similarity,
    recent_outfit_summaries,
    recently_used_item_ids,
)


@pytest.fixture
def outfit_of(make_item):
    """Factory: outfit_of(2) -> every slot filled with item number 2."""
    def _outfit(number, categories=None):
        return {category_id: make_item(category_id, number) for category_id in (categories or slot_ids())}
    return _outfit


class TestOutfitSimilarity:
    """Slot-match ratio."""
    
    def test_identical_full_outfit_scores_one(self, outfit_of):
        outfit = outfit_of(1)
        assert outfit_similarity(outfit, outfit) == 1.0
    
    def test_every_slot_counts_toward_total(self, outfit_of):
        partial = outfit_of(1, ["shirts", "pants", "belts", "shoes"])
        assert outfit_similarity(partial, partial) == pytest.approx(4 / 7)
    
    def test_disjoint_outfits_score_zero(self, outfit_of):
        assert outfit_similarity(outfit_of(1), outfit_of(2)) == 0.0
    
    def test_empty_slots_never_match(self):
        assert outfit_similarity({}, {}) == 0.0
    
    def test_same_item_in_different_slot_is_not_a_match(self, make_item):
        shirt = make_item("shirts", 1)
        assert outfit_similarity({"shirts": shirt}, {"jackets": shirt}) == 0.0
    
    def test_accepts_outfit_objects(self, outfit_of):
        items = outfit_of(1)
        assert outfit_similarity(Outfit.create(items), items) == 1.0
    
    def test_symmetric_and_bounded(self, make_item):
        rng = random.Random(7)
        
        def random_outfit():
            return {
                category_id: make_item(category_id, rng.randint(1, 3)) if rng.random() < 0.8 else None
                for category_id in slot_ids()
            }
        
        for _ in range(200):
            a, b = random_outfit(), random_outfit()
            score = outfit_similarity(a, b)
            assert score == outfit_similarity(b, a)
            assert 0.0 <= score <= 1.0


class TestRecentlyUsed:
    """Items worn in the most recent outfits."""
    
    def test_only_lookback_entries_count(self, outfit_of):
        history = [outfit_of(1), outfit_of(2), outfit_of(3), outfit_of(4)]
        used = recently_used_item_ids(history)
        
        assert "shirt_3" in used
        assert "shirt_4" not in used
    
    def test_custom_lookback(self, outfit_of):
        used = recently_used_item_ids([outfit_of(1), outfit_of(2)], lookback_count=1)
        assert used == {item.id for item in outfit_of(1).values()}
    
    def test_empty_history(self):
        assert recently_used_item_ids([]) == set()


class TestTooSimilar:
    """Threshold check against recent history."""
    
    def test_threshold_is_inclusive(self, make_item, outfit_of):
        history = [outfit_of(1)]
        # 3 of 7 slots shared
        candidate = dict(outfit_of(2))
        for category_id in ("shirts", "pants", "shoes"):
            candidate[category_id] = make_item(category_id, 1)
        
        assert is_too_similar(candidate, history, 3 / 7) is True
        assert is_too_similar(candidate, history, 0.4) is True
        assert is_too_similar(candidate, history, 0.5) is False
    
    def test_only_three_most_recent_compared(self, outfit_of):
        history = [outfit_of(2), outfit_of(3), outfit_of(4), outfit_of(1)]
        assert is_too_similar(outfit_of(1), history, 0.6) is False
        assert is_too_similar(outfit_of(1), history[::-1], 0.6) is True
    
    def test_empty_history_never_too_similar(self, outfit_of):
        assert is_too_similar(outfit_of(1), [], 0.0) is False


class TestSummaries:
    """Recent outfit lines for the stylist prompt."""
    
    def test_lists_item_names(self, make_item):
        history = [{"shirts": make_item("shirts", 1, name="Blue Oxford"), "hats": None}]
        assert recent_outfit_summaries(history) == ["Recent outfit 1: Blue Oxford"]
    
    def test_limited_to_lookback(self, outfit_of):
        assert len(recent_outfit_summaries([outfit_of(n) for n in range(1, 6)])) == 3
