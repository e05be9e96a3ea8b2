"""
Tests for the outfit generation entry point: pins, metrics and error policy.
"""
import asyncio
import random
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from closet_ai.core.categories import slot_ids
from closet_ai.core.orchestrator import generate_outfit, generate_outfit_items, resolve_pinned_items
from closet_ai.llm.stylist import AdvisoryProposal, StylistAdvisor
from closet_ai.observability import get_metrics


def run(coro):
    return asyncio.run(coro)


class TestPins:
    """Pinned items override every selection path."""
    
    def test_pinned_shirt_every_time(self, build_closet, config):
        items = build_closet(5, ["shirts"]) + build_closet(3, ["pants", "belts", "shoes", "hats"])
        
        for seed in range(20):
            result = run(generate_outfit(
                items, pinned_items={"shirts": "shirt_3"}, rng=random.Random(seed), config=config
            ))
            assert result.items["shirts"].id == "shirt_3"
    
    def test_pin_beats_stylist(self, closet, config, fake_advisor):
        advisor = fake_advisor([AdvisoryProposal(selection={"shirts": "shirt_1", "pants": "pants_1"})])
        
        result = run(generate_outfit(
            closet, pinned_items={"shirts": "shirt_3"}, advisory_client=advisor,
            rng=random.Random(1), config=config
        ))
        
        assert result.source == "advisory"
        assert result.items["shirts"].id == "shirt_3"
        assert result.items["pants"].id == "pants_1"
    
    def test_invalid_pins_ignored(self, closet, make_item):
        pins = {
            "shirts": "pants_1",       # wrong category
            "pants": "pants_404",      # not in closet
            "hats": "hat_1",           # slot disabled
            "capes": "cape_1",         # unknown slot
            "shoes": "shoe_2",
        }
        resolved = resolve_pinned_items(closet, {"hats": False}, pins)
        assert {k: v.id for k, v in resolved.items()} == {"shoes": "shoe_2"}
    
    def test_no_pins(self, closet):
        assert resolve_pinned_items(closet, {}, None) == {}


class TestGeneration:
    """Result shape and defaults."""
    
    def test_empty_catalog(self, config):
        result = run(generate_outfit([], config=config))
        assert result.items == {category_id: None for category_id in slot_ids()}
        assert result.source == "random"
    
    def test_default_enables_everything(self, closet):
        from closet_ai.config.settings import GenerationConfig
        config = GenerationConfig(optional_pick_probability=1.0, thinking_delay_seconds=0)
        
        result = run(generate_outfit(closet, None, None, rng=random.Random(4), config=config))
        assert all(item is not None for item in result.items.values())
    
    def test_stylist_failure_still_yields_outfit(self, closet, config):
        client = MagicMock()
        client.generate_text = AsyncMock(side_effect=ConnectionError("gateway down"))
        
        result = run(generate_outfit(
            closet, advisory_client=StylistAdvisor(client), rng=random.Random(1), config=config
        ))
        
        assert result.source == "random"
        assert result.fallback_reason == "error"
        for category_id, item in result.items.items():
            assert item is None or item.category_id == category_id
    
    def test_generate_outfit_items(self, closet, config):
        items = run(generate_outfit_items(closet, config=config, rng=random.Random(1)))
        assert set(items) == set(slot_ids())
    
    def test_result_serialization(self, closet, config):
        result = run(generate_outfit(closet, config=config, rng=random.Random(1)))
        data = result.to_dict()
        
        assert set(data["items"]) == set(slot_ids())
        assert data["fallback_reason"] == "no_client"
        
        outfit = result.to_outfit(name="Friday")
        assert outfit.name == "Friday"
        assert outfit.items == result.items


class TestMetricsAndErrors:
    """Observability around each generation."""
    
    def test_metrics_recorded(self, closet, config, fake_advisor):
        advisor = fake_advisor([AdvisoryProposal(selection={"shirts": "shirt_2"})])
        run(generate_outfit(closet, advisory_client=advisor, rng=random.Random(1), config=config))
        run(generate_outfit(closet, rng=random.Random(2), config=config))
        
        metrics = get_metrics()
        assert metrics["total_generations"] == 2
        assert metrics["advisory_generations"] == 1
        assert metrics["random_generations"] == 1
        assert metrics["advisory_ratio"] == 0.5
        assert metrics["advisory_fallbacks"] == {"no_client": 1}
    
    def test_unexpected_error_propagates(self, closet, config):
        with patch(
            "closet_ai.core.orchestrator.select_with_advisory",
            AsyncMock(side_effect=KeyError("schema"))
        ):
            with pytest.raises(KeyError):
                run(generate_outfit(closet, config=config))
        
        assert get_metrics()["errors"] == 1
    
    def test_generation_logged(self, closet, config):
        with patch("closet_ai.core.orchestrator.log_generation") as mock_log:
            run(generate_outfit(closet, config=config, user_id="user_1", rng=random.Random(1)))
        
        args, kwargs = mock_log.call_args
        assert args[0] == "random"
        assert args[3] == "success"
        assert kwargs["user_id"] == "user_1"
        assert kwargs["fallback_reason"] == "no_client"
