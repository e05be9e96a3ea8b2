"""
Shared fixtures for Closet AI tests.
"""
import os
import sys
import random
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

# Tests never reach a real stylist or write generation logs
os.environ["CLOSET_LLM_ENABLED"] = "false"
os.environ["CLOSET_LOGGING_ENABLED"] = "false"
os.environ["CLOSET_THINKING_DELAY_SECONDS"] = "0"

from closet_ai.config.settings import GenerationConfig, reload_settings
from closet_ai.core.categories import slot_ids
from closet_ai.core.models import ClothingItem
from closet_ai.llm.stylist import AdvisoryClient
from closet_ai.observability import reset_metrics


ITEM_PREFIX = {
    "hats": "hat",
    "shirts": "shirt",
    "jackets": "jacket",
    "accessories": "accessory",
    "pants": "pants",
    "belts": "belt",
    "shoes": "shoe",
}


class FakeAdvisor(AdvisoryClient):
    """Replays canned proposals (or raises canned errors) and records requests."""
    
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []
    
    async def propose_outfit(self, request):
        self.requests.append(request)
        response = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def clean_state():
    """Fresh settings and metrics for every test."""
    reload_settings()
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def make_item():
    """Factory: make_item("shirts", 3) -> ClothingItem id "shirt_3"."""
    def _make(category_id, number=1, name=None, tags=None):
        item_id = f"{ITEM_PREFIX.get(category_id, category_id)}_{number}"
        return ClothingItem(
            id=item_id,
            category_id=category_id,
            name=name or f"{category_id.title()} {number}",
            tags=list(tags or []),
            created_at=1700000000000 + number,
        )
    return _make


@pytest.fixture
def build_closet(make_item):
    """Factory: N items in each of the given categories (default: every slot)."""
    def _build(per_category=3, categories=None):
        return [
            make_item(category_id, number)
            for category_id in (categories or slot_ids())
            for number in range(1, per_category + 1)
        ]
    return _build


@pytest.fixture
def closet(build_closet):
    """Three items in every slot category."""
    return build_closet(3)


@pytest.fixture
def config():
    """Default tuning without the thinking delay."""
    return GenerationConfig(thinking_delay_seconds=0)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def fake_advisor():
    """Factory for FakeAdvisor."""
    return FakeAdvisor
