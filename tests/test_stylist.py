"""
Tests for the LLM stylist: prompt, response parsing and error mapping.
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from closet_ai.llm.stylist import (
    AdvisoryError,
    AdvisoryRequest,
    StylistAdvisor,
    build_stylist_advisor,
    build_user_prompt,
    category_requirements_for,
    extract_json_object,
    parse_proposal,
)


@pytest.fixture
def request_():
    return AdvisoryRequest(
        item_descriptions=[{"id": "shirt_1", "name": "Blue Oxford", "category": "shirts", "tags": [], "recentlyUsed": True}],
        category_requirements=category_requirements_for(["hats", "shirts"]),
        recent_outfits=["Recent outfit 1: Blue Oxford"],
        theme="beach",
        pinned_items={"shirts": "shirt_1"},
    )


class TestPrompt:
    """Stylist request text."""
    
    def test_requirements(self):
        assert category_requirements_for(["hats", "shirts", "capes"]) == {"hats": False, "shirts": True}
    
    def test_prompt_contents(self, request_):
        prompt = build_user_prompt(request_)
        
        assert '"shirt_1"' in prompt
        assert "Recent outfit 1: Blue Oxford" in prompt
        assert "Styling theme requested by the user: beach" in prompt
        assert "- hats: OPTIONAL" in prompt
        assert "- shirts: REQUIRED" in prompt
        assert '- shirts: "shirt_1"' in prompt
    
    def test_prompt_without_extras(self):
        prompt = build_user_prompt(AdvisoryRequest(item_descriptions=[], category_requirements={"shoes": True}))
        
        assert "Recent outfit history" not in prompt
        assert "Styling theme" not in prompt
        assert "Pinned by the user" not in prompt


class TestResponseParsing:
    """Tolerant JSON extraction."""
    
    def test_plain_json(self):
        assert extract_json_object('{"outfit": {}}') == {"outfit": {}}
    
    def test_json_in_prose_and_fences(self):
        text = 'Here you go:\n```json\n{"outfit": {"shirts": "shirt_1"}, "reasoning": "crisp"}\n```\nEnjoy!'
        assert extract_json_object(text)["outfit"] == {"shirts": "shirt_1"}
    
    def test_skips_broken_braces(self):
        text = 'Use {curly} braces wisely. {"outfit": {"pants": "pants_2"}}'
        assert extract_json_object(text) == {"outfit": {"pants": "pants_2"}}
    
    @pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{broken"])
    def test_unparseable(self, text):
        with pytest.raises(AdvisoryError) as exc:
            extract_json_object(text)
        assert exc.value.reason == "unparseable"
    
    def test_parse_proposal_normalizes_ids(self):
        text = json.dumps({
            "outfit": {"shirts": "shirt_1", "hats": "null", "belts": None, "shoes": {"id": "shoe_2"}, "pants": " "},
            "reasoning": "Earth tones",
        })
        proposal = parse_proposal(text)
        
        assert proposal.selection == {
            "shirts": "shirt_1", "hats": None, "belts": None, "shoes": "shoe_2", "pants": None,
        }
        assert proposal.reasoning == "Earth tones"
    
    def test_selection_key_accepted(self):
        assert parse_proposal('{"selection": {"shirts": "shirt_4"}}').selection == {"shirts": "shirt_4"}
    
    def test_missing_selection(self):
        with pytest.raises(AdvisoryError):
            parse_proposal('{"reasoning": "no outfit"}')


class TestStylistAdvisor:
    """LLM call wrapped with timeout and error mapping."""
    
    def test_proposal_returned(self, request_):
        client = MagicMock()
        client.generate_text = AsyncMock(return_value='{"outfit": {"shirts": "shirt_1"}, "reasoning": "ok"}')
        
        proposal = asyncio.run(StylistAdvisor(client).propose_outfit(request_))
        
        assert proposal.selection == {"shirts": "shirt_1"}
        system_prompt, user_prompt = client.generate_text.call_args.args
        assert "fashion stylist" in system_prompt
        assert "beach" in user_prompt
    
    def test_provider_error(self, request_):
        client = MagicMock()
        client.generate_text = AsyncMock(side_effect=ValueError("401 Unauthorized"))
        
        with pytest.raises(AdvisoryError) as exc:
            asyncio.run(StylistAdvisor(client).propose_outfit(request_))
        assert exc.value.reason == "error"
    
    def test_timeout(self, request_):
        async def slow(*args):
            await asyncio.sleep(5)
        
        client = MagicMock()
        client.generate_text = slow
        
        with pytest.raises(AdvisoryError) as exc:
            asyncio.run(StylistAdvisor(client, timeout_seconds=0.05).propose_outfit(request_))
        assert exc.value.reason == "timeout"


class TestBuildAdvisor:
    """Provider selection."""
    
    def test_none_without_provider(self):
        with patch("closet_ai.llm.stylist.get_active_provider", return_value=None):
            assert build_stylist_advisor() is None
    
    def test_gateway_advisor(self):
        with patch("closet_ai.llm.stylist.get_active_provider", return_value="http"):
            advisor = build_stylist_advisor()
        
        assert advisor.client.config.is_gateway()
        assert advisor.timeout_seconds == 20.0
