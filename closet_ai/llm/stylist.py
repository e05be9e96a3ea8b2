"""
Stylist Advisor (v1.2.0)
Asks an LLM stylist to propose one item per slot and parses its answer.

The stylist is advisory only: its proposal is validated against the catalog
by the advisory selector, and every failure here surfaces as AdvisoryError.
"""
import json
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from closet_ai.config.llm_config import ActiveLLMConfig
from closet_ai.config.providers import get_active_provider
from closet_ai.config.settings import Settings, get_settings
from closet_ai.core.categories import get_category
from closet_ai.llm.llm_adapter import LLMClient

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are a professional fashion stylist with expertise in color theory, style "
    "coordination, and current fashion trends. Always respond with valid JSON. Focus on "
    "creating variety and avoiding repetitive outfit combinations."
)

STYLE_GUIDELINES = """Fashion guidelines to follow:
1. COLOR HARMONY: complementary, analogous or monochromatic schemes; neutral bases with accent colors.
2. STYLE CONSISTENCY: match formality levels, balance fitted and loose pieces, keep one aesthetic.
3. VARIETY AND FRESHNESS: PRIORITIZE items NOT marked "recentlyUsed": true and avoid repeating recent combinations.
4. INTENTIONAL CHOICES: every piece should have a purpose; balance bold pieces with neutrals."""


class AdvisoryError(Exception):
    """The stylist could not produce a usable proposal."""
    def __init__(self, message: str, reason: str = "error"):
        self.message = message
        self.reason = reason
        super().__init__(self.message)


@dataclass
class AdvisoryRequest:
    """Everything the stylist is told about one generation."""
    item_descriptions: List[Dict[str, Any]]
    category_requirements: Dict[str, bool]
    recent_outfits: List[str] = field(default_factory=list)
    theme: Optional[str] = None
    pinned_items: Dict[str, str] = field(default_factory=dict)


@dataclass
class AdvisoryProposal:
    """Per-slot item ids (or None) plus free-text reasoning."""
    selection: Dict[str, Optional[str]]
    reasoning: str = ""


class AdvisoryClient:
    """Interface of the styling service consumed by the advisory selector."""
    
    async def propose_outfit(self, request: AdvisoryRequest) -> AdvisoryProposal:
        raise NotImplementedError


# ==================== PROMPT ====================

def build_user_prompt(request: AdvisoryRequest) -> str:
    """Build the stylist request from item descriptions, history, theme and pins."""
    prompt_parts = [
        "Available clothing items:",
        json.dumps(request.item_descriptions, indent=2),
        "",
    ]
    
    if request.recent_outfits:
        prompt_parts.extend([
            "Recent outfit history (AVOID creating similar combinations):",
            "\n".join(request.recent_outfits),
            "",
        ])
    
    if request.theme:
        prompt_parts.extend([
            f"Styling theme requested by the user: {request.theme}",
            "Choose pieces that fit this theme.",
            "",
        ])
    
    prompt_parts.append("Available categories and their requirements:")
    for category_id, required in request.category_requirements.items():
        label = "REQUIRED" if required else "OPTIONAL"
        prompt_parts.append(
            f'- {category_id}: {label} - ONLY select items with category "{category_id}"'
        )
    prompt_parts.append("")
    
    if request.pinned_items:
        prompt_parts.append("Pinned by the user (these slots are FIXED, build the rest around them):")
        for category_id, item_id in request.pinned_items.items():
            prompt_parts.append(f'- {category_id}: "{item_id}"')
        prompt_parts.append("")
    
    prompt_parts.extend([
        "CRITICAL RULE: each item can ONLY go in the slot named by its \"category\" field. "
        "If an item's category doesn't match the slot, DO NOT select it.",
        "",
        STYLE_GUIDELINES,
        "",
        "Select ONE item per category (if available). Return a JSON object with this exact structure:",
        json.dumps({
            "outfit": {category_id: "item_id_or_null" for category_id in request.category_requirements},
            "reasoning": "Why this combination is cohesive and different from recent outfits",
        }, indent=2),
        "",
        "Only include item IDs that exist in the provided list. Use null where you choose no item.",
    ])
    
    return "\n".join(prompt_parts)


def category_requirements_for(category_ids: List[str]) -> Dict[str, bool]:
    """Category id -> required flag, for the given slots."""
    requirements = {}
    for category_id in category_ids:
        category = get_category(category_id)
        if category is not None:
            requirements[category_id] = category.required
    return requirements


# ==================== RESPONSE PARSING ====================

def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Return the first well-formed JSON object embedded in `text`.
    
    Surrounding prose and markdown fences are ignored.
    
    Raises:
        AdvisoryError: If no JSON object can be decoded
    """
    if not text:
        raise AdvisoryError("Empty stylist response", reason="unparseable")
    
    decoder = json.JSONDecoder()
    index = text.find("{")
    while index != -1:
        try:
            value, _ = decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            index = text.find("{", index + 1)
            continue
        if isinstance(value, dict):
            return value
        index = text.find("{", index + 1)
    
    raise AdvisoryError("No JSON object found in stylist response", reason="unparseable")


def _normalize_item_id(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("id")
        if value is None:
            return None
    item_id = str(value).strip()
    if not item_id or item_id.lower() in ("null", "none"):
        return None
    return item_id


def parse_proposal(text: str) -> AdvisoryProposal:
    """
    Parse a stylist completion into a proposal.
    
    Raises:
        AdvisoryError: If the selection is missing or not an object
    """
    data = extract_json_object(text)
    selection = data.get("outfit", data.get("selection"))
    if not isinstance(selection, dict):
        raise AdvisoryError("Stylist response has no outfit selection", reason="unparseable")
    
    reasoning = data.get("reasoning") or ""
    return AdvisoryProposal(
        selection={str(category_id): _normalize_item_id(value) for category_id, value in selection.items()},
        reasoning=str(reasoning),
    )


# ==================== ADVISOR ====================

class StylistAdvisor(AdvisoryClient):
    """LLM-backed styling service."""
    
    def __init__(self, client: LLMClient, timeout_seconds: float = 20.0):
        self.client = client
        self.timeout_seconds = timeout_seconds
    
    async def propose_outfit(self, request: AdvisoryRequest) -> AdvisoryProposal:
        """
        Ask the stylist for one outfit.
        
        Raises:
            AdvisoryError: On timeout, provider failure or unparseable output
        """
        user_prompt = build_user_prompt(request)
        
        try:
            text = await asyncio.wait_for(
                self.client.generate_text(SYSTEM_PROMPT, user_prompt),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            raise AdvisoryError(f"Stylist timed out after {self.timeout_seconds}s", reason="timeout")
        except Exception as e:
            raise AdvisoryError(f"Stylist request failed: {e}", reason="error") from e
        
        proposal = parse_proposal(text)
        if proposal.reasoning:
            logger.info(f"Stylist reasoning: {proposal.reasoning[:200]}")
        return proposal
    
    def get_status(self) -> dict:
        return {**self.client.get_status(), "timeout_seconds": self.timeout_seconds}


def build_stylist_advisor(settings: Optional[Settings] = None) -> Optional[StylistAdvisor]:
    """
    Build the advisor for the active provider.
    
    Returns:
        StylistAdvisor, or None when the LLM is disabled or unconfigured
    """
    settings = settings or get_settings()
    provider = get_active_provider()
    if provider is None:
        return None
    
    config = ActiveLLMConfig.from_env(provider)
    return StylistAdvisor(LLMClient(config, settings), timeout_seconds=settings.llm_timeout_seconds)
