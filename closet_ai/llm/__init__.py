# LLM module
from closet_ai.llm.llm_adapter import LLMClient
from closet_ai.llm.stylist import (
    AdvisoryClient,
    AdvisoryError,
    AdvisoryProposal,
    AdvisoryRequest,
    StylistAdvisor,
    build_stylist_advisor,
    parse_proposal,
)
