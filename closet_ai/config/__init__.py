# Config module
from closet_ai.config.settings import get_settings, reload_settings, Settings, GenerationConfig
from closet_ai.config.providers import (
    get_provider_status,
    get_active_provider,
    get_provider_availability,
    validate_provider_config,
)
from closet_ai.config.llm_config import (
    LLMProvider,
    ActiveLLMConfig,
)
