"""
Providers Module (v1.2.0)
Stylist provider availability and selection.
"""
import logging
from typing import Optional, List, Dict, Any

from closet_ai.config.settings import get_settings

logger = logging.getLogger(__name__)


SUPPORTED_PROVIDERS = ["openai", "gemini", "http"]


def get_provider_availability() -> Dict[str, bool]:
    """Get availability status for each provider."""
    settings = get_settings()
    return {
        "openai": settings.has_openai(),
        "gemini": settings.has_gemini(),
        "http": settings.has_gateway(),
    }


def get_active_provider() -> Optional[str]:
    """
    Get the provider the stylist should use.
    
    The configured provider (CLOSET_LLM_PROVIDER) wins when it has
    credentials; otherwise the first available provider is used.
    
    Returns:
        Provider name or None if no provider available
    """
    settings = get_settings()
    
    if not settings.llm_enabled:
        logger.info("LLM is disabled via CLOSET_LLM_ENABLED")
        return None
    
    availability = get_provider_availability()
    preferred = settings.llm_provider
    
    if preferred in SUPPORTED_PROVIDERS:
        if availability.get(preferred):
            return preferred
        logger.warning(f"Preferred provider '{preferred}' not available, checking others...")
    
    for provider in SUPPORTED_PROVIDERS:
        if availability.get(provider):
            logger.info(f"Using available provider: {provider}")
            return provider
    
    logger.info("No LLM provider available - outfits will use random selection")
    return None


def get_provider_status() -> Dict[str, Any]:
    """
    Get complete provider status for health endpoint.
    
    Returns:
        Dict with enabled, availability, active provider
    """
    settings = get_settings()
    return {
        "enabled": settings.llm_enabled,
        "availability": get_provider_availability(),
        "active_provider": get_active_provider(),
        "timeout_seconds": settings.llm_timeout_seconds,
    }


def validate_provider_config() -> List[str]:
    """
    Validate provider configuration and return warnings.
    
    Returns:
        List of warning messages
    """
    settings = get_settings()
    availability = get_provider_availability()
    warnings = []
    
    if not settings.llm_enabled:
        warnings.append("LLM is disabled - outfits will use random selection only")
    
    if not any(availability.values()):
        warnings.append(
            "No LLM provider configured - set OPENAI_API_KEY, GEMINI_API_KEY or CLOSET_LLM_GATEWAY_URL"
        )
    
    preferred = settings.llm_provider
    if preferred not in SUPPORTED_PROVIDERS:
        warnings.append(f"Unknown provider: {preferred}")
    
    return warnings
