"""
LLM Configuration Layer (v1.2.0)
Model-agnostic config for the stylist (outfit advisory) model.

Environment Variables:
    - CLOSET_LLM_PROVIDER: read through Settings.llm_provider ("openai" | "gemini" | "http")
    - CLOSET_LLM_MODEL: Override default model (optional)
    - CLOSET_LLM_FALLBACK_MODEL: Override fallback model (optional)
    - CLOSET_LLM_TEMPERATURE / CLOSET_LLM_MAX_TOKENS
"""
import os
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional

from closet_ai.config.settings import get_settings

logger = logging.getLogger(__name__)


# ==================== ENUMS ====================

class LLMProvider(Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    GEMINI = "gemini"
    HTTP = "http"        # Text-LLM gateway: {"messages": [...]} -> {"completion": "..."}


# ==================== PROVIDER DEFAULTS ====================

@dataclass
class OpenAIConfig:
    """OpenAI model configuration."""
    default_model: str = "gpt-4o-mini"
    fallback_model: str = "gpt-4o-mini"
    temperature: float = 0.7
    max_tokens: int = 1200


@dataclass
class GeminiConfig:
    """Gemini model configuration."""
    default_model: str = "gemini-1.5-flash"
    fallback_model: str = "gemini-1.5-flash-8b"
    temperature: float = 0.7
    max_tokens: int = 1200


@dataclass
class GatewayConfig:
    """Text-LLM gateway configuration (model is chosen by the gateway)."""
    default_model: str = "gateway-default"
    fallback_model: str = "gateway-default"
    temperature: float = 0.7
    max_tokens: int = 1200


_DEFAULTS = {
    LLMProvider.OPENAI: OpenAIConfig,
    LLMProvider.GEMINI: GeminiConfig,
    LLMProvider.HTTP: GatewayConfig,
}


# ==================== ACTIVE CONFIG ====================

@dataclass
class ActiveLLMConfig:
    """Active stylist model configuration."""
    provider: LLMProvider
    model: str
    fallback_model: str
    temperature: float
    max_tokens: int
    
    @classmethod
    def from_env(cls, provider: Optional[str] = None) -> "ActiveLLMConfig":
        """Resolve configuration from environment variables."""
        provider_str = (provider or get_settings().llm_provider).lower()
        
        try:
            resolved = LLMProvider(provider_str)
        except ValueError:
            logger.warning(f"Unknown LLM provider '{provider_str}', using openai")
            resolved = LLMProvider.OPENAI
        
        defaults = _DEFAULTS[resolved]()
        
        config = cls(
            provider=resolved,
            model=os.getenv("CLOSET_LLM_MODEL", defaults.default_model),
            fallback_model=os.getenv("CLOSET_LLM_FALLBACK_MODEL", defaults.fallback_model),
            temperature=float(os.getenv("CLOSET_LLM_TEMPERATURE", str(defaults.temperature))),
            max_tokens=int(os.getenv("CLOSET_LLM_MAX_TOKENS", str(defaults.max_tokens))),
        )
        
        logger.info(f"LLM Config: provider={resolved.value}, model={config.model}")
        return config
    
    def resolve_model(self, use_fallback: bool = False) -> str:
        return self.fallback_model if use_fallback else self.model
    
    def is_openai(self) -> bool:
        return self.provider == LLMProvider.OPENAI
    
    def is_gemini(self) -> bool:
        return self.provider == LLMProvider.GEMINI
    
    def is_gateway(self) -> bool:
        return self.provider == LLMProvider.HTTP
    
    def to_dict(self) -> dict:
        return {
            "provider": self.provider.value,
            "model": self.model,
            "fallback_model": self.fallback_model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens
        }
