"""
Settings Module (v1.2.0)
Centralized configuration from environment variables.
"""
import os
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class GenerationConfig:
    """
    Tuning constants for outfit generation.
    
    These are empirical values; they are kept configurable rather than
    baked into the selectors.
    """
    lookback_count: int = 3
    random_similarity_threshold: float = 0.6
    advisory_similarity_threshold: float = 0.5
    optional_pick_probability: float = 0.7
    fresh_pick_probability: float = 0.8
    max_random_attempts: int = 5
    max_advisory_attempts: int = 3
    min_advisory_items: int = 3
    thinking_delay_seconds: float = 1.0
    history_limit: int = 50

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Override defaults from CLOSET_* variables (unset ones keep the default)."""
        defaults = cls()
        return cls(
            lookback_count=int(os.getenv("CLOSET_LOOKBACK_COUNT", defaults.lookback_count)),
            random_similarity_threshold=float(
                os.getenv("CLOSET_RANDOM_SIMILARITY_THRESHOLD", defaults.random_similarity_threshold)
            ),
            advisory_similarity_threshold=float(
                os.getenv("CLOSET_ADVISORY_SIMILARITY_THRESHOLD", defaults.advisory_similarity_threshold)
            ),
            optional_pick_probability=float(
                os.getenv("CLOSET_OPTIONAL_PICK_PROBABILITY", defaults.optional_pick_probability)
            ),
            fresh_pick_probability=float(os.getenv("CLOSET_FRESH_PICK_PROBABILITY", defaults.fresh_pick_probability)),
            max_random_attempts=int(os.getenv("CLOSET_MAX_RANDOM_ATTEMPTS", defaults.max_random_attempts)),
            max_advisory_attempts=int(os.getenv("CLOSET_MAX_ADVISORY_ATTEMPTS", defaults.max_advisory_attempts)),
            min_advisory_items=int(os.getenv("CLOSET_MIN_ADVISORY_ITEMS", defaults.min_advisory_items)),
            thinking_delay_seconds=float(os.getenv("CLOSET_THINKING_DELAY_SECONDS", defaults.thinking_delay_seconds)),
            history_limit=int(os.getenv("CLOSET_HISTORY_LIMIT", defaults.history_limit)),
        )

    def to_dict(self) -> dict:
        return {
            "lookback_count": self.lookback_count,
            "random_similarity_threshold": self.random_similarity_threshold,
            "advisory_similarity_threshold": self.advisory_similarity_threshold,
            "optional_pick_probability": self.optional_pick_probability,
            "fresh_pick_probability": self.fresh_pick_probability,
            "max_random_attempts": self.max_random_attempts,
            "max_advisory_attempts": self.max_advisory_attempts,
            "min_advisory_items": self.min_advisory_items,
            "thinking_delay_seconds": self.thinking_delay_seconds,
            "history_limit": self.history_limit,
        }


@dataclass
class Settings:
    """Application settings from environment variables."""
    
    # API Keys
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    llm_gateway_url: Optional[str] = None
    
    # LLM Configuration
    llm_enabled: bool = True
    llm_provider: str = "openai"
    llm_timeout_seconds: float = 20.0
    
    # Storage
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "closet_ai"
    
    # Observability
    logging_enabled: bool = True
    logs_dir: str = "logs"
    
    # Generation tuning
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    
    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            # API Keys
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            llm_gateway_url=os.getenv("CLOSET_LLM_GATEWAY_URL"),
            
            # LLM Configuration
            llm_enabled=_env_bool("CLOSET_LLM_ENABLED", "true"),
            llm_provider=os.getenv("CLOSET_LLM_PROVIDER", "openai").lower(),
            llm_timeout_seconds=float(os.getenv("CLOSET_LLM_TIMEOUT_SECONDS", "20")),
            
            # Storage
            mongo_uri=os.getenv("CLOSET_MONGO_URI", "mongodb://localhost:27017"),
            mongo_db_name=os.getenv("CLOSET_MONGO_DB", "closet_ai"),
            
            # Observability
            logging_enabled=_env_bool("CLOSET_LOGGING_ENABLED", "true"),
            logs_dir=os.getenv("CLOSET_LOGS_DIR", "logs"),
            
            # Generation tuning
            generation=GenerationConfig.from_env(),
        )
    
    def has_openai(self) -> bool:
        """Check if OpenAI API key is configured."""
        return bool(self.openai_api_key)
    
    def has_gemini(self) -> bool:
        """Check if Gemini API key is configured."""
        return bool(self.gemini_api_key)
    
    def has_gateway(self) -> bool:
        """Check if a text-LLM gateway URL is configured."""
        return bool(self.llm_gateway_url)
    
    def generation_config(self) -> GenerationConfig:
        return self.generation
    
    def to_dict(self) -> dict:
        """Export settings as dict (without sensitive keys)."""
        return {
            "llm_enabled": self.llm_enabled,
            "llm_provider": self.llm_provider,
            "llm_timeout_seconds": self.llm_timeout_seconds,
            "openai_configured": self.has_openai(),
            "gemini_configured": self.has_gemini(),
            "gateway_configured": self.has_gateway(),
            "mongo_db_name": self.mongo_db_name,
            "logging_enabled": self.logging_enabled,
            "generation": self.generation.to_dict(),
        }


def get_settings() -> Settings:
    """Get application settings (cached singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.info(f"Settings loaded: {_settings.to_dict()}")
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings.from_env()
    logger.info(f"Settings reloaded: {_settings.to_dict()}")
    return _settings


# Singleton instance
_settings: Optional[Settings] = None
