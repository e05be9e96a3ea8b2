"""
LLM Initialization Adapter (v1.2.0)
Unified text-generation client with automatic fallback model.

Supports OpenAI, Gemini and a plain text-LLM HTTP gateway.
"""
import os
import logging
from typing import Optional, List, Dict

import httpx

from closet_ai.config.llm_config import ActiveLLMConfig
from closet_ai.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Text-generation client for the stylist, whichever provider is active.

    Example:
        client = LLMClient(ActiveLLMConfig.from_env())
        text = await client.generate_text(system, user)
    """
    
    def __init__(self, config: ActiveLLMConfig, settings: Optional[Settings] = None):
        self.config = config
        self.settings = settings or get_settings()
        self._openai_client = None
        self._gemini_model = None
        self._current_model = None
        self._fallback_used = False
        self._initialized = False
    
    def initialize(self, use_fallback: bool = False):
        """Create the provider client for the primary (or fallback) model."""
        model = self.config.resolve_model(use_fallback)
        self._fallback_used = use_fallback
        self._current_model = model
        
        if self.config.is_openai():
            self._init_openai(model)
        elif self.config.is_gemini():
            self._init_gemini(model)
        elif self.config.is_gateway():
            self._init_gateway(model)
        
        self._initialized = True
    
    def _init_openai(self, model: str):
        """Create the AsyncOpenAI client."""
        from openai import AsyncOpenAI
        
        api_key = self.settings.openai_api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY not set")
        
        self._openai_client = AsyncOpenAI(api_key=api_key)
        logger.info(f"OpenAI stylist: model={model}, fallback={self._fallback_used}")
    
    def _init_gemini(self, model: str):
        """Configure google.generativeai and bind the model."""
        import google.generativeai as genai
        
        api_key = self.settings.gemini_api_key or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise ValueError("GEMINI_API_KEY not set")
        
        genai.configure(api_key=api_key)
        self._gemini_model = genai.GenerativeModel(model)
        logger.info(f"Gemini stylist: model={model}, fallback={self._fallback_used}")
    
    def _init_gateway(self, model: str):
        """Check the text-LLM gateway is configured."""
        if not self.settings.llm_gateway_url:
            raise ValueError("CLOSET_LLM_GATEWAY_URL not set")
        logger.info(f"Gateway stylist: url={self.settings.llm_gateway_url}, fallback={self._fallback_used}")
    
    async def generate_text(self, system_prompt: str, user_prompt: str, json_mode: bool = True) -> str:
        """Generate text, retrying once on the fallback model."""
        if not self._initialized:
            self.initialize()
        
        try:
            return await self._generate_impl(system_prompt, user_prompt, json_mode)
        except Exception as e:
            if not self._fallback_used and self.config.fallback_model != self.config.model:
                logger.warning(f"Primary model failed ({e}), trying fallback...")
                self.initialize(use_fallback=True)
                return await self._generate_impl(system_prompt, user_prompt, json_mode)
            raise
    
    async def _generate_impl(self, system_prompt: str, user_prompt: str, json_mode: bool) -> str:
        """Dispatch to the active provider."""
        if self.config.is_openai():
            return await self._generate_openai(system_prompt, user_prompt, json_mode)
        elif self.config.is_gemini():
            return await self._generate_gemini(system_prompt, user_prompt, json_mode)
        elif self.config.is_gateway():
            return await self._generate_gateway(system_prompt, user_prompt)
        else:
            raise ValueError(f"Unsupported provider: {self.config.provider}")
    
    async def _generate_openai(self, system_prompt: str, user_prompt: str, json_mode: bool) -> str:
        """Chat completion, JSON mode when requested."""
        kwargs = {
            "model": self._current_model,
            "messages": self._messages(system_prompt, user_prompt),
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens
        }
        
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        
        response = await self._openai_client.chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""
    
    async def _generate_gemini(self, system_prompt: str, user_prompt: str, json_mode: bool) -> str:
        """Single-prompt Gemini call (no separate system role)."""
        combined = f"{system_prompt}\n\n{user_prompt}"
        
        if json_mode:
            combined += "\n\nRespond with valid JSON only, no markdown code blocks."
        
        response = await self._gemini_model.generate_content_async(
            combined,
            generation_config={
                "temperature": self.config.temperature,
                "max_output_tokens": self.config.max_tokens,
            },
        )
        return response.text
    
    async def _generate_gateway(self, system_prompt: str, user_prompt: str) -> str:
        """Generate using the text-LLM gateway ({"messages"} -> {"completion"})."""
        async with httpx.AsyncClient(timeout=self.settings.llm_timeout_seconds) as client:
            response = await client.post(
                self.settings.llm_gateway_url,
                json={"messages": self._messages(system_prompt, user_prompt)},
            )
            response.raise_for_status()
            data = response.json()
        
        completion = data.get("completion") if isinstance(data, dict) else None
        if not isinstance(completion, str):
            raise ValueError("Gateway response has no completion text")
        return completion
    
    @staticmethod
    def _messages(system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]
    
    def get_status(self) -> dict:
        """Provider, model and fallback state for /health."""
        return {
            "provider": self.config.provider.value,
            "model": self._current_model or self.config.model,
            "fallback_used": self._fallback_used,
            "initialized": self._initialized
        }
