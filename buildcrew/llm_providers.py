"""
LLM provider configuration for the Generation Service.

Supported providers:
- Mistral (default, Codestral)
- Groq
- OpenAI
- OpenRouter
- Google Gemini

Model strings are in litellm format; credentials are read from Settings and
passed per request instead of through process-wide environment variables.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    MISTRAL = "mistral"
    GROQ = "groq"
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    GEMINI = "gemini"


@dataclass
class ProviderConfig:
    """Resolved configuration for one provider."""
    provider: LLMProvider
    model_name: str
    api_key: Optional[str] = None
    base_url: Optional[str] = None


# Default model per provider (litellm format)
DEFAULT_MODELS = {
    LLMProvider.MISTRAL: "mistral/codestral-latest",
    LLMProvider.GROQ: "groq/llama-3.3-70b-versatile",
    LLMProvider.OPENAI: "gpt-4o-mini",
    LLMProvider.OPENROUTER: "openrouter/openai/gpt-4o-mini",
    LLMProvider.GEMINI: "gemini/gemini-1.5-pro",
}

# litellm prefix expected in front of a bare model name
_MODEL_PREFIXES = {
    LLMProvider.MISTRAL: "mistral/",
    LLMProvider.GROQ: "groq/",
    LLMProvider.OPENAI: "",
    LLMProvider.OPENROUTER: "openrouter/",
    LLMProvider.GEMINI: "gemini/",
}

_API_KEY_SETTINGS = {
    LLMProvider.MISTRAL: "MISTRAL_API_KEY",
    LLMProvider.GROQ: "GROQ_API_KEY",
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
    LLMProvider.GEMINI: "GEMINI_API_KEY",
}


def _qualify_model(provider: LLMProvider, model_name: str) -> str:
    prefix = _MODEL_PREFIXES[provider]
    if not prefix or model_name.startswith(prefix):
        return model_name
    return f"{prefix}{model_name}"


def get_provider_config(
    provider: Optional[str] = None,
    model_name: Optional[str] = None,
    config: Optional[Settings] = None,
) -> ProviderConfig:
    """
    Get configuration for the specified provider.

    Args:
        provider: Provider name (defaults to MODEL_PROVIDER setting)
        model_name: Model name (defaults to MODEL_NAME setting or provider default)
        config: Settings to read from (defaults to the module-level settings)

    Returns:
        ProviderConfig with model string, API key and base URL
    """
    config = config or default_settings
    provider_str = (provider or config.MODEL_PROVIDER or "mistral").lower()

    try:
        llm_provider = LLMProvider(provider_str)
    except ValueError:
        logger.warning(f"Unknown provider '{provider_str}', falling back to mistral")
        llm_provider = LLMProvider.MISTRAL

    final_model = model_name or config.MODEL_NAME
    final_model = _qualify_model(llm_provider, final_model) if final_model else DEFAULT_MODELS[llm_provider]

    return ProviderConfig(
        provider=llm_provider,
        model_name=final_model,
        api_key=getattr(config, _API_KEY_SETTINGS[llm_provider]),
        base_url=config.OPENROUTER_BASE_URL if llm_provider == LLMProvider.OPENROUTER else None,
    )


def validate_provider_config(provider: str, config: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Validate that the required configuration is present for a provider.

    Returns:
        Dict with 'valid' bool, 'missing' list of missing setting names and 'provider'
    """
    config = config or default_settings
    provider_str = provider.lower()
    missing = []

    try:
        key_setting = _API_KEY_SETTINGS[LLMProvider(provider_str)]
    except ValueError:
        return {"valid": False, "missing": [], "provider": provider_str, "error": "unknown provider"}

    if not getattr(config, key_setting):
        missing.append(key_setting)

    return {
        "valid": len(missing) == 0,
        "missing": missing,
        "provider": provider_str,
    }


def list_available_providers(config: Optional[Settings] = None) -> Dict[str, Dict[str, Any]]:
    """Map every provider to its configuration status and default model."""
    providers = {}
    for p in LLMProvider:
        validation = validate_provider_config(p.value, config)
        providers[p.value] = {
            "configured": validation["valid"],
            "missing_config": validation["missing"],
            "default_model": DEFAULT_MODELS.get(p),
        }
    return providers
