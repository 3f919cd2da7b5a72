"""
Generation Service: turns prompts into free text or JSON objects.

The orchestration core only depends on the GenerationService protocol.
LiteLLMGenerationService is the default implementation backed by litellm.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import litellm

from .core.config import Settings, settings as default_settings
from .exceptions import GenerationError, MalformationError
from .llm_providers import ProviderConfig, get_provider_config

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"```(?:json)?\s*\n?|```")


@runtime_checkable
class GenerationService(Protocol):
    async def generate_structured(self, prompt: str, shape_description: str) -> Dict[str, Any]:
        """Return a JSON object for ``prompt``; raise GenerationError or MalformationError."""
        ...

    async def generate_text(self, prompt: str) -> str:
        """Return free text for ``prompt``; raise GenerationError."""
        ...


def json_only_instruction(shape_description: str) -> str:
    return (
        "You are a JSON-only response bot. You must output VALID JSON matching this "
        f"structure: {shape_description}. Do not include markdown formatting like ```json. "
        "Just the raw JSON string."
    )


def parse_json_payload(raw: str) -> Dict[str, Any]:
    """
    Parse a model response that should contain a single JSON object.

    Markdown fences are removed first, since models add them despite being told not to.

    Raises:
        MalformationError: If the text is not JSON or not a JSON object
    """
    cleaned = _JSON_FENCE.sub("", raw or "").strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformationError(f"Failed to parse AI response as JSON: {e.msg}") from e

    if not isinstance(payload, dict):
        raise MalformationError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )
    return payload


class LiteLLMGenerationService:
    """GenerationService backed by ``litellm.acompletion``."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model_name: Optional[str] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.provider_config: ProviderConfig = get_provider_config(provider, model_name, self.config)

    async def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        provider = self.provider_config
        if not provider.api_key:
            raise GenerationError(
                f"API key not configured for provider '{provider.provider.value}'. "
                "Set it in the environment or .env file."
            )

        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        request: Dict[str, Any] = {
            "model": provider.model_name,
            "messages": messages,
            "temperature": self.config.LLM_TEMPERATURE,
            "api_key": provider.api_key,
        }
        if provider.base_url:
            request["api_base"] = provider.base_url
        if self.config.LLM_REQUEST_TIMEOUT is not None:
            request["timeout"] = self.config.LLM_REQUEST_TIMEOUT

        try:
            response = await litellm.acompletion(**request)
        except Exception as e:
            logger.error(f"Generation request to {provider.model_name} failed: {e}", exc_info=True)
            raise GenerationError(f"Generation request failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise GenerationError(f"Unexpected completion response from {provider.model_name}") from e

        return content or ""

    async def generate_structured(self, prompt: str, shape_description: str) -> Dict[str, Any]:
        raw = await self.generate_text(prompt, system_instruction=json_only_instruction(shape_description))
        return parse_json_payload(raw)
