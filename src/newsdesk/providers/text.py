"""Text generation provider using the Agno framework.

Each configured provider becomes an Agno model; the chat assistant's prompt
runs through an Agno ``Agent`` on the first provider that answers.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional, Protocol

from .config import ProviderConfig, ProviderSettings, TextProviderConfig, load_provider_config

_logger = logging.getLogger("ai_calls")


class TextGenerator(Protocol):
    """Opaque text-generation collaborator used by the chat assistant."""

    async def generate(self, prompt: str, context: str) -> str:
        ...


def _create_agno_model(
    provider_name: str,
    provider_config: TextProviderConfig,
    settings: Optional[ProviderSettings] = None,
) -> Any:
    """Create an Agno model instance for the given provider.

    Unknown provider names are treated as OpenAI-compatible endpoints and
    need a ``base_url``.
    """
    settings = settings or ProviderSettings()
    model_id = provider_config.model
    api_key = provider_config.get_api_key()
    base_url = provider_config.get_base_url()

    if provider_name == "ollama":
        from agno.models.ollama import Ollama
        return Ollama(
            id=model_id,
            host=base_url or "http://localhost:11434",
            timeout=provider_config.timeout,
            options={"temperature": settings.temperature, "num_predict": settings.max_tokens},
        )

    sampling = {
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
        "timeout": provider_config.timeout,
    }

    if provider_name == "openai":
        from agno.models.openai import OpenAIChat
        return OpenAIChat(id=model_id, api_key=api_key, base_url=base_url, **sampling)

    elif provider_name == "groq":
        from agno.models.groq import Groq
        return Groq(id=model_id, api_key=api_key, base_url=base_url, **sampling)

    else:
        from agno.models.openai.like import OpenAILike
        return OpenAILike(id=model_id, api_key=api_key or "not-provided", base_url=base_url, **sampling)


class TextProvider:
    """Text generation with priority-ordered provider fallback.

    Usage:
        provider = TextProvider()
        answer = await provider.generate("What happened today?", context_block)
    """

    def __init__(self, config: Optional[ProviderConfig] = None):
        """Initialize the text provider.

        Args:
            config: Provider configuration. If None, loads from default config file.
        """
        self.config = config or load_provider_config()
        self._current_provider: Optional[str] = None
        self._current_model: Optional[str] = None
        self._total_calls = 0

    @property
    def available(self) -> bool:
        return bool(self.config.get_enabled_text_providers())

    @property
    def current_provider(self) -> Optional[str]:
        return self._current_provider

    @property
    def current_model(self) -> Optional[str]:
        return self._current_model

    async def generate(self, prompt: str, context: str = "", system: Optional[str] = None) -> str:
        """Generate a reply to ``prompt``.

        Args:
            prompt: The user message.
            context: Context block appended to the system prompt.
            system: Optional system prompt.

        Returns:
            Generated text response.

        Raises:
            RuntimeError: If no provider is configured.
            Exception: The last provider error when every provider failed.
        """
        from agno.agent import Agent

        instructions = "\n\n".join(part for part in (system, context) if part) or None
        settings = self.config.provider_settings

        last_error: Optional[Exception] = None
        for provider_name, provider_config in self.config.get_enabled_text_providers():
            try:
                model = _create_agno_model(provider_name, provider_config, settings)
                model_id = getattr(model, "id", None) or provider_config.model

                self._current_provider = provider_name
                self._current_model = model_id
                start_time = time.time()

                _logger.info(
                    f"AI_REQUEST | provider:{provider_name} | model:{model_id} | "
                    f"context_chars:{len(context)}\n"
                    f"--- PROMPT ---\n{prompt}\n"
                    f"--- END REQUEST ---"
                )

                agent = Agent(model=model, instructions=instructions, markdown=False)
                response = await agent.arun(prompt)
                result = (response.content or "").strip()

                duration = time.time() - start_time
                self._total_calls += 1

                _logger.info(
                    f"AI_RESPONSE | provider:{provider_name} | model:{model_id} | "
                    f"duration:{duration:.2f}s\n"
                    f"--- RESPONSE ---\n{result}\n"
                    f"--- END RESPONSE ---"
                )
                return result

            except Exception as e:
                last_error = e
                _logger.warning(f"Provider {provider_name} failed: {e}")
                if not settings.fallback_on_error:
                    raise

        if last_error:
            raise last_error
        raise RuntimeError("No text providers available")
