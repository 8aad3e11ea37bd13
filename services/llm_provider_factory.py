"""
LLM Provider Factory
Provides a unified interface for different generative providers (Gemini, OpenAI, Mistral)
Allows easy swapping between providers via environment configuration
"""

import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from config import ProviderSettings
from services.errors import ConfigurationError, ProviderError, ProviderRateLimitError

logger = logging.getLogger(__name__)

# HTTP statuses that switch the request over to the fallback model
RATE_LIMIT_STATUSES = {429, 503}


def _status_of(error: Exception) -> Optional[int]:
    """HTTP status carried by an SDK exception, if any"""
    for attr in ("status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def _wrap_sdk_error(error: Exception, provider: str, model: str) -> ProviderError:
    """Map an SDK exception onto the service's provider errors"""
    status = _status_of(error)
    if status in RATE_LIMIT_STATUSES:
        return ProviderRateLimitError(
            f"{provider} model {model} is rate limited or unavailable (HTTP {status})",
            provider=provider,
            details=str(error),
        )
    return ProviderError(
        f"{provider} request failed for model {model}",
        provider=provider,
        details=str(error),
    )


def _data_url(image_b64: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{image_b64}"


class LLMProvider(ABC):
    """Abstract base class for generative providers"""

    @abstractmethod
    def generate_content(
        self,
        prompt: str,
        model: str,
        image_b64: Optional[str] = None,
        mime_type: str = "image/jpeg",
        json_mode: bool = True,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """
        Send a prompt (and optionally one image) to the provider.

        Returns a normalized response dictionary with:
        - content: str (the response text)
        - model: str (model used)
        - usage: dict (token usage stats)
        - raw_response: original API response object

        Raises:
            ProviderRateLimitError: On rate-limit / service-unavailable signals
            ProviderError: On any other provider failure
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """
        Return provider name.

        Returns:
            Provider name ('gemini', 'openai', 'mistral')
        """
        pass


class GeminiProvider(LLMProvider):
    """Google Gemini provider implementation"""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Gemini provider with API key"""
        import google.generativeai as genai

        if not api_key:
            raise ConfigurationError("Server Config Error: Missing API Key", details="GEMINI_API_KEY is not set")

        self.api_key = api_key
        self._genai = genai
        genai.configure(api_key=api_key)
        logger.info("Initialized Gemini provider")

    def generate_content(
        self,
        prompt: str,
        model: str,
        image_b64: Optional[str] = None,
        mime_type: str = "image/jpeg",
        json_mode: bool = True,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Generate content using the Gemini API"""
        parts: List[Any] = [prompt]
        if image_b64:
            try:
                image_bytes = base64.b64decode(image_b64)
            except ValueError as e:
                raise ProviderError("Image payload is not valid base64", provider="gemini", details=str(e))
            parts.append({"mime_type": mime_type, "data": image_bytes})

        generation_config = {"response_mime_type": "application/json"} if json_mode else None

        try:
            client = self._genai.GenerativeModel(model)
            response = client.generate_content(
                parts,
                generation_config=generation_config,
                request_options={"timeout": timeout},
            )
            content = response.text
        except Exception as e:
            raise _wrap_sdk_error(e, "gemini", model)

        usage_metadata = getattr(response, "usage_metadata", None)
        usage = {
            "prompt_tokens": getattr(usage_metadata, "prompt_token_count", 0) or 0,
            "completion_tokens": getattr(usage_metadata, "candidates_token_count", 0) or 0,
            "total_tokens": getattr(usage_metadata, "total_token_count", 0) or 0,
        }

        return {
            "content": content,
            "model": model,
            "usage": usage,
            "raw_response": response,
        }

    def get_provider_name(self) -> str:
        return "gemini"


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation"""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize OpenAI provider with API key"""
        from openai import OpenAI

        if not api_key:
            raise ConfigurationError("Server Config Error: Missing API Key", details="OPENAI_API_KEY is not set")

        self.api_key = api_key
        self.client = OpenAI(api_key=self.api_key)
        logger.info("Initialized OpenAI provider")

    def generate_content(
        self,
        prompt: str,
        model: str,
        image_b64: Optional[str] = None,
        mime_type: str = "image/jpeg",
        json_mode: bool = True,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Generate content using the OpenAI chat completions API"""
        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        if image_b64:
            content.append({"type": "image_url", "image_url": {"url": _data_url(image_b64, mime_type)}})

        api_params = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
            "temperature": 0.2,
            "timeout": timeout,
        }
        if json_mode:
            api_params["response_format"] = {"type": "json_object"}

        try:
            response = self.client.chat.completions.create(**api_params)
        except Exception as e:
            raise _wrap_sdk_error(e, "openai", model)

        return {
            "content": response.choices[0].message.content,
            "model": response.model,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response,
        }

    def get_provider_name(self) -> str:
        return "openai"


class MistralProvider(LLMProvider):
    """Mistral AI provider implementation (pixtral models accept images)"""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Mistral provider with API key"""
        from mistralai import Mistral

        if not api_key:
            raise ConfigurationError("Server Config Error: Missing API Key", details="MISTRAL_API_KEY is not set")

        self.api_key = api_key
        self.client = Mistral(api_key=self.api_key)
        logger.info("Initialized Mistral provider")

    def generate_content(
        self,
        prompt: str,
        model: str,
        image_b64: Optional[str] = None,
        mime_type: str = "image/jpeg",
        json_mode: bool = True,
        timeout: float = 30.0,
    ) -> Dict[str, Any]:
        """Generate content using the Mistral chat API"""
        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
        if image_b64:
            content.append({"type": "image_url", "image_url": _data_url(image_b64, mime_type)})

        api_params = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
            "temperature": 0.2,
            "timeout_ms": int(timeout * 1000),
        }
        if json_mode:
            api_params["response_format"] = {"type": "json_object"}

        try:
            # Mistral SDK uses chat.complete()
            response = self.client.chat.complete(**api_params)
        except Exception as e:
            raise _wrap_sdk_error(e, "mistral", model)

        return {
            "content": response.choices[0].message.content,
            "model": response.model,
            "usage": {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            },
            "raw_response": response,
        }

    def get_provider_name(self) -> str:
        return "mistral"


class LLMProviderFactory:
    """Factory class for creating LLM provider instances"""

    PROVIDERS = {
        "gemini": GeminiProvider,
        "openai": OpenAIProvider,
        "mistral": MistralProvider,
    }

    @staticmethod
    def create_provider(provider_name: str, api_key: Optional[str]) -> LLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_name: Provider to use ("gemini", "openai", "mistral")
            api_key: Credential for that provider

        Returns:
            LLMProvider instance

        Raises:
            ConfigurationError: If provider is not supported or API key is missing
        """
        provider_name = (provider_name or "").lower()
        logger.info(f"Creating LLM provider: {provider_name}")

        provider_class = LLMProviderFactory.PROVIDERS.get(provider_name)
        if provider_class is None:
            raise ConfigurationError(
                f"Unsupported LLM provider: {provider_name}",
                details=f"Supported providers: {', '.join(LLMProviderFactory.PROVIDERS)}",
            )
        return provider_class(api_key=api_key)


def get_llm_client(settings: ProviderSettings) -> LLMProvider:
    """
    Get the generative provider selected by the settings.

    This is a convenience wrapper around LLMProviderFactory.create_provider()
    for easier imports in service files.
    """
    return LLMProviderFactory.create_provider(settings.llm_provider, settings.primary_api_key)
