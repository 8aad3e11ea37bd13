"""
Generative Translation Service
Handles image and text translation through a generative provider (Gemini, OpenAI, Mistral).
A rate-limited primary model gets exactly one retry on the fallback model.
"""

import logging
from typing import Optional

from config import ProviderSettings
from services.errors import ProviderRateLimitError
from services.llm_models.translation_models import AnalyzeRequest, TranslationResponse
from services.llm_provider_factory import LLMProvider
from services.prompt_builder import build_prompt
from services.response_sanitizer import parse_translation_response

logger = logging.getLogger(__name__)


def generate_with_fallback(
    provider: LLMProvider,
    prompt: str,
    primary_model: str,
    fallback_model: Optional[str],
    image_b64: Optional[str] = None,
    timeout: float = 30.0,
) -> dict:
    """
    Call the primary model, switching once to the fallback model on a rate limit.

    Returns:
        The provider's normalized response dictionary

    Raises:
        ProviderRateLimitError: Primary was rate limited and no distinct fallback exists,
                                or the fallback was rate limited too
        ProviderError: Any other provider failure
    """
    try:
        return provider.generate_content(prompt, model=primary_model, image_b64=image_b64, timeout=timeout)
    except ProviderRateLimitError as e:
        if not fallback_model or fallback_model == primary_model:
            raise
        logger.warning(f"{primary_model} unavailable ({e.message}); retrying with {fallback_model}")

    return provider.generate_content(prompt, model=fallback_model, image_b64=image_b64, timeout=timeout)


def translate_with_llm(
    request: AnalyzeRequest,
    settings: ProviderSettings,
    provider: LLMProvider,
) -> TranslationResponse:
    """
    Translate an image or text request with the generative provider.

    Args:
        request: Validated analyze request (image or text)
        settings: Provider settings (models, credentials, timeout)
        provider: Generative provider client

    Returns:
        Validated TranslationResponse

    Raises:
        ProviderError: Provider call failed (after the fallback model, if any)
        ResponseParseError: Output not parseable as JSON
        ResponseSchemaError: Output parseable but not an item list
    """
    prompt = build_prompt(
        kind=request.kind,
        mode=request.mode,
        source=request.source_lang,
        target=request.target_lang,
        text=request.text,
    )

    logger.info(
        f"Generative translation: provider={provider.get_provider_name()}, "
        f"kind={request.kind}, mode={request.mode}, "
        f"{request.source_lang}->{request.target_lang}, model={settings.primary_model}"
    )

    response = generate_with_fallback(
        provider,
        prompt,
        primary_model=settings.primary_model,
        fallback_model=settings.fallback_model,
        image_b64=request.image if request.kind == "image" else None,
        timeout=settings.request_timeout,
    )

    raw_text = response.get("content") or ""
    logger.debug(f"Raw generative response ({response.get('model')}): {raw_text}")

    parsed = parse_translation_response(raw_text)

    for index, item in enumerate(parsed.items, start=1):
        if item.id is None:
            item.id = index
        if not item.category:
            item.category = response.get("model")

    logger.info(
        f"Generative translation successful: {len(parsed.items)} item(s), "
        f"tokens={response.get('usage', {}).get('total_tokens', 0)}"
    )
    return parsed
