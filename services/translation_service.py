"""
Translation Service - Runs one analyze request through the provider chain.

Request lifecycle:
    RECEIVED -> VALIDATED -> FAST_PATH_ATTEMPTED (Thai<->Chinese text only, each fast provider in order)
             -> FAST_PATH_OK -> RESPONDED | FAST_PATH_FAILED
             -> GENERATIVE_ATTEMPTED -> PARSE_OK -> RESPONDED | PARSE_FAILED -> ERROR_RESPONDED
    Any other error after RECEIVED ends in ERROR_RESPONDED.

Fast-path failures are absorbed and logged; only generative failures reach the caller.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from config import ProviderSettings
from services.errors import (
    BadInputError,
    ConfigurationError,
    ProviderError,
    ResponseParseError,
)
from services.fast_translation_service import (
    FastTranslationProvider,
    build_fast_item,
    build_fast_providers,
)
from services.generative_translation_service import translate_with_llm
from services.language_utils import resolve_direction
from services.llm_models.translation_models import (
    AnalyzeRequest,
    TranslationItem,
    TranslationResponse,
)
from services.llm_provider_factory import LLMProvider, get_llm_client

logger = logging.getLogger(__name__)


class RequestState(str, Enum):
    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    FAST_PATH_ATTEMPTED = "FAST_PATH_ATTEMPTED"
    FAST_PATH_OK = "FAST_PATH_OK"
    FAST_PATH_FAILED = "FAST_PATH_FAILED"
    GENERATIVE_ATTEMPTED = "GENERATIVE_ATTEMPTED"
    PARSE_OK = "PARSE_OK"
    PARSE_FAILED = "PARSE_FAILED"
    RESPONDED = "RESPONDED"
    ERROR_RESPONDED = "ERROR_RESPONDED"


@dataclass
class AttemptResult:
    """Outcome of one provider attempt: items on success, error on failure"""

    provider: str
    items: Optional[List[TranslationItem]] = None
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.items is not None


@dataclass
class RequestTrace:
    """States one request has passed through, oldest first"""

    states: List[RequestState] = field(default_factory=lambda: [RequestState.RECEIVED])

    @property
    def current(self) -> RequestState:
        return self.states[-1]

    def advance(self, new: RequestState) -> None:
        logger.debug(f"Request state {self.current.value} -> {new.value}")
        self.states.append(new)


# Fast-path translators only handle the Thai <-> Chinese pair
FAST_PATH_PAIRS = frozenset({("th", "zh"), ("zh", "th")})


class TranslationService:
    """Service to translate one analyze request through the configured providers"""

    def __init__(
        self,
        settings: ProviderSettings,
        fast_providers: Optional[List[FastTranslationProvider]] = None,
        llm_provider: Optional[LLMProvider] = None,
    ):
        self.settings = settings
        self.fast_providers = build_fast_providers(settings) if fast_providers is None else fast_providers

        # One SDK client per service; without a credential every request is refused in analyze()
        if llm_provider is None and settings.primary_api_key:
            llm_provider = get_llm_client(settings)
        self._llm_provider = llm_provider

    @staticmethod
    def parse_request(payload: Optional[Dict[str, Any]]) -> AnalyzeRequest:
        """
        Validate a raw JSON body into an AnalyzeRequest.

        Raises:
            BadInputError: Body missing, malformed, or carrying neither image nor text
        """
        if not isinstance(payload, dict):
            raise BadInputError("No image or text provided", details="Request body must be a JSON object")

        try:
            request = AnalyzeRequest.model_validate(payload)
        except ValueError as e:
            raise BadInputError("Invalid request", details=str(e))

        if request.kind is None:
            raise BadInputError("No image or text provided")

        source, target = resolve_direction(request.source_lang, request.target_lang)
        return request.model_copy(update={"source_lang": source, "target_lang": target})

    def analyze(
        self,
        payload: Optional[Dict[str, Any]],
        trace: Optional[RequestTrace] = None,
    ) -> TranslationResponse:
        """
        Translate one request.

        Args:
            payload: Parsed JSON request body
            trace: Records the lifecycle states this request passes through

        Returns:
            TranslationResponse with at least the provider's items

        Raises:
            BadInputError: Neither image nor text provided
            ConfigurationError: Generative provider credential missing
            ProviderError: Generative provider failed
            ResponseParseError: Generative output unusable
        """
        if trace is None:
            trace = RequestTrace()

        try:
            response = self._run(payload, trace)
        except Exception:
            trace.advance(RequestState.ERROR_RESPONDED)
            raise

        trace.advance(RequestState.RESPONDED)
        return response

    def _run(self, payload: Optional[Dict[str, Any]], trace: RequestTrace) -> TranslationResponse:
        request = self.parse_request(payload)
        trace.advance(RequestState.VALIDATED)

        if not self.settings.primary_api_key or self._llm_provider is None:
            raise ConfigurationError(
                "Server Config Error: Missing API Key",
                details=f"No API key configured for provider '{self.settings.llm_provider}'",
            )

        if self.uses_fast_path(request):
            trace.advance(RequestState.FAST_PATH_ATTEMPTED)
            for attempt in self.iter_fast_attempts(request):
                if attempt.ok:
                    trace.advance(RequestState.FAST_PATH_OK)
                    return TranslationResponse(items=attempt.items)
            trace.advance(RequestState.FAST_PATH_FAILED)

        trace.advance(RequestState.GENERATIVE_ATTEMPTED)
        try:
            response = translate_with_llm(request, self.settings, self._llm_provider)
        except ResponseParseError:
            trace.advance(RequestState.PARSE_FAILED)
            raise

        trace.advance(RequestState.PARSE_OK)
        return response

    def uses_fast_path(self, request: AnalyzeRequest) -> bool:
        """Text requests between Thai and Chinese go to the fast translators first"""
        return (
            request.kind == "text"
            and bool(self.fast_providers)
            and (request.source_lang, request.target_lang) in FAST_PATH_PAIRS
        )

    def iter_fast_attempts(self, request: AnalyzeRequest):
        """Yield one AttemptResult per fast provider, stopping after the first success"""
        for provider in self.fast_providers:
            result = self.attempt_fast_provider(provider, request)
            yield result
            if result.ok:
                return

    def attempt_fast_provider(self, provider: FastTranslationProvider, request: AnalyzeRequest) -> AttemptResult:
        """Run one fast provider, turning any failure into a failed AttemptResult"""
        logger.info(f"Trying fast-path provider {provider.name} ({request.source_lang}->{request.target_lang})")
        try:
            translated = provider.translate(request.text, request.source_lang, request.target_lang)
        except ProviderError as e:
            logger.warning(f"Fast-path provider {provider.name} failed: {e.message}; falling back")
            return AttemptResult(provider=provider.name, error=e)
        except Exception as e:
            logger.warning(f"Fast-path provider {provider.name} raised {type(e).__name__}: {e}; falling back")
            return AttemptResult(
                provider=provider.name,
                error=ProviderError(str(e), provider=provider.name),
            )

        item = build_fast_item(request.text, translated, request.source_lang, provider.name)
        logger.info(f"Fast-path provider {provider.name} succeeded")
        return AttemptResult(provider=provider.name, items=[item])

