"""
Fast-path Translation Service
Plain-text translators tried before the generative provider.
They return a bare translated string; the caller builds the item around it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import requests

from config import ProviderSettings
from services.allergen_detector import contains_shellfish
from services.errors import ModelLoadingError, ProviderError
from services.language_utils import get_nllb_code, get_relay_code
from services.llm_models.translation_models import TranslationItem
from services.retry import retry_with_backoff

logger = logging.getLogger(__name__)

HF_INFERENCE_URL = "https://router.huggingface.co/hf-inference/models/{model}"


class FastTranslationProvider(ABC):
    """Abstract base class for plain-text translators"""

    # Provider identity shown in TranslationItem.category
    name: str = ""

    @abstractmethod
    def translate(self, text: str, source: str, target: str) -> str:
        """
        Translate text and return the translated string.

        Raises:
            ProviderError: On network errors, non-2xx statuses or malformed payloads
        """
        pass


class RelayTranslationProvider(FastTranslationProvider):
    """Google Translate exposed through an Apps Script web app.

    The relay accepts ``{text, source, target}`` and answers
    ``{"status": "success", "translated": "..."}``.
    """

    name = "Google Translate"

    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    def translate(self, text: str, source: str, target: str) -> str:
        payload = {
            "text": text,
            "source": get_relay_code(source),
            "target": get_relay_code(target),
        }

        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(f"Relay request failed: {e}", provider=self.name)

        if not response.ok:
            raise ProviderError(
                f"Relay returned HTTP {response.status_code}",
                provider=self.name,
                details=response.text[:200],
            )

        try:
            data = response.json()
        except ValueError:
            raise ProviderError("Relay returned a non-JSON body", provider=self.name)

        if not isinstance(data, dict):
            raise ProviderError("Relay returned an unexpected payload", provider=self.name)

        if data.get("status") != "success":
            raise ProviderError(
                f"Relay reported status {data.get('status')!r}",
                provider=self.name,
                details=str(data.get("message", ""))[:200] or None,
            )

        translated = data.get("translated")
        if not isinstance(translated, str) or not translated.strip():
            raise ProviderError("Relay returned an empty translation", provider=self.name)

        return translated.strip()


class HuggingFaceTranslationProvider(FastTranslationProvider):
    """NLLB (or any translation model) on the Hugging Face inference API.

    A cold model answers 503 with ``{"error": "... is currently loading",
    "estimated_time": 20.0}``; those answers are retried after the
    suggested wait, within a small attempt budget.
    """

    name = "HuggingFace NLLB"

    def __init__(
        self,
        api_key: str,
        model: str,
        max_retries: int = 3,
        default_wait: float = 5.0,
        max_wait: float = 20.0,
        timeout: float = 30.0,
        sleep=None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_retries = max_retries
        self.default_wait = default_wait
        self.max_wait = max_wait
        self.timeout = timeout
        self._sleep = sleep

    @property
    def url(self) -> str:
        return HF_INFERENCE_URL.format(model=self.model)

    def translate(self, text: str, source: str, target: str) -> str:
        payload = {
            "inputs": text,
            "parameters": {
                "src_lang": get_nllb_code(source),
                "tgt_lang": get_nllb_code(target),
            },
        }

        retry_kwargs = {}
        if self._sleep is not None:
            retry_kwargs["sleep"] = self._sleep

        return retry_with_backoff(
            lambda: self._request(payload),
            max_attempts=self.max_retries,
            should_retry=lambda e: isinstance(e, ModelLoadingError),
            wait_for=self._wait_seconds,
            **retry_kwargs,
        )

    def _wait_seconds(self, error: Exception, attempt: int) -> float:
        suggested = getattr(error, "retry_after", None)
        if not suggested:
            suggested = self.default_wait
        return min(float(suggested), self.max_wait)

    def _request(self, payload: dict) -> str:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            response = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(f"Inference request failed: {e}", provider=self.name)

        data = self._json_or_none(response)

        if response.status_code == 503 and _is_loading(data):
            estimated = data.get("estimated_time") if isinstance(data, dict) else None
            logger.info(f"{self.model} is loading (estimated_time={estimated})")
            raise ModelLoadingError(
                f"{self.model} is loading",
                provider=self.name,
                retry_after=float(estimated) if isinstance(estimated, (int, float)) else None,
            )

        if not response.ok:
            raise ProviderError(
                f"Inference API returned HTTP {response.status_code}",
                provider=self.name,
                details=response.text[:200],
            )

        translated = _extract_translation_text(data)
        if not translated:
            raise ProviderError("Inference API returned no translation_text", provider=self.name)
        return translated

    @staticmethod
    def _json_or_none(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None


def _is_loading(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    return "estimated_time" in data or "loading" in str(data.get("error", "")).lower()


def _extract_translation_text(data: Any) -> Optional[str]:
    # Pipeline output is a list of {"translation_text": ...}; some models return a bare dict
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        text = data.get("translation_text") or data.get("generated_text")
        if isinstance(text, str) and text.strip():
            return text.strip()
    return None


def build_fast_providers(settings: ProviderSettings) -> List[FastTranslationProvider]:
    """
    Build the configured fast-path providers in policy order.

    Providers whose URL or credential is not configured are skipped.
    """
    providers: List[FastTranslationProvider] = []

    for name in settings.text_provider_order:
        if name == "relay":
            if settings.relay_url:
                providers.append(RelayTranslationProvider(settings.relay_url, timeout=settings.request_timeout))
        elif name in ("huggingface", "hf"):
            if settings.hf_api_key:
                providers.append(
                    HuggingFaceTranslationProvider(
                        api_key=settings.hf_api_key,
                        model=settings.hf_model,
                        max_retries=settings.hf_max_retries,
                        default_wait=settings.hf_default_wait,
                        max_wait=settings.hf_max_wait,
                        timeout=settings.request_timeout,
                    )
                )
        else:
            logger.warning(f"Unknown text provider '{name}' in TEXT_PROVIDER_ORDER, skipping")

    return providers


def build_fast_item(text: str, translated: str, source: str, provider_name: str) -> TranslationItem:
    """
    Wrap a plain translation into a single TranslationItem.

    The Thai side always lands in ``thai`` and the Chinese side in ``zh``,
    whichever direction was translated.
    """
    if source == "zh":
        thai, zh = translated, text
    else:
        thai, zh = text, translated

    return TranslationItem(
        id=1,
        thai=thai,
        zh=zh,
        price="",
        desc="",
        isSpicy=False,
        containsShellfish=contains_shellfish(text, language=source),
        tags=[],
        category=provider_name,
    )
