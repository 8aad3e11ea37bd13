"""
Translation error types.

Every error raised on the request path maps to an HTTP status and a
``kind`` string that the front-end can switch on.
"""

from typing import Any, Dict, Optional

# Excerpt length for raw provider text echoed back on parse failures
RAW_EXCERPT_LENGTH = 500


class TranslationError(Exception):
    """Base class for errors surfaced by the analyze endpoint"""

    status_code = 500
    kind = "TranslationError"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "kind": self.kind}
        if self.details:
            body["details"] = self.details
        return body


class BadInputError(TranslationError):
    """Request carried neither an image nor text"""

    status_code = 400
    kind = "BadInput"


class ConfigurationError(TranslationError):
    """A required credential or setting is missing"""

    status_code = 500
    kind = "ConfigurationError"


class ProviderError(TranslationError):
    """An outbound provider call failed"""

    status_code = 500
    kind = "ProviderError"

    def __init__(self, message: str, provider: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message, details=details)
        self.provider = provider


class ProviderRateLimitError(ProviderError):
    """Provider answered with a rate-limit or service-unavailable signal"""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        details: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, provider=provider, details=details)
        self.retry_after = retry_after


class ModelLoadingError(ProviderRateLimitError):
    """Inference endpoint reports the model is still loading"""


class ResponseParseError(TranslationError):
    """Generative output could not be parsed as JSON after sanitisation"""

    status_code = 500
    kind = "ResponseParseError"

    def __init__(self, message: str, raw: str = "", details: Optional[str] = None):
        super().__init__(message, details=details)
        self.raw = raw

    @property
    def raw_excerpt(self) -> str:
        return self.raw[:RAW_EXCERPT_LENGTH]

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["raw"] = self.raw_excerpt
        return body


class ResponseSchemaError(ResponseParseError):
    """Generative output was valid JSON but not the expected item list"""

    kind = "ResponseSchemaError"
