import os
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()


# Default (primary, fallback) model per generative provider
DEFAULT_MODELS: Dict[str, Tuple[str, str]] = {
    "gemini": ("gemini-2.0-flash-exp", "gemini-1.5-flash"),
    "openai": ("gpt-4o-mini", "gpt-4o"),
    "mistral": ("pixtral-12b-2409", "pixtral-large-latest"),
}

DEFAULT_HF_MODEL = "facebook/nllb-200-distilled-600M"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


class ProviderSettings(BaseModel):
    """
    Immutable snapshot of provider configuration.

    Built once when the app starts and handed to the translation service.
    Request handling never reads the environment directly.
    """

    model_config = ConfigDict(frozen=True)

    llm_provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    mistral_api_key: Optional[str] = None
    primary_model: str = DEFAULT_MODELS["gemini"][0]
    fallback_model: str = DEFAULT_MODELS["gemini"][1]

    # Optional fast-path text translators
    relay_url: Optional[str] = None
    hf_api_key: Optional[str] = None
    hf_model: str = DEFAULT_HF_MODEL
    text_provider_order: Tuple[str, ...] = ("relay", "huggingface")

    hf_max_retries: int = Field(default=3, ge=1)
    hf_default_wait: float = 5.0
    hf_max_wait: float = 20.0
    request_timeout: float = 30.0

    allowed_origins: Tuple[str, ...] = ("*",)

    @property
    def primary_api_key(self) -> Optional[str]:
        """Credential of the selected generative provider"""
        return {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
            "mistral": self.mistral_api_key,
        }.get(self.llm_provider)

    @classmethod
    def from_env(cls) -> "ProviderSettings":
        """Read provider configuration from the process environment"""
        provider = os.getenv("LLM_PROVIDER", "gemini").lower()
        default_primary, default_fallback = DEFAULT_MODELS.get(provider, DEFAULT_MODELS["gemini"])

        # GEMINI_MODEL is kept for deployments that predate LLM_MODEL
        primary_model = os.getenv("LLM_MODEL") or (
            os.getenv("GEMINI_MODEL") if provider == "gemini" else None
        )

        order = os.getenv("TEXT_PROVIDER_ORDER", "relay,huggingface")
        origins = os.getenv("ALLOWED_ORIGINS", "*")

        return cls(
            llm_provider=provider,
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            mistral_api_key=os.getenv("MISTRAL_API_KEY"),
            primary_model=primary_model or default_primary,
            fallback_model=os.getenv("LLM_FALLBACK_MODEL") or default_fallback,
            relay_url=os.getenv("TRANSLATE_RELAY_URL") or None,
            hf_api_key=os.getenv("HF_API_KEY") or None,
            hf_model=os.getenv("HF_TRANSLATION_MODEL", DEFAULT_HF_MODEL),
            text_provider_order=tuple(p.strip().lower() for p in order.split(",") if p.strip()),
            hf_max_retries=_env_int("HF_MAX_RETRIES", 3),
            hf_default_wait=_env_float("HF_DEFAULT_WAIT", 5.0),
            hf_max_wait=_env_float("HF_MAX_WAIT", 20.0),
            request_timeout=_env_float("REQUEST_TIMEOUT", 30.0),
            allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )


class Config:
    """Base configuration class"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    FLASK_ENV = os.getenv("FLASK_ENV", "development")
    DEBUG = os.getenv("DEBUG", "True") == "True"

    # Base64 photos from phone cameras can be large
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = True


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
