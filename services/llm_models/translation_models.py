"""
Translation Pydantic Models

Request and response models for the analyze endpoint.
The response models define the JSON structure the front-end renders and
that generative providers are instructed to produce.
"""

import logging
import re
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from services.language_utils import normalize_language_code

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:[^;,]+;base64,", re.IGNORECASE)

# Request modes; anything else is treated as a menu
REQUEST_MODES = ("menu", "sign", "general")

_BOOL_WORDS = {"true", "false", "yes", "no", "1", "0"}


def _scalar_as_text(value, field_name: str):
    """Keep strings, stringify numbers, drop anything else (None)"""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    logger.warning(f"Dropping {field_name}={value!r}: expected text")
    return None


class TranslationItem(BaseModel):
    """A single translated line: one dish on a menu or one phrase on a sign.

    Example structure:
    {
        "id": 1,
        "thai": "ต้มยำกุ้ง",
        "zh": "泰式酸辣蝦湯",
        "roman": "tom yam kung",
        "price": "120",
        "desc": "酸辣湯",
        "isSpicy": true,
        "containsShellfish": true,
        "tags": ["推薦"]
    }

    Models drift from the requested shape one field at a time, so field
    values of the wrong type are coerced or dropped instead of rejecting
    the item.
    """

    # Unknown keys from the provider are kept as-is
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    thai: str = Field(default="", description="Original Thai text")
    zh: str = Field(default="", description="Traditional Chinese translation")
    roman: Optional[str] = Field(default=None, description="Romanization of the Thai text")
    price: Optional[str] = None
    desc: Optional[str] = None
    isSpicy: Optional[bool] = None
    containsShellfish: Optional[bool] = None
    tags: Optional[List[str]] = None
    category: Optional[str] = Field(default=None, description="Which provider produced this item")

    @field_validator("id", mode="before")
    @classmethod
    def _usable_id(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, str, type(None))):
            logger.warning(f"Dropping id={value!r}")
            return None
        return value

    @field_validator("thai", "zh", mode="before")
    @classmethod
    def _text_or_empty(cls, value, info):
        text = _scalar_as_text(value, info.field_name)
        return "" if text is None else text

    @field_validator("roman", "price", "desc", "category", mode="before")
    @classmethod
    def _optional_text(cls, value, info):
        return _scalar_as_text(value, info.field_name)

    @field_validator("isSpicy", "containsShellfish", mode="before")
    @classmethod
    def _flag(cls, value, info):
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str) and value.strip().lower() in _BOOL_WORDS:
            return value.strip().lower()
        logger.warning(f"Dropping {info.field_name}={value!r}: expected a boolean")
        return None

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, value):
        if value is None:
            return None
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, (list, tuple)):
            return [str(tag) for tag in value if isinstance(tag, (str, int, float)) and not isinstance(tag, bool)]
        logger.warning(f"Dropping tags={value!r}: expected a list")
        return None


class TranslationResponse(BaseModel):
    """Response body of the analyze endpoint: ``{"items": [...]}``"""

    items: List[TranslationItem]

    def to_dict(self) -> dict:
        return {"items": [item.model_dump(exclude_none=True) for item in self.items]}


class AnalyzeRequest(BaseModel):
    """Inbound analyze request.

    At most one of image/text is used; image wins when both are sent.
    Unknown modes fall back to "menu" and unrecognised source languages to Thai.
    """

    model_config = ConfigDict(populate_by_name=True)

    image: Optional[str] = None
    text: Optional[str] = None
    mode: Optional[str] = "menu"
    source_lang: Optional[str] = Field(default="th", alias="sourceLang")
    target_lang: Optional[str] = Field(default=None, alias="targetLang")

    @field_validator("image", mode="before")
    @classmethod
    def _strip_data_url(cls, value):
        if isinstance(value, str):
            value = _DATA_URL_PREFIX.sub("", value.strip())
        return value or None

    @field_validator("text", mode="before")
    @classmethod
    def _blank_text_is_missing(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None

    @field_validator("mode", mode="before")
    @classmethod
    def _known_mode(cls, value):
        mode = value.strip().lower() if isinstance(value, str) else None
        return mode if mode in REQUEST_MODES else "menu"

    @field_validator("source_lang", mode="before")
    @classmethod
    def _source_code(cls, value):
        code = normalize_language_code(value) if isinstance(value, str) else None
        return code if code in ("th", "zh") else "th"

    @field_validator("target_lang", mode="before")
    @classmethod
    def _target_as_text(cls, value):
        return value if isinstance(value, str) else None

    @model_validator(mode="after")
    def _default_target(self):
        if not self.target_lang:
            self.target_lang = "th" if self.source_lang == "zh" else "zh"
        return self

    @property
    def kind(self) -> Optional[str]:
        """'image', 'text', or None when the request carries neither"""
        if self.image:
            return "image"
        if self.text:
            return "text"
        return None
