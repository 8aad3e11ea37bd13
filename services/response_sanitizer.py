"""
Response sanitisation for generative output.

Providers are asked for bare JSON but regularly wrap it in ```json fences
or surround it with a sentence or two. The text is cleaned, cut down to the
outermost object, parsed, then validated against TranslationResponse.
"""

import json
import logging
import re

from pydantic import ValidationError

from services.errors import ResponseParseError, ResponseSchemaError
from services.llm_models.translation_models import TranslationResponse

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```[a-zA-Z]*")


def strip_code_fences(content: str) -> str:
    """
    Remove markdown code fence markers from a response.

    Examples:
        >>> strip_code_fences('```json\\n{"items": []}\\n```')
        '{"items": []}'
        >>> strip_code_fences('{"items": []}')
        '{"items": []}'
    """
    return _CODE_FENCE.sub("", content).strip()


def extract_json_object(content: str) -> str:
    """
    Slice content to the span between the first '{' and the last '}'.

    Content without such a span is returned unchanged so the parse error
    reports the original text.
    """
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end <= start:
        return content
    return content[start:end + 1]


def parse_translation_response(raw: str) -> TranslationResponse:
    """
    Turn raw generative output into a validated TranslationResponse.

    Raises:
        ResponseParseError: The sanitised text is not valid JSON
        ResponseSchemaError: The JSON is valid but has no usable items list
    """
    if raw is None:
        raw = ""

    cleaned = extract_json_object(strip_code_fences(raw))

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse generative response as JSON: {e}")
        raise ResponseParseError(
            "AI response was not valid JSON",
            raw=raw,
            details=str(e),
        )

    if not isinstance(data, dict):
        raise ResponseSchemaError(
            "AI response JSON is not an object",
            raw=raw,
            details=f"Expected an object with 'items', got {type(data).__name__}",
        )

    try:
        return TranslationResponse.model_validate(data)
    except ValidationError as e:
        logger.error(f"Generative response failed schema validation: {e.error_count()} error(s)")
        raise ResponseSchemaError(
            "AI response did not match the expected item schema",
            raw=raw,
            details=str(e),
        )
