"""
Prompt Builder
Builds the instruction sent to the generative provider.

The prompt depends on three things:
- input kind: a photo (image) or typed text
- direction: Thai -> Chinese, or Chinese -> Thai
- mode: "menu" asks for price/spice/allergen enrichment, "sign"/"general" for plain translation
"""

from typing import Optional

from services.language_utils import get_language_name

MENU_ITEM_EXAMPLE = """{{
  "items": [
    {{
      "id": 1,
      "thai": "{thai_example}",
      "zh": "{zh_example}",
      "roman": "{roman_example}",
      "price": "120",
      "desc": "short description of the dish in {desc_language}",
      "isSpicy": true,
      "containsShellfish": true,
      "tags": ["Best Seller"]
    }}
  ]
}}"""

SIGN_ITEM_EXAMPLE = """{{
  "items": [
    {{
      "id": 1,
      "thai": "{thai_example}",
      "zh": "{zh_example}",
      "roman": "{roman_example}",
      "desc": "what this is: street name, warning, shop name, opening hours...",
      "price": "",
      "isSpicy": false,
      "containsShellfish": false,
      "tags": []
    }}
  ]
}}"""

JSON_ONLY_RULE = (
    "Respond with a single JSON object only. Do NOT wrap it in markdown code fences "
    "and do NOT add any text before or after it."
)


def _direction_rules(source: str, target: str) -> str:
    source_name = get_language_name(source) or source
    target_name = get_language_name(target) or target

    if source == "zh":
        return (
            f"Translate from {source_name} into {target_name}.\n"
            f'Put the original {source_name} text in "zh" and the {target_name} translation in "thai".\n'
            f'Put a romanization of the {target_name} translation in "roman" so a traveller can read it aloud.'
        )
    return (
        f"Translate from {source_name} into {target_name}.\n"
        f'Put the original {source_name} text in "thai" and the {target_name} translation in "zh".\n'
        f'Put a romanization (RTGS) of the {source_name} text in "roman".'
    )


def _example(mode: str, source: str) -> str:
    template = MENU_ITEM_EXAMPLE if mode == "menu" else SIGN_ITEM_EXAMPLE
    if mode == "menu":
        thai_example, zh_example, roman_example = "ต้มยำกุ้ง", "泰式酸辣蝦湯", "tom yam kung"
    else:
        thai_example, zh_example, roman_example = "ห้ามจอด", "禁止停車", "ham chot"
    desc_language = "Thai" if source == "zh" else "Traditional Chinese"
    return template.format(
        thai_example=thai_example,
        zh_example=zh_example,
        roman_example=roman_example,
        desc_language=desc_language,
    )


def _menu_rules() -> str:
    return """4. Extract the price of each dish if one is shown (digits only, empty string if none).
5. Set "isSpicy": true for dishes marked with chili icons or red markers, or that are spicy by nature.
6. Set "containsShellfish": true if the dish contains shrimp, prawn, crab, clams, mussels, oysters, lobster or other shellfish.
7. Fill "tags" from markers such as "Best Seller", "Recommended" or thumbs-up icons; use an empty list if there are none.
8. Give a short description of the dish in "desc"."""


def _sign_rules() -> str:
    return """4. Describe in "desc" what the text is (street name, warning, shop name, opening hours, ...).
5. Leave "price" empty, and set "isSpicy" and "containsShellfish" to false.
6. Use an empty list for "tags"."""


def build_image_prompt(mode: str, source: str, target: str) -> str:
    """Prompt for a photographed menu or sign"""
    source_name = get_language_name(source) or source
    subject = "a restaurant menu" if mode == "menu" else "a sign or notice"
    rules = _menu_rules() if mode == "menu" else _sign_rules()

    return f"""You are a professional translation assistant helping travellers read {subject}.
Analyze this image.

Requirements:
1. Identify all {source_name} text in the image.
2. Keep the items in the visual order they appear in the image (top to bottom).
3. {_direction_rules(source, target)}
{rules}

{JSON_ONLY_RULE}

JSON format example:
{_example(mode, source)}"""


def build_text_prompt(text: str, mode: str, source: str, target: str) -> str:
    """Prompt for typed text"""
    source_name = get_language_name(source) or source
    if mode == "menu":
        subject = "the name of a dish or a line from a menu"
        rules = _menu_rules()
    else:
        subject = "a phrase or a sentence"
        rules = _sign_rules()

    return f"""You are a professional translation assistant helping travellers.
The following {source_name} text is {subject}:

"{text}"

Requirements:
1. Treat the whole text as one item unless it clearly lists several separate dishes or phrases.
2. Keep the original text exactly as given.
3. {_direction_rules(source, target)}
{rules}

{JSON_ONLY_RULE}

JSON format example:
{_example(mode, source)}"""


def build_prompt(
    kind: str,
    mode: str,
    source: str,
    target: str,
    text: Optional[str] = None,
) -> str:
    """
    Build the generative prompt for a request.

    Args:
        kind: "image" or "text"
        mode: "menu", "sign" or "general"
        source: Source language code ("th" or "zh")
        target: Target language code
        text: The text to translate (text kind only)

    Returns:
        Prompt string

    Raises:
        ValueError: If kind is unknown or text is missing for a text prompt
    """
    if kind == "image":
        return build_image_prompt(mode, source, target)
    if kind == "text":
        if not text:
            raise ValueError("text is required for a text prompt")
        return build_text_prompt(text, mode, source, target)
    raise ValueError(f"Unsupported input kind: {kind}")
