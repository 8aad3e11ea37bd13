"""
Allergen keyword detection.

Keyword heuristic used when a fast-path translator returns a bare string
and no model has judged the dish. Thai is written without spaces, so short
keywords carry guards against the common words they are embedded in
(ปู่ grandfather, ปูน cement, ชายทะเล seaside, น้ำหมึก ink).
"""

import logging
import re
from typing import Dict, Iterable, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

SHELLFISH_PATTERNS: Dict[str, Tuple[Pattern, ...]] = {
    "th": tuple(re.compile(p) for p in (
        r"กุ้ง",                                    # shrimp / prawn, lobster (กุ้งมังกร)
        r"ปู(?![่้๊๋น])",                           # crab, not ปู่ / ปูน
        r"หอย",                                     # clams, mussels, oysters, snails
        r"กั้ง",                                     # mantis shrimp
        r"ล็อบสเตอร์",                               # lobster
        r"(?<!น้ำ)หมึก(?!พิมพ์)",                     # squid / cuttlefish, not ink
        r"(?<!ชาย)(?<!ริม)(?<!ไป)(?<!ทาง)ทะเล(?!สาบ)",  # อาหารทะเล seafood, not seaside
    )),
    "zh": tuple(re.compile(p) for p in (
        r"[蝦虾蟹貝贝蚵蠔蚝蛤蜆蚬螺魷鱿]",
        r"花枝",
        r"墨魚|墨鱼",
        r"海鮮|海鲜",
    )),
}


def contains_shellfish(
    text: str,
    language: str = "th",
    keywords: Optional[Iterable[str]] = None,
) -> bool:
    """
    Check whether text mentions a shellfish ingredient.

    Args:
        text: Text in the source language
        language: Source language code ("th" or "zh")
        keywords: Override keyword set, matched as plain substrings;
            defaults to the guarded SHELLFISH_PATTERNS[language]

    Returns:
        True if any keyword occurs in text
    """
    if not text:
        return False

    if keywords is not None:
        patterns = tuple(re.compile(re.escape(k)) for k in keywords if k)
    else:
        patterns = SHELLFISH_PATTERNS.get(language, ())

    for pattern in patterns:
        match = pattern.search(text)
        if match:
            logger.debug(f"Shellfish keyword '{match.group(0)}' found in '{text}'")
            return True
    return False
