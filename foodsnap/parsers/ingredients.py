"""Lenient parsing of ingredient lists from multimodal model text.

The model is asked for a bare JSON array but frequently wraps it in prose or
markdown fences, or ignores the format entirely. parse_ingredient_response()
tries, in order:

1. Exact empty array "[]" -> no ingredients
2. Every bracketed array literal decoded as a JSON array of strings
3. Line-based fallback: strip list markers, split on commas, strip quotes

Results of strategies 2 and 3 are de-duplicated and sorted.
"""

import json
import re
from typing import Optional

from foodsnap.models.models import IngredientParseResult
from foodsnap.utils.errors import safe_execute_sync
from foodsnap.utils.logger import logger


ARRAY_LITERAL_RE = re.compile(r"\[.*?\]", re.DOTALL)
LIST_MARKER_RE = re.compile(r"^[•\-\*\d\.\)]+\s*")
QUOTE_CHARS = "\"'“”‘’`"


def _decode_string_array(literal: str) -> Optional[list[str]]:
    """Decode a JSON array literal whose items are all strings. None if it is anything else."""

    def _decode():
        value = json.loads(literal)
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ValueError("not an array of strings")
        return value

    return safe_execute_sync(_decode, f"Decode array literal {literal[:40]!r}", log_level="debug")


def _unique_sorted(items: list[str]) -> list[str]:
    return sorted({item.strip() for item in items if item and item.strip()})


def parse_json_arrays(text: str) -> Optional[list[str]]:
    """Collect the contents of every decodable string-array literal in text.

    Returns:
        De-duplicated, sorted union of all decoded arrays, or None when no
        bracketed substring decodes.
    """
    decoded_any = False
    collected: list[str] = []

    for match in ARRAY_LITERAL_RE.finditer(text):
        items = _decode_string_array(match.group())
        if items is None:
            continue
        decoded_any = True
        collected.extend(items)

    return _unique_sorted(collected) if decoded_any else None


def parse_text_lines(text: str) -> list[str]:
    """Extract ingredients from free text, one per comma-delimited token per line."""
    ingredients = []

    for line in text.splitlines():
        cleaned = LIST_MARKER_RE.sub("", line.strip())
        if not cleaned:
            continue
        for token in cleaned.split(","):
            item = token.strip().strip(QUOTE_CHARS).strip()
            if item:
                ingredients.append(item)

    return _unique_sorted(ingredients)


def parse_ingredient_response(text: str) -> IngredientParseResult:
    """Parse model text into an ingredient list.

    Args:
        text: Raw text returned by the model.

    Returns:
        IngredientParseResult tagged with the strategy that produced it
        ("empty", "json_array" or "text_lines").
    """
    if text.strip() == "[]":
        logger.debug("Model returned an empty array: no ingredients visible", extra={"strategy": "empty"})
        return IngredientParseResult(strategy="empty", ingredients=[])

    ingredients = parse_json_arrays(text)
    if ingredients is not None:
        logger.debug(f"Parsed {len(ingredients)} ingredients from JSON array(s)", extra={"strategy": "json_array"})
        return IngredientParseResult(strategy="json_array", ingredients=ingredients)

    ingredients = parse_text_lines(text)
    logger.debug(
        f"No JSON array found, extracted {len(ingredients)} ingredients from text lines",
        extra={"strategy": "text_lines"},
    )
    return IngredientParseResult(strategy="text_lines", ingredients=ingredients)
