"""Parsing of sectioned recipe text into a Recipe.

The recipe prompt asks for TITLE / DESCRIPTION / COOK_TIME / DIFFICULTY /
SERVINGS / INGREDIENTS / INSTRUCTIONS sections. Models rename, decorate
(markdown bold, headings) and reorder them, so headers are matched
case-insensitively against several synonyms and everything up to the next
header belongs to the current section.

If no header is recognised at all, the text is split into sentences which
become the instructions. Fields still missing afterwards are backfilled
(see parse_recipe_response).
"""

import re
from typing import Optional

from foodsnap.models.models import Recipe, RecipeParseResult
from foodsnap.utils.logger import logger


HEADER_SYNONYMS: dict[str, tuple[str, ...]] = {
    "title": ("TITLE", "RECIPE TITLE", "RECIPE NAME", "NAME"),
    "description": ("DESCRIPTION", "SUMMARY", "OVERVIEW"),
    "cook_time": ("COOK_TIME", "COOK TIME", "COOKING TIME", "TOTAL TIME", "TIME"),
    "difficulty": ("DIFFICULTY", "DIFFICULTY LEVEL", "SKILL LEVEL"),
    "servings": ("SERVINGS", "SERVES", "YIELD", "PORTIONS"),
    "ingredients": ("INGREDIENTS", "INGREDIENT LIST"),
    "instructions": ("INSTRUCTIONS", "DIRECTIONS", "STEPS", "METHOD", "PREPARATION"),
}

LIST_FIELDS = ("ingredients", "instructions")

DEFAULT_COOK_TIME = "30 min"
DEFAULT_DIFFICULTY = "Medium"
DEFAULT_SERVINGS = 4
DEFAULT_TITLE = "Delicious Recipe"
GENERIC_INSTRUCTION = "Prepare the ingredients and cook them together until done, seasoning to taste."


def _keyword_pattern(keyword: str) -> str:
    # "COOK_TIME", "COOK TIME" and "COOK-TIME" are the same header
    return r"[ _\-]?".join(re.escape(word) for word in re.split(r"[ _]", keyword))


_KEYWORD_TO_FIELD = {kw: field for field, kws in HEADER_SYNONYMS.items() for kw in kws}
_SEPARATOR_RE = re.compile(r"[ _\-]+")
_FIELD_BY_BARE_KEYWORD = {_SEPARATOR_RE.sub("", kw): field for kw, field in _KEYWORD_TO_FIELD.items()}
# Longest first so "RECIPE NAME" wins over "NAME"
_KEYWORDS = sorted(_KEYWORD_TO_FIELD, key=len, reverse=True)
# Markdown is only allowed before and around the keyword; text after the
# colon is kept as written.
HEADER_RE = re.compile(
    r"^(?P<lead>[\s#*_]*)(?P<keyword>"
    + "|".join(_keyword_pattern(kw) for kw in _KEYWORDS)
    + r")[\s*_]*(?::(?P<rest>.*)|[\s#*_]*)$",
    re.IGNORECASE,
)
HEADER_WRAPPERS = ("**", "__")
BOLD_RE = re.compile(r"(\*\*|__)(?P<text>.+?)\1")
# A lone "*" is a bullet, "**" opens bold text
LIST_ITEM_MARKER_RE = re.compile(
    r"^(?:(?:[-•·]|\*(?!\*))+|\d+\s*[.)](?=\s|$)|step\s*\d+\s*[:.)\-]?)\s*", re.IGNORECASE
)
SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")
INTEGER_RE = re.compile(r"\d+")


def match_header(line: str) -> Optional[tuple[str, str]]:
    """Return (field, inline text) if line is a section header, else None.

    "**TITLE:** Stew" and "**TITLE: Stew**" both give ("title", "Stew"); any
    other markdown in the inline text is left alone.
    """
    match = HEADER_RE.match(line.strip())
    if not match:
        return None
    field = _FIELD_BY_BARE_KEYWORD[_SEPARATOR_RE.sub("", match.group("keyword").upper())]

    rest = (match.group("rest") or "").strip()
    lead = match.group("lead").rstrip()
    wrapper = next((w for w in HEADER_WRAPPERS if lead.endswith(w)), None)
    if wrapper and rest.startswith(wrapper):
        rest = rest[len(wrapper):].strip()
    elif wrapper and rest.endswith(wrapper):
        rest = rest[: -len(wrapper)].strip()
    return field, rest


def strip_list_marker(line: str) -> str:
    """Remove a bullet, number or "Step N" prefix and unwrap bold text."""
    item = LIST_ITEM_MARKER_RE.sub("", line.strip()).strip()
    return BOLD_RE.sub(r"\g<text>", item)


def split_sections(text: str) -> dict[str, list[str]]:
    """Group non-blank lines under the most recent header. Lines before the first header are dropped."""
    sections: dict[str, list[str]] = {}
    current: Optional[str] = None

    for line in text.splitlines():
        header = match_header(line)
        if header:
            current, inline = header
            sections.setdefault(current, [])
            if inline:
                sections[current].append(inline)
            continue
        if current is None:
            continue
        stripped = line.strip()
        if stripped:
            sections[current].append(stripped)

    return sections


def split_sentences(text: str) -> list[str]:
    collapsed = " ".join(line.strip() for line in text.splitlines() if line.strip())
    return [s.strip() for s in SENTENCE_BOUNDARY_RE.split(collapsed) if s.strip()]


def synthesize_title(ingredients: list[str]) -> str:
    """Build a title from the first one or two ingredient names."""
    names = [" ".join(w[:1].upper() + w[1:] for w in name.split()) for name in ingredients if name.strip()][:2]
    if not names:
        return DEFAULT_TITLE
    return f"{' and '.join(names)} Dish"


def _parse_servings(body: str) -> Optional[int]:
    match = INTEGER_RE.search(body)
    if not match:
        return None
    return min(max(int(match.group()), 1), 100)


def parse_recipe_response(text: str, ingredients: list[str]) -> RecipeParseResult:
    """Parse model text into a Recipe.

    Args:
        text: Raw text returned by the model.
        ingredients: Ingredients the recipe was requested for, used for backfill.

    Returns:
        RecipeParseResult with strategy "sections" or "sentences". Missing
        ingredients are backfilled from the input list, missing instructions
        with a single generic step, a missing title from the first one or two
        ingredient names, missing cook time/difficulty/servings with defaults.
    """
    sections = split_sections(text)
    fields: dict[str, object] = {}

    if sections:
        strategy = "sections"
        for field, lines in sections.items():
            if field in LIST_FIELDS:
                items = [strip_list_marker(line) for line in lines]
                fields[field] = [item for item in items if item]
            else:
                fields[field] = " ".join(lines).strip()
    else:
        strategy = "sentences"
        logger.warning(
            "No recipe section headers found, falling back to sentence splitting", extra={"strategy": "sentences"}
        )
        fields["instructions"] = split_sentences(text)

    backfilled = []

    servings = _parse_servings(str(fields.get("servings") or ""))
    if servings is None:
        servings = DEFAULT_SERVINGS
        backfilled.append("servings")

    title = str(fields.get("title") or "").strip(" \"'")
    if not title:
        title = synthesize_title(ingredients)
        backfilled.append("title")

    cook_time = str(fields.get("cook_time") or "")
    if not cook_time:
        cook_time = DEFAULT_COOK_TIME
        backfilled.append("cook_time")

    difficulty = str(fields.get("difficulty") or "")
    if not difficulty:
        difficulty = DEFAULT_DIFFICULTY
        backfilled.append("difficulty")

    recipe_ingredients = fields.get("ingredients") or []
    if not recipe_ingredients:
        recipe_ingredients = [name.strip() for name in ingredients if name.strip()]
        backfilled.append("ingredients")

    instructions = fields.get("instructions") or []
    if not instructions:
        instructions = [GENERIC_INSTRUCTION]
        backfilled.append("instructions")

    recipe = Recipe(
        title=title[:200],
        cook_time=cook_time,
        difficulty=difficulty,
        servings=servings,
        ingredients=recipe_ingredients,
        instructions=instructions,
        description=str(fields.get("description") or "") or None,
    )

    if backfilled:
        logger.debug(f"Recipe fields backfilled: {', '.join(backfilled)}")

    return RecipeParseResult(strategy=strategy, recipe=recipe, backfilled=backfilled)
