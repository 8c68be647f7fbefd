"""Recipe generation with Gemini.

generate_recipe() builds the prompt from the selected ingredients and survey
preferences, asks the text model for a sectioned recipe and parses it with
parse_recipe_response(). Any failure (missing key, network error, deadline,
API error, empty text) returns Recipe.placeholder() instead of raising.
"""

from typing import Optional

from google.genai import types

from foodsnap.models.models import Recipe, RecipeParseResult, RecipePreferences
from foodsnap.parsers.recipes import parse_recipe_response
from foodsnap.prompts.prompts import build_recipe_prompt
from foodsnap.services.gemini import GeminiClient
from foodsnap.utils.config import config
from foodsnap.utils.errors import safe_execute_async
from foodsnap.utils.logger import logger


async def generate_recipe_detailed(
    ingredients: list[str],
    preferences: Optional[RecipePreferences] = None,
    client: Optional[GeminiClient] = None,
) -> Optional[RecipeParseResult]:
    """Generate a recipe and return the tagged parse result.

    Args:
        ingredients: Ingredients to cook with.
        preferences: Survey answers, optional.
        client: Gemini client. Created from configuration when omitted.

    Returns:
        RecipeParseResult, or None if the request failed (logged as warning).
    """

    async def _generate() -> RecipeParseResult:
        gemini = client or GeminiClient()
        prompt = build_recipe_prompt(ingredients, preferences)

        logger.info(
            f"Requesting recipe for {len(ingredients)} ingredient(s), prompt {len(prompt)} chars",
            extra={"operation": "recipe"},
        )
        text = await gemini.generate_text(
            model=config.RECIPE_MODEL,
            parts=[types.Part.from_text(text=prompt)],
            temperature=config.RECIPE_TEMPERATURE,
            top_p=config.RECIPE_TOP_P,
            top_k=config.RECIPE_TOP_K,
            timeout_seconds=config.RECIPE_TIMEOUT_SECONDS,
        )
        return parse_recipe_response(text, ingredients)

    return await safe_execute_async(
        _generate(),
        "Recipe generation",
        log_level="warning",
        default_return=None,
        timeout=config.RECIPE_TIMEOUT_SECONDS,
    )


async def generate_recipe(
    ingredients: list[str],
    preferences: Optional[RecipePreferences] = None,
    client: Optional[GeminiClient] = None,
) -> Recipe:
    """Generate a recipe. Never raises: any failure returns Recipe.placeholder()."""
    result = await generate_recipe_detailed(ingredients, preferences, client=client)

    if result is None:
        logger.warning(
            "Recipe generation failed, using placeholder recipe",
            extra={"operation": "recipe", "strategy": "placeholder"},
        )
        return Recipe.placeholder()

    logger.info(
        f"Generated recipe {result.recipe.title!r}"
        + (f" (backfilled: {', '.join(result.backfilled)})" if result.backfilled else ""),
        extra={"operation": "recipe", "strategy": result.strategy},
    )
    return result.recipe
