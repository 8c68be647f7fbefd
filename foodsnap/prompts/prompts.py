"""Prompt text for the three generative calls.

- INGREDIENT_ANALYSIS_PROMPT: instruction sent with the ingredient photos
- build_recipe_prompt(): recipe request from ingredients and survey preferences
- build_image_prompt(): food-photography prompt for the image generator

The recipe prompt asks for named sections (TITLE, DESCRIPTION, COOK_TIME,
DIFFICULTY, SERVINGS, INGREDIENTS, INSTRUCTIONS) which parsers/recipes.py reads back.
"""

from typing import Optional

from foodsnap.models.models import NO_PREFERENCE, Recipe, RecipePreferences


INGREDIENT_ANALYSIS_PROMPT = """Analyze the food ingredients in these images.
Return ONLY a JSON array of ingredient names. Example: ["tomato", "onion", "chicken", "olive oil"]
Be specific but concise with ingredient names.
If no ingredients are visible, return an empty JSON array: []
Do not include any explanations, just the JSON array."""

# Pantry items the model may use on top of the user's ingredients
STAPLE_INGREDIENTS = ("salt", "black pepper", "cooking oil", "water")

RECIPE_SECTIONS = ("TITLE", "DESCRIPTION", "COOK_TIME", "DIFFICULTY", "SERVINGS", "INGREDIENTS", "INSTRUCTIONS")

IMAGE_STYLE_SUFFIX = (
    "professional food photography, high resolution, beautiful lighting, styled food plating, "
    "shallow depth of field, restaurant quality presentation"
)

# Ingredients mentioned in the image prompt
MAX_IMAGE_PROMPT_INGREDIENTS = 5


def _preference_lines(preferences: RecipePreferences) -> list[str]:
    """Render each provided preference as a bullet. "No preference" answers are left out."""
    lines = []

    if preferences.meal_type:
        meal = preferences.meal_type
        if preferences.meal_subtype and preferences.meal_subtype != NO_PREFERENCE:
            meal = f"{meal} ({preferences.meal_subtype})"
        lines.append(f"- Meal: {meal}")
    if preferences.skill_level:
        lines.append(f"- Cooking skill level: {preferences.skill_level}")
    if preferences.cook_time and preferences.cook_time != NO_PREFERENCE:
        lines.append(f"- Available cooking time: {preferences.cook_time}")
    if preferences.cuisines:
        lines.append(f"- Preferred cuisines: {', '.join(preferences.cuisines)}")
    if preferences.allergies:
        lines.append(f"- Allergies/intolerances (MUST avoid): {', '.join(preferences.allergies)}")
    if preferences.dietary_restrictions:
        lines.append(f"- Dietary restrictions: {', '.join(preferences.dietary_restrictions)}")
    if preferences.nutritional_requirements:
        lines.append(f"- Nutritional requirements: {', '.join(preferences.nutritional_requirements)}")

    return lines


def build_recipe_prompt(ingredients: list[str], preferences: Optional[RecipePreferences] = None) -> str:
    """Build the recipe generation prompt.

    Args:
        ingredients: Ingredients the user selected.
        preferences: Survey answers. None or empty means no constraints.

    Returns:
        Prompt text that constrains the model to the listed ingredients plus
        STAPLE_INGREDIENTS and asks for the RECIPE_SECTIONS layout.
    """
    preference_lines = _preference_lines(preferences) if preferences else []

    parts = [
        "You are a helpful chef. Create ONE recipe.",
        "",
        f"Use ONLY these ingredients: {', '.join(ingredients)}.",
        f"You may also use these basic staples: {', '.join(STAPLE_INGREDIENTS)}.",
        "Do not add any other ingredients.",
    ]

    if preference_lines:
        parts += ["", "Respect these preferences:", *preference_lines]

    parts += [
        "",
        "Respond using exactly these sections, each header on its own line:",
        "TITLE: <recipe name>",
        "DESCRIPTION: <one or two appetizing sentences>",
        "COOK_TIME: <total time, e.g. 30 min>",
        "DIFFICULTY: <Easy, Medium or Hard>",
        "SERVINGS: <number>",
        "INGREDIENTS:",
        "- <quantity and ingredient, one per line>",
        "INSTRUCTIONS:",
        "1. <one step per line>",
        "",
        "Do not use markdown formatting and do not add any other sections.",
    ]

    return "\n".join(parts)


def build_image_prompt(recipe: Recipe) -> str:
    """Build a photorealistic food-photography prompt from the recipe.

    Uses the title, the description when present and the first few ingredients.
    """
    components = [f"A professional food photography image of {recipe.title},"]

    if recipe.description:
        components.append(recipe.description)

    key_ingredients = recipe.ingredients[:MAX_IMAGE_PROMPT_INGREDIENTS]
    if key_ingredients:
        components.append(f"featuring {', '.join(key_ingredients)},")

    components.append(IMAGE_STYLE_SUFFIX)

    return " ".join(components)
