"""Data models and schemas for FoodSnap.

Defines Pydantic models for the recipe record, the user's survey preferences
and the tagged results returned by the text parsers. Also holds the fixed
option lists offered by the preference survey.
All models use Pydantic v2.
"""

from typing import List, Literal, Optional, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# Survey Options
# ============================================================================

MEAL_TYPES = ("Breakfast", "Lunch", "Dinner", "Snack")
MEAL_SUBTYPES: dict[str, tuple[str, ...]] = {
    "Breakfast": ("No preference", "Cereal", "Pancakes", "Eggs & Toast", "Smoothie Bowl", "Oatmeal"),
    "Lunch": ("No preference", "Sandwich", "Salad", "Soup", "Wrap", "Bowl"),
    "Dinner": ("No preference", "Appetizer", "Main Course", "Side Dish", "Dessert"),
    "Snack": ("No preference", "Sweet", "Savory", "Healthy", "Indulgent"),
}
SKILL_LEVELS = ("Beginner", "Intermediate", "Advanced")
COOK_TIMES = ("No preference", "Under 15 minutes", "15-30 minutes", "30-60 minutes", "Over 60 minutes")
CUISINES = ("Italian", "Mexican", "Asian", "Mediterranean", "American", "Indian", "French", "Middle Eastern")
ALLERGIES = ("Dairy", "Eggs", "Nuts", "Shellfish", "Wheat", "Soy")
DIETARY_RESTRICTIONS = ("Vegetarian", "Vegan", "Pescatarian", "Keto", "Paleo", "Low Carb", "Gluten Free")
NUTRITIONAL_REQUIREMENTS = ("High Protein", "Low Fat", "Low Calorie", "Low Sodium", "Low Sugar")

NO_PREFERENCE = "No preference"


def canonical_option(value: str, options: tuple[str, ...], field_name: str) -> str:
    """Match value against options case-insensitively and return the canonical spelling.

    Raises:
        ValueError: If value is not one of options.
    """
    wanted = value.strip().lower()
    for option in options:
        if option.lower() == wanted:
            return option
    raise ValueError(f"Invalid {field_name}: {value!r}. Expected one of: {', '.join(options)}")


# ============================================================================
# Recipe
# ============================================================================


class Recipe(BaseModel):
    """Domain model for a generated recipe.

    Created by the recipe parser from a model response, or defaulted to the
    placeholder when generation fails. Immutable: use with_image() to attach
    an illustration.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    title: Annotated[str, Field(min_length=1, max_length=200, description="Recipe name (1-200 chars)")]
    cook_time: Annotated[str, Field(min_length=1, description="Human-readable cooking time, e.g. '30 min'")]
    difficulty: Annotated[str, Field(min_length=1, description="Difficulty, e.g. 'Easy', 'Medium'")]
    servings: Annotated[int, Field(ge=1, le=100, description="Number of servings (1-100)")]
    ingredients: Annotated[List[str], Field(description="Ingredients with quantities, in order")]
    instructions: Annotated[List[str], Field(description="Step-by-step instructions, in order")]
    description: Annotated[Optional[str], Field(None, description="Short appetising description")]
    image_url: Annotated[Optional[str], Field(None, description="Remote illustration URL")]
    image_data: Annotated[Optional[bytes], Field(None, description="Illustration bytes", repr=False)]

    @classmethod
    def placeholder(cls) -> "Recipe":
        """Fixed recipe shown while loading and substituted on any generation failure."""
        return cls(
            title="Delicious Recipe",
            cook_time="30 min",
            difficulty="Medium",
            servings=4,
            ingredients=[f"Ingredient {i}" for i in range(1, 6)],
            instructions=[
                f"This is step {i} of the recipe instructions. "
                "It explains what to do in this part of the cooking process."
                for i in range(1, 5)
            ],
            description="A colorful and appetizing dish with fresh ingredients arranged beautifully on a plate.",
        )

    def with_image(self, image_data: bytes) -> "Recipe":
        return self.model_copy(update={"image_data": image_data})


# ============================================================================
# Preferences
# ============================================================================


class RecipePreferences(BaseModel):
    """Preference selections collected by the mise en place survey.

    Every field is optional. Single choices are validated against the survey
    options; multi-choice fields are stored sorted and de-duplicated so the
    generated prompt is deterministic.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    meal_type: Optional[str] = None
    meal_subtype: Optional[str] = None
    skill_level: Optional[str] = None
    cook_time: Optional[str] = None
    cuisines: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    dietary_restrictions: List[str] = Field(default_factory=list)
    nutritional_requirements: List[str] = Field(default_factory=list)

    @field_validator("meal_type", mode="before")
    @classmethod
    def validate_meal_type(cls, v: Optional[str]) -> Optional[str]:
        return canonical_option(v, MEAL_TYPES, "meal type") if v else None

    @field_validator("skill_level", mode="before")
    @classmethod
    def validate_skill_level(cls, v: Optional[str]) -> Optional[str]:
        return canonical_option(v, SKILL_LEVELS, "skill level") if v else None

    @field_validator("cook_time", mode="before")
    @classmethod
    def validate_cook_time(cls, v: Optional[str]) -> Optional[str]:
        return canonical_option(v, COOK_TIMES, "cook time") if v else None

    @field_validator(
        "cuisines", "allergies", "dietary_restrictions", "nutritional_requirements", mode="before"
    )
    @classmethod
    def normalize_choices(cls, v, info) -> list[str]:
        """Accept any iterable of strings (sets included), validate and sort."""
        options = {
            "cuisines": CUISINES,
            "allergies": ALLERGIES,
            "dietary_restrictions": DIETARY_RESTRICTIONS,
            "nutritional_requirements": NUTRITIONAL_REQUIREMENTS,
        }[info.field_name]
        if not v:
            return []
        if isinstance(v, str):
            v = [v]
        label = info.field_name.replace("_", " ")
        return sorted({canonical_option(item, options, label) for item in v})

    @model_validator(mode="before")
    @classmethod
    def validate_meal_subtype(cls, data):
        """A subtype must belong to the chosen meal type."""
        if not isinstance(data, dict) or not data.get("meal_subtype"):
            return data
        meal_type = data.get("meal_type")
        if not meal_type:
            raise ValueError("meal_subtype requires meal_type")
        meal_type = canonical_option(meal_type, MEAL_TYPES, "meal type")
        subtype = canonical_option(data["meal_subtype"], MEAL_SUBTYPES[meal_type], "meal subtype")
        return {**data, "meal_subtype": subtype}


# ============================================================================
# Tagged Parse Results
# ============================================================================


class IngredientParseResult(BaseModel):
    """Ingredient list extracted from model text, tagged with the strategy that produced it."""

    model_config = ConfigDict(frozen=True)

    strategy: Literal["empty", "json_array", "text_lines"]
    ingredients: List[str]

    @property
    def is_fallback(self) -> bool:
        return self.strategy == "text_lines"


class RecipeParseResult(BaseModel):
    """Recipe extracted from model text.

    strategy is "sections" when at least one section header was recognised and
    "sentences" when the text was split into sentences instead. backfilled lists
    the Recipe fields that had to be filled from defaults or input ingredients.
    """

    model_config = ConfigDict(frozen=True)

    strategy: Literal["sections", "sentences"]
    recipe: Recipe
    backfilled: List[str] = Field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.strategy == "sentences"
