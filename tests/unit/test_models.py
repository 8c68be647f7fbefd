"""Unit tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from foodsnap.models.models import (
    IngredientParseResult,
    Recipe,
    RecipeParseResult,
    RecipePreferences,
    canonical_option,
)


def _recipe(**overrides):
    data = {
        "title": "Garlic Chicken",
        "cook_time": "30 min",
        "difficulty": "Easy",
        "servings": 2,
        "ingredients": ["chicken", "garlic"],
        "instructions": ["Cook it."],
    }
    data.update(overrides)
    return Recipe(**data)


class TestRecipe:
    """Test Recipe model validation."""

    def test_valid_recipe(self):
        """Test creating a recipe with required fields."""
        recipe = _recipe()

        assert recipe.title == "Garlic Chicken"
        assert recipe.description is None
        assert recipe.image_data is None

    def test_title_whitespace_stripped(self):
        """Test that string fields are stripped."""
        assert _recipe(title="  Soup  ").title == "Soup"

    def test_empty_title_rejected(self):
        """Test that the title must not be empty."""
        with pytest.raises(ValidationError):
            _recipe(title="")

    def test_title_max_length(self):
        """Test that titles over 200 characters are rejected."""
        with pytest.raises(ValidationError):
            _recipe(title="x" * 201)

    @pytest.mark.parametrize("servings", [0, 101])
    def test_servings_bounds(self, servings):
        """Test that servings must be between 1 and 100."""
        with pytest.raises(ValidationError):
            _recipe(servings=servings)

    def test_recipe_is_frozen(self):
        """Test that recipes are immutable."""
        recipe = _recipe()
        with pytest.raises(ValidationError):
            recipe.title = "Other"

    def test_with_image_returns_copy(self):
        """Test that with_image attaches bytes to a new instance."""
        recipe = _recipe()
        illustrated = recipe.with_image(b"\x89PNG")

        assert illustrated.image_data == b"\x89PNG"
        assert recipe.image_data is None
        assert illustrated.title == recipe.title

    def test_image_data_not_in_repr(self):
        """Test that image bytes are kept out of repr."""
        assert "image_data" not in repr(_recipe().with_image(b"abc"))


class TestPlaceholderRecipe:
    """Test the placeholder recipe."""

    def test_placeholder_values(self):
        """Test the fixed placeholder content."""
        recipe = Recipe.placeholder()

        assert recipe.title == "Delicious Recipe"
        assert recipe.cook_time == "30 min"
        assert recipe.difficulty == "Medium"
        assert recipe.servings == 4
        assert recipe.ingredients == [f"Ingredient {i}" for i in range(1, 6)]
        assert len(recipe.instructions) == 4
        assert recipe.instructions[0].startswith("This is step 1")

    def test_placeholder_is_equal_each_time(self):
        """Test that the placeholder is deterministic."""
        assert Recipe.placeholder() == Recipe.placeholder()


class TestCanonicalOption:
    """Test case-insensitive option matching."""

    def test_returns_canonical_spelling(self):
        """Test that matching is case-insensitive."""
        assert canonical_option("  main course ", ("Main Course", "Dessert"), "meal subtype") == "Main Course"

    def test_unknown_option(self):
        """Test that unknown options raise ValueError naming the field."""
        with pytest.raises(ValueError, match="Invalid meal subtype"):
            canonical_option("Brunch", ("Main Course",), "meal subtype")


class TestRecipePreferences:
    """Test survey preference validation."""

    def test_empty_preferences(self):
        """Test that every preference is optional."""
        prefs = RecipePreferences()

        assert prefs.meal_type is None
        assert prefs.cuisines == []

    def test_single_choices_canonicalized(self):
        """Test that single choices are matched to option spelling."""
        prefs = RecipePreferences(meal_type="dinner", skill_level="BEGINNER", cook_time="15-30 minutes")

        assert prefs.meal_type == "Dinner"
        assert prefs.skill_level == "Beginner"
        assert prefs.cook_time == "15-30 minutes"

    def test_multi_choices_sorted_and_deduplicated(self):
        """Test that sets and lists are normalized to sorted lists."""
        prefs = RecipePreferences(cuisines={"mexican", "Italian"}, allergies=["Nuts", "nuts", "Dairy"])

        assert prefs.cuisines == ["Italian", "Mexican"]
        assert prefs.allergies == ["Dairy", "Nuts"]

    def test_single_string_accepted_for_multi_choice(self):
        """Test that one string is treated as a one-item list."""
        assert RecipePreferences(dietary_restrictions="vegan").dietary_restrictions == ["Vegan"]

    def test_invalid_choice_rejected(self):
        """Test that unknown options fail validation."""
        with pytest.raises(ValidationError, match="Invalid cuisines"):
            RecipePreferences(cuisines=["Martian"])

    def test_subtype_belongs_to_meal_type(self):
        """Test that the subtype is validated against the meal type."""
        prefs = RecipePreferences(meal_type="Dinner", meal_subtype="main course")
        assert prefs.meal_subtype == "Main Course"

        with pytest.raises(ValidationError, match="Invalid meal subtype"):
            RecipePreferences(meal_type="Breakfast", meal_subtype="Main Course")

    def test_subtype_requires_meal_type(self):
        """Test that a subtype without a meal type is rejected."""
        with pytest.raises(ValidationError, match="meal_subtype requires meal_type"):
            RecipePreferences(meal_subtype="Salad")


class TestParseResults:
    """Test tagged parse result models."""

    def test_ingredient_result_fallback_flag(self):
        """Test that only the text-line strategy is a fallback."""
        assert IngredientParseResult(strategy="text_lines", ingredients=["a"]).is_fallback is True
        assert IngredientParseResult(strategy="json_array", ingredients=["a"]).is_fallback is False
        assert IngredientParseResult(strategy="empty", ingredients=[]).is_fallback is False

    def test_unknown_strategy_rejected(self):
        """Test that the strategy tag is restricted."""
        with pytest.raises(ValidationError):
            IngredientParseResult(strategy="guess", ingredients=[])

    def test_recipe_result(self):
        """Test that the sentence strategy is a fallback and backfilled defaults to empty."""
        result = RecipeParseResult(strategy="sentences", recipe=_recipe())

        assert result.is_fallback is True
        assert result.backfilled == []
