"""Unit tests for the query.py command-line runner."""

from unittest.mock import AsyncMock, patch

import pytest

import query
from foodsnap.models.models import Recipe
from foodsnap.survey.session import SurveySession


class TestRenderRecipeMarkdown:
    """Test Markdown rendering."""

    def test_sections_rendered(self):
        """Title, description, metadata, ingredients and numbered steps appear."""
        recipe = Recipe.placeholder()
        markdown = query.render_recipe_markdown(recipe)

        assert markdown.startswith("# Delicious Recipe")
        assert f"_{recipe.description}_" in markdown
        assert "**Servings:** 4" in markdown
        assert "- Ingredient 1" in markdown
        assert "4. This is step 4" in markdown


class TestApplySurveyAnswers:
    """Test mapping of flags onto the survey."""

    def test_flags_fill_session(self):
        """Every flag is applied to the session."""
        args = query.build_parser().parse_args(
            [
                "--ingredients", "egg, milk",
                "--meal-type", "breakfast",
                "--meal-subtype", "pancakes",
                "--skill-level", "beginner",
                "--cook-time", "under 15 minutes",
                "--cuisine", "French",
                "--cuisine", "American",
                "--allergy", "nuts",
                "--diet", "vegetarian",
                "--nutrition", "low sugar",
            ]
        )
        session = SurveySession([])
        query.apply_survey_answers(session, args)

        assert session.ingredients.selected == ["Egg", "Milk"]
        assert session.is_complete
        assert session.cuisines == {"French", "American"}
        assert session.allergies == {"Nuts"}
        assert session.dietary_restrictions == {"Vegetarian"}
        assert session.nutritional_requirements == {"Low Sugar"}

    def test_subtype_without_meal_type(self):
        """--meal-subtype alone is rejected."""
        args = query.build_parser().parse_args(["--ingredients", "egg", "--meal-subtype", "Salad"])

        with pytest.raises(ValueError, match="--meal-type"):
            query.apply_survey_answers(SurveySession([]), args)


class TestMain:
    """Test the entry point."""

    def test_requires_images_or_ingredients(self):
        """Running with no input exits with a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            query.main([])
        assert exc_info.value.code == 2

    def test_writes_image(self, tmp_path):
        """--with-image saves the illustration bytes."""
        out = tmp_path / "recipe.png"
        recipe = Recipe.placeholder().with_image(b"png-bytes")

        with patch.object(query, "run", AsyncMock(return_value=recipe)):
            query.main(["--ingredients", "egg", "--with-image", str(out)])

        assert out.read_bytes() == b"png-bytes"

    def test_invalid_answer_exits(self):
        """An unknown survey answer exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            query.main(["--ingredients", "egg", "--skill-level", "Wizard"])
        assert exc_info.value.code == 1

    def test_missing_image_file_exits(self, tmp_path):
        """A nonexistent image path exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            query.main(["--image", str(tmp_path / "missing.jpg")])
        assert exc_info.value.code == 1
