"""Mise en place survey state.

A SurveySession lives for one pass through the survey: the user reviews the
recognised ingredients (add, remove, select/deselect) and answers the
preference questions. build_request() snapshots the answers into the
arguments for recipe generation.
"""

from typing import Optional

from foodsnap.models.models import (
    ALLERGIES,
    COOK_TIMES,
    CUISINES,
    DIETARY_RESTRICTIONS,
    MEAL_SUBTYPES,
    MEAL_TYPES,
    NUTRITIONAL_REQUIREMENTS,
    SKILL_LEVELS,
    RecipePreferences,
    canonical_option,
)
from foodsnap.utils.logger import logger


def capitalize_first(name: str) -> str:
    """Upper-case the first character only ("olive oil" -> "Olive oil")."""
    name = name.strip()
    return name[:1].upper() + name[1:]


class IngredientSelection:
    """Recognised ingredients plus the subset the user wants to cook with.

    Names are de-duplicated after capitalising the first letter and kept in
    sorted order. Every ingredient starts selected.
    """

    def __init__(self, ingredients: list[str]) -> None:
        names = {capitalize_first(name) for name in ingredients if name and name.strip()}
        self._identified: list[str] = sorted(names)
        self._selected: set[str] = set(self._identified)

    @property
    def identified(self) -> list[str]:
        return list(self._identified)

    @property
    def selected(self) -> list[str]:
        """Selected ingredients in display order."""
        return [name for name in self._identified if name in self._selected]

    def is_selected(self, name: str) -> bool:
        return capitalize_first(name) in self._selected

    def add(self, name: str) -> bool:
        """Add and select a new ingredient. Returns False for blanks and duplicates."""
        name = capitalize_first(name)
        if not name or name in self._identified:
            return False
        self._identified.append(name)
        self._identified.sort()
        self._selected.add(name)
        return True

    def remove(self, name: str) -> bool:
        name = capitalize_first(name)
        if name not in self._identified:
            return False
        self._identified.remove(name)
        self._selected.discard(name)
        return True

    def toggle(self, name: str) -> bool:
        """Flip selection of a known ingredient. Returns the new state.

        Raises:
            KeyError: If the ingredient is not in the list.
        """
        name = capitalize_first(name)
        if name not in self._identified:
            raise KeyError(name)
        if name in self._selected:
            self._selected.discard(name)
            return False
        self._selected.add(name)
        return True


def _toggle_choice(choices: set[str], value: str, options: tuple[str, ...], label: str) -> bool:
    option = canonical_option(value, options, label)
    if option in choices:
        choices.discard(option)
        return False
    choices.add(option)
    return True


class SurveySession:
    """Answers for one survey pass.

    Required before recipe generation: at least one selected ingredient, a
    meal type with subtype, a skill level and a cook time. Cuisines,
    allergies, dietary restrictions and nutritional requirements are optional.
    """

    def __init__(self, identified_ingredients: list[str]) -> None:
        self.ingredients = IngredientSelection(identified_ingredients)
        self.meal_type: Optional[str] = None
        self.meal_subtype: Optional[str] = None
        self.skill_level: Optional[str] = None
        self.cook_time: Optional[str] = None
        self.cuisines: set[str] = set()
        self.allergies: set[str] = set()
        self.dietary_restrictions: set[str] = set()
        self.nutritional_requirements: set[str] = set()

    def select_meal(self, meal_type: str, meal_subtype: Optional[str] = None) -> None:
        """Choose a meal type and optionally its subtype.

        Changing the meal type clears a subtype that belonged to the old one.
        A rejected call leaves both answers as they were.

        Raises:
            ValueError: Unknown meal type or subtype not offered for it.
        """
        meal_type = canonical_option(meal_type, MEAL_TYPES, "meal type")
        if meal_subtype is not None:
            subtype = canonical_option(meal_subtype, MEAL_SUBTYPES[meal_type], "meal subtype")
        elif meal_type == self.meal_type:
            subtype = self.meal_subtype
        else:
            subtype = None
        self.meal_type, self.meal_subtype = meal_type, subtype

    def select_skill_level(self, skill_level: str) -> None:
        self.skill_level = canonical_option(skill_level, SKILL_LEVELS, "skill level")

    def select_cook_time(self, cook_time: str) -> None:
        self.cook_time = canonical_option(cook_time, COOK_TIMES, "cook time")

    def toggle_cuisine(self, cuisine: str) -> bool:
        return _toggle_choice(self.cuisines, cuisine, CUISINES, "cuisine")

    def toggle_allergy(self, allergy: str) -> bool:
        return _toggle_choice(self.allergies, allergy, ALLERGIES, "allergy")

    def toggle_dietary_restriction(self, diet: str) -> bool:
        return _toggle_choice(self.dietary_restrictions, diet, DIETARY_RESTRICTIONS, "dietary restriction")

    def toggle_nutritional_requirement(self, requirement: str) -> bool:
        return _toggle_choice(
            self.nutritional_requirements, requirement, NUTRITIONAL_REQUIREMENTS, "nutritional requirement"
        )

    def missing_requirements(self) -> list[str]:
        """Unanswered required sections, in survey order."""
        missing = []
        if not self.ingredients.selected:
            missing.append("Ingredients")
        if self.meal_type is None or self.meal_subtype is None:
            missing.append("Meal Type")
        if self.skill_level is None:
            missing.append("Skill Level")
        if self.cook_time is None:
            missing.append("Cook Time")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_requirements()

    def preferences(self) -> RecipePreferences:
        return RecipePreferences(
            meal_type=self.meal_type,
            meal_subtype=self.meal_subtype,
            skill_level=self.skill_level,
            cook_time=self.cook_time,
            cuisines=self.cuisines,
            allergies=self.allergies,
            dietary_restrictions=self.dietary_restrictions,
            nutritional_requirements=self.nutritional_requirements,
        )

    def build_request(self) -> tuple[list[str], RecipePreferences]:
        """Snapshot the session into (selected ingredients, preferences).

        Incomplete sessions are allowed; unanswered questions simply add no
        constraint to the prompt.
        """
        missing = self.missing_requirements()
        if missing:
            logger.debug(f"Building recipe request with unanswered sections: {', '.join(missing)}")
        return self.ingredients.selected, self.preferences()
