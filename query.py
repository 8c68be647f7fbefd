#!/usr/bin/env python3
"""Ad hoc runner for the FoodSnap flow.

Snap photos, answer the survey from flags and print the recipe, without any UI.

Usage:
    python query.py --image images/fridge.jpg
    python query.py --image a.jpg --image b.jpg --meal-type Dinner --meal-subtype "Main Course"
    python query.py --ingredients "eggs, milk, flour" --skill-level Beginner --cook-time "15-30 minutes"
    python query.py --image images/fridge.jpg --with-image recipe.png  # Also illustrate the recipe
    python query.py --debug --ingredients "rice, beans"  # Show the recipe as JSON too

Features:
- Ingredient recognition from one or more photos (or a typed ingredient list)
- Survey answers from flags; repeat --cuisine/--allergy/--diet/--nutrition for several
- Markdown recipe output rendered with rich
- Optional Stability AI illustration written to a file
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown

from foodsnap.models.models import Recipe
from foodsnap.services.pipeline import FoodSnapPipeline
from foodsnap.survey.session import SurveySession
from foodsnap.utils.logger import logger

console = Console()


def render_recipe_markdown(recipe: Recipe) -> str:
    """Format a recipe as Markdown for the terminal."""
    lines = [f"# {recipe.title}", ""]
    if recipe.description:
        lines += [f"_{recipe.description}_", ""]
    lines += [
        f"**Cook time:** {recipe.cook_time} | **Difficulty:** {recipe.difficulty} | **Servings:** {recipe.servings}",
        "",
        "## Ingredients",
    ]
    lines += [f"- {item}" for item in recipe.ingredients]
    lines += ["", "## Instructions"]
    lines += [f"{idx}. {step}" for idx, step in enumerate(recipe.instructions, 1)]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="FoodSnap: photos in, recipe out")
    parser.add_argument("--image", action="append", default=[], help="Photo of ingredients (repeatable)")
    parser.add_argument("--ingredients", help="Comma-separated ingredients to add to (or instead of) photos")
    parser.add_argument("--meal-type", help="Breakfast, Lunch, Dinner, ...")
    parser.add_argument("--meal-subtype", help="Subtype for the meal type, e.g. 'Main Course'")
    parser.add_argument("--skill-level", help="Beginner, Intermediate or Advanced")
    parser.add_argument("--cook-time", help="e.g. 'Under 15 minutes', '15-30 minutes'")
    parser.add_argument("--cuisine", action="append", default=[], help="Preferred cuisine (repeatable)")
    parser.add_argument("--allergy", action="append", default=[], help="Allergy to avoid (repeatable)")
    parser.add_argument("--diet", action="append", default=[], help="Dietary restriction (repeatable)")
    parser.add_argument("--nutrition", action="append", default=[], help="Nutritional requirement (repeatable)")
    parser.add_argument("--with-image", metavar="PATH", help="Generate an illustration and save it to PATH")
    parser.add_argument("--debug", action="store_true", help="Also print the recipe as JSON")
    return parser


def apply_survey_answers(session: SurveySession, args: argparse.Namespace) -> None:
    """Fill the survey from parsed flags.

    Raises:
        ValueError: An answer is not one of the offered options.
    """
    if args.ingredients:
        for name in args.ingredients.split(","):
            session.ingredients.add(name)
    if args.meal_type:
        session.select_meal(args.meal_type, args.meal_subtype)
    elif args.meal_subtype:
        raise ValueError("--meal-subtype requires --meal-type")
    if args.skill_level:
        session.select_skill_level(args.skill_level)
    if args.cook_time:
        session.select_cook_time(args.cook_time)
    for cuisine in args.cuisine:
        session.toggle_cuisine(cuisine)
    for allergy in args.allergy:
        session.toggle_allergy(allergy)
    for diet in args.diet:
        session.toggle_dietary_restriction(diet)
    for requirement in args.nutrition:
        session.toggle_nutritional_requirement(requirement)


async def run(args: argparse.Namespace) -> Recipe:
    pipeline = FoodSnapPipeline()

    if args.image:
        for image in args.image:
            if not Path(image).is_file():
                raise FileNotFoundError(f"Image file not found: {image}")
        session = await pipeline.snap([Path(image) for image in args.image])
        logger.info(f"Identified ingredients: {', '.join(session.ingredients.identified)}")
    else:
        session = SurveySession([])

    apply_survey_answers(session, args)

    missing = session.missing_requirements()
    if missing:
        logger.info(f"No answer for: {', '.join(missing)}")

    return await pipeline.recipify(session, with_image=bool(args.with_image))


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.image and not args.ingredients:
        parser.error("provide at least one --image or --ingredients")

    try:
        recipe = asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)

    console.print()

    if args.debug:
        console.print("[bold cyan]Debug Mode: Full Recipe[/bold cyan]")
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print_json(recipe.model_dump_json(exclude={"image_data"}))
        console.print("[dim]" + "=" * 60 + "[/dim]")
        console.print()

    console.print(Markdown(render_recipe_markdown(recipe)))

    if args.with_image:
        if recipe.image_data:
            Path(args.with_image).write_bytes(recipe.image_data)
            console.print(f"\n[green]✓ Image saved to {args.with_image}[/green]")
        else:
            console.print("\n[yellow]No image generated[/yellow]")


if __name__ == "__main__":
    main()
