"""The FoodSnap flow: photos -> survey -> recipe (-> illustration).

Core Functions:
- FoodSnapPipeline.snap(): Recognise ingredients and open a survey session
- FoodSnapPipeline.recipify(): Generate a recipe from a session, optionally illustrated
- FoodSnapPipeline.regenerate(): "Another Recipe!" with the same answers
"""

from typing import Optional

from foodsnap.models.models import Recipe
from foodsnap.services.gemini import GeminiClient
from foodsnap.services.ingredients import ImageSource, analyze_images
from foodsnap.services.recipes import generate_recipe
from foodsnap.services.stability import StabilityService
from foodsnap.survey.session import SurveySession
from foodsnap.utils.errors import FoodSnapError
from foodsnap.utils.logger import logger


class FoodSnapPipeline:
    """Run the app's single user flow against injectable clients.

    Each step is one awaited request. Recognition and recipe generation
    degrade to their fallbacks; illustration failures are logged and the
    recipe is returned without image bytes.
    """

    def __init__(
        self,
        gemini: Optional[GeminiClient] = None,
        stability: Optional[StabilityService] = None,
    ) -> None:
        self.gemini = gemini
        self.stability = stability or StabilityService()

    async def snap(self, images: list[ImageSource]) -> SurveySession:
        """Recognise ingredients in the photos and start a survey with them."""
        logger.info(f"Snapped {len(images)} photo(s)")
        ingredients = await analyze_images(images, client=self.gemini)
        return SurveySession(ingredients)

    async def recipify(self, session: SurveySession, with_image: bool = False) -> Recipe:
        """Generate a recipe from the session's selected ingredients and answers."""
        ingredients, preferences = session.build_request()
        recipe = await generate_recipe(ingredients, preferences, client=self.gemini)

        if not with_image:
            return recipe

        try:
            image = await self.stability.generate_image(recipe)
        except FoodSnapError as e:
            logger.warning(f"Recipe image unavailable: {e}")
            return recipe
        return recipe.with_image(image)

    async def regenerate(self, session: SurveySession, with_image: bool = False) -> Recipe:
        """Ask for a different recipe with the same inputs."""
        logger.info("Generating another recipe")
        return await self.recipify(session, with_image=with_image)
