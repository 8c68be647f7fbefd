"""Recipe illustration with the Stability AI text-to-image API.

Unlike the Gemini adapters this one does not degrade: the caller receives the
image bytes or a typed error and decides what to show instead.
"""

import base64
import json
from typing import Any, Optional

import aiohttp

from foodsnap.models.models import Recipe
from foodsnap.prompts.prompts import build_image_prompt
from foodsnap.utils.config import Config, config, load_api_key
from foodsnap.utils.errors import (
    APIError,
    APIKeyNotFoundError,
    InvalidResponseError,
    NetworkError,
    NoDataReceivedError,
    safe_execute_async,
)
from foodsnap.utils.logger import logger


def parse_image_response(raw: bytes) -> bytes:
    """Extract the first artifact from a text-to-image response body.

    Raises:
        NoDataReceivedError: Empty body.
        InvalidResponseError: Body is not a JSON object or has no decodable artifact.
        APIError: The body reports an error message.
    """
    if not raw:
        raise NoDataReceivedError()

    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise InvalidResponseError("Response is not valid JSON") from e

    if not isinstance(payload, dict):
        raise InvalidResponseError()

    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        first = errors[0]
        message = first.get("message") if isinstance(first, dict) else str(first)
        if message:
            raise APIError(message)

    artifacts = payload.get("artifacts")
    if isinstance(artifacts, list) and artifacts and isinstance(artifacts[0], dict):
        encoded = artifacts[0].get("base64")
        if isinstance(encoded, str):
            try:
                return base64.b64decode(encoded, validate=True)
            except ValueError as e:
                raise InvalidResponseError("Artifact is not valid base64") from e

    # {"id": ..., "name": ..., "message": ...} error shape
    if payload.get("message"):
        raise APIError(str(payload["message"]))

    raise InvalidResponseError()


class StabilityService:
    """Generate a food photograph for a recipe.

    The API key is resolved lazily on each call (environment, then key files),
    so a service can be created before the key is configured.
    """

    def __init__(self, api_key: Optional[str] = None, settings: Optional[Config] = None) -> None:
        self.settings = settings or config
        self._api_key = api_key

    @property
    def endpoint(self) -> str:
        return (
            f"{self.settings.STABILITY_BASE_URL.rstrip('/')}/v1/generation/"
            f"{self.settings.STABILITY_ENGINE_ID}/text-to-image"
        )

    def build_request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "text_prompts": [{"text": prompt, "weight": 1}],
            "cfg_scale": self.settings.IMAGE_CFG_SCALE,
            "height": self.settings.IMAGE_HEIGHT,
            "width": self.settings.IMAGE_WIDTH,
            "samples": self.settings.IMAGE_SAMPLES,
            "steps": self.settings.IMAGE_STEPS,
        }

    async def _post(self, api_key: str, body: dict[str, Any]) -> tuple[int, bytes]:
        """POST the request body. Returns (status, raw body)."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.endpoint,
                    json=body,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.settings.IMAGE_TIMEOUT_SECONDS),
                ) as response:
                    return response.status, await response.read()
        except aiohttp.ClientError as e:
            raise NetworkError(f"Stability request failed: {e}") from e

    async def generate_image(self, recipe: Recipe) -> bytes:
        """Generate an illustration for recipe.

        Returns:
            Raw image bytes (PNG).

        Raises:
            APIKeyNotFoundError: No STABILITY_API_KEY.
            NetworkError: Transport failure or deadline exceeded.
            NoDataReceivedError: Empty response body.
            InvalidResponseError: Undecodable response.
            APIError: Error message reported by the API.
        """
        logger.info(f"Generating image for recipe: {recipe.title}", extra={"operation": "illustrate"})

        api_key = self._api_key or load_api_key("STABILITY_API_KEY", self.settings.ENV_FILE_PATHS)
        if not api_key:
            logger.warning("Stability API key not found")
            raise APIKeyNotFoundError("Stability")

        prompt = build_image_prompt(recipe)
        logger.debug(f"Image generation prompt: {prompt}")

        status, raw = await safe_execute_async(
            self._post(api_key, self.build_request_body(prompt)),
            "Stability image generation",
            reraise=True,
            timeout=self.settings.IMAGE_TIMEOUT_SECONDS,
        )
        logger.debug(f"Stability HTTP {status}, {len(raw)} bytes")

        image = parse_image_response(raw)
        logger.info(f"Generated image: {len(image) / 1024:.1f}KB", extra={"operation": "illustrate"})
        return image
