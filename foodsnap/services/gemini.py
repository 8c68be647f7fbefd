"""Thin async client for Gemini generateContent.

Wraps the google-genai SDK so the adapters only deal with prompt parts in and
model text out. SDK and transport failures are translated into the FoodSnap
error taxonomy (APIError, NetworkError, NoDataReceivedError).
"""

from typing import Optional

import aiohttp
import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from foodsnap.utils.config import Config, config, load_api_key
from foodsnap.utils.errors import APIError, APIKeyNotFoundError, NetworkError, NoDataReceivedError
from foodsnap.utils.logger import logger


class GeminiClient:
    """Send one multimodal request and return the text of the first candidate.

    The API key is resolved once at construction (environment, then key files).
    A missing key raises APIKeyNotFoundError so callers can degrade before any
    request is built.
    """

    def __init__(self, api_key: Optional[str] = None, settings: Optional[Config] = None) -> None:
        self.settings = settings or config
        self.api_key = api_key or load_api_key("GEMINI_API_KEY", self.settings.ENV_FILE_PATHS)
        if not self.api_key:
            raise APIKeyNotFoundError("Gemini")

    def _client(self, timeout_seconds: float) -> genai.Client:
        return genai.Client(
            api_key=self.api_key,
            http_options=types.HttpOptions(
                base_url=self.settings.GEMINI_BASE_URL,
                timeout=int(timeout_seconds * 1000),
            ),
        )

    async def generate_text(
        self,
        model: str,
        parts: list[types.Part],
        temperature: float,
        top_p: float,
        top_k: int,
        timeout_seconds: float,
    ) -> str:
        """Call generateContent with a single user turn.

        Args:
            model: Model name, e.g. "gemini-2.0-flash".
            parts: Text and inline image parts, in order.
            temperature, top_p, top_k: Generation config.
            timeout_seconds: Request-level HTTP timeout.

        Returns:
            Text of the response (never blank).

        Raises:
            APIError: The API returned an error message.
            NetworkError: Transport failure.
            NoDataReceivedError: The response carried no text.
        """
        logger.debug(f"Gemini request: model={model}, parts={len(parts)}")

        try:
            response = await self._client(timeout_seconds).aio.models.generate_content(
                model=model,
                contents=[types.Content(role="user", parts=parts)],
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    top_p=top_p,
                    top_k=top_k,
                ),
            )
        except genai_errors.APIError as e:
            raise APIError(e.message or str(e)) from e
        except (httpx.HTTPError, aiohttp.ClientError) as e:
            raise NetworkError(f"Gemini request failed: {e}") from e

        text = response.text
        if not text or not text.strip():
            raise NoDataReceivedError("Gemini returned no text")

        logger.debug(f"Gemini response: {len(text)} chars: {text[:100]!r}")
        return text
