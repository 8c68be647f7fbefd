"""Ingredient recognition from photos using the Gemini vision API.

Pipeline for analyze_images():
1. Load every image source (bytes, path, data URL, http(s) URL, base64)
2. Validate format (JPEG/PNG/WEBP) and size (MAX_IMAGE_SIZE_MB)
3. Re-encode as JPEG at JPEG_QUALITY to keep the request small
4. Send ONE multimodal request: analysis instruction + one inline part per image
5. Parse the text with parse_ingredient_response()

Failure policy: silent degrade. A missing key, network error, deadline, API
error or empty response yields FALLBACK_INGREDIENTS. There are no retries.
An explicit "[]" from the model is a real answer and is returned as [].

Core Functions:
- fetch_image_bytes(): Get image bytes from URL or data URL (async)
- load_image_bytes(): Resolve any supported source to bytes (async)
- validate_image_format() / validate_image_size(): Pre-flight checks
- encode_jpeg(): Pillow re-encode
- prepare_images(): Steps 1-3 for a batch
- analyze_images_detailed(): Steps 1-5, tagged result or None on failure
- analyze_images(): Ingredient names, never raises
"""

import base64
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import aiohttp
import filetype
from google.genai import types
from PIL import Image

from foodsnap.models.models import IngredientParseResult
from foodsnap.parsers.ingredients import parse_ingredient_response
from foodsnap.prompts.prompts import INGREDIENT_ANALYSIS_PROMPT
from foodsnap.services.gemini import GeminiClient
from foodsnap.utils.config import config
from foodsnap.utils.errors import NoDataReceivedError, safe_execute_async, safe_execute_sync
from foodsnap.utils.logger import logger


ImageSource = Union[bytes, str, Path]

FALLBACK_INGREDIENTS = ("Chicken", "Tomatoes", "Onions", "Garlic", "Olive Oil")

SUPPORTED_EXTENSIONS = ("jpg", "jpeg", "png", "webp")


async def fetch_image_bytes(url: str) -> Optional[bytes]:
    """Fetch image bytes from an http(s) URL or decode a data URL.

    Returns:
        Image bytes, or None on any failure (logged as warning).
    """
    if url.startswith("data:"):

        def _decode_data_url():
            _, encoded = url.split(",", 1)
            return base64.b64decode(encoded)

        return safe_execute_sync(_decode_data_url, "Decode data URL", default_return=None)

    async def _fetch_url():
        async with aiohttp.ClientSession() as session:
            async with session.get(url, timeout=aiohttp.ClientTimeout(total=10)) as response:
                response.raise_for_status()
                return await response.read()

    return await safe_execute_async(_fetch_url(), f"Fetch image from URL: {url}", default_return=None)


async def load_image_bytes(source: ImageSource) -> Optional[bytes]:
    """Resolve an image source to raw bytes.

    Supports raw bytes, filesystem paths (str or Path), data URLs, http(s)
    URLs and plain base64 strings.

    Returns:
        Image bytes or None if the source could not be read.
    """
    if isinstance(source, bytes):
        return source

    if isinstance(source, Path):
        return safe_execute_sync(source.read_bytes, f"Read image file {source}", default_return=None)

    if isinstance(source, str):
        if source.startswith(("http://", "https://", "data:")):
            return await fetch_image_bytes(source)

        path = Path(source)
        if len(source) < 4096 and path.is_file():
            return safe_execute_sync(path.read_bytes, f"Read image file {path}", default_return=None)

        def _decode_base64():
            return base64.b64decode(source, validate=True)

        return safe_execute_sync(_decode_base64, "Decode base64 image string", default_return=None)

    logger.warning(f"Unsupported image source type: {type(source).__name__}")
    return None


def validate_image_format(image_bytes: bytes) -> bool:
    """Check magic bytes for JPEG, PNG or WEBP."""
    kind = filetype.guess(image_bytes)
    if kind is None or kind.extension not in SUPPORTED_EXTENSIONS:
        logger.warning(f"Invalid image format: {kind.extension if kind else 'unknown'}. "
                       f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}")
        return False
    return True


def validate_image_size(image_bytes: bytes) -> bool:
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        return False
    return True


def encode_jpeg(image_bytes: bytes, quality: Optional[int] = None) -> bytes:
    """Re-encode an image as JPEG with Pillow.

    Transparent and palette images are flattened onto white first.

    Raises:
        PIL.UnidentifiedImageError / OSError: If Pillow cannot decode the image.
    """
    quality = quality or config.JPEG_QUALITY
    img = Image.open(BytesIO(image_bytes))

    if img.mode in ("RGBA", "LA", "P"):
        img = img.convert("RGBA")
        rgb_img = Image.new("RGB", img.size, (255, 255, 255))
        rgb_img.paste(img, mask=img.split()[-1])
        img = rgb_img
    elif img.mode != "RGB":
        img = img.convert("RGB")

    output = BytesIO()
    img.save(output, format="JPEG", quality=quality, optimize=True)
    encoded = output.getvalue()

    logger.debug(f"Image re-encoded: {len(image_bytes) / 1024:.1f}KB → {len(encoded) / 1024:.1f}KB (q={quality})")
    return encoded


async def prepare_images(sources: list[ImageSource]) -> list[bytes]:
    """Load, validate and JPEG-encode images. Unusable images are skipped."""
    if len(sources) > config.MAX_IMAGES:
        logger.warning(f"{len(sources)} images supplied, only the first {config.MAX_IMAGES} are analysed")
        sources = sources[: config.MAX_IMAGES]

    prepared = []
    for idx, source in enumerate(sources):
        image_bytes = await load_image_bytes(source)
        if not image_bytes:
            logger.warning(f"Image {idx + 1}: Failed to get image bytes")
            continue
        if not validate_image_format(image_bytes) or not validate_image_size(image_bytes):
            continue
        jpeg = safe_execute_sync(
            lambda: encode_jpeg(image_bytes),
            f"Image {idx + 1}: JPEG encoding",
            default_return=None,
        )
        if jpeg:
            prepared.append(jpeg)

    return prepared


def build_image_parts(jpeg_images: list[bytes]) -> list[types.Part]:
    """Instruction text followed by one inline JPEG part per image."""
    parts = [types.Part.from_text(text=INGREDIENT_ANALYSIS_PROMPT)]
    parts.extend(types.Part.from_bytes(data=image, mime_type="image/jpeg") for image in jpeg_images)
    return parts


async def analyze_images_detailed(
    images: list[ImageSource],
    client: Optional[GeminiClient] = None,
) -> Optional[IngredientParseResult]:
    """Recognise ingredients and return the tagged parse result.

    Args:
        images: Image sources (see load_image_bytes).
        client: Gemini client. Created from configuration when omitted.

    Returns:
        IngredientParseResult, or None if any step failed (logged as warning).
    """

    async def _recognise() -> IngredientParseResult:
        gemini = client or GeminiClient()

        jpeg_images = await prepare_images(images)
        if not jpeg_images:
            raise NoDataReceivedError("No usable images to analyse")

        logger.info(
            f"Sending ingredient analysis request with {len(jpeg_images)} image(s)", extra={"operation": "recognise"}
        )
        text = await gemini.generate_text(
            model=config.IMAGE_ANALYSIS_MODEL,
            parts=build_image_parts(jpeg_images),
            temperature=config.ANALYSIS_TEMPERATURE,
            top_p=config.ANALYSIS_TOP_P,
            top_k=config.ANALYSIS_TOP_K,
            timeout_seconds=config.INGREDIENT_TIMEOUT_SECONDS,
        )
        return parse_ingredient_response(text)

    return await safe_execute_async(
        _recognise(),
        "Ingredient recognition",
        log_level="warning",
        default_return=None,
        timeout=config.INGREDIENT_TIMEOUT_SECONDS,
    )


async def analyze_images(
    images: list[ImageSource],
    client: Optional[GeminiClient] = None,
) -> list[str]:
    """Recognise ingredients in photos.

    Never raises: any failure returns a copy of FALLBACK_INGREDIENTS.
    """
    result = await analyze_images_detailed(images, client=client)

    if result is None:
        logger.warning(
            f"Ingredient recognition failed, using fallback ingredients: {list(FALLBACK_INGREDIENTS)}",
            extra={"operation": "recognise", "strategy": "fallback"},
        )
        return list(FALLBACK_INGREDIENTS)

    logger.info(
        f"Recognised {len(result.ingredients)} ingredient(s): {result.ingredients}",
        extra={"operation": "recognise", "strategy": result.strategy},
    )
    return list(result.ingredients)
