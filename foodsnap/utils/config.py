"""Configuration management for FoodSnap.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

API keys are looked up separately by load_api_key(), which also scans the
.env-style key files listed in ENV_FILE_PATHS (the app bundle and the user's
documents directory by default).
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values, load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _default_env_file_paths() -> str:
    return os.pathsep.join(
        [
            str(Path.cwd() / ".env"),
            str(Path.home() / "Documents" / ".env"),
        ]
    )


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # API keys: missing keys are not a configuration error, the adapters degrade instead
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.STABILITY_API_KEY: str = os.getenv("STABILITY_API_KEY", "")
        # Key files searched when the key is not in the environment (os.pathsep separated)
        self.ENV_FILE_PATHS: list[str] = [
            p for p in os.getenv("ENV_FILE_PATHS", _default_env_file_paths()).split(os.pathsep) if p
        ]

        # Gemini
        self.GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com")
        # Model used to recognise ingredients in photos
        self.IMAGE_ANALYSIS_MODEL: str = os.getenv("IMAGE_ANALYSIS_MODEL", "gemini-2.0-flash")
        # Model used to write recipes
        self.RECIPE_MODEL: str = os.getenv("RECIPE_MODEL", "gemini-2.0-flash")
        # Low temperature keeps ingredient names literal
        self.ANALYSIS_TEMPERATURE: float = float(os.getenv("ANALYSIS_TEMPERATURE", "0.2"))
        self.ANALYSIS_TOP_P: float = float(os.getenv("ANALYSIS_TOP_P", "0.8"))
        self.ANALYSIS_TOP_K: int = int(os.getenv("ANALYSIS_TOP_K", "40"))
        self.RECIPE_TEMPERATURE: float = float(os.getenv("RECIPE_TEMPERATURE", "0.7"))
        self.RECIPE_TOP_P: float = float(os.getenv("RECIPE_TOP_P", "0.95"))
        self.RECIPE_TOP_K: int = int(os.getenv("RECIPE_TOP_K", "40"))

        # Stability AI
        self.STABILITY_BASE_URL: str = os.getenv("STABILITY_BASE_URL", "https://api.stability.ai")
        self.STABILITY_ENGINE_ID: str = os.getenv("STABILITY_ENGINE_ID", "stable-diffusion-xl-1024-v1-0")
        self.IMAGE_CFG_SCALE: int = int(os.getenv("IMAGE_CFG_SCALE", "7"))
        self.IMAGE_HEIGHT: int = int(os.getenv("IMAGE_HEIGHT", "1024"))
        self.IMAGE_WIDTH: int = int(os.getenv("IMAGE_WIDTH", "1024"))
        self.IMAGE_SAMPLES: int = int(os.getenv("IMAGE_SAMPLES", "1"))
        self.IMAGE_STEPS: int = int(os.getenv("IMAGE_STEPS", "30"))

        # Deadlines (seconds). The request is cancelled when one expires.
        self.INGREDIENT_TIMEOUT_SECONDS: float = float(os.getenv("INGREDIENT_TIMEOUT_SECONDS", "15"))
        self.RECIPE_TIMEOUT_SECONDS: float = float(os.getenv("RECIPE_TIMEOUT_SECONDS", "25"))
        self.IMAGE_TIMEOUT_SECONDS: float = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "60"))

        # Uploaded photos
        # JPEG re-encode quality (1-95). 50 keeps multi-photo requests small.
        self.JPEG_QUALITY: int = int(os.getenv("JPEG_QUALITY", "50"))
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "10"))
        self.MAX_IMAGES: int = int(os.getenv("MAX_IMAGES", "10"))

        self.LOG_TYPE: str = os.getenv("LOG_TYPE", "text").lower()

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a value is out of range.
        """
        for name in ("ANALYSIS_TEMPERATURE", "RECIPE_TEMPERATURE"):
            value = getattr(self, name)
            if not (0.0 <= value <= 2.0):
                raise ValueError(f"{name} must be between 0.0 and 2.0, got: {value}")
        for name in ("ANALYSIS_TOP_P", "RECIPE_TOP_P"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0.0 and 1.0, got: {value}")
        for name in (
            "ANALYSIS_TOP_K",
            "RECIPE_TOP_K",
            "INGREDIENT_TIMEOUT_SECONDS",
            "RECIPE_TIMEOUT_SECONDS",
            "IMAGE_TIMEOUT_SECONDS",
            "IMAGE_HEIGHT",
            "IMAGE_WIDTH",
            "IMAGE_SAMPLES",
            "IMAGE_STEPS",
            "MAX_IMAGE_SIZE_MB",
            "MAX_IMAGES",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got: {value}")
        if not (1 <= self.JPEG_QUALITY <= 95):
            raise ValueError(f"JPEG_QUALITY must be between 1 and 95, got: {self.JPEG_QUALITY}")
        if self.LOG_TYPE not in ("text", "json"):
            raise ValueError(f"LOG_TYPE must be 'text' or 'json', got: {self.LOG_TYPE}")


def load_api_key(name: str, search_paths: Optional[list[str]] = None) -> Optional[str]:
    """Look up an API key by name.

    Checks the process environment first, then each existing .env-style file
    in search_paths (KEY=value lines). Blank values are ignored.

    Args:
        name: Variable name, e.g. "GEMINI_API_KEY".
        search_paths: Key files to scan. Defaults to config.ENV_FILE_PATHS.

    Returns:
        The key with surrounding whitespace removed, or None if not found.
    """
    value = os.getenv(name, "").strip()
    if value:
        return value

    paths = config.ENV_FILE_PATHS if search_paths is None else search_paths
    for path in paths:
        if not Path(path).is_file():
            continue
        value = (dotenv_values(path).get(name) or "").strip()
        if value:
            return value

    return None


# Create module-level config instance and validate immediately
config = Config()
config.validate()
