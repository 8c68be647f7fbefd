"""Pytest configuration and fixtures for integration tests.

Loads .env from the project root and skips the live API tests when
GEMINI_API_KEY is not available.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env before collection so the key check below can see it."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests call the live Gemini API (GEMINI_API_KEY required)")
    print("      Image generation tests also need STABILITY_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip the integration session when no Gemini key is configured."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip(
            "Integration tests skipped. Missing API key: GEMINI_API_KEY. Please set it in your .env file.",
            allow_module_level=True,
        )


@pytest.fixture
def stability_key():
    """Skip tests that need Stability AI when its key is missing."""
    key = os.getenv("STABILITY_API_KEY")
    if not key:
        pytest.skip("STABILITY_API_KEY not set")
    return key
