"""Unit tests for the error taxonomy and safe execution helpers."""

import asyncio

import pytest

from foodsnap.utils.errors import (
    APIError,
    APIKeyNotFoundError,
    FoodSnapError,
    InvalidResponseError,
    NetworkError,
    NoDataReceivedError,
    safe_execute_async,
    safe_execute_sync,
)


class TestErrorMessages:
    """Test user-facing error messages."""

    def test_api_key_not_found(self):
        """The missing key message names the service."""
        error = APIKeyNotFoundError("Stability")

        assert error.service == "Stability"
        assert str(error) == "Stability API key not found. Please add it to your .env file."

    def test_default_messages(self):
        """Empty and invalid responses have default messages."""
        assert str(NoDataReceivedError()) == "No data received from the API."
        assert str(InvalidResponseError()) == "Invalid response from the API."

    def test_api_error_keeps_message(self):
        """APIError exposes the remote message."""
        error = APIError("quota exceeded")

        assert error.message == "quota exceeded"
        assert str(error) == "API Error: quota exceeded"

    @pytest.mark.parametrize(
        "error",
        [APIKeyNotFoundError("Gemini"), NetworkError("down"), NoDataReceivedError(), InvalidResponseError(), APIError("x")],
    )
    def test_common_base(self, error):
        """Every error derives from FoodSnapError."""
        assert isinstance(error, FoodSnapError)


class TestSafeExecuteAsync:
    """Test safe_execute_async."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        """Successful awaitables return their result."""

        async def work():
            return 42

        assert await safe_execute_async(work(), "Work") == 42

    @pytest.mark.asyncio
    async def test_returns_default_on_error(self, caplog):
        """Failures are logged and the default is returned."""

        async def boom():
            raise RuntimeError("kaput")

        result = await safe_execute_async(boom(), "Boom", default_return="fallback")

        assert result == "fallback"
        assert "Boom: RuntimeError: kaput" in caplog.text

    @pytest.mark.asyncio
    async def test_reraise(self):
        """reraise=True propagates the original exception."""

        async def boom():
            raise APIError("bad request")

        with pytest.raises(APIError, match="bad request"):
            await safe_execute_async(boom(), "Boom", reraise=True)

    @pytest.mark.asyncio
    async def test_deadline_cancels_request(self):
        """An expired deadline cancels the awaitable and returns the default once."""
        cancelled = asyncio.Event()

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return "late"

        result = await safe_execute_async(slow(), "Slow call", default_return="default", timeout=0.01)

        assert result == "default"
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_deadline_reraised_as_network_error(self):
        """With reraise=True a deadline surfaces as NetworkError."""

        async def slow():
            await asyncio.sleep(10)

        with pytest.raises(NetworkError, match="Slow call timed out after 0.01s"):
            await safe_execute_async(slow(), "Slow call", reraise=True, timeout=0.01)


class TestSafeExecuteSync:
    """Test safe_execute_sync."""

    def test_returns_result(self):
        """Successful callables return their result."""
        assert safe_execute_sync(lambda: "ok", "Work") == "ok"

    def test_returns_default_on_error(self):
        """Failures return the default."""

        def boom():
            raise ValueError("nope")

        assert safe_execute_sync(boom, "Boom", default_return=[]) == []

    def test_reraise(self):
        """reraise=True propagates the exception."""

        def boom():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            safe_execute_sync(boom, "Boom", reraise=True)
