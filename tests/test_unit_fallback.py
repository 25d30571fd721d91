"""
Unit tests for the live/demo dispatch combinators.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ummah_api.repos.fallback import attempt_or_default, read_with_fallback, write_or_raise


@pytest.mark.anyio
async def test_demo_mode_never_calls_live() -> None:
    live = AsyncMock()
    demo = MagicMock(return_value="demo")

    assert await read_with_fallback(True, "op", live, demo) == "demo"
    assert await write_or_raise(True, "op", live, demo) == "demo"
    assert await attempt_or_default(True, "op", live, demo, failed="failed") == "demo"
    live.assert_not_called()


@pytest.mark.anyio
async def test_live_success_skips_demo() -> None:
    live = AsyncMock(return_value="live")
    demo = MagicMock()

    assert await read_with_fallback(False, "op", live, demo) == "live"
    assert await write_or_raise(False, "op", live, demo) == "live"
    assert await attempt_or_default(False, "op", live, demo, failed=None) == "live"
    demo.assert_not_called()


@pytest.mark.anyio
async def test_read_failure_answers_from_demo() -> None:
    live = AsyncMock(side_effect=TimeoutError("pool exhausted"))

    assert await read_with_fallback(False, "op", live, lambda: ["demo"]) == ["demo"]


@pytest.mark.anyio
async def test_write_failure_reraises_original_error() -> None:
    error = ValueError("constraint violated")
    live = AsyncMock(side_effect=error)

    with pytest.raises(ValueError) as exc_info:
        await write_or_raise(False, "op", live, MagicMock())

    assert exc_info.value is error


@pytest.mark.anyio
async def test_attempt_failure_returns_failed_value() -> None:
    live = AsyncMock(side_effect=RuntimeError("boom"))
    demo = MagicMock()

    assert await attempt_or_default(False, "op", live, demo, failed=False) is False
    demo.assert_not_called()
