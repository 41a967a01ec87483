"""Tests for the cancellation token and the warning reporter."""

import asyncio

import pytest

from pagegraph.utils import BuildCancelled, CancellationToken, FetchError, Reporter


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_initial_state(self):
        token = CancellationToken()

        assert token.cancelled is False
        token.raise_if_cancelled()

    def test_cancel_is_idempotent(self):
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")

        assert token.cancelled is True
        assert token.reason == "first"

    def test_raise_if_cancelled(self):
        token = CancellationToken()
        token.cancel("stop")

        with pytest.raises(BuildCancelled) as exc_info:
            token.raise_if_cancelled()
        assert exc_info.value.context["reason"] == "stop"

    @pytest.mark.asyncio
    async def test_guard_returns_result(self):
        token = CancellationToken()

        async def work():
            return 42

        assert await token.guard(work()) == 42

    @pytest.mark.asyncio
    async def test_guard_propagates_errors(self):
        token = CancellationToken()

        async def work():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await token.guard(work())

    @pytest.mark.asyncio
    async def test_guard_aborts_slow_work(self):
        """Firing the token unblocks the guard and cancels the inner work."""
        token = CancellationToken()
        started = asyncio.Event()
        finished = False

        async def slow():
            nonlocal finished
            started.set()
            await asyncio.sleep(10)
            finished = True

        guarded = asyncio.ensure_future(token.guard(slow()))
        await started.wait()
        token.cancel()

        with pytest.raises(BuildCancelled):
            await guarded
        assert finished is False

    @pytest.mark.asyncio
    async def test_guard_when_already_cancelled(self):
        token = CancellationToken()
        token.cancel()

        async def work():
            return 1

        with pytest.raises(BuildCancelled):
            await token.guard(work())


class TestReporter:
    """Tests for the warning reporter."""

    def test_record_keeps_kind_message_and_context(self):
        reporter = Reporter()
        warning = reporter.record(FetchError("got 404", context={"url": "https://x.test"}))

        assert warning.kind == "FetchError"
        assert warning.message == "got 404"
        assert warning.context == {"url": "https://x.test"}
        assert reporter.warnings == [warning]
        assert len(reporter) == 1

    def test_warnings_returns_copy(self):
        reporter = Reporter()
        reporter.record(FetchError("x"))

        reporter.warnings.clear()

        assert len(reporter) == 1
