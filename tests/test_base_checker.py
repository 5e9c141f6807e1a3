"""Tests for timed_check and BaseChecker."""

import asyncio

import pytest

from stackaudit.core.base_checker import BaseChecker, timed_check, unit_budget
from stackaudit.core.models import CheckResult, CheckStatus, Outcome


class TestTimedCheck:

    @pytest.mark.asyncio
    async def test_merges_name_and_duration(self):
        async def op():
            return Outcome.passed("all good")

        result = await timed_check("Sample", op)

        assert result == CheckResult(name="Sample", status=CheckStatus.PASS, message="all good", duration=result.duration)
        assert isinstance(result.duration, int)
        assert result.duration >= 0

    @pytest.mark.asyncio
    async def test_measures_elapsed_time(self):
        async def op():
            await asyncio.sleep(0.05)
            return Outcome.warning("slow")

        result = await timed_check("Slow", op)
        assert result.status is CheckStatus.WARN
        assert result.duration >= 40

    @pytest.mark.asyncio
    async def test_exception_becomes_fail(self):
        async def op():
            raise RuntimeError("probe exploded")

        result = await timed_check("Broken", op)

        assert result.name == "Broken"
        assert result.status is CheckStatus.FAIL
        assert result.message == "probe exploded"

    @pytest.mark.asyncio
    async def test_exception_without_message_uses_type_name(self):
        async def op():
            raise KeyError

        result = await timed_check("Broken", op)
        assert result.message == "KeyError"

    @pytest.mark.asyncio
    async def test_result_is_immutable(self):
        async def op():
            return Outcome.passed("ok")

        result = await timed_check("Frozen", op)
        with pytest.raises(AttributeError):
            result.status = CheckStatus.FAIL


class _EchoChecker(BaseChecker):
    def __init__(self, results, delay=0.0, timeout_seconds=1.0):
        super().__init__(name="EchoChecker", timeout_seconds=timeout_seconds)
        self.results = results
        self.delay = delay

    async def _check(self):
        await asyncio.sleep(self.delay)
        return self.results


class TestBaseChecker:

    @pytest.mark.asyncio
    async def test_call_runs_check(self):
        results = [CheckResult("a", CheckStatus.PASS, "ok", 1)]
        checker = _EchoChecker(results)
        assert await checker() == results

    @pytest.mark.asyncio
    async def test_timeout_propagates_to_caller(self):
        checker = _EchoChecker([], delay=1.0, timeout_seconds=0.05)
        with pytest.raises(asyncio.TimeoutError):
            await checker.run()

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            BaseChecker("abstract")


@pytest.mark.parametrize("timeout_seconds, count, command_timeout_ms, expected", [
    (60.0, 1, 10_000, 60.0),
    (60.0, 6, 10_000, 61.0),
    (0.5, 2, 1000, 3.0),
    (None, 10, 10_000, None),
])
def test_unit_budget(timeout_seconds, count, command_timeout_ms, expected):
    assert unit_budget(timeout_seconds, count, command_timeout_ms) == expected
