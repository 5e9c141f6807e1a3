"""
Runtime version checkers.

- NodeVersionChecker: probes `node --version`
- PythonVersionChecker: reads the running interpreter's version in-process
"""

import platform
import sys
from typing import List, Optional

from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS, timed_check, unit_budget
from ..core.models import CheckResult, Outcome
from ..core.system import DEFAULT_COMMAND_TIMEOUT_MS, exec_command
from ..core.versions import clean_version, parse_range, satisfies


def version_outcome(current: str, requirement: str) -> Outcome:
    """Сравнить уже нормализованную версию с npm-диапазоном."""
    spec = parse_range(requirement)
    if spec is None:
        return Outcome.failed(f'Invalid semver range in config: "{requirement}"')

    if satisfies(current, spec):
        return Outcome.passed(f"v{current} satisfies {requirement}")

    return Outcome.failed(f"v{current} does not satisfy {requirement}")


class NodeVersionChecker(BaseChecker):
    """Проверка версии Node.js."""

    label = "Node.js Version"

    def __init__(
        self,
        requirement: str,
        command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS,
        timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS,
    ):
        super().__init__(name="NodeVersionChecker", timeout_seconds=unit_budget(timeout_seconds, 1, command_timeout_ms))
        self.requirement = requirement
        self.command_timeout_ms = command_timeout_ms

    async def _check(self) -> List[CheckResult]:
        async def check() -> Outcome:
            raw = await exec_command("node --version", timeout_ms=self.command_timeout_ms)
            current = clean_version(raw)
            if current is None:
                return Outcome.failed(f"Could not parse current Node.js version: {raw.strip()}")
            return version_outcome(current, self.requirement)

        return [await timed_check(self.label, check)]


class PythonVersionChecker(BaseChecker):
    """Проверка версии интерпретатора Python, в котором запущен stackaudit."""

    label = "Python Version"

    def __init__(self, requirement: str, timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS):
        super().__init__(name="PythonVersionChecker", timeout_seconds=timeout_seconds)
        self.requirement = requirement

    def current_version(self) -> str:
        info = sys.version_info
        return f"{info.major}.{info.minor}.{info.micro}"

    async def _check(self) -> List[CheckResult]:
        async def check() -> Outcome:
            raw = self.current_version()
            current = clean_version(raw)
            if current is None:
                return Outcome.failed(
                    f"Could not parse current Python version: {raw} ({platform.python_implementation()})"
                )
            return version_outcome(current, self.requirement)

        return [await timed_check(self.label, check)]
