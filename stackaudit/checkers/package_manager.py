"""Package manager version checker (npm)."""

from typing import List, Optional

from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS, timed_check, unit_budget
from ..core.models import CheckResult, Outcome
from ..core.system import DEFAULT_COMMAND_TIMEOUT_MS, exec_command
from ..core.versions import clean_version
from .runtime_version import version_outcome


class NpmVersionChecker(BaseChecker):
    """Проверка версии npm через `npm --version`."""

    label = "npm Version"
    probe = "npm --version"

    def __init__(
        self,
        requirement: str,
        command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS,
        timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS,
    ):
        super().__init__(name="NpmVersionChecker", timeout_seconds=unit_budget(timeout_seconds, 1, command_timeout_ms))
        self.requirement = requirement
        self.command_timeout_ms = command_timeout_ms

    async def _check(self) -> List[CheckResult]:
        async def check() -> Outcome:
            stdout = await exec_command(self.probe, timeout_ms=self.command_timeout_ms)
            current = clean_version(stdout)
            if current is None:
                return Outcome.failed(f'Could not parse npm version from output: "{stdout.strip()}"')
            return version_outcome(current, self.requirement)

        return [await timed_check(self.label, check)]
