"""
Custom command checker.

Commands that are not on the safe allowlist are SKIPPED unless the user
passes --trust-commands, so a config file from a freshly cloned repository
cannot run arbitrary programs on the developer's machine.
"""

from typing import List, Optional, Sequence

from ..config import CommandConfig
from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS, timed_check, unit_budget
from ..core.exceptions import CommandError
from ..core.models import CheckResult, CheckStatus, Outcome
from ..core.system import DEFAULT_COMMAND_TIMEOUT_MS, exec_command, is_command_allowed

MAX_LABEL_LENGTH = 40


def command_label(command: str) -> str:
    """Короткая подпись для отчёта; для выполнения используется полная команда."""
    if len(command) > MAX_LABEL_LENGTH:
        return command[:MAX_LABEL_LENGTH - 3] + "..."
    return command


class CommandsChecker(BaseChecker):
    """Выполнение пользовательских диагностических команд."""

    def __init__(
        self,
        commands: Sequence[CommandConfig],
        trust_commands: bool = False,
        command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS,
        timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS,
    ):
        self.commands = list(commands)
        super().__init__(
            name="CommandsChecker",
            timeout_seconds=unit_budget(timeout_seconds, len(self.commands), command_timeout_ms),
        )
        self.trust_commands = trust_commands
        self.command_timeout_ms = command_timeout_ms

    async def _check(self) -> List[CheckResult]:
        results = []

        for cmd_def in self.commands:
            name = f"Command: {command_label(cmd_def.cmd)}"

            if not self.trust_commands and not is_command_allowed(cmd_def.cmd):
                self.logger.info(f"Skipping untrusted command {cmd_def.cmd!r}")
                results.append(CheckResult(
                    name=name,
                    status=CheckStatus.SKIP,
                    message=(
                        f'Skipped untrusted command: "{cmd_def.cmd}". '
                        f"Use --trust-commands to allow execution of custom commands."
                    ),
                ))
                continue

            results.append(await timed_check(name, lambda cmd_def=cmd_def: self.run_command(cmd_def)))

        return results

    async def run_command(self, cmd_def: CommandConfig) -> Outcome:
        try:
            stdout = await exec_command(cmd_def.cmd, timeout_ms=self.command_timeout_ms)
        except CommandError as e:
            return Outcome.failed(cmd_def.error_msg or f'Command failed: "{cmd_def.cmd}" - {e}')

        if cmd_def.match and cmd_def.match not in stdout:
            return Outcome.failed(
                cmd_def.error_msg or f'Output of "{cmd_def.cmd}" does not contain "{cmd_def.match}"'
            )

        if cmd_def.match:
            return Outcome.passed(f'"{cmd_def.cmd}" output contains "{cmd_def.match}"')
        return Outcome.passed(f'"{cmd_def.cmd}" executed successfully')
