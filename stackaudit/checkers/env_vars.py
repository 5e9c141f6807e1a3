"""
Environment variables checker.

Checks that required keys exist in the target .env file (or in the process
environment) and are non-empty. Values are never logged or put into a
result message.

The file is parsed with dotenv_values(), which does not modify os.environ.
"""

import asyncio
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

from ..config import EnvConfig
from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS, timed_check
from ..core.exceptions import AbsolutePathError, PathSafetyError, PathTraversalError
from ..core.models import CheckResult, CheckStatus, Outcome
from ..core.paths import resolve_safe_path


class EnvVarsChecker(BaseChecker):
    """
    Проверка переменных окружения ("closed eyes": значения не раскрываются).

    Если target-файл отсутствует:
    - allow_process_env=True  -> WARN, ключи ищутся в os.environ
    - allow_process_env=False -> FAIL, проверки ключей не выполняются
    """

    def __init__(
        self,
        env_config: EnvConfig,
        cwd: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS,
    ):
        super().__init__(name="EnvVarsChecker", timeout_seconds=timeout_seconds)
        self.env_config = env_config
        self.cwd = cwd
        self.environ = environ if environ is not None else os.environ

    @property
    def file_label(self) -> str:
        return f"Env File ({self.env_config.target})"

    async def _check(self) -> List[CheckResult]:
        target = self.env_config.target

        try:
            target_path = resolve_safe_path(target, self.cwd)
        except AbsolutePathError:
            return [self._guard_failure(f'Absolute paths are not allowed for env.target: "{target}"')]
        except PathTraversalError as e:
            return [self._guard_failure(str(e))]
        except ValueError as e:
            # Например, NUL-байт в пути
            return [self._guard_failure(f"Invalid path for env.target: {target!r} ({e})")]

        file_values: Dict[str, Optional[str]] = {}

        async def load_file() -> Outcome:
            nonlocal file_values
            if not await asyncio.to_thread(target_path.is_file):
                return self._missing_file_outcome()

            file_values = await asyncio.to_thread(
                dotenv_values, target_path, interpolate=False, encoding="utf-8"
            )
            return Outcome.passed(f"{target} loaded successfully ({len(file_values)} keys)")

        file_result = await timed_check(self.file_label, load_file)
        results = [file_result]

        if file_result.status is CheckStatus.FAIL:
            self.logger.debug(f"Skipping key checks: {target} unavailable")
            return results

        for key in self.env_config.required:
            results.append(
                await timed_check(f"Env: {key}", lambda key=key: self.check_key(key, file_values))
            )

        return results

    def _guard_failure(self, message: str) -> CheckResult:
        return CheckResult(name=self.file_label, status=CheckStatus.FAIL, message=message)

    def _missing_file_outcome(self) -> Outcome:
        target = self.env_config.target
        if not self.env_config.allow_process_env:
            return Outcome.failed(f"Required env file not found: {target}")

        message = f"File not found: {target} (using process environment)"
        if self._example_exists():
            message += f". Copy {self.env_config.example} to {target} to configure it locally"
        return Outcome.warning(message)

    def _example_exists(self) -> bool:
        try:
            return resolve_safe_path(self.env_config.example, self.cwd).is_file()
        except (PathSafetyError, ValueError):
            return False

    async def check_key(self, key: str, file_values: Mapping[str, Optional[str]]) -> Outcome:
        # Ключ без "=" в .env даёт None - считаем его пустым
        if key in file_values:
            value = file_values[key] or ""
        elif key in self.environ:
            value = self.environ[key]
        else:
            return Outcome.failed(
                f'Missing required variable "{key}" in {self.env_config.target} and process environment'
            )

        if not value.strip():
            return Outcome.failed(f'Variable "{key}" exists but is empty')

        return Outcome.passed(f'"{key}" is set (value hidden)')

