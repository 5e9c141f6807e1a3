"""
Required files checker.

Every path goes through the path safety guard first, so "../../etc/passwd"
or "/etc/shadow" are rejected without touching the filesystem.
"""

import asyncio
import os
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS, timed_check
from ..core.exceptions import AbsolutePathError, PathTraversalError
from ..core.models import CheckResult, Outcome
from ..core.paths import resolve_safe_path


class FilesChecker(BaseChecker):
    """Проверка наличия обязательных файлов проекта."""

    def __init__(
        self,
        files: Sequence[str],
        cwd: Optional[Path] = None,
        timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS,
    ):
        super().__init__(name="FilesChecker", timeout_seconds=timeout_seconds)
        self.files = list(files)
        self.cwd = cwd

    async def _check(self) -> List[CheckResult]:
        results = []
        for file in self.files:
            results.append(await timed_check(f"File: {file}", lambda file=file: self.check_file(file)))
        return results

    async def check_file(self, file: str) -> Outcome:
        try:
            path = resolve_safe_path(file, self.cwd)
        except AbsolutePathError:
            return Outcome.failed(f'Absolute paths are not allowed in file checks: "{file}"')
        except PathTraversalError as e:
            return Outcome.failed(str(e))

        exists = await asyncio.to_thread(os.path.exists, path)
        if not exists:
            return Outcome.failed(f"Required file not found: {file}")

        return Outcome.passed(f"{file} exists")
