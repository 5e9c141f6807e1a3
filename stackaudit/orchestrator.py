"""
Audit orchestrator: runs checker units and aggregates the report.

Features:
- Parallel execution with settle-all semantics (one crashing unit never
  cancels or hides the others)
- Sequential mode for debugging
- Single-pass summary
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from .checkers import PipelineOptions, build_checker_pipeline
from .config import StackAuditConfig
from .core.models import AuditReport, AuditSummary, CheckResult, CheckStatus

logger = logging.getLogger(__name__)

UNKNOWN_CHECK_NAME = "Unknown Check"

CheckerUnit = Callable[[], Awaitable[List[CheckResult]]]


def unit_name(checker: CheckerUnit) -> str:
    return getattr(checker, "name", None) or UNKNOWN_CHECK_NAME


def crash_result(checker: CheckerUnit, error: BaseException) -> CheckResult:
    """FAIL-результат для checker'а, который упал целиком."""
    if isinstance(error, asyncio.TimeoutError):
        message = f"{unit_name(checker)} timed out"
    else:
        message = str(error) or type(error).__name__
    return CheckResult(
        name=unit_name(checker),
        status=CheckStatus.FAIL,
        message=message,
        duration=0,
    )


async def _invoke(checker: CheckerUnit) -> List[CheckResult]:
    # checker() может упасть ещё до первого await
    return await checker()


def summarize(results: Sequence[CheckResult]) -> AuditSummary:
    """Посчитать итоги за один проход."""
    counts = {status: 0 for status in CheckStatus}
    for result in results:
        counts[result.status] += 1

    return AuditSummary(
        passed=counts[CheckStatus.PASS],
        failed=counts[CheckStatus.FAIL],
        warned=counts[CheckStatus.WARN],
        skipped=counts[CheckStatus.SKIP],
        total=len(results),
    )


class AuditOrchestrator:
    """Оркестратор для управления выполнением checker'ов."""

    async def run_checkers_parallel(self, checkers: Sequence[CheckerUnit]) -> List[CheckResult]:
        """
        Запустить checkers параллельно и дождаться всех.

        Returns:
            Результаты всех checker'ов в порядке их создания
        """
        if not checkers:
            return []

        logger.info(f"Running {len(checkers)} checkers in parallel...")

        # gather с return_exceptions: падение одного не отменяет остальные
        outcomes = await asyncio.gather(
            *[_invoke(checker) for checker in checkers],
            return_exceptions=True,
        )

        results: List[CheckResult] = []
        for checker, outcome in zip(checkers, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Checker {unit_name(checker)} failed: {outcome!r}")
                results.append(crash_result(checker, outcome))
            else:
                results.extend(outcome)

        return results

    async def run_checkers_sequential(self, checkers: Sequence[CheckerUnit]) -> List[CheckResult]:
        """Запустить checkers последовательно (для отладки)."""
        if not checkers:
            return []

        logger.info(f"Running {len(checkers)} checkers sequentially...")

        results: List[CheckResult] = []
        for i, checker in enumerate(checkers, 1):
            logger.info(f"[{i}/{len(checkers)}] Running {unit_name(checker)}...")
            try:
                results.extend(await checker())
            except Exception as e:
                logger.error(f"Checker {unit_name(checker)} failed: {e!r}", exc_info=True)
                results.append(crash_result(checker, e))

        return results

    async def run(
        self,
        project_name: str,
        checkers: Sequence[CheckerUnit],
        parallel: bool = True,
    ) -> AuditReport:
        if parallel:
            results = await self.run_checkers_parallel(checkers)
        else:
            results = await self.run_checkers_sequential(checkers)

        summary = summarize(results)
        logger.info(
            f"Audit complete: {summary.passed} passed, {summary.failed} failed, "
            f"{summary.warned} warned, {summary.skipped} skipped"
        )
        return AuditReport(project_name=project_name, results=results, summary=summary)


async def run_audit(
    config: StackAuditConfig,
    options: Optional[PipelineOptions] = None,
    parallel: bool = True,
) -> AuditReport:
    """
    Удобная функция: собрать pipeline из конфига и выполнить его.

    Args:
        config: Провалидированная конфигурация
        options: Опции pipeline (trust_commands, таймауты, cwd)
        parallel: Запускать параллельно
    """
    checkers = build_checker_pipeline(config.checks, options)
    return await AuditOrchestrator().run(config.project_name, checkers, parallel=parallel)
