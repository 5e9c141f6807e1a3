"""
Base classes for checker units and the timed check wrapper.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional

from .models import CheckResult, CheckStatus, Outcome

logger = logging.getLogger(__name__)

DEFAULT_CHECKER_TIMEOUT_SECONDS = 60.0
BUDGET_MARGIN_SECONDS = 1.0

CheckOperation = Callable[[], Awaitable[Outcome]]


def _elapsed_ms(start: float) -> int:
    return max(0, round((time.perf_counter() - start) * 1000))


def unit_budget(
    timeout_seconds: Optional[float],
    command_count: int,
    command_timeout_ms: int,
) -> Optional[float]:
    """
    Общий таймаут checker'а не меньше суммы таймаутов его команд.

    Команды выполняются последовательно и каждая ограничена command_timeout_ms,
    поэтому зависшая команда даёт свой FAIL, а не таймаут всего checker'а.
    """
    if timeout_seconds is None:
        return None
    own_bound = command_count * command_timeout_ms / 1000 + BUDGET_MARGIN_SECONDS
    return max(timeout_seconds, own_bound)


async def timed_check(name: str, operation: CheckOperation) -> CheckResult:
    """
    Выполнить одну проверку с замером времени.

    Любое исключение внутри operation превращается в FAIL-результат:
    наружу ничего не пробрасывается.

    Args:
        name: Имя проверки для отчёта
        operation: Корутина без аргументов, возвращающая Outcome

    Returns:
        CheckResult с длительностью в миллисекундах
    """
    start = time.perf_counter()
    try:
        outcome = await operation()
    except Exception as e:
        logger.debug(f"Check {name!r} raised {type(e).__name__}", exc_info=True)
        return CheckResult(
            name=name,
            status=CheckStatus.FAIL,
            message=str(e) or type(e).__name__,
            duration=_elapsed_ms(start),
        )

    return CheckResult(
        name=name,
        status=outcome.status,
        message=outcome.message,
        duration=_elapsed_ms(start),
    )


class BaseChecker(ABC):
    """
    Базовый класс для всех checker'ов.

    Экземпляр вызывается без аргументов (``await checker()``) и возвращает
    список CheckResult в порядке, заданном конфигурацией. Исключение,
    вылетевшее из _check(), ловит оркестратор.
    """

    def __init__(self, name: str, timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS):
        """
        Args:
            name: Имя checker'а (для логирования и отчётов)
            timeout_seconds: Общий таймаут checker'а (None = без ограничения)
        """
        self.name = name
        self.timeout_seconds = timeout_seconds
        self.logger = logging.getLogger(f"stackaudit.{name}")

    async def run(self) -> List[CheckResult]:
        """Запустить checker с общим таймаутом."""
        self.logger.debug(f"Starting {self.name}...")
        start = time.perf_counter()

        if self.timeout_seconds:
            results = await asyncio.wait_for(self._check(), timeout=self.timeout_seconds)
        else:
            results = await self._check()

        failed = sum(1 for r in results if r.status is CheckStatus.FAIL)
        self.logger.debug(
            f"Completed {self.name}: "
            f"{len(results)} results, "
            f"failed={failed}, "
            f"duration={_elapsed_ms(start)}ms"
        )
        return results

    def __call__(self) -> Awaitable[List[CheckResult]]:
        return self.run()

    @abstractmethod
    async def _check(self) -> List[CheckResult]:
        """Выполнить проверки (реализуется в подклассах)."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
