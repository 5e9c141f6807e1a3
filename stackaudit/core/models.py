"""
Core data models for the audit pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List


class CheckStatus(Enum):
    """Итог одной проверки."""
    PASS = "pass"
    FAIL = "fail"
    WARN = "warn"    # Не влияет на итоговый вердикт
    SKIP = "skip"    # Проверка не выполнялась (например, недоверенная команда)


@dataclass(frozen=True)
class Outcome:
    """Частичный результат: статус и сообщение, без имени и длительности."""

    status: CheckStatus
    message: str

    @classmethod
    def passed(cls, message: str) -> "Outcome":
        return cls(CheckStatus.PASS, message)

    @classmethod
    def failed(cls, message: str) -> "Outcome":
        return cls(CheckStatus.FAIL, message)

    @classmethod
    def warning(cls, message: str) -> "Outcome":
        return cls(CheckStatus.WARN, message)


@dataclass(frozen=True)
class CheckResult:
    """Результат одной проверки."""

    name: str
    status: CheckStatus
    message: str
    duration: int = 0  # миллисекунды

    def to_dict(self) -> Dict[str, Any]:
        """Преобразовать в словарь для JSON."""
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class AuditSummary:
    """Счётчики по статусам."""

    passed: int = 0
    failed: int = 0
    warned: int = 0
    skipped: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "warned": self.warned,
            "skipped": self.skipped,
            "total": self.total,
        }


@dataclass
class AuditReport:
    """Итоговый отчёт аудита."""

    project_name: str
    results: List[CheckResult]
    summary: AuditSummary
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def passed(self) -> bool:
        """Warnings and skips never fail the audit."""
        return self.summary.failed == 0

    @property
    def duration_ms(self) -> int:
        return sum(r.duration for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        """Преобразовать в словарь для JSON."""
        return {
            "projectName": self.project_name,
            "timestamp": self.timestamp.isoformat(),
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }
