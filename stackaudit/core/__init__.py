"""
Core components of the audit pipeline.

Contains:
- Data models (CheckResult, AuditReport, ...)
- BaseChecker and the timed check wrapper
- Command tokenizer / allowlist and the path safety guard
"""

from .base_checker import BaseChecker, timed_check
from .models import AuditReport, AuditSummary, CheckResult, CheckStatus, Outcome

__all__ = [
    "AuditReport",
    "AuditSummary",
    "BaseChecker",
    "CheckResult",
    "CheckStatus",
    "Outcome",
    "timed_check",
]
