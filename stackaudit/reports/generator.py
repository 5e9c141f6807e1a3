"""
Report generator for audit results.

Generates:
- Rich console output for humans
- JSON documents for machines (--json, CI)
- Plain text files via write()
"""

import json
from pathlib import Path
from typing import Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.models import AuditReport, CheckResult, CheckStatus

STATUS_ICONS = {
    CheckStatus.PASS: ("✔", "green"),
    CheckStatus.FAIL: ("✖", "red"),
    CheckStatus.WARN: ("⚠", "yellow"),
    CheckStatus.SKIP: ("○", "bright_black"),
}


class ReportGenerator:
    """Генератор отчётов аудита."""

    def __init__(self, console: Optional[Console] = None):
        """
        Args:
            console: Rich console (по умолчанию stdout)
        """
        self.console = console or Console()

    def to_json(self, report: AuditReport) -> str:
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)

    def build_table(self, report: AuditReport, verbose: bool = False) -> Table:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("status", no_wrap=True)
        table.add_column("check")
        table.add_column("duration", style="dim", justify="right", no_wrap=True)

        for result in report.results:
            icon, color = STATUS_ICONS[result.status]
            name = Text(result.name, style="red" if result.status is CheckStatus.FAIL else "")
            # Сообщения успешных проверок скрыты без --verbose
            if verbose or result.status is not CheckStatus.PASS:
                name.append(f"\n{result.message}", style="dim")
            table.add_row(Text(icon, style=color), name, f"{result.duration}ms")

        return table

    def build_summary(self, report: AuditReport) -> Panel:
        summary = report.summary
        parts = [Text(f"{summary.passed} passed", style="green")]
        if summary.failed:
            parts.append(Text(f"{summary.failed} failed", style="red"))
        if summary.warned:
            parts.append(Text(f"{summary.warned} warnings", style="yellow"))
        if summary.skipped:
            parts.append(Text(f"{summary.skipped} skipped", style="bright_black"))

        counts = Text(" · ", style="dim").join(parts)
        counts.append(f" ({summary.total} checks)", style="dim")

        header = (
            Text("stackAudit: PASS", style="bold green")
            if report.passed
            else Text("stackAudit: FAIL", style="bold red")
        )

        return Panel(
            Group(
                header,
                Text(f"Project: {report.project_name}", style="dim"),
                Text(""),
                counts,
                Text(f"Done in {report.duration_ms}ms", style="dim"),
            ),
            border_style="green" if report.passed else "red",
            padding=(1, 2),
            expand=False,
        )

    def render(self, report: AuditReport, verbose: bool = False) -> None:
        """Напечатать отчёт в консоль."""
        self.console.print()
        self.console.print(self.build_table(report, verbose=verbose))
        self.console.print()
        self.console.print(self.build_summary(report))

    def to_text(self, report: AuditReport) -> str:
        """Plain-text report without colors."""
        lines = [f"stackAudit report: {report.project_name}", f"Date: {report.timestamp.isoformat()}", ""]
        for result in report.results:
            lines.append(_format_line(result))
        s = report.summary
        lines.append("")
        lines.append(
            f"{'PASS' if report.passed else 'FAIL'}: {s.passed} passed, {s.failed} failed, "
            f"{s.warned} warnings, {s.skipped} skipped ({s.total} checks)"
        )
        return "\n".join(lines) + "\n"

    def write(self, report: AuditReport, path: Path, fmt: str = "json") -> Path:
        """Сохранить отчёт в файл ("json" или "text")."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = self.to_json(report) + "\n" if fmt == "json" else self.to_text(report)
        path.write_text(content, encoding="utf-8")
        return path


def _format_line(result: CheckResult) -> str:
    return f"[{result.status.value.upper():4}] {result.name} ({result.duration}ms): {result.message}"
