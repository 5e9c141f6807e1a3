"""
Checker units and the pipeline builder.

Contains:
- NodeVersionChecker / PythonVersionChecker - версии рантаймов
- NpmVersionChecker - версия пакетного менеджера
- FilesChecker - обязательные файлы
- EnvVarsChecker - переменные окружения
- PortsChecker - TCP порты на localhost
- CommandsChecker - пользовательские команды
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..config import ChecksConfig
from ..core.base_checker import BaseChecker, DEFAULT_CHECKER_TIMEOUT_SECONDS
from ..core.system import DEFAULT_COMMAND_TIMEOUT_MS
from .commands import CommandsChecker
from .env_vars import EnvVarsChecker
from .files import FilesChecker
from .package_manager import NpmVersionChecker
from .ports import DEFAULT_PORT_TIMEOUT_MS, PortsChecker
from .runtime_version import NodeVersionChecker, PythonVersionChecker


@dataclass(frozen=True)
class PipelineOptions:
    trust_commands: bool = False
    port_timeout_ms: int = DEFAULT_PORT_TIMEOUT_MS
    command_timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS
    checker_timeout_seconds: Optional[float] = DEFAULT_CHECKER_TIMEOUT_SECONDS
    cwd: Optional[Path] = None


def build_checker_pipeline(checks: ChecksConfig, options: Optional[PipelineOptions] = None) -> List[BaseChecker]:
    """
    Собрать checker'ы для секций, которые есть в конфиге.

    Порядок фиксирован (node, python, npm, files, env, ports, commands) и
    определяет только порядок результатов в отчёте.
    """
    options = options or PipelineOptions()
    timeout = options.checker_timeout_seconds
    pipeline: List[BaseChecker] = []

    if checks.node:
        pipeline.append(NodeVersionChecker(checks.node, options.command_timeout_ms, timeout))

    if checks.python:
        pipeline.append(PythonVersionChecker(checks.python, timeout))

    if checks.npm:
        pipeline.append(NpmVersionChecker(checks.npm, options.command_timeout_ms, timeout))

    if checks.files:
        pipeline.append(FilesChecker(checks.files, options.cwd, timeout))

    if checks.env:
        pipeline.append(EnvVarsChecker(checks.env, options.cwd, timeout_seconds=timeout))

    if checks.ports:
        pipeline.append(PortsChecker(checks.ports, options.port_timeout_ms, timeout))

    if checks.commands:
        pipeline.append(CommandsChecker(
            checks.commands,
            trust_commands=options.trust_commands,
            command_timeout_ms=options.command_timeout_ms,
            timeout_seconds=timeout,
        ))

    return pipeline


__all__ = [
    "CommandsChecker",
    "EnvVarsChecker",
    "FilesChecker",
    "NodeVersionChecker",
    "NpmVersionChecker",
    "PipelineOptions",
    "PortsChecker",
    "PythonVersionChecker",
    "build_checker_pipeline",
]
