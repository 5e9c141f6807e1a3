"""
Configuration schema and loader for stackAudit.config.json.

The checker pipeline only ever sees a validated StackAuditConfig; every
structural problem is reported here as a ConfigError.
"""

import json
import logging
import os
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "stackAudit.config.json"

NonEmptyStr = Annotated[str, Field(min_length=1)]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class PortConfig(_ConfigModel):
    """Порт, который должен принимать TCP-соединения на localhost."""
    port: int = Field(..., ge=1, le=65535)
    name: NonEmptyStr
    type: Literal["tcp"] = "tcp"


class EnvConfig(_ConfigModel):
    """Проверка .env файла."""
    target: NonEmptyStr
    example: NonEmptyStr
    required: List[NonEmptyStr] = Field(..., min_length=1)
    # Нет target-файла -> берём значения из os.environ (удобно для CI)
    allow_process_env: bool = Field(True, alias="allowProcessEnv")

    @model_validator(mode="after")
    def _keys_not_empty(self) -> "EnvConfig":
        if any(not key.strip() for key in self.required):
            raise ValueError("Required env var names cannot be empty")
        return self


class CommandConfig(_ConfigModel):
    """Пользовательская диагностическая команда."""
    cmd: NonEmptyStr
    match: Optional[str] = None
    error_msg: Optional[str] = Field(None, alias="errorMsg")


class ChecksConfig(_ConfigModel):
    """Секции проверок. Отсутствующая секция = проверка не запускается."""
    node: Optional[NonEmptyStr] = None
    python: Optional[NonEmptyStr] = None
    npm: Optional[NonEmptyStr] = None
    env: Optional[EnvConfig] = None
    ports: Optional[Annotated[List[PortConfig], Field(min_length=1)]] = None
    files: Optional[Annotated[List[NonEmptyStr], Field(min_length=1)]] = None
    commands: Optional[Annotated[List[CommandConfig], Field(min_length=1)]] = None

    @model_validator(mode="after")
    def _at_least_one_check(self) -> "ChecksConfig":
        if not self.has_any():
            raise ValueError("At least one check must be configured")
        return self

    def has_any(self) -> bool:
        return any([
            self.node,
            self.python,
            self.npm,
            self.env,
            self.ports,
            self.files,
            self.commands,
        ])


class StackAuditConfig(_ConfigModel):
    """Корневой объект конфигурации."""
    project_name: str = Field(..., min_length=1, alias="projectName")
    version: NonEmptyStr
    checks: ChecksConfig


def format_validation_error(error: ValidationError) -> str:
    lines = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue["loc"]) or "(root)"
        lines.append(f"  - {location}: {issue['msg']}")
    return "\n".join(lines)


def parse_config(data: object, source: str = "<config>") -> StackAuditConfig:
    """Validate an already-decoded JSON document."""
    try:
        return StackAuditConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}:\n{format_validation_error(e)}") from e


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    cwd: Optional[Union[str, Path]] = None,
) -> StackAuditConfig:
    """
    Загрузить и провалидировать конфигурацию.

    Args:
        config_path: Путь к файлу (по умолчанию stackAudit.config.json)
        cwd: Директория, относительно которой разрешается путь

    Raises:
        ConfigError: файл не найден, невалидный JSON или ошибка схемы
    """
    base = Path(cwd) if cwd is not None else Path(os.getcwd())
    file_path = (base / (config_path or DEFAULT_CONFIG_FILE)).resolve()
    logger.debug(f"Loading config from {file_path}")

    try:
        raw = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(
            f"Config file not found: {file_path}\n"
            f'Run "stackaudit init" to create one, or use --config to specify a path.'
        )
    except OSError as e:
        raise ConfigError(f"Could not read config file {file_path}: {e.strerror or e}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in config file: {file_path} (line {e.lineno}, column {e.colno})\n"
            f"Check for trailing commas or syntax errors."
        )

    config = parse_config(data, source=str(file_path))
    logger.debug(f"Loaded config for {config.project_name!r}")
    return config
