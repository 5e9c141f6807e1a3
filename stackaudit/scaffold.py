"""
Starter config generation for `stackaudit init`.

With detection enabled the local environment is probed using allowlisted
commands only (version queries), plus a few well-known project files.
"""

import json
import logging
import os
import re
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import dotenv_values

from .config import DEFAULT_CONFIG_FILE, parse_config
from .core.exceptions import CommandError, ConfigError
from .core.system import exec_command
from .core.versions import clean_version

logger = logging.getLogger(__name__)

COMMON_FILES = [
    "package.json",
    "pyproject.toml",
    "requirements.txt",
    "docker-compose.yml",
    "docker-compose.yaml",
    "Dockerfile",
    "Makefile",
    ".env.example",
    "tsconfig.json",
]

DEFAULT_CHECKS: Dict[str, Any] = {
    "node": ">=18.0.0",
    "npm": ">=9.0.0",
    "files": ["package.json"],
}

Reporter = Callable[[str], None]

_VERSION_TOKEN = re.compile(r"\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?")


async def probe_tool_version(command: str) -> Optional[str]:
    """Вернуть нормализованную версию инструмента или None."""
    try:
        output = await exec_command(command)
    except CommandError as e:
        logger.debug(f"{command!r} unavailable: {e}")
        return None

    # "v20.11.1", "Python 3.12.1", "Docker version 24.0.7, build afdd53b"
    match = _VERSION_TOKEN.search(output)
    return clean_version(match.group(0)) if match else None


def detect_files(cwd: Path, candidates: List[str] = COMMON_FILES) -> List[str]:
    return [name for name in candidates if (cwd / name).is_file()]


def detect_env_keys(example_path: Path) -> List[str]:
    """Ключи из .env.example (значения игнорируются)."""
    if not example_path.is_file():
        return []
    return [key for key in dotenv_values(example_path, interpolate=False) if key.strip()]


def detect_project_name(cwd: Path) -> str:
    """Имя из package.json, затем из pyproject.toml, иначе имя директории."""
    package_json = cwd / "package.json"
    if package_json.is_file():
        try:
            name = json.loads(package_json.read_text(encoding="utf-8")).get("name")
            if isinstance(name, str) and name:
                return name
        except (OSError, ValueError, AttributeError):
            logger.debug("Could not read name from package.json")

    pyproject = cwd / "pyproject.toml"
    if pyproject.is_file():
        try:
            name = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {}).get("name")
            if isinstance(name, str) and name:
                return name
        except (OSError, tomllib.TOMLDecodeError):
            logger.debug("Could not read name from pyproject.toml")

    return cwd.resolve().name


def _major_range(version: str) -> str:
    return f">={version.split('.')[0]}.0.0"


async def build_detected_checks(cwd: Path, report: Reporter = lambda message: None) -> Dict[str, Any]:
    """Собрать секцию checks по тому, что найдено в окружении."""
    checks: Dict[str, Any] = {}

    node = await probe_tool_version("node --version")
    if node:
        checks["node"] = _major_range(node)
        report(f"Detected Node.js v{node} → requiring {checks['node']}")

    python = await probe_tool_version("python3 --version") or await probe_tool_version("python --version")
    if python:
        major, minor = python.split(".")[:2]
        checks["python"] = f">={major}.{minor}.0"
        report(f"Detected Python {python} → requiring {checks['python']}")

    npm = await probe_tool_version("npm --version")
    if npm:
        checks["npm"] = _major_range(npm)
        report(f"Detected npm {npm} → requiring {checks['npm']}")

    files = detect_files(cwd)
    if files:
        checks["files"] = files
        report(f"Detected {len(files)} project files: {', '.join(files)}")

    keys = detect_env_keys(cwd / ".env.example")
    if keys:
        checks["env"] = {"target": ".env", "example": ".env.example", "required": keys}
        report(f"Detected {len(keys)} env vars from .env.example: {', '.join(keys)}")

    if await probe_tool_version("docker --version"):
        checks["commands"] = [{
            "cmd": "docker info",
            "match": "Server Version",
            "errorMsg": "Docker daemon is not running. Start Docker Desktop or the Docker service.",
        }]
        report("Detected Docker → adding daemon check")

    return checks


async def build_config(cwd: Path, detect: bool = False, report: Reporter = lambda message: None) -> Dict[str, Any]:
    checks = await build_detected_checks(cwd, report) if detect else {}
    if detect and not checks:
        report("No tools detected. Generating a minimal config.")
        checks = {"node": DEFAULT_CHECKS["node"]}

    config = {
        "projectName": detect_project_name(cwd),
        "version": "1.0.0",
        "checks": checks or dict(DEFAULT_CHECKS),
    }
    # Сгенерированный файл должен проходить ту же валидацию, что и ручной
    parse_config(config, source="generated config")
    return config


def write_config(config: Dict[str, Any], cwd: Path, force: bool = False) -> Path:
    """
    Raises:
        ConfigError: файл уже существует (и не указан force) или не записывается
    """
    target = cwd / DEFAULT_CONFIG_FILE
    if target.exists() and not force:
        raise ConfigError(
            f"{DEFAULT_CONFIG_FILE} already exists in this directory. "
            f"Delete it first or use --force to re-initialize."
        )

    try:
        target.write_text(json.dumps(config, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write {DEFAULT_CONFIG_FILE}: {e.strerror or e}")

    logger.info(f"Wrote {target}")
    return target


def resolve_cwd(cwd: Optional[Path] = None) -> Path:
    return Path(cwd) if cwd is not None else Path(os.getcwd())
