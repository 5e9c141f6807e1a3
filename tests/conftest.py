"""
Pytest configuration and fixtures.

Использование:
    pytest tests/ -v
"""

import json
import socket
import sys

import pytest


# ═══════════════════════════════════════════════════════
# PROJECT DIRECTORY
# ═══════════════════════════════════════════════════════

@pytest.fixture
def project_dir(tmp_path, monkeypatch):
    """Пустая директория проекта, ставится текущей рабочей директорией."""
    project = tmp_path / "proj"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def write_config(project_dir):
    """Записать stackAudit.config.json в директорию проекта."""
    def _write(checks, project_name="demo", name="stackAudit.config.json"):
        path = project_dir / name
        path.write_text(json.dumps({
            "projectName": project_name,
            "version": "1.0.0",
            "checks": checks,
        }), encoding="utf-8")
        return path
    return _write


# ═══════════════════════════════════════════════════════
# SOCKETS
# ═══════════════════════════════════════════════════════

@pytest.fixture
def listening_port():
    """Порт на 127.0.0.1, который принимает соединения."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(8)
    yield server.getsockname()[1]
    server.close()


@pytest.fixture
def closed_port():
    """Порт, на котором заведомо никто не слушает."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


# ═══════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════

@pytest.fixture
def python_cmd():
    """Командная строка для текущего интерпретатора (в кавычках)."""
    def _cmd(code: str) -> str:
        return f'"{sys.executable}" -c "{code}"'
    return _cmd


def make_fake_exec(outputs, calls=None):
    """Подмена exec_command: возвращает заранее заданный stdout или бросает."""
    async def fake_exec(command, timeout_ms=None):
        if calls is not None:
            calls.append(command)
        value = outputs[command] if isinstance(outputs, dict) else outputs
        if isinstance(value, BaseException):
            raise value
        return value
    return fake_exec


@pytest.fixture
def fake_exec():
    return make_fake_exec
