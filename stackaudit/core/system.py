"""
Command parsing, allowlisting and execution.

Commands are never handed to a shell: the string is tokenized by
parse_command() and executed with create_subprocess_exec, so pipes,
redirects and chaining operators are passed through as plain arguments.
"""

import asyncio
import logging
from contextlib import suppress
from typing import FrozenSet, List

from .exceptions import CommandError

logger = logging.getLogger(__name__)

DEFAULT_COMMAND_TIMEOUT_MS = 10_000

# Только полные read-only вызовы. Никаких "node" / "npm" / "npx" без
# аргументов: они позволяют выполнить произвольный код (node -e, npx pkg).
SAFE_COMMANDS: FrozenSet[str] = frozenset({
    "node --version",
    "node -v",
    "npm --version",
    "npm -v",
    "docker info",
    "docker --version",
    "docker compose version",
    "git --version",
    "python --version",
    "python3 --version",
    "ruby --version",
    "java --version",
    "javac --version",
    "go version",
    "rustc --version",
    "cargo --version",
})


def is_command_allowed(command: str) -> bool:
    """Exact, case-insensitive match against SAFE_COMMANDS."""
    return command.strip().lower() in SAFE_COMMANDS


def parse_command(command: str) -> List[str]:
    """
    Split a command string into [executable, *args] without a shell.

        "grep 'Server Version' file.log"  -> ["grep", "Server Version", "file.log"]
        'echo "hello world"'              -> ["echo", "hello world"]

    A backslash outside single quotes escapes the next character. An
    unterminated quote is closed by the end of the string, and a trailing
    lone backslash is dropped.
    """
    tokens: List[str] = []
    current: List[str] = []
    in_single = False
    in_double = False
    escaped = False

    for char in command:
        if escaped:
            current.append(char)
            escaped = False
            continue

        if char == "\\" and not in_single:
            escaped = True
            continue

        if char == "'" and not in_double:
            in_single = not in_single
            continue

        if char == '"' and not in_single:
            in_double = not in_double
            continue

        if char.isspace() and not in_single and not in_double:
            if current:
                tokens.append("".join(current))
                current = []
            continue

        current.append(char)

    if current:
        tokens.append("".join(current))

    return tokens


async def exec_command(command: str, timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS) -> str:
    """
    Run a command and return its stdout.

    Raises:
        CommandError: пустая команда, бинарник не найден, ненулевой код
            возврата или превышен таймаут
    """
    tokens = parse_command(command)
    if not tokens:
        raise CommandError("Empty command")

    executable, *args = tokens
    logger.debug(f"Executing {executable!r} with {len(args)} args")

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        raise CommandError(f"Command not found: {executable}")
    except OSError as e:
        raise CommandError(f"Could not start {executable}: {e.strerror or e}")

    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError:
        with suppress(ProcessLookupError):
            process.kill()
        await process.communicate()
        raise CommandError(f'Command "{command}" timed out after {timeout_ms}ms')
    except asyncio.CancelledError:
        # Внешняя отмена (таймаут checker'а): сначала убить процесс
        with suppress(ProcessLookupError):
            process.kill()
        await process.communicate()
        raise

    out = stdout.decode("utf-8", errors="replace")
    err = stderr.decode("utf-8", errors="replace").strip()

    if process.returncode != 0:
        raise CommandError(
            err or f'Command "{command}" failed with exit code {process.returncode}',
            returncode=process.returncode,
        )

    return out
