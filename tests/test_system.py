"""
Tests for the command tokenizer, the allowlist guard and exec_command.
"""

import asyncio

import pytest
from hypothesis import given, strategies as st

from stackaudit.core.exceptions import CommandError
from stackaudit.core.system import SAFE_COMMANDS, exec_command, is_command_allowed, parse_command


# ═══════════════════════════════════════════════════════
# TOKENIZER
# ═══════════════════════════════════════════════════════

class TestParseCommand:

    @pytest.mark.parametrize("command, expected", [
        ("echo hello", ["echo", "hello"]),
        ("grep 'Server Version' file.log", ["grep", "Server Version", "file.log"]),
        ('echo "hello world"', ["echo", "hello world"]),
        ("", []),
        ("   \t  ", []),
        ("  docker   info  ", ["docker", "info"]),
        ('echo "it\'s"', ["echo", "it's"]),
        ("echo 'say \"hi\"'", ["echo", 'say "hi"']),
        ("a''b", ["ab"]),
        ("echo ''", ["echo"]),
    ])
    def test_basic(self, command, expected):
        assert parse_command(command) == expected

    def test_backslash_escapes_space(self):
        assert parse_command(r"ls my\ dir") == ["ls", "my dir"]

    def test_backslash_literal_inside_single_quotes(self):
        assert parse_command(r"echo 'a\b'") == ["echo", r"a\b"]

    def test_backslash_escapes_quote_inside_double_quotes(self):
        assert parse_command(r'echo "a\"b"') == ["echo", 'a"b']

    def test_consecutive_escapes(self):
        # Два обратных слеша дают один
        assert parse_command("echo \\\\") == ["echo", "\\"]
        assert parse_command("echo \\\\\\ x") == ["echo", "\\ x"]

    def test_unterminated_quote_closes_at_end(self):
        assert parse_command('echo "abc def') == ["echo", "abc def"]
        assert parse_command("echo 'abc") == ["echo", "abc"]

    def test_trailing_backslash_dropped(self):
        assert parse_command("echo abc\\") == ["echo", "abc"]

    def test_shell_operators_are_plain_tokens(self):
        assert parse_command("cat a | grep b && rm -rf x") == [
            "cat", "a", "|", "grep", "b", "&&", "rm", "-rf", "x",
        ]

    @given(st.text(alphabet=st.characters(exclude_characters="'\"\\", exclude_categories=("Cs",))))
    def test_without_quotes_matches_whitespace_split(self, command):
        assert parse_command(command) == command.split()

    @given(st.lists(st.text(alphabet="abcXYZ019._-/", min_size=1), max_size=6))
    def test_double_quoted_tokens_survive(self, words):
        command = " ".join(f'"{w} {w}"' for w in words)
        assert parse_command(command) == [f"{w} {w}" for w in words]


# ═══════════════════════════════════════════════════════
# ALLOWLIST
# ═══════════════════════════════════════════════════════

class TestIsCommandAllowed:

    def test_allowed_version_queries(self):
        assert is_command_allowed("node --version")
        assert is_command_allowed("docker info")
        assert is_command_allowed("docker compose version")

    def test_whitespace_and_case_are_normalized(self):
        assert is_command_allowed("  node --version  ")
        assert is_command_allowed("NODE --VERSION")
        assert is_command_allowed("Git --Version")

    def test_no_prefix_matching(self):
        assert not is_command_allowed("node-gyp rebuild")
        assert not is_command_allowed("node --version && rm -rf /")
        assert not is_command_allowed("docker info; curl https://evil.com")
        assert not is_command_allowed("node")

    def test_untrusted_commands(self):
        assert not is_command_allowed("curl https://evil.com")
        assert not is_command_allowed("node -e 'process.exit(1)'")
        assert not is_command_allowed("npx some-package")

    def test_allowlist_has_no_bare_executables(self):
        for entry in SAFE_COMMANDS:
            assert len(entry.split()) >= 2, entry
            assert entry == entry.lower()


# ═══════════════════════════════════════════════════════
# EXECUTION
# ═══════════════════════════════════════════════════════

@pytest.mark.integration
class TestExecCommand:

    @pytest.mark.asyncio
    async def test_returns_stdout(self, python_cmd):
        stdout = await exec_command(python_cmd("print(42)"))
        assert stdout.strip() == "42"

    @pytest.mark.asyncio
    async def test_shell_operators_are_passed_as_arguments(self, python_cmd):
        stdout = await exec_command(python_cmd("import sys; print(sys.argv[1:])") + " x '|' y")
        assert stdout.strip() == "['x', '|', 'y']"

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises_with_stderr(self, python_cmd):
        with pytest.raises(CommandError) as exc_info:
            await exec_command(python_cmd("import sys; sys.stderr.write('boom'); sys.exit(3)"))
        assert "boom" in str(exc_info.value)
        assert exc_info.value.returncode == 3

    @pytest.mark.asyncio
    async def test_nonzero_exit_without_stderr(self, python_cmd):
        with pytest.raises(CommandError, match="exit code 2"):
            await exec_command(python_cmd("import sys; sys.exit(2)"))

    @pytest.mark.asyncio
    async def test_missing_executable(self):
        with pytest.raises(CommandError, match="Command not found"):
            await exec_command("definitely-not-a-real-binary-4711 --version")

    @pytest.mark.asyncio
    async def test_empty_command(self):
        with pytest.raises(CommandError, match="Empty command"):
            await exec_command("   ")

    @pytest.mark.asyncio
    async def test_timeout(self, python_cmd):
        with pytest.raises(CommandError, match="timed out"):
            await exec_command(python_cmd("import time; time.sleep(5)"), timeout_ms=300)

    @pytest.mark.asyncio
    async def test_cancellation_kills_child(self, python_cmd, tmp_path):
        marker = tmp_path / "still-running.txt"
        code = f"import pathlib, time; time.sleep(1); pathlib.Path(r'{marker}').write_text('x')"

        task = asyncio.create_task(exec_command(python_cmd(code)))
        await asyncio.sleep(0.3)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        await asyncio.sleep(1.5)
        assert not marker.exists()

    @pytest.mark.asyncio
    async def test_checker_timeout_kills_child(self, python_cmd, tmp_path):
        marker = tmp_path / "still-running.txt"
        code = f"import pathlib, time; time.sleep(1); pathlib.Path(r'{marker}').write_text('x')"

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(exec_command(python_cmd(code)), timeout=0.3)

        await asyncio.sleep(1.5)
        assert not marker.exists()


class _ExitedProcess:
    """Процесс, который завершился между таймаутом и kill()."""

    returncode = None

    def __init__(self):
        self.calls = 0

    async def communicate(self):
        self.calls += 1
        if self.calls == 1:
            await asyncio.sleep(10)
        return b"", b""

    def kill(self):
        raise ProcessLookupError


class TestExecCommandKillRace:

    @pytest.mark.asyncio
    async def test_timeout_after_exit_is_command_error(self, monkeypatch):
        async def fake_spawn(*args, **kwargs):
            return _ExitedProcess()

        monkeypatch.setattr(asyncio, "create_subprocess_exec", fake_spawn)

        with pytest.raises(CommandError, match="timed out after 50ms"):
            await exec_command("docker info", timeout_ms=50)
