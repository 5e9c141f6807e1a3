"""Tests for the path safety guard."""

import os

import pytest

from stackaudit.core.exceptions import AbsolutePathError, PathSafetyError, PathTraversalError
from stackaudit.core.paths import is_absolute_path, resolve_safe_path


class TestResolveSafePath:

    def test_relative_path_inside_project(self, tmp_path):
        (tmp_path / "config").mkdir()
        resolved = resolve_safe_path("config/.env", tmp_path)
        assert resolved == tmp_path.resolve() / "config" / ".env"

    def test_missing_file_is_still_resolved(self, tmp_path):
        # Существование файла проверяет checker, не guard
        assert resolve_safe_path("nope.txt", tmp_path).name == "nope.txt"

    def test_traversal_rejected(self, tmp_path):
        with pytest.raises(PathTraversalError) as exc_info:
            resolve_safe_path("../../etc/shadow", tmp_path)
        assert "Path traversal detected" in str(exc_info.value)
        assert exc_info.value.raw_path == "../../etc/shadow"

    def test_parent_directory_itself_rejected(self, tmp_path):
        with pytest.raises(PathTraversalError):
            resolve_safe_path("..", tmp_path)

    def test_inner_dotdot_that_stays_inside_is_allowed(self, tmp_path):
        resolved = resolve_safe_path("a/../b.txt", tmp_path)
        assert resolved == tmp_path.resolve() / "b.txt"

    def test_dotdot_prefixed_name_is_not_traversal(self, tmp_path):
        assert resolve_safe_path("..hidden", tmp_path).name == "..hidden"

    def test_absolute_path_rejected(self, tmp_path):
        with pytest.raises(AbsolutePathError) as exc_info:
            resolve_safe_path("/etc/shadow", tmp_path)
        assert "Absolute paths are not allowed" in str(exc_info.value)

    def test_absolute_path_inside_project_still_rejected(self, tmp_path):
        with pytest.raises(AbsolutePathError):
            resolve_safe_path(str(tmp_path / "file.txt"), tmp_path)

    def test_errors_share_base_class(self, tmp_path):
        with pytest.raises(PathSafetyError):
            resolve_safe_path("/etc/passwd", tmp_path)
        with pytest.raises(PathSafetyError):
            resolve_safe_path("../x", tmp_path)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlink_escaping_project_rejected(self, tmp_path):
        project = tmp_path / "proj"
        project.mkdir()
        outside = tmp_path / "secret.txt"
        outside.write_text("x")
        (project / "link.txt").symlink_to(outside)

        with pytest.raises(PathTraversalError):
            resolve_safe_path("link.txt", project)

    def test_defaults_to_current_directory(self, project_dir):
        assert resolve_safe_path("a.txt") == project_dir.resolve() / "a.txt"


@pytest.mark.parametrize("raw, expected", [
    ("/etc/passwd", True),
    ("C:\\Windows\\system32", True),
    ("\\\\server\\share\\file", True),
    ("config/.env", False),
    ("../up", False),
    (".env", False),
])
def test_is_absolute_path(raw, expected):
    assert is_absolute_path(raw) is expected
