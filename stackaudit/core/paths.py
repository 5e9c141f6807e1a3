"""
Path safety guard.

Every path that comes from the config file goes through resolve_safe_path()
before the filesystem is touched, so a malicious config cannot probe
locations such as "../../etc/shadow".
"""

import ntpath
import os
from pathlib import Path
from typing import Optional, Union

from .exceptions import AbsolutePathError, PathTraversalError


def is_absolute_path(raw: str) -> bool:
    """POSIX absolute paths, Windows drive paths and UNC paths."""
    return os.path.isabs(raw) or ntpath.isabs(raw) or bool(ntpath.splitdrive(raw)[0])


def resolve_safe_path(raw: str, cwd: Optional[Union[str, Path]] = None) -> Path:
    """
    Resolve a config path relative to the working directory.

    Args:
        raw: Путь из конфигурации (должен быть относительным)
        cwd: Рабочая директория (по умолчанию os.getcwd())

    Returns:
        Канонический путь внутри рабочей директории

    Raises:
        AbsolutePathError: путь абсолютный
        PathTraversalError: путь (после разрешения симлинков) выходит за cwd
    """
    if is_absolute_path(raw):
        raise AbsolutePathError(raw, f'Absolute paths are not allowed: "{raw}"')

    root = os.path.realpath(cwd if cwd is not None else os.getcwd())
    target = os.path.realpath(os.path.join(root, raw))

    try:
        rel = os.path.relpath(target, root)
    except ValueError:
        # Другой диск на Windows
        rel = os.pardir

    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        raise PathTraversalError(
            raw,
            f'Path traversal detected: "{raw}" resolves outside the project directory',
        )

    return Path(target)
