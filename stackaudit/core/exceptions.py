"""
Exception hierarchy for stackaudit.

Only ConfigError is allowed to reach the CLI. Everything raised while a
check is running is converted into a failing CheckResult.
"""


class StackAuditError(Exception):
    """Базовое исключение stackaudit."""
    pass


class ConfigError(StackAuditError):
    """Конфигурация не найдена, не парсится или не прошла валидацию."""
    pass


class CommandError(StackAuditError):
    """Команда не запустилась, завершилась с ошибкой или по таймауту."""

    def __init__(self, message: str, returncode: int = None):
        super().__init__(message)
        self.returncode = returncode


class PathSafetyError(StackAuditError):
    """Путь из конфигурации выходит за пределы рабочей директории."""

    def __init__(self, raw_path: str, message: str):
        super().__init__(message)
        self.raw_path = raw_path


class AbsolutePathError(PathSafetyError):
    pass


class PathTraversalError(PathSafetyError):
    pass
