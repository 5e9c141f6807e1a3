"""
stackaudit - development environment audit

Проверяет локальное окружение разработчика по декларативному конфигу:
- Версии рантаймов и инструментов (Node.js, Python, npm)
- Обязательные файлы проекта
- Переменные окружения (.env), без раскрытия значений
- Открытые TCP порты на localhost
- Пользовательские диагностические команды (allowlist + --trust-commands)

Usage:
    stackaudit check
    python -m stackaudit check --json
"""

__version__ = "0.1.0"
