# src/newsdesk/core/constants.py
from __future__ import annotations

# Сортировка по умолчанию для списков новостей
DEFAULT_ORDER: str = "date DESC"

# Границы BIGINT, больше в БД не передаём
DB_INT_MIN: int = -(2**63)
DB_INT_MAX: int = 2**63 - 1

# Режим отображения back end (генерация лент и т.п.)
BACKEND_RENDER_MODE: str = "BE"
