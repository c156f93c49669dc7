# src/newsdesk/core/context.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from newsdesk.core.constants import BACKEND_RENDER_MODE


def unix_now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class RequestContext:
    """
    Контекст вызова: кто спрашивает и в каком режиме.

    privileged   — авторизованный пользователь back end (фильтр видимости
                   не применяется)
    backend_mode — запрос идёт из back end (например, генерация RSS ленты)
    clock        — источник текущего времени в Unix секундах
    """

    privileged: bool = False
    backend_mode: bool = False
    clock: Callable[[], int] = field(default=unix_now, compare=False)

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls()

    @classmethod
    def frozen_at(
        cls,
        now: int,
        *,
        privileged: bool = False,
        backend_mode: bool = False,
    ) -> "RequestContext":
        return cls(privileged=privileged, backend_mode=backend_mode, clock=lambda: now)

    @classmethod
    def from_render_mode(cls, mode: str | None, *, privileged: bool) -> "RequestContext":
        backend_mode = (mode or "").strip().upper() == BACKEND_RENDER_MODE
        return cls(privileged=privileged, backend_mode=backend_mode)

    def is_privileged(self) -> bool:
        return self.privileged

    def is_backend_mode(self) -> bool:
        return self.backend_mode

    def current_time(self) -> int:
        return int(self.clock())
