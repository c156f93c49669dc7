# src/newsdesk/api/deps.py
from __future__ import annotations

import secrets

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.core.config import settings
from newsdesk.core.context import RequestContext
from newsdesk.db.session import get_db
from newsdesk.repositories.news_repo import NewsRepository


def get_request_context(
  backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
  render_mode: str | None = Header(default=None, alias="X-Render-Mode"),
) -> RequestContext:
  """
  Контекст запроса из заголовков.
  X-Backend-Token совпадает с настройкой -> пользователь back end,
  X-Render-Mode: BE -> режим back end (фильтр видимости включается всегда).
  """
  privileged = bool(
    settings.backend_access_enabled
    and backend_token
    and secrets.compare_digest(backend_token.encode(), settings.backend_token.encode())
  )
  return RequestContext.from_render_mode(render_mode, privileged=privileged)


def get_news_repo(db: AsyncSession = Depends(get_db)) -> NewsRepository:
  return NewsRepository(db)
