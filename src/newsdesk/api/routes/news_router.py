# src/newsdesk/api/routes/news_router.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from newsdesk.api.deps import get_news_repo, get_request_context
from newsdesk.core.constants import DB_INT_MAX
from newsdesk.core.context import RequestContext
from newsdesk.core.logger import get_logger
from newsdesk.models.news_models import News
from newsdesk.repositories.base import InvalidOrderError
from newsdesk.repositories.news_repo import NewsRepository
from newsdesk.schemas.news_schemas import NewsCountResponse, NewsItem

logger = get_logger(__name__)

router = APIRouter(prefix="/api/news", tags=["News"])


def _to_items(rows: list[News] | None) -> list[NewsItem]:
  if not rows:
    return []
  return [NewsItem.model_validate(row, from_attributes=True) for row in rows]


def _order_options(order: str | None) -> dict[str, str]:
  return {"order": order} if order else {}


@router.get("", response_model=list[NewsItem])
async def list_news(
  pids: list[int] = Query(default=[]),
  featured: bool | None = None,
  limit: int = Query(default=0, ge=0, le=DB_INT_MAX),
  offset: int = Query(default=0, ge=0, le=DB_INT_MAX),
  order: str | None = None,
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> list[NewsItem]:
  try:
    rows = await repo.find_published_by_pids(
      ctx, pids, featured, limit, offset, _order_options(order)
    )
  except InvalidOrderError as exc:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
  return _to_items(rows)


@router.get("/count", response_model=NewsCountResponse)
async def count_news(
  pids: list[int] = Query(default=[]),
  featured: bool | None = None,
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> NewsCountResponse:
  count = await repo.count_published_by_pids(ctx, pids, featured)
  return NewsCountResponse(count=count)


@router.get("/range", response_model=list[NewsItem])
async def list_news_in_range(
  date_from: int,
  date_to: int,
  pids: list[int] = Query(default=[]),
  limit: int = Query(default=0, ge=0, le=DB_INT_MAX),
  offset: int = Query(default=0, ge=0, le=DB_INT_MAX),
  order: str | None = None,
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> list[NewsItem]:
  try:
    rows = await repo.find_published_from_to_by_pids(
      ctx, date_from, date_to, pids, limit, offset, _order_options(order)
    )
  except InvalidOrderError as exc:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
  return _to_items(rows)


@router.get("/range/count", response_model=NewsCountResponse)
async def count_news_in_range(
  date_from: int,
  date_to: int,
  pids: list[int] = Query(default=[]),
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> NewsCountResponse:
  count = await repo.count_published_from_to_by_pids(ctx, date_from, date_to, pids)
  return NewsCountResponse(count=count)


@router.get("/archive/{pid}", response_model=list[NewsItem])
async def list_archive_news(
  pid: int,
  limit: int = Query(default=0, ge=0, le=DB_INT_MAX),
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> list[NewsItem]:
  rows = await repo.find_published_by_pid(ctx, pid, limit)
  return _to_items(rows)


@router.get("/archive/{pid}/default", response_model=list[NewsItem])
async def list_archive_default_news(
  pid: int,
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> list[NewsItem]:
  rows = await repo.find_published_default_by_pid(ctx, pid)
  return _to_items(rows)


@router.get("/item/{value}", response_model=NewsItem)
async def get_news_item(
  value: str,
  pids: list[int] = Query(default=[]),
  ctx: RequestContext = Depends(get_request_context),
  repo: NewsRepository = Depends(get_news_repo),
) -> NewsItem:
  news = await repo.find_published_by_parent_and_id_or_alias(ctx, value, pids)
  if news is None:
    logger.debug(f"Новость {value!r} не найдена в архивах {pids}")
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
  return NewsItem.model_validate(news, from_attributes=True)
