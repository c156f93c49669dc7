from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.core.context import RequestContext
from newsdesk.core.logger import get_logger
from newsdesk.models.news_models import News
from newsdesk.repositories.base import BaseRepository
from newsdesk.services.visibility_service import FeaturedFilter, NewsFilterBuilder

logger = get_logger(__name__)


class NewsRepository(BaseRepository[News]):
    def __init__(self, db: AsyncSession, builder: NewsFilterBuilder | None = None) -> None:
        super().__init__(db, News)
        self.builder = builder or NewsFilterBuilder(News)

    async def find_published_by_parent_and_id_or_alias(
        self,
        ctx: RequestContext,
        value: int | str,
        pids: Any,
        options: Mapping[str, Any] | None = None,
    ) -> News | None:
        query = self.builder.by_parent_and_id_or_alias(ctx, value, pids, options)
        if query is None:
            logger.debug("No archives given for news lookup %r", value)
            return None
        return await self.find_one_by(query.conditions, query.options)

    async def find_published_by_pids(
        self,
        ctx: RequestContext,
        pids: Any,
        featured: FeaturedFilter | bool | None = None,
        limit: int = 0,
        offset: int = 0,
        options: Mapping[str, Any] | None = None,
    ) -> list[News] | None:
        query = self.builder.published_by_pids(ctx, pids, featured, limit, offset, options)
        if query is None:
            logger.debug("No archives given, skipping news list")
            return None
        return await self.find_by(query.conditions, query.options)

    async def count_published_by_pids(
        self,
        ctx: RequestContext,
        pids: Any,
        featured: FeaturedFilter | bool | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> int:
        query = self.builder.count_published_by_pids(ctx, pids, featured, options)
        if query is None:
            return 0
        return await self.count_by(query.conditions, query.options)

    async def find_published_default_by_pid(
        self,
        ctx: RequestContext,
        pid: int,
        options: Mapping[str, Any] | None = None,
    ) -> list[News] | None:
        query = self.builder.published_default_by_pid(ctx, pid, options)
        return await self.find_by(query.conditions, query.options)

    async def find_published_by_pid(
        self,
        ctx: RequestContext,
        pid: int,
        limit: int = 0,
        options: Mapping[str, Any] | None = None,
    ) -> list[News] | None:
        query = self.builder.published_by_pid(ctx, pid, limit, options)
        return await self.find_by(query.conditions, query.options)

    async def find_published_from_to_by_pids(
        self,
        ctx: RequestContext,
        date_from: int,
        date_to: int,
        pids: Any,
        limit: int = 0,
        offset: int = 0,
        options: Mapping[str, Any] | None = None,
    ) -> list[News] | None:
        query = self.builder.published_from_to_by_pids(
            ctx, date_from, date_to, pids, limit, offset, options
        )
        if query is None:
            logger.debug("No archives given, skipping news range %s..%s", date_from, date_to)
            return None
        return await self.find_by(query.conditions, query.options)

    async def count_published_from_to_by_pids(
        self,
        ctx: RequestContext,
        date_from: int,
        date_to: int,
        pids: Any,
        options: Mapping[str, Any] | None = None,
    ) -> int:
        query = self.builder.count_published_from_to_by_pids(
            ctx, date_from, date_to, pids, options
        )
        if query is None:
            return 0
        return await self.count_by(query.conditions, query.options)
