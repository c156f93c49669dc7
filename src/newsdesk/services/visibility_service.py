# src/newsdesk/services/visibility_service.py
"""
Построение условий выборки опубликованных новостей.

Каждый метод NewsFilterBuilder возвращает NewsQuery (список условий + опции
выборки) или None, если входные данные заведомо ничего не найдут (пустой
список архивов и т.п.). Сам билдер в БД не ходит.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from newsdesk.core.constants import DB_INT_MAX, DB_INT_MIN, DEFAULT_ORDER
from newsdesk.core.context import RequestContext
from newsdesk.models.news_models import News, NewsSource

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)", re.ASCII)
_NUMERIC_ID = re.compile(r"[0-9]+", re.ASCII)

_COLLECTION_TYPES = (list, tuple, set, frozenset)


class FeaturedFilter(str, Enum):
    ONLY = "only"
    EXCLUDE = "exclude"
    ANY = "any"

    @classmethod
    def coerce(cls, value: Any) -> "FeaturedFilter":
        """True -> ONLY, False -> EXCLUDE, всё остальное -> ANY."""
        if isinstance(value, cls):
            return value
        if value is True:
            return cls.ONLY
        if value is False:
            return cls.EXCLUDE
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.ANY
        return cls.ANY


def _in_range(value: int) -> int:
    # всё, что не влезает в BIGINT, заведомо ни с чем не совпадёт
    return value if DB_INT_MIN <= value <= DB_INT_MAX else 0


def _clamp(value: int) -> int:
    return max(DB_INT_MIN, min(DB_INT_MAX, int(value)))


def to_int(value: Any) -> int:
    """Целое из id архива; всё, что не парсится, превращается в 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return _in_range(value)
    if isinstance(value, float):
        return _in_range(int(value)) if math.isfinite(value) else 0
    if isinstance(value, (str, bytes)):
        text = value.decode(errors="ignore") if isinstance(value, bytes) else value
        match = _LEADING_INT.match(text)
        return _in_range(int(match.group(1))) if match else 0
    return 0


def normalize_parent_ids(pids: Any) -> list[int] | None:
    if not isinstance(pids, _COLLECTION_TYPES) or not pids:
        return None

    if isinstance(pids, (set, frozenset)):
        return sorted({to_int(pid) for pid in pids})

    return [to_int(pid) for pid in pids]


def lookup_id(value: Any) -> int:
    # нечисловой идентификатор никогда не совпадёт по id
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return _in_range(value)
    if isinstance(value, str) and _NUMERIC_ID.fullmatch(value.strip()):
        return _in_range(int(value.strip()))
    return 0


@dataclass(frozen=True)
class NewsQuery:
    conditions: tuple[ColumnElement[bool], ...]
    options: dict[str, Any] = field(default_factory=dict)
    now: int | None = None

    @property
    def visibility_applied(self) -> bool:
        return self.now is not None

    def where_clause(self) -> ColumnElement[bool]:
        return and_(*self.conditions)


class NewsFilterBuilder:
    def __init__(self, model: type[News] = News) -> None:
        self.model = model

    # --- элементарные условия ---

    def visibility_condition(self, now: int) -> ColumnElement[bool]:
        m = self.model
        return and_(
            or_(m.start.is_(None), m.start < now),
            or_(m.stop.is_(None), m.stop > now),
            m.published.is_(True),
        )

    def featured_condition(
        self, featured: FeaturedFilter | bool | None
    ) -> ColumnElement[bool] | None:
        mode = FeaturedFilter.coerce(featured)
        if mode is FeaturedFilter.ONLY:
            return self.model.featured.is_(True)
        if mode is FeaturedFilter.EXCLUDE:
            return self.model.featured.is_(False)
        return None

    def _build(
        self,
        conditions: list[ColumnElement[bool]],
        *,
        visible: bool,
        ctx: RequestContext,
        options: Mapping[str, Any] | None,
        defaults: Mapping[str, Any] | None = None,
        forced: Mapping[str, Any] | None = None,
    ) -> NewsQuery:
        now: int | None = None
        if visible:
            now = ctx.current_time()
            conditions.append(self.visibility_condition(now))

        merged = dict(options or {})
        for key, value in (defaults or {}).items():
            if merged.get(key) is None:
                merged[key] = value
        merged.update(forced or {})

        return NewsQuery(conditions=tuple(conditions), options=merged, now=now)

    # --- операции ---

    def by_parent_and_id_or_alias(
        self,
        ctx: RequestContext,
        value: int | str,
        pids: Any,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery | None:
        parent_ids = normalize_parent_ids(pids)
        if parent_ids is None:
            return None

        m = self.model
        conditions = [
            or_(m.id == lookup_id(value), m.alias == str(value)),
            m.pid.in_(parent_ids),
        ]
        return self._build(
            conditions,
            visible=not ctx.is_privileged(),
            ctx=ctx,
            options=options,
        )

    def published_by_pids(
        self,
        ctx: RequestContext,
        pids: Any,
        featured: FeaturedFilter | bool | None = None,
        limit: int = 0,
        offset: int = 0,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery | None:
        parent_ids = normalize_parent_ids(pids)
        if parent_ids is None:
            return None

        conditions = [self.model.pid.in_(parent_ids)]
        featured_cond = self.featured_condition(featured)
        if featured_cond is not None:
            conditions.append(featured_cond)

        # в back end неопубликованное не отдаём никогда, иначе попадёт в RSS ленту
        return self._build(
            conditions,
            visible=not ctx.is_privileged() or ctx.is_backend_mode(),
            ctx=ctx,
            options=options,
            defaults={"order": DEFAULT_ORDER},
            forced={"limit": limit, "offset": offset},
        )

    def count_published_by_pids(
        self,
        ctx: RequestContext,
        pids: Any,
        featured: FeaturedFilter | bool | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery | None:
        parent_ids = normalize_parent_ids(pids)
        if parent_ids is None:
            return None

        conditions = [self.model.pid.in_(parent_ids)]
        featured_cond = self.featured_condition(featured)
        if featured_cond is not None:
            conditions.append(featured_cond)

        return self._build(
            conditions,
            visible=not ctx.is_privileged(),
            ctx=ctx,
            options=options,
        )

    def published_default_by_pid(
        self,
        ctx: RequestContext,
        pid: int,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery:
        m = self.model
        conditions = [m.pid == to_int(pid), m.source == NewsSource.DEFAULT]
        return self._build(
            conditions,
            visible=not ctx.is_privileged(),
            ctx=ctx,
            options=options,
            defaults={"order": DEFAULT_ORDER},
        )

    def published_by_pid(
        self,
        ctx: RequestContext,
        pid: int,
        limit: int = 0,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery:
        forced = {"limit": limit} if limit > 0 else None
        return self._build(
            [self.model.pid == to_int(pid)],
            visible=True,
            ctx=ctx,
            options=options,
            defaults={"order": DEFAULT_ORDER},
            forced=forced,
        )

    def _date_range_conditions(
        self, date_from: int, date_to: int, parent_ids: list[int]
    ) -> list[ColumnElement[bool]]:
        m = self.model
        return [
            m.date >= _clamp(date_from),
            m.date <= _clamp(date_to),
            m.pid.in_(parent_ids),
        ]

    def published_from_to_by_pids(
        self,
        ctx: RequestContext,
        date_from: int,
        date_to: int,
        pids: Any,
        limit: int = 0,
        offset: int = 0,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery | None:
        parent_ids = normalize_parent_ids(pids)
        if parent_ids is None:
            return None

        return self._build(
            self._date_range_conditions(date_from, date_to, parent_ids),
            visible=not ctx.is_privileged(),
            ctx=ctx,
            options=options,
            defaults={"order": DEFAULT_ORDER},
            forced={"limit": limit, "offset": offset},
        )

    def count_published_from_to_by_pids(
        self,
        ctx: RequestContext,
        date_from: int,
        date_to: int,
        pids: Any,
        options: Mapping[str, Any] | None = None,
    ) -> NewsQuery | None:
        parent_ids = normalize_parent_ids(pids)
        if parent_ids is None:
            return None

        return self._build(
            self._date_range_conditions(date_from, date_to, parent_ids),
            visible=not ctx.is_privileged(),
            ctx=ctx,
            options=options,
        )
