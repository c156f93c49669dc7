from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from newsdesk.core.constants import DB_INT_MAX
from newsdesk.core.logger import get_logger
from newsdesk.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger(__name__)

_ORDER_PART = re.compile(r"^(?:(\w+)\.)?(\w+)(?:\s+(ASC|DESC))?$", re.IGNORECASE)

# опции, которые понимает find_by / count_by
KNOWN_OPTIONS = frozenset({"order", "limit", "offset"})


class InvalidOrderError(ValueError):
    pass


class BaseRepository(Generic[ModelType]):
    """
    Общие примитивы выборки.

    find_by возвращает непустой список или None, find_one_by — модель или None,
    count_by — количество строк. Опции: order, limit, offset (0 = без ограничения).
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def create(self, obj_in: dict[str, Any]) -> ModelType:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def find_one_by(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: Mapping[str, Any] | None = None,
    ) -> ModelType | None:
        stmt = self._apply_options(select(self.model).where(*conditions), options)
        stmt = stmt.limit(1)
        result = await self.db.scalars(stmt)
        return result.first()

    async def find_by(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: Mapping[str, Any] | None = None,
    ) -> list[ModelType] | None:
        stmt = self._apply_options(select(self.model).where(*conditions), options)
        rows = list(await self.db.scalars(stmt))
        return rows or None

    async def count_by(
        self,
        conditions: Sequence[ColumnElement[bool]],
        options: Mapping[str, Any] | None = None,
    ) -> int:
        self._warn_unknown_options(options)
        stmt = select(func.count()).select_from(self.model).where(*conditions)
        count = await self.db.scalar(stmt)
        return int(count or 0)

    def _apply_options(
        self, stmt: Select[Any], options: Mapping[str, Any] | None
    ) -> Select[Any]:
        if not options:
            return stmt

        self._warn_unknown_options(options)

        order = options.get("order")
        if order is not None:
            stmt = stmt.order_by(*self.parse_order(order))

        limit = min(int(options.get("limit") or 0), DB_INT_MAX)
        if limit > 0:
            stmt = stmt.limit(limit)

        offset = min(int(options.get("offset") or 0), DB_INT_MAX)
        if offset > 0:
            stmt = stmt.offset(offset)

        return stmt

    def parse_order(self, order: Any) -> list[Any]:
        """
        "date DESC, id" -> [date.desc(), id.asc()].
        Колонки проверяются по таблице модели, сырой SQL сюда не попадает.
        """
        if not isinstance(order, str):
            if isinstance(order, (list, tuple)):
                return list(order)
            return [order]

        table = self.model.__table__
        clauses: list[Any] = []

        for part in order.split(","):
            part = part.strip()
            if not part:
                continue

            match = _ORDER_PART.match(part)
            if match is None:
                raise InvalidOrderError(f"Invalid order clause: {part!r}")

            table_name, column_name, direction = match.groups()
            if table_name is not None and table_name != table.name:
                raise InvalidOrderError(f"Unknown table in order clause: {table_name!r}")
            if column_name not in table.columns:
                raise InvalidOrderError(f"Unknown order column: {column_name!r}")

            column = table.columns[column_name]
            if direction is not None and direction.upper() == "DESC":
                clauses.append(column.desc())
            else:
                clauses.append(column.asc())

        return clauses

    def _warn_unknown_options(self, options: Mapping[str, Any] | None) -> None:
        if not options:
            return
        unknown = set(options) - KNOWN_OPTIONS
        if unknown:
            logger.debug(
                "Ignoring unsupported options for %s: %s",
                self.model.__name__,
                ", ".join(sorted(unknown)),
            )
