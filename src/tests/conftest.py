from __future__ import annotations

import os
import tempfile
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("NEWSDESK_LOG_DIR", tempfile.mkdtemp(prefix="newsdesk-logs-"))
os.environ.setdefault("NEWSDESK_LOG_LEVEL", "DEBUG")

from newsdesk.core.context import RequestContext  # noqa: E402
from newsdesk.db.base import Base  # noqa: E402
from newsdesk.models.news_models import News, NewsArchive, NewsSource  # noqa: E402
from newsdesk.repositories.news_repo import NewsRepository  # noqa: E402
from newsdesk.schemas.news_schemas import NewsImport  # noqa: E402

NOW = 1_700_000_000


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def anonymous() -> RequestContext:
    return RequestContext.frozen_at(NOW)


@pytest.fixture
def backend_user() -> RequestContext:
    return RequestContext.frozen_at(NOW, privileged=True)


@pytest.fixture
def backend_user_in_backend_mode() -> RequestContext:
    return RequestContext.frozen_at(NOW, privileged=True, backend_mode=True)


@pytest.fixture
async def db(anyio_backend: str) -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


# ключ -> запись; start/stop в виде "" как в старых выгрузках
NEWS_ROWS: dict[str, dict] = {
    "a": {"pid": 3, "alias": "first-post", "featured": True, "published": True,
          "start": "", "stop": "", "date": NOW - 100},
    "b": {"pid": 3, "published": True, "date": NOW - 200},
    "c": {"pid": 9, "featured": True, "published": True, "date": NOW - 300},
    "d": {"pid": 3, "alias": "draft", "published": False, "date": NOW - 50},
    "e": {"pid": 7, "published": True, "start": NOW + 100, "date": NOW - 10},
    "f": {"pid": 7, "published": True, "stop": NOW - 1, "date": NOW - 20},
    "g": {"pid": 7, "published": True, "start": 0, "stop": "", "date": NOW - 400},
    "h": {"pid": 7, "published": True, "stop": 0, "date": NOW - 500},
    "i": {"pid": 7, "published": True, "start": NOW, "date": NOW - 600},
    "k": {"pid": 1, "alias": "launch-day", "published": True, "date": NOW - 800},
    "l": {"pid": 7, "published": True, "source": NewsSource.EXTERNAL,
          "url": "https://example.org/elsewhere", "date": NOW - 700},
    # архив 5: stop ровно сейчас (уже скрыта) и алиас из одних цифр
    "m": {"pid": 5, "published": True, "stop": NOW, "date": NOW - 900},
    "n": {"pid": 5, "alias": "99999999999999999999", "published": True, "date": NOW - 950},
}


@pytest.fixture
async def news(db: AsyncSession) -> dict[str, News]:
    for archive_id in (1, 3, 5, 7, 9):
        db.add(NewsArchive(id=archive_id, title=f"Archive {archive_id}"))
    await db.flush()

    repo = NewsRepository(db)
    created: dict[str, News] = {}
    for key, row in NEWS_ROWS.items():
        payload = NewsImport(headline=f"News {key}", **row)
        created[key] = await repo.create(payload.model_dump())

    await db.commit()
    return created
