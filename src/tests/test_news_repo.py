'''
Выборки новостей на реальной (in-memory sqlite) БД:

видимость по published / start / stop;

обход фильтра для пользователя back end и режим back end для лент;

featured: только / без / все;

диапазон дат с включёнными границами.
'''

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.core.context import RequestContext
from newsdesk.models.news_models import News
from newsdesk.repositories.base import InvalidOrderError
from newsdesk.repositories.news_repo import NewsRepository
from newsdesk.services.visibility_service import FeaturedFilter

NOW = 1_700_000_000


def keys(news: dict[str, News], rows: list[News] | None) -> list[str]:
    by_id = {item.id: key for key, item in news.items()}
    return [by_id[row.id] for row in rows or []]


@pytest.mark.anyio
@pytest.mark.unit
@pytest.mark.news
class TestFindByParentAndIdOrAlias:
    async def test_alias_lookup_ignores_numeric_id(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        found = await repo.find_published_by_parent_and_id_or_alias(anonymous, "launch-day", [1])

        assert found is not None
        assert found.id == news["k"].id

    async def test_numeric_lookup_by_id(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)
        target = news["a"]

        by_str = await repo.find_published_by_parent_and_id_or_alias(anonymous, str(target.id), [3])
        by_int = await repo.find_published_by_parent_and_id_or_alias(anonymous, target.id, [3, 7])

        assert by_str is not None and by_str.id == target.id
        assert by_int is not None and by_int.id == target.id

    async def test_wrong_archive_or_garbage_id_finds_nothing(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.find_published_by_parent_and_id_or_alias(anonymous, "launch-day", [3]) is None
        assert (
            await repo.find_published_by_parent_and_id_or_alias(
                anonymous, f"{news['a'].id}abc", [3]
            )
            is None
        )

    async def test_unpublished_visible_only_to_backend_user(
        self,
        db: AsyncSession,
        news: dict[str, News],
        anonymous: RequestContext,
        backend_user: RequestContext,
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.find_published_by_parent_and_id_or_alias(anonymous, "draft", [3]) is None

        found = await repo.find_published_by_parent_and_id_or_alias(backend_user, "draft", [3])
        assert found is not None
        assert found.id == news["d"].id

    @pytest.mark.parametrize("pids", [[], None, 3, "3", {}])
    async def test_invalid_parent_ids_skip_database(
        self, db: AsyncSession, anonymous: RequestContext, pids: object
    ) -> None:
        repo = NewsRepository(db)

        with patch.object(repo, "find_one_by", new=AsyncMock()) as mock_find:
            result = await repo.find_published_by_parent_and_id_or_alias(anonymous, 1, pids)

        assert result is None
        mock_find.assert_not_awaited()


@pytest.mark.anyio
@pytest.mark.unit
@pytest.mark.news
class TestFindAndCountByPids:
    async def test_featured_scenario(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        """
        Архивы 3 и 7, только featured:
        - a (архив 3, featured) попадает
        - b (архив 3, не featured) нет
        - c (архив 9) нет
        """
        repo = NewsRepository(db)

        rows = await repo.find_published_by_pids(anonymous, [3, 7], featured=True)

        assert keys(news, rows) == ["a"]

    async def test_featured_tri_state(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        every = await repo.find_published_by_pids(anonymous, [3, 7])
        unfeatured = await repo.find_published_by_pids(anonymous, [3, 7], FeaturedFilter.EXCLUDE)

        assert keys(news, every) == ["a", "b", "g", "l"]
        assert keys(news, unfeatured) == ["b", "g", "l"]

    async def test_visibility_window(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        """
        e — ещё не начался, f — уже закончился, h — stop=0,
        i — start ровно сейчас, g — start=0 (показываем).
        """
        repo = NewsRepository(db)

        rows = await repo.find_published_by_pids(anonymous, [7])

        assert keys(news, rows) == ["g", "l"]

    async def test_backend_user_sees_everything_outside_backend_mode(
        self,
        db: AsyncSession,
        news: dict[str, News],
        backend_user: RequestContext,
        backend_user_in_backend_mode: RequestContext,
    ) -> None:
        repo = NewsRepository(db)

        everything = await repo.find_published_by_pids(backend_user, [3, 7])
        feed = await repo.find_published_by_pids(backend_user_in_backend_mode, [3, 7])

        assert keys(news, everything) == ["e", "f", "d", "a", "b", "g", "h", "i", "l"]
        assert keys(news, feed) == ["a", "b", "g", "l"]

    async def test_limit_offset_and_explicit_order(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        page = await repo.find_published_by_pids(anonymous, [3, 7], limit=2, offset=1)
        ascending = await repo.find_published_by_pids(
            anonymous, [3, 7], options={"order": "tl_news.date ASC"}
        )

        assert keys(news, page) == ["b", "g"]
        assert keys(news, ascending) == ["l", "g", "b", "a"]

    async def test_unknown_order_column_raises(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        with pytest.raises(InvalidOrderError):
            await repo.find_published_by_pids(
                anonymous, [3], options={"order": "date DESC; DROP TABLE tl_news"}
            )
        with pytest.raises(InvalidOrderError):
            await repo.find_published_by_pids(anonymous, [3], options={"order": "password"})

    async def test_nothing_found_returns_none(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.find_published_by_pids(anonymous, [42]) is None
        assert await repo.find_published_by_pids(anonymous, []) is None

    async def test_count(
        self,
        db: AsyncSession,
        news: dict[str, News],
        anonymous: RequestContext,
        backend_user: RequestContext,
        backend_user_in_backend_mode: RequestContext,
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.count_published_by_pids(anonymous, [3, 7]) == 4
        assert await repo.count_published_by_pids(anonymous, [3, 7], True) == 1
        assert await repo.count_published_by_pids(anonymous, [3, 7], False) == 3
        assert await repo.count_published_by_pids(backend_user, [3, 7]) == 9
        # у count нет особого правила для режима back end
        assert await repo.count_published_by_pids(backend_user_in_backend_mode, [3, 7]) == 9

    @pytest.mark.parametrize("pids", [[], None, 7, "7"])
    async def test_count_invalid_parent_ids_is_zero(
        self, db: AsyncSession, anonymous: RequestContext, pids: object
    ) -> None:
        repo = NewsRepository(db)

        with patch.object(repo, "count_by", new=AsyncMock()) as mock_count:
            assert await repo.count_published_by_pids(anonymous, pids) == 0

        mock_count.assert_not_awaited()


@pytest.mark.anyio
@pytest.mark.unit
@pytest.mark.news
class TestSingleArchive:
    async def test_default_source_only(
        self,
        db: AsyncSession,
        news: dict[str, News],
        anonymous: RequestContext,
        backend_user: RequestContext,
    ) -> None:
        repo = NewsRepository(db)

        public = await repo.find_published_default_by_pid(anonymous, 7)
        privileged = await repo.find_published_default_by_pid(backend_user, 7)

        assert keys(news, public) == ["g"]
        assert keys(news, privileged) == ["e", "f", "g", "h", "i"]

    async def test_by_pid_is_always_public(
        self, db: AsyncSession, news: dict[str, News], backend_user: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        rows = await repo.find_published_by_pid(backend_user, 7)
        limited = await repo.find_published_by_pid(backend_user, 7, limit=1)

        assert keys(news, rows) == ["g", "l"]
        assert keys(news, limited) == ["g"]


@pytest.mark.anyio
@pytest.mark.unit
@pytest.mark.news
class TestDateRange:
    async def test_bounds_are_inclusive(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        rows = await repo.find_published_from_to_by_pids(anonymous, NOW - 300, NOW - 100, [3, 7, 9])

        assert keys(news, rows) == ["a", "b", "c"]

    async def test_find_and_count_by_privilege(
        self,
        db: AsyncSession,
        news: dict[str, News],
        anonymous: RequestContext,
        backend_user: RequestContext,
    ) -> None:
        repo = NewsRepository(db)
        date_from, date_to = NOW - 600, NOW - 50

        public = await repo.find_published_from_to_by_pids(anonymous, date_from, date_to, [3, 7, 9])
        everything = await repo.find_published_from_to_by_pids(
            backend_user, date_from, date_to, [3, 7, 9]
        )

        assert keys(news, public) == ["a", "b", "c", "g"]
        assert keys(news, everything) == ["d", "a", "b", "c", "g", "h", "i"]
        assert await repo.count_published_from_to_by_pids(anonymous, date_from, date_to, [3, 7, 9]) == 4
        assert (
            await repo.count_published_from_to_by_pids(backend_user, date_from, date_to, [3, 7, 9])
            == 7
        )

    async def test_range_paging(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        rows = await repo.find_published_from_to_by_pids(
            anonymous, NOW - 600, NOW - 50, [3, 7, 9], limit=2, offset=2
        )

        assert keys(news, rows) == ["c", "g"]

    async def test_invalid_parent_ids(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.find_published_from_to_by_pids(anonymous, 0, NOW, []) is None
        assert await repo.count_published_from_to_by_pids(anonymous, 0, NOW, None) == 0


@pytest.mark.anyio
@pytest.mark.unit
@pytest.mark.news
class TestMalformedInput:
    async def test_stop_equal_to_now_is_hidden(
        self,
        db: AsyncSession,
        news: dict[str, News],
        anonymous: RequestContext,
        backend_user: RequestContext,
    ) -> None:
        repo = NewsRepository(db)

        public = await repo.find_published_by_pids(anonymous, [5])
        everything = await repo.find_published_by_pids(backend_user, [5])

        assert keys(news, public) == ["n"]
        assert keys(news, everything) == ["m", "n"]

    async def test_long_digit_alias_is_found_by_alias(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        found = await repo.find_published_by_parent_and_id_or_alias(
            anonymous, "99999999999999999999", [5]
        )

        assert found is not None
        assert found.id == news["n"].id

    async def test_huge_numeric_lookup_finds_nothing(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.find_published_by_parent_and_id_or_alias(anonymous, 10**20, [5]) is None

    @pytest.mark.parametrize(
        "pids",
        [[10**20], ["99999999999999999999"], [float("nan")], [float("inf"), -(10**30)]],
    )
    async def test_out_of_range_parent_ids_match_nothing(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext, pids: list
    ) -> None:
        repo = NewsRepository(db)

        assert await repo.count_published_by_pids(anonymous, pids) == 0
        assert await repo.find_published_by_pids(anonymous, pids) is None

    async def test_range_bounds_beyond_bigint_are_clamped(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        count = await repo.count_published_from_to_by_pids(anonymous, -(10**30), 10**30, [3, 7, 9])
        rows = await repo.find_published_from_to_by_pids(
            anonymous, -(10**30), 10**30, [3, 7, 9], limit=10**30
        )

        assert count == 5
        assert keys(news, rows) == ["a", "b", "c", "g", "l"]

    async def test_unknown_featured_value_means_no_filter(
        self, db: AsyncSession, news: dict[str, News], anonymous: RequestContext
    ) -> None:
        repo = NewsRepository(db)

        rows = await repo.find_published_by_pids(anonymous, [3, 7], featured=1)  # type: ignore[arg-type]

        assert keys(news, rows) == ["a", "b", "g", "l"]
