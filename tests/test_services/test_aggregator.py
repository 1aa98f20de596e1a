from unittest.mock import AsyncMock, MagicMock

import pytest

from feedmix.adapters.movies import MovieAdapter
from feedmix.adapters.news import NewsAdapter
from feedmix.adapters.social import SocialAdapter
from feedmix.config import Settings
from feedmix.models import ContentSource, UserPreferences
from feedmix.services.aggregator import ContentAggregator
from feedmix.utils.date_utils import parse_item_date


def make_settings(**kwargs) -> Settings:
    kwargs.setdefault("news_api_key", None)
    kwargs.setdefault("tmdb_api_key", None)
    kwargs.setdefault("social_latency_seconds", 0)
    return Settings(_env_file=None, **kwargs)


def failing_adapter(adapter_cls: type, error: Exception) -> MagicMock:
    adapter = MagicMock(spec=adapter_cls)
    adapter.fetch_by_topic = AsyncMock(side_effect=error)
    adapter.search_by_query = AsyncMock(side_effect=error)
    return adapter


def empty_adapter(adapter_cls: type) -> MagicMock:
    adapter = MagicMock(spec=adapter_cls)
    adapter.fetch_by_topic = AsyncMock(return_value=[])
    adapter.search_by_query = AsyncMock(return_value=[])
    adapter.normalize.return_value = []
    return adapter


@pytest.fixture
def preferences() -> UserPreferences:
    return UserPreferences(
        news_categories=("technology",),
        movie_genres=(),
        social_hashtags=("webdev",),
    )


class TestContentAggregatorLifecycle:
    async def test_initialize_creates_shared_http_client(self) -> None:
        aggregator = ContentAggregator(make_settings())

        await aggregator.initialize()
        client = aggregator._http_client

        assert client is not None
        assert aggregator._adapters[ContentSource.NEWS]._client is client
        assert aggregator._adapters[ContentSource.MOVIES]._client is client

        await aggregator.close()

        assert client.is_closed

    async def test_initialize_keeps_injected_adapters(self) -> None:
        social = SocialAdapter(latency_seconds=0)
        aggregator = ContentAggregator(make_settings(), adapters={ContentSource.SOCIAL: social})

        await aggregator.initialize()

        assert aggregator._adapters == {ContentSource.SOCIAL: social}
        await aggregator.close()

    async def test_initialize_twice_reuses_client(self) -> None:
        aggregator = ContentAggregator(make_settings())

        await aggregator.initialize()
        client = aggregator._http_client
        await aggregator.initialize()

        assert aggregator._http_client is client
        await aggregator.close()

    async def test_close_releases_client_from_adapters(self) -> None:
        aggregator = ContentAggregator(
            make_settings(news_api_key="news-key-1234567890", tmdb_api_key="tmdb-key-1234567890")
        )
        await aggregator.initialize()
        client = aggregator._http_client

        await aggregator.close()

        assert client is not None and client.is_closed
        assert aggregator._http_client is None
        assert aggregator._adapters[ContentSource.NEWS]._client is None
        assert aggregator._adapters[ContentSource.MOVIES]._client is None

    async def test_reinitialize_after_close(self) -> None:
        aggregator = ContentAggregator(make_settings())
        await aggregator.initialize()
        first = aggregator._http_client
        await aggregator.close()

        await aggregator.initialize()

        assert aggregator._http_client is not None
        assert aggregator._http_client is not first
        assert not aggregator._http_client.is_closed
        await aggregator.close()

    async def test_close_without_initialize(self) -> None:
        aggregator = ContentAggregator(make_settings())

        await aggregator.close()


class TestFetchPersonalizedContent:
    async def test_all_sources_merged_newest_first(self, preferences: UserPreferences) -> None:
        aggregator = ContentAggregator(make_settings())

        items = await aggregator.fetch_personalized_content(preferences)

        assert len(items) == 10
        sources = [item.source for item in items]
        assert sources.count(ContentSource.NEWS) == 4
        assert sources.count(ContentSource.MOVIES) == 4
        assert sources.count(ContentSource.SOCIAL) == 2
        dates = [parse_item_date(item.date) for item in items]
        assert dates == sorted(dates, reverse=True)
        # bundled movies are the oldest records
        assert all(source is ContentSource.MOVIES for source in sources[-4:])

    async def test_feed_limits_applied(self, preferences: UserPreferences) -> None:
        aggregator = ContentAggregator(make_settings(news_feed_limit=2, movie_feed_limit=1))

        items = await aggregator.fetch_personalized_content(preferences)

        sources = [item.source for item in items]
        assert sources.count(ContentSource.NEWS) == 2
        assert sources.count(ContentSource.MOVIES) == 1

    async def test_only_enabled_sources_are_called(self) -> None:
        news = empty_adapter(NewsAdapter)
        movies = empty_adapter(MovieAdapter)
        social = empty_adapter(SocialAdapter)
        aggregator = ContentAggregator(
            make_settings(),
            adapters={
                ContentSource.NEWS: news,
                ContentSource.MOVIES: movies,
                ContentSource.SOCIAL: social,
            },
        )
        preferences = UserPreferences(
            movie_genres=("  ", "Drama"),
            content_types=frozenset({ContentSource.MOVIES}),
        )

        await aggregator.fetch_personalized_content(preferences)

        news.fetch_by_topic.assert_not_called()
        social.fetch_by_topic.assert_not_called()
        movies.fetch_by_topic.assert_awaited_once_with("Drama")

    async def test_default_topics_used_without_preferences(self) -> None:
        news = empty_adapter(NewsAdapter)
        movies = empty_adapter(MovieAdapter)
        social = empty_adapter(SocialAdapter)
        aggregator = ContentAggregator(
            make_settings(),
            adapters={
                ContentSource.NEWS: news,
                ContentSource.MOVIES: movies,
                ContentSource.SOCIAL: social,
            },
        )

        await aggregator.fetch_personalized_content(UserPreferences())

        news.fetch_by_topic.assert_awaited_once_with("technology")
        movies.fetch_by_topic.assert_awaited_once_with(None)
        social.fetch_by_topic.assert_awaited_once_with("technology")

    async def test_no_enabled_sources(self) -> None:
        news = empty_adapter(NewsAdapter)
        aggregator = ContentAggregator(make_settings(), adapters={ContentSource.NEWS: news})

        items = await aggregator.fetch_personalized_content(
            UserPreferences(content_types=frozenset())
        )

        assert items == []
        news.fetch_by_topic.assert_not_called()

    async def test_one_failing_source_does_not_sink_the_feed(
        self, preferences: UserPreferences
    ) -> None:
        aggregator = ContentAggregator(
            make_settings(),
            adapters={
                ContentSource.NEWS: failing_adapter(NewsAdapter, RuntimeError("boom")),
                ContentSource.MOVIES: MovieAdapter(),
                ContentSource.SOCIAL: SocialAdapter(latency_seconds=0),
            },
        )

        items = await aggregator.fetch_personalized_content(preferences)

        sources = {item.source for item in items}
        assert sources == {ContentSource.MOVIES, ContentSource.SOCIAL}
        assert len(items) == 6

    async def test_all_sources_failing_returns_empty(self, preferences: UserPreferences) -> None:
        aggregator = ContentAggregator(
            make_settings(),
            adapters={
                ContentSource.NEWS: failing_adapter(NewsAdapter, RuntimeError("news down")),
                ContentSource.MOVIES: failing_adapter(MovieAdapter, ValueError("bad data")),
                ContentSource.SOCIAL: failing_adapter(SocialAdapter, KeyError("missing")),
            },
        )

        assert await aggregator.fetch_personalized_content(preferences) == []

    async def test_all_sources_empty_returns_empty(self, preferences: UserPreferences) -> None:
        aggregator = ContentAggregator(
            make_settings(),
            adapters={
                ContentSource.NEWS: empty_adapter(NewsAdapter),
                ContentSource.MOVIES: empty_adapter(MovieAdapter),
                ContentSource.SOCIAL: empty_adapter(SocialAdapter),
            },
        )

        assert await aggregator.fetch_personalized_content(preferences) == []

    async def test_slow_source_times_out_alone(self, preferences: UserPreferences) -> None:
        aggregator = ContentAggregator(
            make_settings(source_timeout_seconds=0.05),
            adapters={
                ContentSource.NEWS: NewsAdapter(api_key=None),
                ContentSource.MOVIES: MovieAdapter(),
                ContentSource.SOCIAL: SocialAdapter(latency_seconds=1.0),
            },
        )

        items = await aggregator.fetch_personalized_content(preferences)

        sources = {item.source for item in items}
        assert sources == {ContentSource.NEWS, ContentSource.MOVIES}


class TestSearchAllContent:
    async def test_search_across_sources(self) -> None:
        aggregator = ContentAggregator(make_settings())

        items = await aggregator.search_all_content("remote")

        assert len(items) == 2
        assert {item.source for item in items} == {ContentSource.NEWS, ContentSource.SOCIAL}

    async def test_search_single_match(self) -> None:
        aggregator = ContentAggregator(make_settings())

        items = await aggregator.search_all_content("React")

        assert [item.id for item in items] == ["social-1"]

    async def test_search_limit_per_source(self) -> None:
        aggregator = ContentAggregator(make_settings(search_limit_per_source=1))

        items = await aggregator.search_all_content("e")

        sources = [item.source for item in items]
        assert len(sources) == len(set(sources))

    async def test_blank_query_skips_adapters(self) -> None:
        news = empty_adapter(NewsAdapter)
        social = empty_adapter(SocialAdapter)
        aggregator = ContentAggregator(
            make_settings(),
            adapters={ContentSource.NEWS: news, ContentSource.SOCIAL: social},
        )

        assert await aggregator.search_all_content("   ") == []
        news.search_by_query.assert_not_called()
        social.search_by_query.assert_not_called()

    async def test_failing_source_is_isolated(self) -> None:
        aggregator = ContentAggregator(
            make_settings(),
            adapters={
                ContentSource.NEWS: failing_adapter(NewsAdapter, RuntimeError("boom")),
                ContentSource.SOCIAL: SocialAdapter(latency_seconds=0),
            },
        )

        items = await aggregator.search_all_content("React")

        assert [item.id for item in items] == ["social-1"]


class TestDefaultPreferences:
    def test_default_preferences(self) -> None:
        prefs = ContentAggregator.get_default_preferences()

        assert prefs.news_categories == ("technology", "business")
        assert prefs.movie_genres == ("action", "drama", "comedy")
        assert prefs.social_hashtags == ("technology", "webdev", "startup")
        assert prefs.content_types == frozenset(ContentSource)
