import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from itertools import chain
from typing import Any

import httpx
import structlog

from feedmix.adapters.base import BaseAdapter
from feedmix.adapters.movies import MovieAdapter
from feedmix.adapters.news import NewsAdapter
from feedmix.adapters.social import SocialAdapter
from feedmix.config import Settings
from feedmix.models import ContentItem, ContentSource, UserPreferences
from feedmix.services.merge import merge_content

logger = structlog.get_logger()

DEFAULT_TOPICS: dict[ContentSource, str | None] = {
    ContentSource.NEWS: "technology",
    ContentSource.MOVIES: None,
    ContentSource.SOCIAL: "technology",
}


class ContentAggregator:
    """Fan out to the enabled source adapters and merge what comes back.

    Every source runs concurrently and is isolated from the others: an adapter that
    raises or times out contributes nothing, while the rest still reach the feed.
    Neither public operation raises for a data-fetch problem; a total failure shows
    up as an empty list and an error log line.
    """

    def __init__(
        self,
        settings: Settings,
        adapters: Mapping[ContentSource, BaseAdapter[Any]] | None = None,
    ) -> None:
        self._settings = settings
        self._http_client: httpx.AsyncClient | None = None
        self._injected = adapters is not None
        self._adapters: dict[ContentSource, BaseAdapter[Any]] = (
            dict(adapters) if adapters is not None else self._create_adapters()
        )

    async def initialize(self) -> None:
        if self._http_client is not None:
            logger.debug("Content aggregator already initialized")
            return

        self._http_client = httpx.AsyncClient(timeout=self._settings.http_timeout_seconds)
        if not self._injected:
            self._adapters = self._create_adapters()
        logger.debug("Content aggregator initialized", sources=self._source_names())

    async def close(self) -> None:
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
            # Rebuilt adapters open a short-lived client per request.
            if not self._injected:
                self._adapters = self._create_adapters()
        logger.debug("Content aggregator closed")

    def _create_adapters(self) -> dict[ContentSource, BaseAdapter[Any]]:
        credential_check = self._settings.credential_check()
        return {
            ContentSource.NEWS: NewsAdapter(
                api_key=self._settings.news_api_key,
                http_client=self._http_client,
                base_url=self._settings.news_base_url,
                country=self._settings.news_country,
                page_size=self._settings.news_page_size,
                max_attempts=self._settings.news_max_attempts,
                retry_wait_seconds=self._settings.news_retry_wait_seconds,
                timeout_seconds=self._settings.http_timeout_seconds,
                credential_check=credential_check,
            ),
            ContentSource.MOVIES: MovieAdapter(
                api_key=self._settings.tmdb_api_key,
                http_client=self._http_client,
                base_url=self._settings.tmdb_base_url,
                image_base_url=self._settings.tmdb_image_base_url,
                timeout_seconds=self._settings.http_timeout_seconds,
                credential_check=credential_check,
            ),
            ContentSource.SOCIAL: SocialAdapter(
                latency_seconds=self._settings.social_latency_seconds,
            ),
        }

    def _feed_limit(self, source: ContentSource) -> int:
        return {
            ContentSource.NEWS: self._settings.news_feed_limit,
            ContentSource.MOVIES: self._settings.movie_feed_limit,
            ContentSource.SOCIAL: self._settings.social_feed_limit,
        }[source]

    async def fetch_personalized_content(self, preferences: UserPreferences) -> list[ContentItem]:
        calls: dict[ContentSource, Callable[[], Awaitable[list[ContentItem]]]] = {}

        for source in ContentSource:
            if source not in preferences.content_types:
                continue
            adapter = self._adapters.get(source)
            if adapter is None:
                logger.warning("No adapter for content type", source=source.value)
                continue
            topic = preferences.first_topic(source) or DEFAULT_TOPICS[source]
            calls[source] = self._topic_call(adapter, topic, self._feed_limit(source))

        if not calls:
            logger.info("No content types enabled, nothing to fetch")
            return []

        logger.info("Fetching personalized content", sources=[s.value for s in calls])
        return await self._gather_and_merge(calls, operation="personalized")

    async def search_all_content(self, query: str) -> list[ContentItem]:
        """Search every adapter and merge the matches.

        A blank or whitespace-only query is not a search: it returns ``[]`` without
        calling any adapter.
        """
        if not query.strip():
            return []

        limit = self._settings.search_limit_per_source
        calls = {
            source: self._search_call(adapter, query, limit)
            for source, adapter in self._adapters.items()
        }

        logger.info("Searching all content", query=query, sources=[s.value for s in calls])
        return await self._gather_and_merge(calls, operation="search")

    @staticmethod
    def get_default_preferences() -> UserPreferences:
        return UserPreferences(
            news_categories=("technology", "business"),
            movie_genres=("action", "drama", "comedy"),
            social_hashtags=("technology", "webdev", "startup"),
            content_types=frozenset(ContentSource),
        )

    def _topic_call(
        self, adapter: BaseAdapter[Any], topic: str | None, limit: int
    ) -> Callable[[], Awaitable[list[ContentItem]]]:
        async def call() -> list[ContentItem]:
            records = await adapter.fetch_by_topic(topic)
            return adapter.normalize(records[:limit])

        return call

    def _search_call(
        self, adapter: BaseAdapter[Any], query: str, limit: int
    ) -> Callable[[], Awaitable[list[ContentItem]]]:
        async def call() -> list[ContentItem]:
            records = await adapter.search_by_query(query)
            return adapter.normalize(records[:limit])

        return call

    async def _gather_and_merge(
        self,
        calls: Mapping[ContentSource, Callable[[], Awaitable[list[ContentItem]]]],
        operation: str,
    ) -> list[ContentItem]:
        start = time.monotonic()
        try:
            per_source = await self._gather_settled(calls)
        except Exception as e:
            logger.exception(
                "Unexpected error aggregating content", operation=operation, error=str(e)
            )
            return []

        succeeded = [items for items in per_source.values() if items is not None]
        failed = [source.value for source, items in per_source.items() if items is None]

        if not succeeded:
            logger.error("All content sources failed", operation=operation, sources=failed)
            return []

        merged = merge_content(chain.from_iterable(succeeded))

        logger.info(
            "Content aggregated",
            operation=operation,
            item_count=len(merged),
            failed_sources=failed,
            elapsed_seconds=round(time.monotonic() - start, 2),
        )
        return merged

    async def _gather_settled(
        self,
        calls: Mapping[ContentSource, Callable[[], Awaitable[list[ContentItem]]]],
    ) -> dict[ContentSource, list[ContentItem] | None]:
        sources: Sequence[ContentSource] = list(calls)
        results = await asyncio.gather(
            *(self._bounded(calls[source]()) for source in sources),
            return_exceptions=True,
        )

        settled: dict[ContentSource, list[ContentItem] | None] = {}
        for source, result in zip(sources, results, strict=True):
            if isinstance(result, TimeoutError):
                logger.warning(
                    "Content source timed out",
                    source=source.value,
                    timeout_seconds=self._settings.source_timeout_seconds,
                )
                settled[source] = None
            elif isinstance(result, BaseException):
                logger.error(
                    "Content source failed",
                    source=source.value,
                    error_type=type(result).__name__,
                    error=str(result),
                )
                settled[source] = None
            else:
                logger.debug("Content source settled", source=source.value, count=len(result))
                settled[source] = result
        return settled

    async def _bounded(self, call: Awaitable[list[ContentItem]]) -> list[ContentItem]:
        timeout = self._settings.source_timeout_seconds
        if timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout=timeout)

    def _source_names(self) -> list[str]:
        return [source.value for source in self._adapters]
