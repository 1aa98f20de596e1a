import math
import re
import time
from collections.abc import Sequence
from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from feedmix.adapters.base import BaseAdapter, has_credential, matches_query
from feedmix.adapters.fallback import FALLBACK_NEWS
from feedmix.config import CredentialCheck
from feedmix.models import ContentItem, ContentSource, NewsArticle
from feedmix.utils.date_utils import UNKNOWN_DATE

logger = structlog.get_logger()

NEWS_API_BASE = "https://newsapi.org/v2"
NEWS_PLACEHOLDER_IMAGE = (
    "https://images.pexels.com/photos/546819/pexels-photo-546819.jpeg"
    "?auto=compress&cs=tinysrgb&w=800"
)
NEWS_CATEGORY = "Technology"
REMOVED_TITLE = "[Removed]"

TAG_VOCABULARY = (
    "Technology",
    "AI",
    "Business",
    "Innovation",
    "Science",
    "Security",
    "Remote Work",
    "Sustainability",
)
MAX_TAGS = 3

WORDS_PER_MINUTE = 200
MIN_READ_MINUTES = 3
MAX_READ_MINUTES = 12

# 401 is a bad key, 426 is the free plan refusing the request; retrying cannot help.
REJECTED_KEY_STATUSES = {401, 426}


class NewsAPIError(Exception):
    pass


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class NewsAdapter(BaseAdapter[NewsArticle]):
    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = NEWS_API_BASE,
        country: str = "us",
        page_size: int = 20,
        max_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
        timeout_seconds: float = 10.0,
        credential_check: CredentialCheck = has_credential,
    ) -> None:
        super().__init__(api_key=api_key, credential_check=credential_check)
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._country = country
        self._page_size = page_size
        self._max_attempts = max_attempts
        self._retry_wait_seconds = retry_wait_seconds
        self._timeout_seconds = timeout_seconds

    @property
    def source(self) -> ContentSource:
        return ContentSource.NEWS

    @property
    def fallback_records(self) -> Sequence[NewsArticle]:
        return FALLBACK_NEWS

    async def fetch_by_topic(self, topic: str | None) -> list[NewsArticle]:
        if not self.has_valid_credential:
            logger.info("No usable news API key, serving fallback articles")
            return list(FALLBACK_NEWS)

        params = {"country": self._country, "pageSize": str(self._page_size)}
        category = (topic or "").strip().lower()
        if category and category != "general":
            params["category"] = category

        logger.debug("Fetching top headlines", category=category or None)

        try:
            articles = await self._get_articles("top-headlines", params)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in REJECTED_KEY_STATUSES:
                logger.warning(
                    "News API key rejected, serving fallback articles",
                    status_code=status,
                )
            else:
                logger.error(
                    "HTTP error fetching headlines",
                    category=category or None,
                    status_code=status,
                )
            return list(FALLBACK_NEWS)
        except httpx.RequestError as e:
            logger.error(
                "Request error fetching headlines",
                category=category or None,
                error=type(e).__name__,
            )
            return list(FALLBACK_NEWS)
        except (NewsAPIError, ValueError, KeyError, TypeError) as e:
            logger.error("Malformed news response", category=category or None, error=str(e))
            return list(FALLBACK_NEWS)

        logger.info("Fetched headlines", category=category or None, count=len(articles))
        return articles

    async def search_by_query(self, query: str) -> list[NewsArticle]:
        if not query.strip():
            return []

        if not self.has_valid_credential:
            logger.debug("No usable news API key, searching fallback articles", query=query)
            return self.search_fallback(query)

        params = {"q": query, "sortBy": "publishedAt", "pageSize": str(self._page_size)}

        try:
            articles = await self._get_articles("everything", params)
        except httpx.HTTPStatusError as e:
            logger.warning(
                "HTTP error searching news, searching fallback articles",
                query=query,
                status_code=e.response.status_code,
            )
            return self.search_fallback(query)
        except httpx.RequestError as e:
            logger.warning(
                "Request error searching news, searching fallback articles",
                query=query,
                error=type(e).__name__,
            )
            return self.search_fallback(query)
        except (NewsAPIError, ValueError, KeyError, TypeError) as e:
            logger.error("Malformed news search response", query=query, error=str(e))
            return self.search_fallback(query)

        logger.info("Searched news", query=query, count=len(articles))
        return articles

    def record_matches(self, record: NewsArticle, query: str) -> bool:
        return matches_query(
            query,
            record.title,
            record.description,
            record.content,
            record.author,
            record.source.name,
        )

    def normalize(self, records: Sequence[NewsArticle]) -> list[ContentItem]:
        stamp = int(time.time() * 1000)
        return [
            ContentItem(
                id=f"news-{index}-{stamp}",
                title=(article.title or "").strip() or "Untitled article",
                description=(article.description or "").strip() or "No description available",
                category=NEWS_CATEGORY,
                author=self._resolve_author(article),
                date=article.published_at or UNKNOWN_DATE,
                read_time=self._estimate_read_time(article),
                tags=self._extract_tags(f"{article.title or ''} {article.description or ''}"),
                image_url=article.url_to_image or NEWS_PLACEHOLDER_IMAGE,
                source=ContentSource.NEWS,
                source_data=article,
                url=article.url or None,
            )
            for index, article in enumerate(records)
        ]

    async def _get_articles(self, endpoint: str, params: dict[str, str]) -> list[NewsArticle]:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            wait=wait_exponential(multiplier=self._retry_wait_seconds, max=30),
            stop=stop_after_attempt(self._max_attempts),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.debug(
                        "Retrying news request",
                        endpoint=endpoint,
                        attempt=attempt.retry_state.attempt_number,
                    )
                response = await self._request(f"{self._base_url}/{endpoint}", params)

        data: Any = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        if data.get("status") == "error":
            raise NewsAPIError(f"{data.get('code', 'unknown')}: {data.get('message', '')}")

        raw_articles = data.get("articles") or []
        if not isinstance(raw_articles, list):
            raise ValueError("Expected 'articles' to be a list")

        articles: list[NewsArticle] = []
        for raw in raw_articles:
            if not isinstance(raw, dict):
                logger.debug("Skipping malformed article entry", entry_type=type(raw).__name__)
                continue
            article = NewsArticle.from_dict(raw)
            if article.title == REMOVED_TITLE:
                continue
            articles.append(article)
        return articles

    async def _request(self, url: str, params: dict[str, str]) -> httpx.Response:
        headers = {"X-Api-Key": self._api_key or ""}

        if self._client:
            response = await self._client.get(url, headers=headers, params=params)
        else:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                response = await client.get(url, headers=headers, params=params)

        response.raise_for_status()
        return response

    def _resolve_author(self, article: NewsArticle) -> str:
        for candidate in (article.author, article.source.name):
            if candidate and candidate.strip():
                return candidate.strip()
        return "Unknown"

    def _estimate_read_time(self, article: NewsArticle) -> int:
        words = len(f"{article.description or ''} {article.content or ''}".split())
        minutes = math.ceil(words / WORDS_PER_MINUTE)
        return max(MIN_READ_MINUTES, min(MAX_READ_MINUTES, minutes))

    def _extract_tags(self, text: str) -> tuple[str, ...]:
        tokens = re.findall(r"[a-z0-9]+", text.lower())
        padded = f" {' '.join(tokens)} "

        tags: list[str] = []
        for tag in TAG_VOCABULARY:
            needle = tag.lower()
            if " " in needle:
                matched = f" {needle} " in padded
            else:
                matched = any(
                    token == needle or (len(needle) > 3 and needle in token) for token in tokens
                )
            if matched:
                tags.append(tag)
            if len(tags) == MAX_TAGS:
                break
        return tuple(tags)
