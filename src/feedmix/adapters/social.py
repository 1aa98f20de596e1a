import asyncio
import math
from collections.abc import Sequence

import structlog

from feedmix.adapters.base import BaseAdapter, matches_query
from feedmix.adapters.fallback import FALLBACK_SOCIAL_POSTS
from feedmix.models import ContentItem, ContentSource, SocialPost
from feedmix.utils.date_utils import UNKNOWN_DATE

logger = structlog.get_logger()

SOCIAL_PLACEHOLDER_IMAGE = (
    "https://images.pexels.com/photos/267350/pexels-photo-267350.jpeg"
    "?auto=compress&cs=tinysrgb&w=800"
)
SOCIAL_CATEGORY = "Social"
TITLE_MAX_LENGTH = 50
CHARS_PER_MINUTE = 200
MAX_TAGS = 3


class SocialAdapter(BaseAdapter[SocialPost]):
    """Simulated social provider serving the bundled posts.

    There is no upstream service; each call only waits ``latency_seconds`` to mimic a
    network round trip. ``posts`` replaces the bundled dataset.
    """

    def __init__(
        self,
        latency_seconds: float = 0.4,
        posts: Sequence[SocialPost] | None = None,
    ) -> None:
        super().__init__()
        self._latency_seconds = latency_seconds
        self._posts = tuple(FALLBACK_SOCIAL_POSTS if posts is None else posts)

    @property
    def source(self) -> ContentSource:
        return ContentSource.SOCIAL

    @property
    def fallback_records(self) -> Sequence[SocialPost]:
        return self._posts

    async def fetch_by_topic(self, topic: str | None) -> list[SocialPost]:
        await self._simulate_latency()

        hashtag = (topic or "").strip().lstrip("#")
        if not hashtag:
            return list(self._posts)

        needle = hashtag.lower()
        posts = [
            post
            for post in self._posts
            if any(needle in tag.lower() for tag in post.hashtags) or needle in post.content.lower()
        ]
        logger.debug("Fetched social posts", hashtag=hashtag, count=len(posts))
        return posts

    async def fetch_user_posts(self, username: str) -> list[SocialPost]:
        await self._simulate_latency()
        return [
            post
            for post in self._posts
            if matches_query(username, post.username, post.display_name)
        ]

    async def search_by_query(self, query: str) -> list[SocialPost]:
        if not query.strip():
            return []
        await self._simulate_latency()
        posts = self.search_fallback(query)
        logger.debug("Searched social posts", query=query, count=len(posts))
        return posts

    def record_matches(self, record: SocialPost, query: str) -> bool:
        return matches_query(query, record.content, record.display_name, *record.hashtags)

    def normalize(self, records: Sequence[SocialPost]) -> list[ContentItem]:
        return [
            ContentItem(
                id=post.id,
                title=self._make_title(post.content),
                description=post.content.strip() or "No content available",
                category=SOCIAL_CATEGORY,
                author=post.display_name or post.username or "Unknown",
                date=post.timestamp or UNKNOWN_DATE,
                read_time=max(1, math.ceil(len(post.content) / CHARS_PER_MINUTE)),
                tags=tuple(post.hashtags[:MAX_TAGS]),
                image_url=self._image_url(post),
                source=ContentSource.SOCIAL,
                source_data=post,
            )
            for post in records
        ]

    async def _simulate_latency(self) -> None:
        if self._latency_seconds > 0:
            await asyncio.sleep(self._latency_seconds)

    def _make_title(self, content: str) -> str:
        first_sentence = content.split(".")[0].strip()
        if len(first_sentence) > TITLE_MAX_LENGTH:
            return first_sentence[:TITLE_MAX_LENGTH] + "..."
        return first_sentence or "Social Media Post"

    def _image_url(self, post: SocialPost) -> str:
        if post.images:
            return post.images[0]
        return post.avatar or SOCIAL_PLACEHOLDER_IMAGE
