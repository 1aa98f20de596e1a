"""Pure helpers that shape an aggregated feed for display.

User state (favorites, read items, saved ordering) is always passed in explicitly;
nothing here reads or writes shared state, and items are never mutated in place.
"""

import enum
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

from feedmix.models import ContentItem, ContentSource
from feedmix.utils.date_utils import parse_item_date

SUGGESTION_MIN_QUERY_LENGTH = 2


class FeedView(enum.Enum):
    ALL = "All"
    FAVORITES = "Favorites"
    READ_LATER = "Read Later"
    POPULAR = "Popular"
    NEWS = "News"
    MOVIES = "Movies"
    SOCIAL = "Social"


class SortOrder(enum.Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    POPULAR = "popular"
    READ_TIME = "readTime"
    ALPHABETICAL = "alphabetical"


class DateRange(enum.Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class ReadStatus(enum.Enum):
    ALL = "all"
    READ = "read"
    UNREAD = "unread"


@dataclass(frozen=True)
class ContentFilters:
    date_range: DateRange = DateRange.ALL
    author: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    read_status: ReadStatus = ReadStatus.ALL


_SOURCE_VIEWS = {
    FeedView.NEWS: ContentSource.NEWS,
    FeedView.MOVIES: ContentSource.MOVIES,
    FeedView.SOCIAL: ContentSource.SOCIAL,
}


def apply_user_state(
    items: Sequence[ContentItem],
    favorites: Collection[str] = (),
    read_ids: Collection[str] = (),
) -> list[ContentItem]:
    favorite_set = set(favorites)
    read_set = set(read_ids)
    result: list[ContentItem] = []
    for item in items:
        is_favorite = item.id in favorite_set
        is_read = item.id in read_set
        if item.is_favorite == is_favorite and item.is_read == is_read:
            result.append(item)
        else:
            result.append(replace(item, is_favorite=is_favorite, is_read=is_read))
    return result


def search_content(items: Sequence[ContentItem], query: str) -> list[ContentItem]:
    if not query:
        return list(items)

    needle = query.lower()
    return [
        item
        for item in items
        if needle in item.title.lower()
        or needle in item.description.lower()
        or needle in item.author.lower()
        or needle in item.category.lower()
        or any(needle in tag.lower() for tag in item.tags)
    ]


def get_search_suggestions(
    items: Sequence[ContentItem], query: str, limit: int = 5
) -> list[str]:
    """Titles, authors and tags containing the query, first-seen order, deduplicated."""
    if len(query) < SUGGESTION_MIN_QUERY_LENGTH:
        return []

    needle = query.lower()
    suggestions: dict[str, None] = {}
    for item in items:
        if needle in item.title.lower():
            suggestions.setdefault(item.title)
        if needle in item.author.lower():
            suggestions.setdefault(item.author)
        for tag in item.tags:
            if needle in tag.lower():
                suggestions.setdefault(tag)
    return list(suggestions)[:limit]


def popularity_score(item: ContentItem) -> float:
    return (item.rating or 0.0) + item.read_time


def select_view(items: Sequence[ContentItem], view: FeedView | str) -> list[ContentItem]:
    """Narrow the feed to a sidebar selection.

    Anything that is not a FeedView value is treated as a literal category name.
    """
    if isinstance(view, str):
        try:
            view = FeedView(view)
        except ValueError:
            return [item for item in items if item.category == view]

    if view is FeedView.ALL:
        return list(items)
    if view is FeedView.FAVORITES:
        return [item for item in items if item.is_favorite]
    if view is FeedView.READ_LATER:
        return [item for item in items if not item.is_read]
    if view is FeedView.POPULAR:
        return sorted(items, key=popularity_score, reverse=True)
    source = _SOURCE_VIEWS[view]
    return [item for item in items if item.source is source]


def sort_content(items: Sequence[ContentItem], order: SortOrder) -> list[ContentItem]:
    if order is SortOrder.NEWEST:
        return sorted(items, key=lambda item: parse_item_date(item.date), reverse=True)
    if order is SortOrder.OLDEST:
        return sorted(items, key=lambda item: parse_item_date(item.date))
    if order is SortOrder.POPULAR:
        return sorted(items, key=lambda item: item.rating or 0.0, reverse=True)
    if order is SortOrder.READ_TIME:
        return sorted(items, key=lambda item: item.read_time)
    return sorted(items, key=lambda item: item.title.casefold())


def _range_start(date_range: DateRange, now: datetime) -> datetime | None:
    if date_range is DateRange.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if date_range is DateRange.WEEK:
        return now - timedelta(days=7)
    if date_range is DateRange.MONTH:
        return now - timedelta(days=30)
    return None


def filter_content(
    items: Sequence[ContentItem],
    filters: ContentFilters,
    now: datetime | None = None,
) -> list[ContentItem]:
    current = now or datetime.now(UTC)
    start = _range_start(filters.date_range, current)
    author = filters.author.strip().lower()

    result: list[ContentItem] = []
    for item in items:
        if start is not None and parse_item_date(item.date) < start:
            continue
        if author and author not in item.author.lower():
            continue
        if filters.tags and not any(tag in filters.tags for tag in item.tags):
            continue
        if filters.read_status is ReadStatus.READ and not item.is_read:
            continue
        if filters.read_status is ReadStatus.UNREAD and item.is_read:
            continue
        result.append(item)
    return result


def apply_custom_order(items: Sequence[ContentItem], order: Sequence[str]) -> list[ContentItem]:
    """Place items in a saved manual order.

    Ids in ``order`` come first in that order; ids no longer present are skipped and
    items missing from ``order`` follow in their current order.
    """
    if not order:
        return list(items)

    remaining = {item.id: item for item in items}
    ordered: list[ContentItem] = []
    for item_id in order:
        item = remaining.pop(item_id, None)
        if item is not None:
            ordered.append(item)
    ordered.extend(remaining.values())
    return ordered
