from collections.abc import Iterable

from feedmix.models import ContentItem, ContentSource
from feedmix.utils.date_utils import parse_item_date


def interleave_by_source(items: Iterable[ContentItem]) -> list[ContentItem]:
    """Round-robin the items across sources.

    Each source keeps its own relative order. Round ``i`` takes the ``i``-th item of
    every source in ContentSource declaration order; sources that run out simply
    drop out of later rounds.
    """
    by_source: dict[ContentSource, list[ContentItem]] = {source: [] for source in ContentSource}
    for item in items:
        by_source[item.source].append(item)

    groups = [group for group in by_source.values() if group]
    if not groups:
        return []

    rounds = max(len(group) for group in groups)
    result: list[ContentItem] = []
    for i in range(rounds):
        for group in groups:
            if i < len(group):
                result.append(group[i])
    return result


def merge_content(items: Iterable[ContentItem]) -> list[ContentItem]:
    """Interleave the items fairly across sources, then order newest first.

    The sort is stable, so items sharing a timestamp keep their round-robin order.
    """
    interleaved = interleave_by_source(items)
    return sorted(interleaved, key=lambda item: parse_item_date(item.date), reverse=True)
