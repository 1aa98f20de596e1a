from feedmix.services.aggregator import ContentAggregator
from feedmix.services.merge import interleave_by_source, merge_content

__all__ = [
    "ContentAggregator",
    "interleave_by_source",
    "merge_content",
]
