from feedmix.adapters.base import BaseAdapter
from feedmix.adapters.movies import MovieAdapter
from feedmix.adapters.news import NewsAdapter
from feedmix.adapters.social import SocialAdapter

__all__ = [
    "BaseAdapter",
    "MovieAdapter",
    "NewsAdapter",
    "SocialAdapter",
]
