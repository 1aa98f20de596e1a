import enum
from dataclasses import dataclass, field
from typing import Any


class ContentSource(enum.Enum):
    NEWS = "news"
    MOVIES = "movies"
    SOCIAL = "social"


@dataclass(frozen=True)
class NewsSourceRef:
    id: str | None
    name: str


@dataclass(frozen=True)
class NewsArticle:
    source: NewsSourceRef
    title: str | None
    url: str
    published_at: str | None
    author: str | None = None
    description: str | None = None
    url_to_image: str | None = None
    content: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": {"id": self.source.id, "name": self.source.name},
            "author": self.author,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "urlToImage": self.url_to_image,
            "publishedAt": self.published_at,
            "content": self.content,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewsArticle":
        source = data.get("source")
        if not isinstance(source, dict):
            source = {}
        return cls(
            source=NewsSourceRef(id=source.get("id"), name=str(source.get("name") or "")),
            author=data.get("author"),
            title=data.get("title"),
            description=data.get("description"),
            url=str(data.get("url") or ""),
            url_to_image=data.get("urlToImage"),
            published_at=data.get("publishedAt"),
            content=data.get("content"),
        )


@dataclass(frozen=True)
class MovieRecord:
    id: int
    title: str | None
    overview: str | None
    release_date: str | None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    poster_path: str | None = None
    backdrop_path: str | None = None
    genre_ids: tuple[int, ...] = ()
    adult: bool = False
    video: bool = False
    original_language: str | None = None
    original_title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "overview": self.overview,
            "poster_path": self.poster_path,
            "backdrop_path": self.backdrop_path,
            "release_date": self.release_date,
            "vote_average": self.vote_average,
            "vote_count": self.vote_count,
            "genre_ids": list(self.genre_ids),
            "popularity": self.popularity,
            "adult": self.adult,
            "video": self.video,
            "original_language": self.original_language,
            "original_title": self.original_title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MovieRecord":
        return cls(
            id=int(data["id"]),
            title=data.get("title"),
            overview=data.get("overview"),
            release_date=data.get("release_date") or None,
            vote_average=float(data.get("vote_average") or 0.0),
            vote_count=int(data.get("vote_count") or 0),
            popularity=float(data.get("popularity") or 0.0),
            poster_path=data.get("poster_path"),
            backdrop_path=data.get("backdrop_path"),
            genre_ids=tuple(int(g) for g in data.get("genre_ids") or ()),
            adult=bool(data.get("adult", False)),
            video=bool(data.get("video", False)),
            original_language=data.get("original_language"),
            original_title=data.get("original_title"),
        )


@dataclass(frozen=True)
class SocialPost:
    id: str
    username: str
    display_name: str
    content: str
    timestamp: str
    platform: str
    avatar: str | None = None
    likes: int = 0
    shares: int = 0
    comments: int = 0
    hashtags: tuple[str, ...] = ()
    images: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "displayName": self.display_name,
            "avatar": self.avatar,
            "content": self.content,
            "timestamp": self.timestamp,
            "likes": self.likes,
            "shares": self.shares,
            "comments": self.comments,
            "hashtags": list(self.hashtags),
            "platform": self.platform,
            "images": list(self.images),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SocialPost":
        return cls(
            id=str(data["id"]),
            username=str(data.get("username", "")),
            display_name=str(data.get("displayName", "")),
            avatar=data.get("avatar"),
            content=str(data.get("content", "")),
            timestamp=str(data.get("timestamp", "")),
            likes=int(data.get("likes", 0)),
            shares=int(data.get("shares", 0)),
            comments=int(data.get("comments", 0)),
            hashtags=tuple(data.get("hashtags") or ()),
            platform=str(data.get("platform", "")),
            images=tuple(data.get("images") or ()),
        )


SourceRecord = NewsArticle | MovieRecord | SocialPost

RECORD_TYPES: dict[ContentSource, type] = {
    ContentSource.NEWS: NewsArticle,
    ContentSource.MOVIES: MovieRecord,
    ContentSource.SOCIAL: SocialPost,
}


@dataclass(frozen=True)
class ContentItem:
    """A single entry of the unified feed.

    ``source`` is the discriminant for ``source_data``: a news item always carries a
    ``NewsArticle``, a movie item a ``MovieRecord`` and a social item a ``SocialPost``.
    Items are immutable; favorite and read flags change by building a new item.
    """

    id: str
    title: str
    description: str
    category: str
    author: str
    date: str
    read_time: int
    image_url: str
    source: ContentSource
    tags: tuple[str, ...] = ()
    source_data: SourceRecord | None = field(default=None, repr=False)
    url: str | None = None
    rating: float | None = None
    is_favorite: bool = False
    is_read: bool = False

    def __post_init__(self) -> None:
        if self.source_data is not None:
            expected = RECORD_TYPES[self.source]
            if not isinstance(self.source_data, expected):
                raise ValueError(
                    f"{self.source.value} item cannot carry "
                    f"{type(self.source_data).__name__} source data"
                )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "author": self.author,
            "date": self.date,
            "readTime": self.read_time,
            "tags": list(self.tags),
            "imageUrl": self.image_url,
            "isFavorite": self.is_favorite,
            "isRead": self.is_read,
            "source": self.source.value,
        }
        if self.source_data is not None:
            data["sourceData"] = self.source_data.to_dict()
        if self.url is not None:
            data["url"] = self.url
        if self.rating is not None:
            data["rating"] = self.rating
        return data


@dataclass(frozen=True)
class UserPreferences:
    news_categories: tuple[str, ...] = ()
    movie_genres: tuple[str, ...] = ()
    social_hashtags: tuple[str, ...] = ()
    content_types: frozenset[ContentSource] = frozenset(ContentSource)

    def first_topic(self, source: ContentSource) -> str | None:
        topics = {
            ContentSource.NEWS: self.news_categories,
            ContentSource.MOVIES: self.movie_genres,
            ContentSource.SOCIAL: self.social_hashtags,
        }[source]
        for topic in topics:
            if topic and topic.strip():
                return topic.strip()
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "newsCategories": list(self.news_categories),
            "movieGenres": list(self.movie_genres),
            "socialHashtags": list(self.social_hashtags),
            "contentTypes": [s.value for s in ContentSource if s in self.content_types],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferences":
        """Build preferences from the persisted camelCase shape.

        Raises ValueError for a content type outside news/movies/social.
        """
        content_types = data.get("contentTypes")
        return cls(
            news_categories=tuple(data.get("newsCategories") or ()),
            movie_genres=tuple(data.get("movieGenres") or ()),
            social_hashtags=tuple(data.get("socialHashtags") or ()),
            content_types=(
                frozenset(ContentSource)
                if content_types is None
                else frozenset(ContentSource(value) for value in content_types)
            ),
        )
