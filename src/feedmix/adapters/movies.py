import math
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import httpx
import structlog

from feedmix.adapters.base import BaseAdapter, has_credential, matches_query
from feedmix.adapters.fallback import FALLBACK_MOVIES
from feedmix.config import CredentialCheck
from feedmix.models import ContentItem, ContentSource, MovieRecord
from feedmix.utils.date_utils import release_year

logger = structlog.get_logger()

TMDB_API_BASE = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p/w500"
MOVIE_PLACEHOLDER_IMAGE = (
    "https://images.pexels.com/photos/7991579/pexels-photo-7991579.jpeg"
    "?auto=compress&cs=tinysrgb&w=800"
)
MOVIE_CATEGORY = "Entertainment"
MOVIE_AUTHOR = "TMDB"
UNKNOWN_RELEASE_DATE = "1970-01-01"

HIGHLY_RATED_THRESHOLD = 8.0
POPULARITY_THRESHOLD = 50.0
MAX_TAGS = 4

TMDB_GENRES = {
    "action": 28,
    "adventure": 12,
    "animation": 16,
    "comedy": 35,
    "crime": 80,
    "documentary": 99,
    "drama": 18,
    "family": 10751,
    "fantasy": 14,
    "history": 36,
    "horror": 27,
    "music": 10402,
    "mystery": 9648,
    "romance": 10749,
    "science fiction": 878,
    "sci-fi": 878,
    "thriller": 53,
    "war": 10752,
    "western": 37,
}


class MovieAdapter(BaseAdapter[MovieRecord]):
    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = TMDB_API_BASE,
        image_base_url: str = TMDB_IMAGE_BASE,
        timeout_seconds: float = 10.0,
        credential_check: CredentialCheck = has_credential,
    ) -> None:
        super().__init__(api_key=api_key, credential_check=credential_check)
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._image_base_url = image_base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @property
    def source(self) -> ContentSource:
        return ContentSource.MOVIES

    @property
    def fallback_records(self) -> Sequence[MovieRecord]:
        return FALLBACK_MOVIES

    async def fetch_by_topic(self, topic: str | None) -> list[MovieRecord]:
        genre_id = TMDB_GENRES.get((topic or "").strip().lower())
        if genre_id is None:
            return await self._fetch_list("movie/popular", {"page": "1"}, label="popular")

        params = {"with_genres": str(genre_id), "sort_by": "popularity.desc", "page": "1"}
        return await self._fetch_list("discover/movie", params, label=topic or "")

    async def fetch_trending(self) -> list[MovieRecord]:
        return await self._fetch_list("trending/movie/week", {}, label="trending")

    async def search_by_query(self, query: str) -> list[MovieRecord]:
        if not query.strip():
            return []

        if not self.has_valid_credential:
            logger.debug("No usable TMDB API key, searching fallback movies", query=query)
            return self.search_fallback(query)

        try:
            movies = await self._get_movies("search/movie", {"query": query, "page": "1"})
        except httpx.HTTPStatusError as e:
            logger.warning(
                "HTTP error searching movies, searching fallback movies",
                query=query,
                status_code=e.response.status_code,
            )
            return self.search_fallback(query)
        except httpx.RequestError as e:
            logger.warning(
                "Request error searching movies, searching fallback movies",
                query=query,
                error=type(e).__name__,
            )
            return self.search_fallback(query)
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Malformed movie search response", query=query, error=str(e))
            return self.search_fallback(query)

        logger.info("Searched movies", query=query, count=len(movies))
        return movies

    def record_matches(self, record: MovieRecord, query: str) -> bool:
        return matches_query(query, record.title, record.overview)

    def normalize(self, records: Sequence[MovieRecord]) -> list[ContentItem]:
        return [
            ContentItem(
                id=f"movie-{movie.id}",
                title=(movie.title or movie.original_title or "").strip() or "Untitled movie",
                description=(movie.overview or "").strip() or "No overview available",
                category=MOVIE_CATEGORY,
                author=MOVIE_AUTHOR,
                date=movie.release_date or UNKNOWN_RELEASE_DATE,
                # Watch-time heuristic derived from the rating, not the runtime.
                read_time=math.floor(movie.vote_average * 10) + 90,
                tags=self._movie_tags(movie),
                image_url=self.image_url(movie.poster_path),
                source=ContentSource.MOVIES,
                source_data=movie,
                rating=movie.vote_average,
            )
            for movie in records
        ]

    def image_url(self, path: str | None) -> str:
        if not path:
            return MOVIE_PLACEHOLDER_IMAGE
        return f"{self._image_base_url}/{path.lstrip('/')}"

    async def _fetch_list(
        self, endpoint: str, params: dict[str, str], label: str
    ) -> list[MovieRecord]:
        if not self.has_valid_credential:
            logger.info("No usable TMDB API key, serving fallback movies", listing=label)
            return list(FALLBACK_MOVIES)

        try:
            movies = await self._get_movies(endpoint, params)
        except httpx.HTTPStatusError as e:
            logger.error(
                "HTTP error fetching movies",
                listing=label,
                status_code=e.response.status_code,
            )
            return list(FALLBACK_MOVIES)
        except httpx.RequestError as e:
            logger.error("Request error fetching movies", listing=label, error=type(e).__name__)
            return list(FALLBACK_MOVIES)
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Malformed movie response", listing=label, error=str(e))
            return list(FALLBACK_MOVIES)

        logger.info("Fetched movies", listing=label, count=len(movies))
        return movies

    async def _get_movies(self, endpoint: str, params: dict[str, str]) -> list[MovieRecord]:
        url = f"{self._base_url}/{endpoint}"
        query = {**params, "api_key": self._api_key or ""}

        if self._client:
            response = await self._client.get(url, params=query)
        else:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                response = await client.get(url, params=query)

        response.raise_for_status()
        data: Any = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

        raw_movies = data.get("results") or []
        if not isinstance(raw_movies, list):
            raise ValueError("Expected 'results' to be a list")

        movies: list[MovieRecord] = []
        for raw in raw_movies:
            if not isinstance(raw, dict):
                logger.debug("Skipping malformed movie entry", entry_type=type(raw).__name__)
                continue
            movies.append(MovieRecord.from_dict(raw))
        return movies

    def _movie_tags(self, movie: MovieRecord) -> tuple[str, ...]:
        tags = ["Movies", "Entertainment"]

        if movie.vote_average >= HIGHLY_RATED_THRESHOLD:
            tags.append("Highly Rated")
        if movie.popularity > POPULARITY_THRESHOLD:
            tags.append("Popular")
        if release_year(movie.release_date) == datetime.now(UTC).year:
            tags.append("New Release")

        return tuple(tags[:MAX_TAGS])
