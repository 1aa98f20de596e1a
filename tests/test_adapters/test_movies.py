from datetime import UTC, datetime

import httpx
import respx

from feedmix.adapters.fallback import FALLBACK_MOVIES
from feedmix.adapters.movies import MOVIE_PLACEHOLDER_IMAGE, MovieAdapter
from feedmix.models import ContentSource, MovieRecord

TMDB = "https://api.themoviedb.org/3"
API_KEY = "tmdb-0123456789abcdef"

SAMPLE_MOVIES_RESPONSE = {
    "page": 1,
    "results": [
        {
            "id": 550,
            "title": "Fight Club",
            "overview": "An insomniac office worker crosses paths with a soap maker.",
            "poster_path": "/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg",
            "backdrop_path": "/hZkgoQYus5vegHoetLkCJzb17zJ.jpg",
            "release_date": "1999-10-15",
            "vote_average": 8.5,
            "vote_count": 26280,
            "genre_ids": [18],
            "popularity": 61.4,
            "adult": False,
            "video": False,
            "original_language": "en",
            "original_title": "Fight Club",
        },
        {
            "id": 551,
            "title": "Quiet Film",
            "overview": "",
            "poster_path": None,
            "release_date": "",
            "vote_average": 6.5,
            "vote_count": 12,
            "genre_ids": [],
            "popularity": 3.2,
        },
    ],
    "total_pages": 1,
    "total_results": 2,
}


class TestMovieAdapterFetch:
    async def test_source(self) -> None:
        assert MovieAdapter().source is ContentSource.MOVIES

    @respx.mock
    async def test_known_genre_uses_discover(self) -> None:
        route = respx.get(f"{TMDB}/discover/movie").mock(
            return_value=httpx.Response(200, json=SAMPLE_MOVIES_RESPONSE)
        )

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_by_topic("Action")

        assert [m.id for m in movies] == [550, 551]
        params = route.calls.last.request.url.params
        assert params["with_genres"] == "28"
        assert params["sort_by"] == "popularity.desc"
        assert params["api_key"] == API_KEY

    @respx.mock
    async def test_unknown_genre_uses_popular(self) -> None:
        route = respx.get(f"{TMDB}/movie/popular").mock(
            return_value=httpx.Response(200, json=SAMPLE_MOVIES_RESPONSE)
        )

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_by_topic(None)

        assert len(movies) == 2
        assert route.called

    @respx.mock
    async def test_fetch_trending(self) -> None:
        respx.get(f"{TMDB}/trending/movie/week").mock(
            return_value=httpx.Response(200, json=SAMPLE_MOVIES_RESPONSE)
        )

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_trending()

        assert movies[0].title == "Fight Club"

    async def test_without_key_serves_fallback(self) -> None:
        adapter = MovieAdapter(api_key=None)

        assert await adapter.fetch_by_topic("drama") == list(FALLBACK_MOVIES)
        assert await adapter.fetch_trending() == list(FALLBACK_MOVIES)

    @respx.mock
    async def test_http_error_serves_fallback(self) -> None:
        respx.get(f"{TMDB}/movie/popular").mock(return_value=httpx.Response(401))

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_by_topic("")

        assert movies == list(FALLBACK_MOVIES)

    @respx.mock
    async def test_transport_error_serves_fallback(self) -> None:
        respx.get(f"{TMDB}/discover/movie").mock(side_effect=httpx.ConnectTimeout("slow"))

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_by_topic("comedy")

        assert movies == list(FALLBACK_MOVIES)

    @respx.mock
    async def test_non_object_body_serves_fallback(self) -> None:
        respx.get(f"{TMDB}/movie/popular").mock(return_value=httpx.Response(200, json=[]))

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_by_topic(None)

        assert movies == list(FALLBACK_MOVIES)

    @respx.mock
    async def test_malformed_movie_entries_are_skipped(self) -> None:
        valid = SAMPLE_MOVIES_RESPONSE["results"][0]
        respx.get(f"{TMDB}/movie/popular").mock(
            return_value=httpx.Response(200, json={"page": 1, "results": [None, valid, 7]})
        )

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.fetch_by_topic(None)

        assert [m.id for m in movies] == [550]

    @respx.mock
    async def test_search_non_object_body_filters_fallback(self) -> None:
        respx.get(f"{TMDB}/search/movie").mock(return_value=httpx.Response(200, json=["x"]))

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.search_by_query("code")

        assert [m.id for m in movies] == [2]


class TestMovieAdapterSearch:
    @respx.mock
    async def test_search_success(self) -> None:
        route = respx.get(f"{TMDB}/search/movie").mock(
            return_value=httpx.Response(200, json=SAMPLE_MOVIES_RESPONSE)
        )

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.search_by_query("fight")

        assert len(movies) == 2
        assert route.calls.last.request.url.params["query"] == "fight"

    async def test_search_without_key_filters_fallback(self) -> None:
        movies = await MovieAdapter().search_by_query("entrepreneurs")

        assert [m.title for m in movies] == ["Startup Dreams"]

    @respx.mock
    async def test_search_failure_filters_fallback(self) -> None:
        respx.get(f"{TMDB}/search/movie").mock(return_value=httpx.Response(500))

        async with httpx.AsyncClient() as client:
            adapter = MovieAdapter(api_key=API_KEY, http_client=client)
            movies = await adapter.search_by_query("code")

        assert [m.id for m in movies] == [2]


class TestMovieAdapterNormalize:
    def test_normalize_fields(self) -> None:
        movie = MovieRecord.from_dict(SAMPLE_MOVIES_RESPONSE["results"][0])

        item = MovieAdapter().normalize([movie])[0]

        assert item.id == "movie-550"
        assert item.title == "Fight Club"
        assert item.category == "Entertainment"
        assert item.author == "TMDB"
        assert item.date == "1999-10-15"
        assert item.read_time == 175
        assert item.rating == 8.5
        assert item.image_url == "https://image.tmdb.org/t/p/w500/pB8BM7pdSp6B6Ih7QZ4DrQ3PmJK.jpg"
        assert item.tags == ("Movies", "Entertainment", "Highly Rated", "Popular")
        assert item.source is ContentSource.MOVIES
        assert item.source_data is movie
        assert item.url is None

    def test_normalize_substitutes_missing_fields(self) -> None:
        movie = MovieRecord.from_dict(SAMPLE_MOVIES_RESPONSE["results"][1])

        item = MovieAdapter().normalize([movie])[0]

        assert item.description == "No overview available"
        assert item.image_url == MOVIE_PLACEHOLDER_IMAGE
        assert item.date == "1970-01-01"
        assert item.read_time == 155
        assert item.tags == ("Movies", "Entertainment")

    def test_new_release_tag(self) -> None:
        movie = MovieRecord(
            id=9,
            title="Fresh",
            overview="Just out.",
            release_date=f"{datetime.now(UTC).year}-01-02",
            vote_average=5.0,
            popularity=10.0,
        )

        item = MovieAdapter().normalize([movie])[0]

        assert item.tags == ("Movies", "Entertainment", "New Release")

    def test_tags_capped_at_four(self) -> None:
        movie = MovieRecord(
            id=10,
            title="Everything",
            overview="All the tags.",
            release_date=f"{datetime.now(UTC).year}-01-02",
            vote_average=9.0,
            popularity=99.0,
        )

        item = MovieAdapter().normalize([movie])[0]

        assert item.tags == ("Movies", "Entertainment", "Highly Rated", "Popular")

    def test_normalize_is_deterministic(self) -> None:
        adapter = MovieAdapter()

        assert adapter.normalize(FALLBACK_MOVIES) == adapter.normalize(FALLBACK_MOVIES)

    def test_image_url(self) -> None:
        adapter = MovieAdapter(image_base_url="https://img.example.com/w300/")

        assert adapter.image_url("/poster.jpg") == "https://img.example.com/w300/poster.jpg"
        assert adapter.image_url(None) == MOVIE_PLACEHOLDER_IMAGE
