"""
Pytest configuration and fixtures for Open Douban tests.
"""

import copy
from typing import Any, AsyncGenerator, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from opendouban.config import Settings
from opendouban.identification.api_client import OddbApiClient
from opendouban.identification.service import MovieMetadataProvider


BASE_URI = "http://oddb.test"


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings(**overrides) -> Settings:
    """Return settings configured for testing."""
    values = dict(
        api_base_uri=BASE_URI,
        noise_pattern=r"\(\d{4}\)$",
        environment="test",
        debug=True,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def test_settings() -> Settings:
    return get_test_settings()


# =============================================================================
# Fake Upstream
# =============================================================================

Handler = Callable[[httpx.Request], Any]


class FakeUpstream:
    """
    In-memory Open Douban API.

    Routes match on path and, optionally, on a subset of query parameters.
    Unmatched requests get a 404. Every request is recorded.
    """

    def __init__(self):
        self.routes: list[tuple[str, dict[str, str], Union[httpx.Response, Handler]]] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        json: Any = None,
        *,
        status_code: int = 200,
        params: Optional[dict[str, str]] = None,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> "FakeUpstream":
        if content is not None:
            response = httpx.Response(status_code, content=content, headers=headers)
        else:
            response = httpx.Response(status_code, json=json, headers=headers)
        self.routes.append((path, params or {}, response))
        return self

    def add_handler(self, path: str, handler: Handler, params: Optional[dict[str, str]] = None) -> "FakeUpstream":
        self.routes.append((path, params or {}, handler))
        return self

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def _handle(self, request: httpx.Request):
        self.requests.append(request)
        for path, params, target in reversed(self.routes):
            if request.url.path != path:
                continue
            if any(request.url.params.get(k) != v for k, v in params.items()):
                continue
            if isinstance(target, httpx.Response):
                return httpx.Response(
                    target.status_code,
                    content=target.content,
                    headers=target.headers,
                )
            return target(request)
        return httpx.Response(404, json={"detail": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def api_client(upstream) -> AsyncGenerator[OddbApiClient, None]:
    """API client talking to the fake upstream."""
    client = OddbApiClient(
        BASE_URI,
        client=httpx.AsyncClient(transport=upstream.transport),
    )
    yield client
    await client.close()


@pytest_asyncio.fixture
async def provider(upstream, test_settings) -> AsyncGenerator[MovieMetadataProvider, None]:
    """Fully wired provider talking to the fake upstream."""
    client = OddbApiClient(
        test_settings.api_base_uri,
        poster_size=test_settings.poster_size,
        client=httpx.AsyncClient(transport=upstream.transport),
    )
    provider = MovieMetadataProvider.from_settings(test_settings, client=client)
    yield provider
    await provider.close()


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app(provider, test_settings):
    """Create FastAPI application backed by the fake upstream."""
    from opendouban.api.main import create_app
    from opendouban.api.dependencies import get_provider

    application = create_app(test_settings)
    application.dependency_overrides[get_provider] = lambda: provider

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# =============================================================================
# Data Fixtures
# =============================================================================

HARRY_POTTER_SUBJECT = {
    "name": "哈利·波特与魔法石",
    "originalName": "Harry Potter and the Sorcerer's Stone",
    "rating": "9.1",
    "img": "https://img9.doubanio.com/view/photo/s_ratio_poster/public/p2614949805.webp",
    "sid": "1295038",
    "year": "2001",
    "director": "克里斯·哥伦布",
    "writer": "史蒂夫·克洛夫斯 / J·K·罗琳",
    "actor": "丹尼尔·雷德克里夫 / 艾玛·沃森 / 鲁伯特·格林特",
    "genre": "奇幻 / 冒险",
    "site": "www.harrypotter.co.uk",
    "country": "美国 / 英国",
    "language": "英语",
    "screen": "2002-01-26(中国大陆) / 2020-08-14(中国大陆重映) / 2001-11-04(英国首映) / 2001-11-16(美国)",
    "duration": "152分钟 / 159分钟(加长版)",
    "subname": "哈利波特1：神秘的魔法石(港/台) / 哈1 / Harry Potter and the Philosopher's Stone",
    "imdb": "tt0241527",
    "intro": "哈利·波特一岁时父母被伏地魔杀害。",
}

HARRY_POTTER_CELEBRITIES = [
    {"id": "1027182", "name": "克里斯·哥伦布", "role": "导演", "img": "https://img.test/c1.jpg"},
    {"id": "1025156", "name": "丹尼尔·雷德克里夫", "role": "演员", "img": "https://img.test/c2.jpg"},
    {"id": "1025158", "name": "艾玛·沃森", "role": "演员", "img": "https://img.test/c3.jpg"},
    {"id": "1044916", "name": "约翰·威廉姆斯", "role": "配乐", "img": ""},
]


@pytest.fixture
def harry_potter_subject() -> dict:
    return copy.deepcopy(HARRY_POTTER_SUBJECT)


@pytest.fixture
def harry_potter_celebrities() -> list[dict]:
    return copy.deepcopy(HARRY_POTTER_CELEBRITIES)


@pytest.fixture
def harry_potter_upstream(upstream, harry_potter_subject, harry_potter_celebrities) -> FakeUpstream:
    """Upstream serving the Harry Potter search, detail and cast."""
    upstream.add(
        "/movies",
        [{"sid": "1295038", "year": "2001", "name": "哈利·波特与魔法石"}],
        params={"type": "partial"},
    )
    upstream.add("/movies/1295038", harry_potter_subject)
    upstream.add("/movies/1295038/celebrities", harry_potter_celebrities)
    return upstream
