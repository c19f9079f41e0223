"""
Open Douban API Client

Talks to an Open Douban compatible HTTP API.

Primary endpoints (search, subject details) are hard-fail: any non-success
response, connection failure or undecodable body raises. Secondary endpoints
(celebrities, photos) are soft-fail: a non-success response is logged and
replaced by an empty value so the caller can carry on.
"""

from enum import Enum
from typing import Any, Mapping, Optional, TypeVar
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from opendouban.identification.models import Celebrity, Photo, Subject


T = TypeVar("T")

_BODY_SNIPPET_LENGTH = 400


class OddbClientError(RuntimeError):
    """Base error for failed upstream calls."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body_snippet: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_snippet = body_snippet


class TransportError(OddbClientError):
    """The request failed or returned a non-success status."""


class DecodeError(OddbClientError):
    """The response body did not have the expected shape."""


class SubjectMismatchError(DecodeError):
    """A detail lookup returned a different subject than the one requested."""


class SearchMode(str, Enum):
    """Search endpoint variant."""
    FULL = "full"
    PARTIAL = "partial"


class OddbApiClient:
    """
    Client for the Open Douban API.

    Usage:
        async with OddbApiClient("http://localhost:5000") as client:
            subjects = await client.partial_search("Harry Potter")
    """

    def __init__(
        self,
        base_uri: str,
        *,
        poster_size: str = "",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize client.

        Args:
            base_uri: Root URL of the API, e.g. ``http://localhost:5000``
            poster_size: Poster size hint sent with subject lookups
            timeout: Transport timeout in seconds
            client: Optional pre-built ``httpx.AsyncClient`` to share
        """
        self.base_uri = base_uri.rstrip("/")
        self.poster_size = poster_size
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _url(self, path: str) -> str:
        return f"{self.base_uri}{path}"

    async def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        client = await self._get_client()
        url = self._url(path)
        try:
            return await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {url} failed: {e}") from e

    @staticmethod
    def _decode(response: httpx.Response, type_: Any) -> Any:
        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Non-JSON response from {response.request.url}",
                status_code=response.status_code,
                body_snippet=(response.text or "")[:_BODY_SNIPPET_LENGTH],
            ) from e

        try:
            return TypeAdapter(type_).validate_python(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected response shape from {response.request.url}: {e.error_count()} error(s)",
                status_code=response.status_code,
                body_snippet=(response.text or "")[:_BODY_SNIPPET_LENGTH],
            ) from e

    async def fetch_json(
        self,
        path: str,
        type_: Any,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        GET a primary endpoint and decode the body.

        Raises:
            TransportError: On connection failure or non-success status.
            DecodeError: If the body is not JSON of the expected shape.
        """
        response = await self._get(path, params)

        if not response.is_success:
            raise TransportError(
                f"GET {path} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body_snippet=(response.text or "")[:_BODY_SNIPPET_LENGTH],
            )

        return self._decode(response, type_)

    async def fetch_json_or_default(
        self,
        path: str,
        type_: Any,
        default: T,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        GET a secondary endpoint, returning ``default`` on non-success status.

        Connection failures and malformed bodies still raise.
        """
        response = await self._get(path, params)

        if not response.is_success:
            logger.info(f"GET {path} returned HTTP {response.status_code}, using default")
            return default

        return self._decode(response, type_)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(self, keyword: str, mode: SearchMode = SearchMode.PARTIAL) -> list[Subject]:
        """
        Search subjects by keyword.

        Args:
            keyword: Search text, passed through unmodified
            mode: Full or partial search

        Returns:
            Subjects in upstream order
        """
        return await self.fetch_json(
            "/movies",
            list[Subject],
            params={"q": keyword, "type": SearchMode(mode).value},
        )

    async def full_search(self, keyword: str) -> list[Subject]:
        return await self.search(keyword, SearchMode.FULL)

    async def partial_search(self, keyword: str) -> list[Subject]:
        return await self.search(keyword, SearchMode.PARTIAL)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_by_sid(self, sid: str, poster_size: Optional[str] = None) -> Subject:
        """
        Fetch the full subject record.

        Raises:
            SubjectMismatchError: If upstream answers with another subject.
        """
        size = self.poster_size if poster_size is None else poster_size
        subject = await self.fetch_json(
            f"/movies/{quote(sid, safe='')}",
            Subject,
            params={"s": size or ""},
        )
        if subject.sid != sid:
            raise SubjectMismatchError(
                f"Requested subject {sid!r} but received {subject.sid!r}"
            )
        return subject

    async def get_celebrities_by_sid(self, sid: str) -> list[Celebrity]:
        """Cast and crew of a subject; empty when upstream has none."""
        return await self.fetch_json_or_default(
            f"/movies/{quote(sid, safe='')}/celebrities",
            list[Celebrity],
            default=[],
        )

    async def get_celebrity_by_cid(self, cid: str) -> Optional[Celebrity]:
        return await self.fetch_json_or_default(
            f"/celebrities/{quote(cid, safe='')}",
            Celebrity,
            default=None,
        )

    async def get_photos_by_sid(self, sid: str) -> Optional[list[Photo]]:
        return await self.fetch_json_or_default(
            f"/photo/{quote(sid, safe='')}",
            list[Photo],
            default=None,
        )

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def get_image(self, url: str) -> httpx.Response:
        """
        Fetch a raw image by absolute URL.

        Raises:
            TransportError: On connection failure or non-success status.
        """
        client = await self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(f"Image request to {url} failed: {e}") from e

        if not response.is_success:
            raise TransportError(
                f"Image request failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def close(self):
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "OddbApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
