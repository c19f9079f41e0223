"""
Movie Metadata Provider

Host-facing entry point: resolve, enrich and map in one call, plus the
lighter listing and lookup operations.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from opendouban.config import Settings
from opendouban.identification.api_client import OddbApiClient, SearchMode
from opendouban.identification.celebrity_enricher import (
    CelebrityEnricher,
    RoleClassifier,
    build_role_table,
)
from opendouban.identification.metadata_mapper import (
    MetadataMapper,
    MetadataResult,
    SearchResult,
)
from opendouban.identification.models import Celebrity, Photo
from opendouban.identification.query_normalizer import QueryNormalizer
from opendouban.identification.resolver import MovieQuery, SubjectResolver


@dataclass
class ImagePayload:
    """Raw image bytes fetched on behalf of the host."""
    content: bytes
    content_type: str


class MovieMetadataProvider:
    """Open Douban metadata provider for a host media library."""

    name = "Open Douban Movie Provider"

    def __init__(
        self,
        client: OddbApiClient,
        resolver: Optional[SubjectResolver] = None,
        enricher: Optional[CelebrityEnricher] = None,
        mapper: Optional[MetadataMapper] = None,
    ):
        """
        Initialize provider.

        Args:
            client: API client shared by all stages
            resolver: Subject resolver (defaults to one without title cleanup)
            enricher: Celebrity enricher
            mapper: Metadata mapper
        """
        self.client = client
        self.resolver = resolver or SubjectResolver(client)
        self.enricher = enricher or CelebrityEnricher(client)
        self.mapper = mapper or MetadataMapper(classifier=self.enricher.classifier)

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[OddbApiClient] = None) -> "MovieMetadataProvider":
        """Wire up a provider from application settings."""
        client = client or OddbApiClient(
            settings.api_base_uri,
            poster_size=settings.poster_size,
            timeout=settings.request_timeout,
        )
        classifier = RoleClassifier(build_role_table(settings.role_table))
        return cls(
            client,
            resolver=SubjectResolver(client, QueryNormalizer(settings.noise_pattern)),
            enricher=CelebrityEnricher(client, classifier),
            mapper=MetadataMapper(classifier=classifier, home_page_url=settings.home_page_url),
        )

    async def resolve_metadata(self, query: MovieQuery) -> MetadataResult:
        """
        Resolve a query to a full metadata record.

        Returns:
            MetadataResult; ``has_metadata`` is False when nothing matched

        Raises:
            OddbClientError: If search or the detail lookup fails
        """
        resolution = await self.resolver.resolve(query)
        if not resolution.found:
            return MetadataResult(queried_by_id=resolution.queried_by_id)

        subject = await self.enricher.enrich(resolution.subject)
        record = self.mapper.to_metadata_record(subject)

        logger.info(
            f"Resolved sid {subject.sid} '{subject.name}' with {len(record.people)} people"
        )
        return MetadataResult(record=record, queried_by_id=resolution.queried_by_id)

    async def list_search_results(self, query: MovieQuery) -> list[SearchResult]:
        """
        List candidates for a query without enriching them.

        A query with an id yields that one subject; a title is searched as
        given.
        """
        if query.has_sid:
            logger.info(f"Search results for sid: \"{query.sid}\"")
            subjects = [await self.client.get_by_sid(query.sid)]
        elif query.has_title:
            logger.info(f"Search results for name: \"{query.title}\"")
            subjects = await self.client.partial_search(query.title)
        else:
            subjects = []

        if not subjects:
            logger.info("Search results found nothing")

        return [self.mapper.to_search_result(s) for s in subjects]

    async def search(self, keyword: str, mode: SearchMode = SearchMode.FULL) -> list[SearchResult]:
        subjects = await self.client.search(keyword, mode)
        return [self.mapper.to_search_result(s) for s in subjects]

    async def get_celebrity(self, cid: str) -> Optional[Celebrity]:
        return await self.enricher.fetch_celebrity(cid)

    async def get_photos(self, sid: str) -> Optional[list[Photo]]:
        return await self.client.get_photos_by_sid(sid)

    async def fetch_image(self, url: str) -> ImagePayload:
        """Fetch an image for the host to serve."""
        logger.info(f"Fetching image: {url}")
        response = await self.client.get_image(url)
        return ImagePayload(
            content=response.content,
            content_type=response.headers.get("content-type", "application/octet-stream"),
        )

    async def close(self):
        """Close the underlying client."""
        await self.client.close()
