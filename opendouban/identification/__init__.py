"""
Movie Identification Module

Resolves movie queries against the Open Douban API and maps the result into
host metadata records.
"""

from opendouban.identification.api_client import (
    OddbApiClient,
    OddbClientError,
    TransportError,
    DecodeError,
    SubjectMismatchError,
    SearchMode,
)
from opendouban.identification.models import (
    Subject,
    Celebrity,
    Photo,
    parse_screen_time,
)
from opendouban.identification.query_normalizer import (
    QueryNormalizer,
    normalize_title,
)
from opendouban.identification.resolver import (
    SubjectResolver,
    MovieQuery,
    Resolution,
    ResolutionState,
)
from opendouban.identification.celebrity_enricher import (
    CelebrityEnricher,
    RoleClassifier,
    RoleKind,
    DEFAULT_ROLE_TABLE,
    build_role_table,
)
from opendouban.identification.metadata_mapper import (
    MetadataMapper,
    MetadataRecord,
    MetadataResult,
    PersonInfo,
    SearchResult,
    PROVIDER_ID,
    IMDB_PROVIDER_ID,
)
from opendouban.identification.service import (
    MovieMetadataProvider,
    ImagePayload,
)

__all__ = [
    # Client
    "OddbApiClient",
    "OddbClientError",
    "TransportError",
    "DecodeError",
    "SubjectMismatchError",
    "SearchMode",
    # Records
    "Subject",
    "Celebrity",
    "Photo",
    "parse_screen_time",
    # Normalizer
    "QueryNormalizer",
    "normalize_title",
    # Resolver
    "SubjectResolver",
    "MovieQuery",
    "Resolution",
    "ResolutionState",
    # Enrichment
    "CelebrityEnricher",
    "RoleClassifier",
    "RoleKind",
    "DEFAULT_ROLE_TABLE",
    "build_role_table",
    # Mapping
    "MetadataMapper",
    "MetadataRecord",
    "MetadataResult",
    "PersonInfo",
    "SearchResult",
    "PROVIDER_ID",
    "IMDB_PROVIDER_ID",
    # Provider
    "MovieMetadataProvider",
    "ImagePayload",
]
