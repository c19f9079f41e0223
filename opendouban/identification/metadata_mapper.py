"""
Metadata Mapper

Projects upstream subjects into the records the host library consumes.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from opendouban.config import DEFAULT_HOME_PAGE_URL
from opendouban.identification.celebrity_enricher import RoleClassifier, RoleKind
from opendouban.identification.models import Celebrity, Subject


PROVIDER_ID = "OpenDouban"
IMDB_PROVIDER_ID = "Imdb"


@dataclass
class PersonInfo:
    """A cast or crew entry on a metadata record."""

    name: str
    type: Union[RoleKind, str]
    role: str
    image_url: Optional[str] = None
    provider_ids: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "type": self.type.value if isinstance(self.type, RoleKind) else self.type,
            "role": self.role,
            "image_url": self.image_url,
            "provider_ids": dict(self.provider_ids),
        }


@dataclass
class MetadataRecord:
    """
    Canonical movie metadata for the host library.

    ``people`` keeps the order in which upstream returned the celebrities.
    """

    provider_ids: dict[str, str]
    name: str
    original_title: Optional[str] = None
    overview: Optional[str] = None
    community_rating: Optional[float] = None
    production_year: Optional[int] = None
    premiere_date: Optional[date] = None
    image_url: Optional[str] = None
    home_page_url: Optional[str] = None
    genres: list[str] = field(default_factory=list)
    production_locations: list[str] = field(default_factory=list)
    people: list[PersonInfo] = field(default_factory=list)

    @property
    def sid(self) -> str:
        return self.provider_ids[PROVIDER_ID]

    @property
    def imdb(self) -> Optional[str]:
        return self.provider_ids.get(IMDB_PROVIDER_ID)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "provider_ids": dict(self.provider_ids),
            "name": self.name,
            "original_title": self.original_title,
            "overview": self.overview,
            "community_rating": self.community_rating,
            "production_year": self.production_year,
            "premiere_date": self.premiere_date.isoformat() if self.premiere_date else None,
            "image_url": self.image_url,
            "home_page_url": self.home_page_url,
            "genres": list(self.genres),
            "production_locations": list(self.production_locations),
            "people": [p.to_dict() for p in self.people],
        }


@dataclass
class MetadataResult:
    """
    Outcome of a metadata request; ``record`` is None when nothing matched.

    ``queried_by_id`` is True only when the query carried a sid. A title that
    resolves through search reports False even though a detail lookup ran.
    """

    record: Optional[MetadataRecord] = None
    queried_by_id: bool = False

    @property
    def has_metadata(self) -> bool:
        return self.record is not None

    def to_dict(self) -> dict:
        return {
            "has_metadata": self.has_metadata,
            "queried_by_id": self.queried_by_id,
            "record": self.record.to_dict() if self.record else None,
        }


@dataclass
class SearchResult:
    """Lightweight candidate listing, no enrichment."""

    provider_ids: dict[str, str]
    name: str
    production_year: Optional[int] = None
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "provider_ids": dict(self.provider_ids),
            "name": self.name,
            "production_year": self.production_year,
            "image_url": self.image_url,
        }


class MetadataMapper:
    """Builds MetadataRecord and SearchResult values from subjects."""

    def __init__(
        self,
        classifier: Optional[RoleClassifier] = None,
        home_page_url: str = DEFAULT_HOME_PAGE_URL,
    ):
        self.classifier = classifier or RoleClassifier()
        self.home_page_url = home_page_url

    @staticmethod
    def _provider_ids(sid: str, imdb: Optional[str] = None) -> dict[str, str]:
        ids = {PROVIDER_ID: sid}
        if imdb:
            ids[IMDB_PROVIDER_ID] = imdb
        return ids

    def to_person(self, celebrity: Celebrity) -> PersonInfo:
        return PersonInfo(
            name=celebrity.name,
            type=self.classifier.classify(celebrity.role),
            role=celebrity.role,
            image_url=celebrity.img or None,
            provider_ids={PROVIDER_ID: celebrity.id},
        )

    def to_metadata_record(self, subject: Subject) -> MetadataRecord:
        """
        Map a resolved (and usually enriched) subject.

        Args:
            subject: Subject from a detail lookup

        Returns:
            MetadataRecord with people in upstream order
        """
        return MetadataRecord(
            provider_ids=self._provider_ids(subject.sid, subject.imdb),
            name=subject.name,
            original_title=subject.subname or subject.original_name or None,
            overview=subject.intro or None,
            community_rating=subject.rating,
            production_year=subject.year,
            premiere_date=subject.screen_time,
            image_url=subject.img or None,
            home_page_url=self.home_page_url,
            genres=subject.genres,
            production_locations=subject.countries,
            people=[self.to_person(c) for c in subject.celebrities or []],
        )

    def to_search_result(self, subject: Subject) -> SearchResult:
        """Map a search candidate without fetching anything else."""
        return SearchResult(
            provider_ids=self._provider_ids(subject.sid),
            name=subject.name,
            production_year=subject.year,
            image_url=subject.img or None,
        )
