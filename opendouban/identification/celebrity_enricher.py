"""
Celebrity Enricher

Attaches cast and crew to a resolved subject and classifies each person's
role.
"""

from enum import Enum
from typing import Mapping, Optional, Union

from loguru import logger

from opendouban.identification.api_client import OddbApiClient
from opendouban.identification.models import Celebrity, Subject


class RoleKind(str, Enum):
    """Person kinds understood by the host library."""
    DIRECTOR = "Director"
    ACTOR = "Actor"


# Upstream role labels -> person kind
DEFAULT_ROLE_TABLE: dict[str, RoleKind] = {
    "导演": RoleKind.DIRECTOR,
    "演员": RoleKind.ACTOR,
}


def build_role_table(labels: Optional[Mapping[str, Union[str, RoleKind]]] = None) -> dict[str, RoleKind]:
    """
    Build a role table from ``label -> kind`` pairs.

    Kinds may be given by value (``"Director"``) or name (``"DIRECTOR"``).
    Entries override the defaults.

    Raises:
        ValueError: For an unknown kind.
    """
    table = dict(DEFAULT_ROLE_TABLE)
    for label, kind in (labels or {}).items():
        if isinstance(kind, RoleKind):
            table[label] = kind
            continue
        try:
            table[label] = RoleKind(kind)
        except ValueError:
            try:
                table[label] = RoleKind[kind.upper()]
            except KeyError:
                raise ValueError(f"Unknown role kind {kind!r} for label {label!r}") from None
    return table


class RoleClassifier:
    """Table lookup from upstream role label to person kind."""

    def __init__(self, table: Optional[Mapping[str, RoleKind]] = None):
        self.table = dict(DEFAULT_ROLE_TABLE if table is None else table)

    def classify(self, label: Optional[str]) -> Union[RoleKind, str]:
        """
        Classify a role label.

        Returns:
            The mapped RoleKind, or the label itself when it is not in the
            table
        """
        if label is None:
            return ""
        return self.table.get(label.strip(), label)


class CelebrityEnricher:
    """Fetches cast and crew for subjects."""

    def __init__(self, client: OddbApiClient, classifier: Optional[RoleClassifier] = None):
        self.client = client
        self.classifier = classifier or RoleClassifier()

    async def enrich(self, subject: Subject) -> Subject:
        """
        Return a copy of ``subject`` with celebrities attached.

        A missing cast (soft miss upstream) yields an empty list.
        """
        celebrities = await self.client.get_celebrities_by_sid(subject.sid)
        if not celebrities:
            logger.info(f"No celebrities for sid {subject.sid}")

        return subject.model_copy(update={"celebrities": list(celebrities or [])})

    async def fetch_celebrity(self, cid: str) -> Optional[Celebrity]:
        return await self.client.get_celebrity_by_cid(cid)

    def classify(self, celebrity: Celebrity) -> Union[RoleKind, str]:
        return self.classifier.classify(celebrity.role)
