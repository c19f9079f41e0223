"""
Subject Resolver

Turns a movie query (an id, a title, or neither) into a single subject.

    START ──id──────────────► DIRECT_LOOKUP ──► RESOLVED
      │                           ▲
      ├──title──► SEARCH_BY_NAME ─┘ (first candidate)
      │                │
      └──neither───────┴──no candidates──► NOT_FOUND

The first search candidate always wins. Matching accuracy is whatever the
upstream search ranking gives; there is no local scoring.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from loguru import logger

from opendouban.identification.api_client import OddbApiClient
from opendouban.identification.models import Subject
from opendouban.identification.query_normalizer import QueryNormalizer


@dataclass(frozen=True)
class MovieQuery:
    """What the host knows about an item it wants metadata for."""
    sid: Optional[str] = None
    title: Optional[str] = None

    @property
    def has_sid(self) -> bool:
        return bool(self.sid)

    @property
    def has_title(self) -> bool:
        return bool(self.title)


class ResolutionState(str, Enum):
    START = "start"
    DIRECT_LOOKUP = "direct_lookup"
    SEARCH_BY_NAME = "search_by_name"
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"


TERMINAL_STATES = frozenset({ResolutionState.RESOLVED, ResolutionState.NOT_FOUND})


@dataclass
class Resolution:
    """Progress and outcome of resolving one query."""

    query: MovieQuery
    state: ResolutionState = ResolutionState.START

    # Id handed to the detail lookup
    sid: Optional[str] = None

    # Search-by-name bookkeeping
    normalized_title: Optional[str] = None
    candidates: list[Subject] = field(default_factory=list)

    subject: Optional[Subject] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def found(self) -> bool:
        return self.state == ResolutionState.RESOLVED and self.subject is not None

    @property
    def queried_by_id(self) -> bool:
        """True when the lookup used the query's own id rather than a search hit."""
        return self.query.has_sid


class SubjectResolver:
    """
    Resolves queries to subjects.

    Failures from primary endpoints (search, detail lookup) propagate and end
    the resolution. An empty search result is a NOT_FOUND outcome, not an
    error.
    """

    def __init__(self, client: OddbApiClient, normalizer: Optional[QueryNormalizer] = None):
        self.client = client
        self.normalizer = normalizer or QueryNormalizer()

        self._handlers: dict[ResolutionState, Callable[[Resolution], Awaitable[None]]] = {
            ResolutionState.START: self._start,
            ResolutionState.DIRECT_LOOKUP: self._direct_lookup,
            ResolutionState.SEARCH_BY_NAME: self._search_by_name,
        }

    async def resolve(self, query: MovieQuery) -> Resolution:
        """
        Run the state machine to a terminal state.

        Args:
            query: Id and/or title to resolve

        Returns:
            Resolution in RESOLVED or NOT_FOUND state
        """
        resolution = Resolution(query=query)

        while not resolution.is_terminal:
            handler = self._handlers[resolution.state]
            await handler(resolution)

        return resolution

    async def _start(self, resolution: Resolution) -> None:
        query = resolution.query

        if query.has_sid:
            logger.info(f"Resolving by sid: \"{query.sid}\"")
            resolution.sid = query.sid
            resolution.state = ResolutionState.DIRECT_LOOKUP
        elif query.has_title:
            logger.info(f"Resolving by name: \"{query.title}\"")
            resolution.state = ResolutionState.SEARCH_BY_NAME
        else:
            logger.info("Query has neither sid nor title")
            resolution.state = ResolutionState.NOT_FOUND

    async def _direct_lookup(self, resolution: Resolution) -> None:
        resolution.subject = await self.client.get_by_sid(resolution.sid)
        resolution.state = ResolutionState.RESOLVED

    async def _search_by_name(self, resolution: Resolution) -> None:
        resolution.normalized_title = self.normalizer.normalize(resolution.query.title)
        resolution.candidates = await self.client.partial_search(resolution.normalized_title)

        if not resolution.candidates:
            logger.info(f"No candidates for \"{resolution.normalized_title}\"")
            resolution.state = ResolutionState.NOT_FOUND
            return

        first = resolution.candidates[0]
        logger.info(
            f"Picked sid {first.sid} ({first.name}) out of {len(resolution.candidates)} candidate(s)"
        )
        resolution.sid = first.sid
        resolution.state = ResolutionState.DIRECT_LOOKUP
