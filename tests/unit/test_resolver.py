"""
Unit tests for the subject resolver state machine.
"""

from unittest.mock import AsyncMock

import pytest

from opendouban.identification.api_client import TransportError
from opendouban.identification.models import Subject
from opendouban.identification.query_normalizer import QueryNormalizer
from opendouban.identification.resolver import (
    MovieQuery,
    ResolutionState,
    SubjectResolver,
)


pytestmark = pytest.mark.asyncio


def _subject(sid: str, name: str = "", year: int = None) -> Subject:
    return Subject(sid=sid, name=name, year=year)


@pytest.fixture
def mock_client():
    """API client double with async lookups."""
    client = AsyncMock()
    client.get_by_sid.side_effect = lambda sid: _subject(sid, name=f"detail-{sid}")
    client.partial_search.return_value = []
    return client


@pytest.fixture
def resolver(mock_client):
    return SubjectResolver(mock_client, QueryNormalizer(r"\(\d{4}\)$"))


class TestStartTransitions:

    async def test_sid_goes_straight_to_lookup(self, resolver, mock_client):
        resolution = await resolver.resolve(MovieQuery(sid="1295038", title="ignored (2001)"))

        assert resolution.state == ResolutionState.RESOLVED
        assert resolution.subject.sid == "1295038"
        assert resolution.queried_by_id
        mock_client.get_by_sid.assert_awaited_once_with("1295038")
        mock_client.partial_search.assert_not_called()
        assert resolution.normalized_title is None

    async def test_nothing_to_go_on_is_not_found(self, resolver, mock_client):
        resolution = await resolver.resolve(MovieQuery())

        assert resolution.state == ResolutionState.NOT_FOUND
        assert not resolution.found
        mock_client.get_by_sid.assert_not_called()
        mock_client.partial_search.assert_not_called()

    async def test_empty_strings_count_as_missing(self, resolver):
        resolution = await resolver.resolve(MovieQuery(sid="", title=""))

        assert resolution.state == ResolutionState.NOT_FOUND


class TestSearchByName:

    async def test_title_is_normalized_before_search(self, resolver, mock_client):
        await resolver.resolve(MovieQuery(title="Harry Potter and the Sorcerer's Stone (2001)"))

        mock_client.partial_search.assert_awaited_once_with("Harry Potter and the Sorcerer's Stone ")

    async def test_empty_candidates_is_not_found(self, resolver, mock_client):
        mock_client.partial_search.return_value = []

        resolution = await resolver.resolve(MovieQuery(title="Nothing Like This"))

        assert resolution.state == ResolutionState.NOT_FOUND
        assert resolution.subject is None
        mock_client.get_by_sid.assert_not_called()

    async def test_first_candidate_wins(self, resolver, mock_client):
        mock_client.partial_search.return_value = [
            _subject("1", "Heat", 1995),
            _subject("2", "Heat", 1986),
        ]

        resolution = await resolver.resolve(MovieQuery(title="Heat"))

        assert resolution.state == ResolutionState.RESOLVED
        assert resolution.sid == "1"
        assert resolution.subject.name == "detail-1"
        assert not resolution.queried_by_id
        mock_client.get_by_sid.assert_awaited_once_with("1")

    async def test_reordering_changes_selection(self, resolver, mock_client):
        mock_client.partial_search.return_value = [
            _subject("2", "Heat", 1986),
            _subject("1", "Heat", 1995),
        ]

        resolution = await resolver.resolve(MovieQuery(title="Heat"))

        assert resolution.sid == "2"
        assert len(resolution.candidates) == 2

    async def test_search_failure_propagates(self, resolver, mock_client):
        mock_client.partial_search.side_effect = TransportError("down", status_code=503)

        with pytest.raises(TransportError):
            await resolver.resolve(MovieQuery(title="Heat"))

        mock_client.get_by_sid.assert_not_called()

    async def test_lookup_failure_propagates(self, resolver, mock_client):
        mock_client.partial_search.return_value = [_subject("1")]
        mock_client.get_by_sid.side_effect = TransportError("gone", status_code=404)

        with pytest.raises(TransportError):
            await resolver.resolve(MovieQuery(title="Heat"))


class TestDefaults:

    async def test_without_normalizer_title_is_searched_as_is(self, mock_client):
        resolver = SubjectResolver(mock_client)

        await resolver.resolve(MovieQuery(title="Heat (1995)"))

        mock_client.partial_search.assert_awaited_once_with("Heat (1995)")
