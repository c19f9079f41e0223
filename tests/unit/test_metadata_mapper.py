"""
Unit tests for metadata and search result mapping.
"""

from datetime import date

import pytest

from opendouban.identification.celebrity_enricher import RoleKind
from opendouban.identification.metadata_mapper import (
    IMDB_PROVIDER_ID,
    PROVIDER_ID,
    MetadataMapper,
    MetadataResult,
)
from opendouban.identification.models import Celebrity, Subject


@pytest.fixture
def mapper():
    return MetadataMapper()


@pytest.fixture
def enriched_subject(harry_potter_subject, harry_potter_celebrities) -> Subject:
    subject = Subject.model_validate(harry_potter_subject)
    celebrities = [Celebrity.model_validate(c) for c in harry_potter_celebrities]
    return subject.model_copy(update={"celebrities": celebrities})


class TestToMetadataRecord:

    def test_copies_display_fields(self, mapper, enriched_subject):
        record = mapper.to_metadata_record(enriched_subject)

        assert record.sid == "1295038"
        assert record.name == "哈利·波特与魔法石"
        assert record.original_title.startswith("哈利波特1")
        assert record.overview == "哈利·波特一岁时父母被伏地魔杀害。"
        assert record.community_rating == pytest.approx(9.1)
        assert record.production_year == 2001
        assert record.premiere_date == date(2002, 1, 26)
        assert record.home_page_url == "https://www.douban.com"
        assert record.genres == ["奇幻", "冒险"]
        assert record.production_locations == ["美国", "英国"]

    def test_imdb_attached_when_present(self, mapper, enriched_subject):
        record = mapper.to_metadata_record(enriched_subject)

        assert record.provider_ids == {PROVIDER_ID: "1295038", IMDB_PROVIDER_ID: "tt0241527"}

    def test_imdb_omitted_when_empty(self, mapper):
        record = mapper.to_metadata_record(Subject(sid="1", imdb=""))

        assert IMDB_PROVIDER_ID not in record.provider_ids
        assert record.imdb is None

    def test_people_keep_upstream_order(self, mapper, enriched_subject):
        record = mapper.to_metadata_record(enriched_subject)

        assert [(p.name, p.type, p.role) for p in record.people] == [
            ("克里斯·哥伦布", RoleKind.DIRECTOR, "导演"),
            ("丹尼尔·雷德克里夫", RoleKind.ACTOR, "演员"),
            ("艾玛·沃森", RoleKind.ACTOR, "演员"),
            ("约翰·威廉姆斯", "配乐", "配乐"),
        ]
        assert record.people[0].provider_ids == {PROVIDER_ID: "1027182"}
        assert record.people[0].image_url == "https://img.test/c1.jpg"
        assert record.people[3].image_url is None

    def test_unenriched_subject_has_no_people(self, mapper):
        record = mapper.to_metadata_record(Subject(sid="1", name="Heat"))

        assert record.people == []

    def test_original_title_falls_back_to_original_name(self, mapper):
        record = mapper.to_metadata_record(Subject(sid="1", original_name="Heat"))

        assert record.original_title == "Heat"

    def test_to_dict(self, mapper, enriched_subject):
        data = mapper.to_metadata_record(enriched_subject).to_dict()

        assert data["premiere_date"] == "2002-01-26"
        assert data["people"][0]["type"] == "Director"
        assert data["people"][3]["type"] == "配乐"


class TestToSearchResult:

    def test_lightweight_fields_only(self, mapper, harry_potter_subject):
        result = mapper.to_search_result(Subject.model_validate(harry_potter_subject))

        assert result.provider_ids == {PROVIDER_ID: "1295038"}
        assert result.name == "哈利·波特与魔法石"
        assert result.production_year == 2001
        assert result.image_url.endswith("p2614949805.webp")


class TestMetadataResult:

    def test_empty_result(self):
        result = MetadataResult()

        assert not result.has_metadata
        assert result.to_dict() == {"has_metadata": False, "queried_by_id": False, "record": None}
