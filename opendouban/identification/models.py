"""
Upstream Records

Subject, Celebrity and Photo payloads as returned by the Open Douban API.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


SCREEN_DATE_FORMAT = "%Y-%m-%d"


def parse_screen_time(screen: Optional[str]) -> Optional[date]:
    """
    Parse the first release date out of an upstream ``screen`` string.

    The string holds slash-separated ``date(location)`` segments, e.g.
    ``"2001-11-16(USA) / 2001-11-04(UK)"``. Only the leading segment is used.

    Returns:
        The parsed date, or None when the segment is missing or malformed.
    """
    if not screen:
        return None

    first = screen.split("/")[0]
    value = first.split("(")[0].strip()
    try:
        return datetime.strptime(value, SCREEN_DATE_FORMAT).date()
    except ValueError:
        return None


def split_field(value: Optional[str]) -> list[str]:
    """Split a slash-separated upstream field like ``"奇幻 / 冒险"``."""
    if not value:
        return []
    return [part.strip() for part in value.split("/") if part.strip()]


class ApiModel(BaseModel):
    """Base for upstream payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Celebrity(ApiModel):
    """A cast or crew member."""

    id: str
    name: str = ""
    img: str = ""
    role: str = ""
    intro: str = ""
    gender: str = ""
    constellation: str = ""
    birthdate: str = ""
    birthplace: str = ""
    nickname: str = ""
    imdb: str = ""
    site: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Ids sometimes arrive as numbers
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator(
        "name", "img", "role", "intro", "gender", "constellation",
        "birthdate", "birthplace", "nickname", "imdb", "site",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Photo(ApiModel):
    """A still or poster with three size variants."""

    id: str
    small: str = ""
    medium: str = ""
    large: str = ""
    size: str = ""
    width: int = 0
    height: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class Subject(ApiModel):
    """
    A movie or show record, identified by ``sid``.

    ``celebrities`` stays None until the subject is enriched; after that it is
    always a list.
    """

    sid: str
    name: str = ""
    original_name: str = ""
    subname: str = ""
    rating: Optional[float] = None
    img: str = ""
    year: Optional[int] = None
    director: str = ""
    writer: str = ""
    actor: str = ""
    genre: str = ""
    site: str = ""
    country: str = ""
    language: str = ""
    screen: str = ""
    duration: str = ""
    imdb: str = ""
    intro: str = ""

    celebrities: Optional[list[Celebrity]] = None

    @field_validator("sid", mode="before")
    @classmethod
    def _coerce_sid(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("rating", "year", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Unrated or undated subjects come back as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "name", "original_name", "subname", "img", "director", "writer",
        "actor", "genre", "site", "country", "language", "screen",
        "duration", "imdb", "intro",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def screen_time(self) -> Optional[date]:
        """First release date, or None when it cannot be parsed."""
        return parse_screen_time(self.screen)

    @property
    def genres(self) -> list[str]:
        return split_field(self.genre)

    @property
    def countries(self) -> list[str]:
        return split_field(self.country)

    @property
    def is_enriched(self) -> bool:
        return self.celebrities is not None
