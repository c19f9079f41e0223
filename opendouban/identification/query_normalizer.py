"""
Query Normalizer

Strips configured noise (e.g. a trailing "(2001)") from free-text titles
before they are sent to search.
"""

import re
from typing import Optional, Pattern, Union

from loguru import logger


def compile_noise_pattern(pattern: Optional[Union[str, Pattern[str]]]) -> Optional[Pattern[str]]:
    """
    Compile a noise pattern.

    Raises:
        ValueError: If the pattern is not a valid regular expression.
    """
    if pattern is None or pattern == "":
        return None
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid noise pattern {pattern!r}: {e}") from e


def normalize_title(title: str, pattern: Optional[Union[str, Pattern[str]]]) -> str:
    """Remove every match of ``pattern`` from ``title``."""
    compiled = compile_noise_pattern(pattern)
    if compiled is None or not title:
        return title
    return compiled.sub("", title)


class QueryNormalizer:
    """
    Title cleanup for search-by-name.

    The pattern is compiled once and never changes afterwards, so a single
    normalizer can serve concurrent requests.

    Usage:
        normalizer = QueryNormalizer(r"\\(\\d{4}\\)$")
        normalizer.normalize("Amelie (2001)")  # "Amelie "
    """

    def __init__(self, noise_pattern: Optional[Union[str, Pattern[str]]] = None):
        """
        Args:
            noise_pattern: Regular expression whose matches are removed
        """
        self._pattern = compile_noise_pattern(noise_pattern)

    @property
    def pattern(self) -> Optional[str]:
        return self._pattern.pattern if self._pattern else None

    def normalize(self, title: str) -> str:
        """
        Strip noise from a title.

        Args:
            title: Raw title from the host library

        Returns:
            Title with all pattern matches removed; unchanged when no
            pattern is configured
        """
        if self._pattern is None or not title:
            return title

        normalized = self._pattern.sub("", title)
        if normalized != title:
            logger.debug(f"Normalized title '{title}' -> '{normalized}'")
        return normalized
