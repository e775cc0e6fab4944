"""Name criteria - how a raw ``name`` query term is interpreted.

A name term is one of three kinds:

- ``LITERAL``: a bare name, compared for equality and ranked by closeness.
- ``ALTERNATION``: a comma-separated list treated as a brace group, so
  ``jquery,bootstrap`` matches either name.
- ``GLOB``: a wildcard pattern such as ``jquery*``.

The pattern is compiled once when the criteria are built and reused for
every candidate.
"""

from __future__ import annotations

from enum import Enum
import fnmatch
import logging
import re

from pydantic import BaseModel, ConfigDict, model_validator


logger = logging.getLogger(__name__)

ALTERNATION_SEPARATOR = ","
WILDCARD = "*"

# Compiles fine and can never match, used when a term cannot be compiled.
NEVER_MATCHES = re.compile(r"(?!)")


class MatchKind(str, Enum):
    """Tagged variant for the three name term shapes."""

    LITERAL = "literal"
    ALTERNATION = "alternation"
    GLOB = "glob"


class NameCriteria(BaseModel):
    """Value object for a resolved name term."""

    model_config = ConfigDict(frozen=True)

    value: str
    kind: MatchKind = MatchKind.LITERAL
    pattern: re.Pattern[str] | None = None

    @model_validator(mode="after")
    def _check_pattern_matches_kind(self) -> NameCriteria:
        if self.kind is MatchKind.LITERAL and self.pattern is not None:
            raise ValueError("literal criteria cannot carry a pattern")
        if self.kind is not MatchKind.LITERAL and self.pattern is None:
            raise ValueError(f"{self.kind.value} criteria require a compiled pattern")
        return self

    @property
    def is_literal(self) -> bool:
        return self.kind is MatchKind.LITERAL

    def matches(self, name: str) -> bool:
        """Return True when ``name`` satisfies the criteria.

        Literal criteria match by equality; pattern criteria require the
        whole name to match.
        """
        if self.pattern is None:
            return name == self.value
        return self.pattern.match(name) is not None

    @classmethod
    def literal(cls, value: str) -> NameCriteria:
        return cls(value=value)


def _compile_globs(globs: list[str]) -> re.Pattern[str]:
    # fnmatch.translate anchors each alternative at the end; re.match anchors the start.
    source = "|".join(f"(?:{fnmatch.translate(glob)})" for glob in globs)
    try:
        return re.compile(source)
    except re.error as exc:
        logger.debug("Name pattern %r failed to compile: %s", globs, exc)
        return NEVER_MATCHES


def resolve_name_criteria(name_term: str | None) -> NameCriteria | None:
    """Turn a raw ``name`` query term into :class:`NameCriteria`.

    Args:
        name_term: The ``name`` value from the query, if any.

    Returns:
        ``None`` when no name filtering was requested, otherwise the criteria.
        Commas take precedence over wildcards: ``a*,b`` is an alternation
        whose first branch happens to be a glob.
    """
    if not name_term:
        return None

    if ALTERNATION_SEPARATOR in name_term:
        alternatives = name_term.split(ALTERNATION_SEPARATOR)
        return NameCriteria(value=name_term, kind=MatchKind.ALTERNATION, pattern=_compile_globs(alternatives))

    if WILDCARD in name_term:
        return NameCriteria(value=name_term, kind=MatchKind.GLOB, pattern=_compile_globs([name_term]))

    return NameCriteria.literal(name_term)
