"""Score a single library against resolved name criteria."""

from __future__ import annotations

from catalog_api.domain.criteria import NameCriteria
from catalog_api.domain.model import Library
from catalog_api.search.fuzzy import DEFAULT_RANK, RankFunction


EXCLUDED = -1
EXACT = 0


def score_name_match(
    library: Library,
    criteria: NameCriteria,
    rank: RankFunction = DEFAULT_RANK,
) -> int:
    """Score ``library`` against ``criteria``; lower is better.

    Pattern criteria exclude names that do not match (``EXCLUDED``) and rank
    the rest against the raw term, so among several glob hits the one closest
    to what was typed comes first. Literal criteria never exclude: an equal
    name scores ``EXACT`` and everything else is ranked by closeness.
    """
    if criteria.pattern is not None:
        if not criteria.matches(library.name):
            return EXCLUDED
        return rank(library.name, criteria.value)

    if library.name == criteria.value:
        return EXACT
    return rank(library.name, criteria.value)
