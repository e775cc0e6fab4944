"""Candidate selection for the ``find`` and ``findOne`` actions."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import math

from catalog_api.domain.criteria import NameCriteria
from catalog_api.domain.model import Library
from catalog_api.search.fuzzy import DEFAULT_RANK, RankFunction
from catalog_api.search.scoring import EXACT, EXCLUDED, score_name_match


logger = logging.getLogger(__name__)


def find_ranked(
    candidates: Sequence[Library],
    criteria: NameCriteria | None,
    rank: RankFunction = DEFAULT_RANK,
) -> list[Library]:
    """Return candidates ordered by ascending score, excluded ones dropped.

    Without criteria the candidates come back unranked in their storage
    order. ``list.sort`` is stable, so equal scores keep their input order.
    """
    if criteria is None:
        return list(candidates)

    scored: list[tuple[int, Library]] = []
    for library in candidates:
        score = score_name_match(library, criteria, rank)
        if score != EXCLUDED:
            scored.append((score, library))

    scored.sort(key=lambda pair: pair[0])
    logger.debug("Ranked %d of %d candidates for %r", len(scored), len(candidates), criteria.value)
    return [library for _, library in scored]


def find_one_exact(candidates: Sequence[Library], criteria: NameCriteria) -> Library | None:
    """Return the first candidate named exactly ``criteria.value``.

    Patterns are deliberately ignored: an exact lookup for ``a,b`` looks for a
    library literally called ``a,b``.
    """
    for library in candidates:
        if library.name == criteria.value:
            return library
    return None


def find_one_loose(
    candidates: Sequence[Library],
    criteria: NameCriteria,
    rank: RankFunction = DEFAULT_RANK,
) -> Library | None:
    """Return the best-scoring candidate, stopping at the first exact hit.

    Ties go to whichever candidate was seen first.
    """
    best: Library | None = None
    best_score: float = math.inf

    for library in candidates:
        score = score_name_match(library, criteria, rank)
        if score == EXCLUDED:
            continue
        if score < best_score:
            best, best_score = library, score
        if best_score == EXACT:
            break

    return best
