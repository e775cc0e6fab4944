"""Name matching, scoring and candidate selection."""

from catalog_api.search.fuzzy import DEFAULT_RANK, RankFunction, levenshtein_distance
from catalog_api.search.scoring import EXACT, EXCLUDED, score_name_match
from catalog_api.search.selector import find_one_exact, find_one_loose, find_ranked


__all__ = [
    "DEFAULT_RANK",
    "EXACT",
    "EXCLUDED",
    "RankFunction",
    "find_one_exact",
    "find_one_loose",
    "find_ranked",
    "levenshtein_distance",
    "score_name_match",
]
