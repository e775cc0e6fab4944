"""Closeness metrics for ranking library names against a query term.

A rank function takes ``(candidate_name, literal)`` and returns a non-negative
integer where lower means closer. It must return 0 for identical strings and
be deterministic, since ties are broken by input order alone.
"""

from __future__ import annotations

from collections.abc import Callable


RankFunction = Callable[[str, str], int]


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Case-sensitive. Uses two rolling rows, so memory is proportional to the
    shorter string.

    Examples:
        >>> levenshtein_distance("jquery", "jquery-ui")
        3
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("", "abc")
        3
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m = len(s1)
    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j, c2 in enumerate(s2, start=1):
        curr_row[0] = j
        for i, c1 in enumerate(s1, start=1):
            cost = 0 if c1 == c2 else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


DEFAULT_RANK: RankFunction = levenshtein_distance
