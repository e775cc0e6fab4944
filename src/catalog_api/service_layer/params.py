"""Translate a request query into collection filters."""

from collections.abc import Mapping
from typing import Any


NAME_PARAM = "name"
VERSION_PARAM = "version"
FIELDS_PARAM = "fields"

# Keys with a meaning of their own; never forwarded as collection filters.
RESERVED_PARAMS = frozenset({NAME_PARAM, VERSION_PARAM, FIELDS_PARAM})


def build_action_params(query: Mapping[str, Any]) -> dict[str, Any]:
    """Return the filter parameters of ``query``.

    Reserved keys and empty values are dropped. An empty result means the
    whole collection is a candidate.
    """
    return {key: value for key, value in query.items() if key not in RESERVED_PARAMS and value not in (None, "")}


def has_param(query: Mapping[str, Any]) -> bool:
    """Check whether ``query`` names a library or filters the collection.

    ``version`` and ``fields`` only shape the response, so on their own they
    do not make a usable query.
    """
    return bool(query.get(NAME_PARAM)) or bool(build_action_params(query))
