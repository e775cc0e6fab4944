"""Shape selected libraries into the public v2 response schema.

The formatter never touches the records it is given. Each record is dumped to
a fresh document and deep-copied before any field is rewritten, so a record
shared between concurrent requests cannot be observed half-formatted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import copy
from typing import Any, overload

from catalog_api.domain.model import INTERNAL_ID_FIELD, Library
from catalog_api.service_layer.params import FIELDS_PARAM


ASSETS_FIELD = "assets"
VERSION_KEY = "version"

DEFAULT_FIELDS: tuple[str, ...] = (
    "name",
    "mainfile",
    "lastversion",
    "description",
    "homepage",
    "github",
    "author",
    "versions",
    ASSETS_FIELD,
)


def select_version_files(library: Library, version: str) -> list[str] | None:
    """Return the files of ``library``'s asset for ``version``, if it has one."""
    asset = library.get_asset(version)
    if asset is None:
        return None
    return list(asset.files)


def parse_fields(fields: str | None) -> list[str]:
    """Split a comma-separated ``fields`` parameter, dropping blanks."""
    if not fields:
        return []
    return [field.strip() for field in fields.split(",") if field.strip()]


def assets_by_version(assets: Iterable[Mapping[str, Any]]) -> dict[str, dict[str, Any]]:
    """Key each asset document by its version, removing ``version`` from the value."""
    restructured: dict[str, dict[str, Any]] = {}
    for asset in assets:
        payload = dict(asset)
        version = payload.pop(VERSION_KEY)
        restructured[version] = payload
    return restructured


class ResponseFormatter:
    """Projects and restructures libraries for a response.

    Args:
        default_fields: Fields returned when the query does not list any.
        internal_id_field: Storage identifier removed from every record, in
            addition to the model's own ``$loki`` id.
    """

    def __init__(
        self,
        default_fields: Sequence[str] = DEFAULT_FIELDS,
        internal_id_field: str = INTERNAL_ID_FIELD,
    ):
        if not default_fields:
            raise ValueError("default_fields must name at least one field")
        self.default_fields: tuple[str, ...] = tuple(default_fields)
        self.internal_id_field = internal_id_field
        self._hidden_fields = frozenset({INTERNAL_ID_FIELD, internal_id_field})

    @overload
    def format(self, query: Mapping[str, Any], selection: Library) -> dict[str, Any]: ...

    @overload
    def format(self, query: Mapping[str, Any], selection: Sequence[Library]) -> list[dict[str, Any]]: ...

    def format(
        self,
        query: Mapping[str, Any],
        selection: Library | Sequence[Library],
    ) -> dict[str, Any] | list[dict[str, Any]]:
        """Format one library or a sequence of libraries.

        Sequences never carry asset detail; a single library carries its
        assets, keyed by version, only when ``assets`` is listed in
        ``query["fields"]``.
        """
        requested = parse_fields(query.get(FIELDS_PARAM))
        fields = requested or list(self.default_fields)

        if isinstance(selection, Library):
            return self._format_record(selection, fields, include_assets=ASSETS_FIELD in requested)

        return [self._format_record(library, fields, include_assets=False) for library in selection]

    def _format_record(self, library: Library, fields: list[str], *, include_assets: bool) -> dict[str, Any]:
        document = copy.deepcopy(library.to_document())

        if ASSETS_FIELD in document:
            if include_assets and document[ASSETS_FIELD] is not None:
                document[ASSETS_FIELD] = assets_by_version(document[ASSETS_FIELD])
            else:
                del document[ASSETS_FIELD]

        for hidden in self._hidden_fields:
            document.pop(hidden, None)
        return self._select_fields(document, fields)

    def _select_fields(self, document: dict[str, Any], fields: list[str]) -> dict[str, Any]:
        return {field: document[field] for field in fields if field in document and field not in self._hidden_fields}
