"""Collection and ETag store adapters.

The request dispatcher only needs two things from storage: a way to list the
candidate libraries matching a set of filters, and the ETags recorded for a
collection. ``InMemoryCollection`` and ``InMemoryEtagStore`` implement both
over data already loaded into memory (for instance by :func:`load_database`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
import logging
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, ValidationError

from catalog_api.domain.model import INTERNAL_ID_FIELD, Library


logger = logging.getLogger(__name__)


class EtagEntry(BaseModel):
    """Cache validator recorded for one path of a collection."""

    model_config = ConfigDict(frozen=True)

    path: str
    etag: str


class AbstractCollection(ABC):
    """Read-only view over a named collection of libraries."""

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def all(self) -> list[Library]:
        """Every library in storage order."""
        raise NotImplementedError

    @abstractmethod
    def find(self, filters: Mapping[str, Any]) -> list[Library]:
        """Libraries matching every filter, in storage order."""
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.all())


class AbstractEtagStore(ABC):
    @abstractmethod
    def etags_for(self, collection_name: str) -> list[EtagEntry]:
        """Return the ETags recorded for ``collection_name`` (empty when unknown)."""
        raise NotImplementedError

    def find_etag(self, collection_name: str, path: str) -> str | None:
        for entry in self.etags_for(collection_name):
            if entry.path == path:
                return entry.etag
        return None


def _value_matches(actual: Any, expected: Any) -> bool:
    if actual == expected:
        return True
    if actual is None or isinstance(expected, (list, dict)):
        return False
    # Query strings arrive untyped; scalars compare by their JSON text.
    if isinstance(expected, str) and isinstance(actual, (bool, int, float)):
        return orjson.dumps(actual).decode() == expected
    return str(actual) == str(expected)


def _attribute_matches(actual: Any, expected: Any) -> bool:
    if isinstance(actual, list):
        return any(_value_matches(item, expected) for item in actual)
    return _value_matches(actual, expected)


class InMemoryCollection(AbstractCollection):
    """Collection backed by a list of validated :class:`Library` records."""

    def __init__(self, name: str, libraries: Iterable[Library] = ()):
        self._name = name
        self._libraries: list[Library] = list(libraries)

    @property
    def name(self) -> str:
        return self._name

    def all(self) -> list[Library]:
        return list(self._libraries)

    def find(self, filters: Mapping[str, Any]) -> list[Library]:
        if not filters:
            return self.all()
        return [
            library
            for library in self._libraries
            if all(_attribute_matches(library.get(key), value) for key, value in filters.items())
        ]

    def add(self, library: Library) -> None:
        """Append a library, assigning the next storage id when it has none."""
        if library.internal_id is None:
            library = library.model_copy(update={"internal_id": len(self._libraries) + 1})
        self._libraries.append(library)

    def __len__(self) -> int:
        return len(self._libraries)

    def __repr__(self) -> str:
        return f"InMemoryCollection(name={self._name!r}, size={len(self._libraries)})"


class InMemoryEtagStore(AbstractEtagStore):
    """ETag store keyed by collection name."""

    def __init__(self, etags: Mapping[str, Iterable[EtagEntry]] | None = None):
        self._etags: dict[str, list[EtagEntry]] = {name: list(entries) for name, entries in (etags or {}).items()}

    def etags_for(self, collection_name: str) -> list[EtagEntry]:
        return list(self._etags.get(collection_name, []))

    def set_etags(self, collection_name: str, entries: Iterable[EtagEntry]) -> None:
        self._etags[collection_name] = list(entries)


def _library_from_document(document: Mapping[str, Any], position: int) -> Library:
    payload = dict(document)
    payload.setdefault(INTERNAL_ID_FIELD, position)
    return Library.model_validate(payload)


class CatalogDatabase:
    """Collections and ETags loaded from one database snapshot."""

    def __init__(self, collections: Mapping[str, InMemoryCollection], etag_store: InMemoryEtagStore):
        self.collections: dict[str, InMemoryCollection] = dict(collections)
        self.etag_store = etag_store

    def get_collection(self, name: str | None = None) -> InMemoryCollection:
        """Return the named collection, or the first one when ``name`` is None.

        Raises:
            KeyError: If the collection does not exist.
        """
        if name is None:
            if not self.collections:
                raise KeyError("database holds no library collections")
            return next(iter(self.collections.values()))
        return self.collections[name]


def _object_list(value: Any, where: str) -> list[dict[str, Any]]:
    """Return ``value`` as a list of JSON objects; a missing list is empty."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ValueError(f"{where} must be a list of objects")
    return value


def _etag_entries(documents: Iterable[Mapping[str, Any]], where: str) -> dict[str, list[EtagEntry]]:
    etags: dict[str, list[EtagEntry]] = {}
    for document in documents:
        cdn = str(document.get("cdn", ""))
        entries = _object_list(document.get("etags"), f"{where} etags for {cdn!r}")
        etags.setdefault(cdn, []).extend(EtagEntry.model_validate(entry) for entry in entries)
    return etags


def load_database(path: Path, etags_collection: str = "etags") -> CatalogDatabase:
    """Load a database snapshot from a JSON file.

    The file holds named collections, the same layout an embedded document
    store serializes to::

        {
            "collections": [
                {"name": "jsdelivr", "data": [{"name": "jquery", "assets": [...]}]},
                {"name": "etags", "data": [{"cdn": "jsdelivr", "etags": [{"path": "jquery", "etag": "abc"}]}]}
            ]
        }

    The collection named ``etags_collection`` feeds the ETag store; every
    other collection holds libraries. Libraries without a ``$loki`` id are
    numbered from 1 in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the file is not valid JSON, does not have the layout
            above, or a record fails validation.
    """
    raw = path.read_bytes()
    try:
        document = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"Database {path} is not valid JSON: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("collections"), list):
        raise ValueError(f"Database {path} must be an object with a 'collections' list")

    collections: dict[str, InMemoryCollection] = {}
    etags: dict[str, list[EtagEntry]] = {}
    try:
        for entry in document["collections"]:
            if not isinstance(entry, dict):
                raise ValueError(f"Database {path} has a collection that is not an object: {entry!r}")
            name = str(entry.get("name") or "")
            data = _object_list(entry.get("data"), f"Database {path} collection {name!r} data")
            if name == etags_collection:
                etags = _etag_entries(data, f"Database {path}")
                continue
            libraries = [_library_from_document(item, position) for position, item in enumerate(data, start=1)]
            collections[name] = InMemoryCollection(name, libraries)
    except ValidationError as exc:
        raise ValueError(f"Database {path} has invalid records: {exc}") from exc

    logger.info(
        "Loaded database %s: %d collections, %d etag sets",
        path,
        len(collections),
        len(etags),
    )
    return CatalogDatabase(collections, InMemoryEtagStore(etags))
