"""Adapters layer - storage collaborators behind abstract interfaces."""

from .collection import (
    AbstractCollection,
    AbstractEtagStore,
    CatalogDatabase,
    EtagEntry,
    InMemoryCollection,
    InMemoryEtagStore,
    load_database,
)


__all__ = [
    "AbstractCollection",
    "AbstractEtagStore",
    "CatalogDatabase",
    "EtagEntry",
    "InMemoryCollection",
    "InMemoryEtagStore",
    "load_database",
]
