"""Domain model - catalog records and their versioned assets.

Records arrive from the storage collaborator as loosely shaped documents. The
models below validate the handful of attributes the matching and formatting
code depends on (``name``, ``assets[].version``, ``assets[].files``) and keep
every other attribute as-is so the response schema can project it later.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


INTERNAL_ID_FIELD = "$loki"


class Asset(BaseModel):
    """One version's file manifest for a library."""

    model_config = ConfigDict(extra="allow")

    version: str
    files: list[str] = Field(default_factory=list)


class Library(BaseModel):
    """Aggregate root for a catalog entry.

    ``internal_id`` is the storage identifier assigned by the embedded
    database. It never leaves the service: the formatter strips it from every
    response.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    assets: list[Asset] | None = None
    internal_id: int | None = Field(default=None, alias=INTERNAL_ID_FIELD)

    @model_validator(mode="after")
    def _check_unique_versions(self) -> "Library":
        # Restructured assets are keyed by version, so two assets sharing a
        # version would collapse into one key.
        if self.assets:
            seen: set[str] = set()
            for asset in self.assets:
                if asset.version in seen:
                    raise ValueError(f"Duplicate asset version {asset.version!r} for library {self.name!r}")
                seen.add(asset.version)
        return self

    def get_asset(self, version: str) -> Asset | None:
        """Return the asset whose version equals ``version`` exactly."""
        for asset in self.assets or []:
            if asset.version == version:
                return asset
        return None

    def get(self, attribute: str, default: Any = None) -> Any:
        """Look up a declared or extra attribute by its public (aliased) name."""
        if attribute == INTERNAL_ID_FIELD:
            return self.internal_id
        if attribute in type(self).model_fields:
            return getattr(self, attribute)
        return (self.model_extra or {}).get(attribute, default)

    def to_document(self) -> dict[str, Any]:
        """Dump the record the way storage holds it (aliases, no unset defaults)."""
        return self.model_dump(by_alias=True, exclude_unset=True)
