"""Request dispatcher - the public entry point of the catalog API.

Routes a query to ``find`` or ``findOne``, converts every matching or
selection failure into an :class:`~catalog_api.domain.errors.ApiError`, and
hands the outcome to a Node-style ``callback(error, result)`` so transport
layers never have to catch anything.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from catalog_api.adapters.collection import AbstractCollection, AbstractEtagStore
from catalog_api.domain.criteria import resolve_name_criteria
from catalog_api.domain.errors import (
    ApiError,
    InvalidActionError,
    MissingQueryError,
    RecordNotFoundError,
    VersionNotFoundError,
)
from catalog_api.domain.model import Library
from catalog_api.observability.context import get_trace_context, set_trace_context, trace_context
from catalog_api.observability.metrics import CANDIDATES_SCANNED, REQUEST_COUNT, REQUEST_LATENCY, track_latency
from catalog_api.observability.tracing import create_span
from catalog_api.search.fuzzy import DEFAULT_RANK, RankFunction
from catalog_api.search.selector import find_one_exact, find_one_loose, find_ranked
from catalog_api.service_layer.formatter import ResponseFormatter, select_version_files
from catalog_api.service_layer.params import NAME_PARAM, VERSION_PARAM, build_action_params, has_param


if TYPE_CHECKING:
    from catalog_api.config import Settings


logger = logging.getLogger(__name__)


class Action(str, Enum):
    FIND = "find"
    FIND_ONE = "findOne"


class ApiResponse(BaseModel):
    """Successful dispatcher result: the payload plus response headers."""

    model_config = ConfigDict(frozen=True)

    data: Any
    headers: dict[str, str] = Field(default_factory=dict)


Callback = Callable[[ApiError | None, ApiResponse | None], None]


class RequestDispatcher:
    """Resolves catalog queries against a collection.

    Args:
        formatter: Response formatter; defaults to the v2 schema fields.
        etag_store: Source of ETags for exact-match responses. Without one,
            exact-match responses carry no headers.
        rank: Closeness metric used to order name matches.
    """

    def __init__(
        self,
        formatter: ResponseFormatter | None = None,
        etag_store: AbstractEtagStore | None = None,
        rank: RankFunction = DEFAULT_RANK,
    ):
        self.formatter = formatter or ResponseFormatter()
        self.etag_store = etag_store
        self.rank = rank

    @classmethod
    def from_settings(cls, settings: Settings, etag_store: AbstractEtagStore | None = None) -> RequestDispatcher:
        formatter = ResponseFormatter(
            default_fields=settings.get_default_fields(),
            internal_id_field=settings.internal_id_field,
        )
        return cls(formatter=formatter, etag_store=etag_store)

    def process_request(
        self,
        collection: AbstractCollection,
        query: Mapping[str, Any],
        action: str,
        exact_match: bool,
        callback: Callback,
    ) -> None:
        """Dispatch a request and report the outcome through ``callback``.

        ``callback`` receives ``(error, None)`` for any :class:`ApiError` and
        ``(None, response)`` otherwise.
        """
        try:
            response = self.dispatch(collection, query, action, exact_match)
        except ApiError as exc:
            callback(exc, None)
            return
        callback(None, response)

    def dispatch(
        self,
        collection: AbstractCollection,
        query: Mapping[str, Any],
        action: str,
        exact_match: bool,
    ) -> ApiResponse:
        """Dispatch a request, raising :class:`ApiError` on failure."""
        action_label = str(action.value if isinstance(action, Action) else action)
        attributes = {
            "catalog.collection": collection.name,
            "catalog.action": action_label,
            "catalog.exact_match": exact_match,
        }

        with (
            create_span("catalog.request", attributes=attributes) as span,
            track_latency(REQUEST_LATENCY, collection=collection.name, action=action_label),
        ):
            # The collection is bound for this request only.
            previous = trace_context.get()
            ctx = get_trace_context()
            set_trace_context(ctx["trace_id"], ctx["span_id"], collection=collection.name)
            try:
                try:
                    response = self._route(collection, query, action, exact_match)
                except ApiError as exc:
                    span.set_attribute("catalog.status", exc.status)
                    REQUEST_COUNT.labels(collection=collection.name, action=action_label, status=str(exc.status)).inc()
                    log = logger.warning if exc.status >= 500 else logger.info
                    log("%s %s on %s failed: %s", action_label, dict(query), collection.name, exc.message)
                    raise

                span.set_attribute("catalog.status", 200)
                REQUEST_COUNT.labels(collection=collection.name, action=action_label, status="200").inc()
                return response
            finally:
                trace_context.set(previous)

    def _route(
        self,
        collection: AbstractCollection,
        query: Mapping[str, Any],
        action: str,
        exact_match: bool,
    ) -> ApiResponse:
        try:
            resolved = Action(action)
        except ValueError:
            raise InvalidActionError(action) from None

        if resolved is Action.FIND:
            return self._find(collection, query)
        return self._find_one(collection, query, exact_match)

    def _apply_params(self, collection: AbstractCollection, query: Mapping[str, Any]) -> list[Library]:
        filters = build_action_params(query)
        if not filters:
            return collection.all()
        return collection.find(filters)

    def _find(self, collection: AbstractCollection, query: Mapping[str, Any]) -> ApiResponse:
        criteria = resolve_name_criteria(query.get(NAME_PARAM))
        candidates = self._apply_params(collection, query)
        CANDIDATES_SCANNED.labels(action=Action.FIND.value).observe(len(candidates))

        libraries = find_ranked(candidates, criteria, self.rank)
        logger.debug("find on %s: %d candidates, %d results", collection.name, len(candidates), len(libraries))
        return ApiResponse(data=self.formatter.format(query, libraries))

    def _find_one(self, collection: AbstractCollection, query: Mapping[str, Any], exact_match: bool) -> ApiResponse:
        if not has_param(query):
            raise MissingQueryError()

        criteria = resolve_name_criteria(query.get(NAME_PARAM))
        candidates = self._apply_params(collection, query)
        CANDIDATES_SCANNED.labels(action=Action.FIND_ONE.value).observe(len(candidates))

        library: Library | None = None
        if criteria is not None:
            if exact_match:
                library = find_one_exact(candidates, criteria)
            else:
                library = find_one_loose(candidates, criteria, self.rank)
        elif not exact_match and candidates:
            library = candidates[0]

        if library is None:
            raise RecordNotFoundError()

        headers = self._etag_headers(collection, library) if exact_match else {}

        version = query.get(VERSION_PARAM)
        if version:
            files = select_version_files(library, version)
            if files is None:
                raise VersionNotFoundError(version)
            return ApiResponse(data=files, headers=headers)

        return ApiResponse(data=self.formatter.format(query, library), headers=headers)

    def _etag_headers(self, collection: AbstractCollection, library: Library) -> dict[str, str]:
        if self.etag_store is None:
            return {}
        etag = self.etag_store.find_etag(collection.name, library.name)
        return {"ETag": etag} if etag else {}


def process_request(
    collection: AbstractCollection,
    query: Mapping[str, Any],
    action: str,
    exact_match: bool,
    callback: Callback,
    *,
    dispatcher: RequestDispatcher | None = None,
) -> None:
    """Functional entry point; see :meth:`RequestDispatcher.process_request`."""
    (dispatcher or RequestDispatcher()).process_request(collection, query, action, exact_match, callback)
