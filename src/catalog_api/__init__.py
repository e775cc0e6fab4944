"""catalog-api: resolve name queries against a library catalog.

Ranks catalog records against a ``name`` term (literal, ``a,b`` alternation or
``glob*``), selects one or many, and shapes them into the v2 response schema.
"""

from catalog_api.domain import ApiError, Asset, Library, NameCriteria, resolve_name_criteria
from catalog_api.service_layer import ApiResponse, RequestDispatcher, ResponseFormatter, process_request


__version__ = "2.0.0"

__all__ = [
    "ApiError",
    "ApiResponse",
    "Asset",
    "Library",
    "NameCriteria",
    "RequestDispatcher",
    "ResponseFormatter",
    "__version__",
    "process_request",
    "resolve_name_criteria",
]
