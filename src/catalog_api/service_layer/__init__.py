"""Service layer - request orchestration.

- ``params``: query -> collection filters
- ``formatter``: selected libraries -> v2 response schema
- ``dispatcher``: ``find`` / ``findOne`` routing and error conversion
"""

from .dispatcher import Action, ApiResponse, RequestDispatcher, process_request
from .formatter import DEFAULT_FIELDS, ResponseFormatter, select_version_files
from .params import build_action_params, has_param


__all__ = [
    "DEFAULT_FIELDS",
    "Action",
    "ApiResponse",
    "RequestDispatcher",
    "ResponseFormatter",
    "build_action_params",
    "has_param",
    "process_request",
    "select_version_files",
]
