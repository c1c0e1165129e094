"""
Response Envelope
=================
Renders handler outcomes into the JSON wire shape.

Success:
    non-list payload -> sent as-is (200)
    list payload     -> pagination envelope (200)

Error:
    bare message     -> 400 {code: "E_ERROR", message}
    error object     -> {code, status?, message} with the object's status
    wrapped error    -> {code, status?, message, stack} from the wrapped error, 500
    list             -> 500, empty body
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from sso_gate.config import DEFAULT_PAGE_LIMIT
from sso_gate.errors import GENERIC_ERROR_CODE
from .pagination import build_page_envelope, is_sequence_payload

_SCALAR_TYPES = (str, bytes, int, float, bool)


def request_url(request: Request) -> str:
    """Path plus query string of the request, as the client sent it."""
    url = request.url.path
    if request.url.query:
        url += "?" + request.url.query
    return url


def build_success_body(
    data: Any,
    url: str,
    params: Mapping,
    default_limit: int = DEFAULT_PAGE_LIMIT,
) -> Any:
    if not is_sequence_payload(data):
        return data
    return build_page_envelope(data, url, params, default_limit=default_limit)


def success_response(
    request: Request,
    data: Any,
    default_limit: int = DEFAULT_PAGE_LIMIT,
) -> JSONResponse:
    """Render a handler's success payload for this request."""
    body = build_success_body(data, request_url(request), request.query_params, default_limit)
    return JSONResponse(status_code=200, content=jsonable_encoder(body))


def _has(obj: Any, name: str) -> bool:
    if isinstance(obj, Mapping):
        return obj.get(name) is not None
    return getattr(obj, name, None) is not None


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _message(obj: Any) -> Any:
    message = _field(obj, "message")
    if message is None and isinstance(obj, BaseException):
        return str(obj)
    return message


def _trace(obj: Any) -> Optional[str]:
    if isinstance(obj, Mapping):
        return obj.get("raw_stack")
    return getattr(obj, "trace", None)


def _compact(body: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in body.items() if value is not None}


def render_error(error: Any) -> Tuple[int, Optional[Dict[str, Any]]]:
    """
    Resolve the HTTP status and body for an error outcome.

    Returns:
        (status_code, body); body is None for degenerate inputs
    """
    if error is None or isinstance(error, _SCALAR_TYPES):
        if isinstance(error, bytes):
            error = error.decode("utf-8", errors="replace")
        return 400, {"code": GENERIC_ERROR_CODE, "message": error}

    if isinstance(error, (list, tuple, set, frozenset)):
        return 500, None

    status_code = 500
    original = _field(error, "original_error")
    if original is not None and _has(original, "message") and _has(original, "code"):
        # Status of the wrapper is reported but not applied
        return status_code, _compact({
            "code": _field(original, "code"),
            "status": _field(error, "status"),
            "message": _field(original, "message"),
            "stack": _trace(error),
        })

    status = _field(error, "status")
    if status is not None:
        status_code = int(status)
    return status_code, _compact({
        "code": _field(error, "code"),
        "status": status,
        "message": _message(error),
    })


def error_response(error: Any) -> Response:
    """Render an error value, exception or bare message."""
    status_code, body = render_error(error)
    if body is None:
        return Response(status_code=status_code)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
