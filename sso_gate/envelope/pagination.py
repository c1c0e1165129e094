"""
Pagination Envelope
===================
Wraps list results in ``{skip, limit, previous?, next?, results}``.

Links are built by editing the request URL text: ``limit=``/``skip=`` are
appended when missing, and the ``skip=<skip>`` token is swapped for the
adjacent page's offset. A full page means more data probably follows; a
short page is treated as the last one.
"""

from typing import Any, Dict, Mapping, Sequence

from pydantic import BaseModel, Field, ValidationError

from sso_gate.config import DEFAULT_PAGE_LIMIT
from sso_gate.errors import ApiErrors


class PageQuery(BaseModel):
    """Pagination parameters read from the query string."""
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, gt=0)


def parse_page_query(params: Mapping[str, str], default_limit: int = DEFAULT_PAGE_LIMIT) -> PageQuery:
    """
    Resolve skip/limit from query parameters.

    Missing or empty values take the defaults; anything else must be a valid
    integer in range.

    Raises:
        ApiError: E_REQUEST when a value is not a usable integer
    """
    values = {"limit": default_limit}
    for name in ("skip", "limit"):
        raw = params.get(name)
        if raw not in (None, ""):
            values[name] = raw
    try:
        return PageQuery.model_validate(values)
    except ValidationError as e:
        raise ApiErrors.request("Invalid pagination parameters") from e


def is_sequence_payload(data: Any) -> bool:
    return isinstance(data, (list, tuple))


def _raw_value(params: Mapping[str, str], name: str, parsed: int) -> str:
    """The value as the client wrote it, or the parsed default when absent."""
    raw = params.get(name)
    if raw in (None, ""):
        return str(parsed)
    return raw


def _base_url(url: str, raw_skip: str, raw_limit: str) -> str:
    if f"limit={raw_limit}" not in url:
        url += ("&" if "?" in url else "?") + f"limit={raw_limit}"
    if "skip=" not in url:
        url += ("&" if "?" in url else "?") + f"skip={raw_skip}"
    return url


def previous_skip(skip: int, limit: int, count: int) -> int:
    """Offset of the previous page, given a page of ``count`` items at ``skip``."""
    new_skip = skip
    if count < limit:
        new_skip = skip - limit
    if new_skip < 0:
        new_skip = skip - count
    if new_skip < limit or new_skip < 0:
        new_skip = 0
    return new_skip


def build_page_envelope(
    data: Sequence[Any],
    url: str,
    params: Mapping[str, str],
    default_limit: int = DEFAULT_PAGE_LIMIT,
) -> Dict[str, Any]:
    """
    Build the pagination envelope for a list result.

    Args:
        data: The handler's result sequence
        url: The request URL (path plus query string)
        params: The request's query parameters
        default_limit: Page size used when the request gives none

    Returns:
        Envelope dict; ``previous`` and ``next`` only when applicable
    """
    query = parse_page_query(params, default_limit=default_limit)
    raw_skip = _raw_value(params, "skip", query.skip)
    raw_limit = _raw_value(params, "limit", query.limit)
    url = _base_url(url, raw_skip, raw_limit)
    # Tokens match the query text; arithmetic uses the parsed values
    skip_token = f"skip={raw_skip}"
    count = len(data)

    envelope: Dict[str, Any] = {"skip": query.skip, "limit": query.limit}
    if count > 0:
        if query.skip > 0:
            new_skip = previous_skip(query.skip, query.limit, count)
            envelope["previous"] = url.replace(skip_token, f"skip={new_skip}", 1)
        if count >= query.limit:
            envelope["next"] = url.replace(skip_token, f"skip={query.skip + count}", 1)
    envelope["results"] = data
    return envelope
