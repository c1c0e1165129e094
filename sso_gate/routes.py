"""
Route Prefixing
===============
Applies a deployment path prefix (``PATH_PREFIX``) to a route table keyed
by ``"VERB /path"``.

Usage:
    ROUTES = {
        "GET /": index,
        "GET /orders": list_orders,
    }

    app = Starlette(routes=build_routes(prefix_routes(ROUTES, config.path_prefix)))
"""

from typing import Any, Callable, Dict, List, Mapping, Optional

import structlog
from starlette.routing import Route

logger = structlog.get_logger(__name__)


def usable_prefix(path_prefix: Optional[str]) -> bool:
    """A prefix is applied only when it is non-blank and contains a slash."""
    if path_prefix is None:
        return False
    stripped = path_prefix.strip()
    return bool(stripped) and "/" in stripped


def prefix_routes(routes: Mapping[str, Any], path_prefix: Optional[str]) -> Dict[str, Any]:
    """
    Return a copy of the route table with every path prefixed.

    The root route ``/`` is also registered at the bare prefix. Keys without
    a verb are treated as bare paths. With no usable prefix the table is
    returned unchanged.
    """
    if not usable_prefix(path_prefix):
        return dict(routes)

    logger.info("routes_using_path_prefix", path_prefix=path_prefix)

    prefixed = {}
    for key, target in routes.items():
        verb, _, path = key.partition(" ")
        if not path:
            verb, path = "", verb
        lead = f"{verb} " if verb else ""
        prefixed[f"{lead}{path_prefix}{path}"] = target
        if path == "/":
            prefixed[f"{lead}{path_prefix}"] = target
    return prefixed


def build_routes(routes: Mapping[str, Callable]) -> List[Route]:
    """Turn a ``"VERB /path" -> endpoint`` table into Starlette routes."""
    built = []
    for key, endpoint in routes.items():
        verb, _, path = key.partition(" ")
        if not path:
            built.append(Route(verb, endpoint))
        else:
            built.append(Route(path, endpoint, methods=[verb.upper()]))
    return built
