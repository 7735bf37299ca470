"""Response memoization for read endpoints, backed by the app's TTLCache.

Routers opt in with ``APIRouter(route_class=cached_route(ttl_ms))``. Every GET
endpoint on such a router answers from the cache only once all of the route's
dependencies have resolved without error, so auth and request validation run
on hits as well as misses. Only 200 JSON responses are stored.

No single-flight: two concurrent misses for the same key both run the handler.
Invalidation is not linearizable with in-flight reads either: a miss that read
the database before a write's ``invalidate_by_pattern`` can still store its
pre-write payload afterwards, and that payload is served until it expires.
"""

from __future__ import annotations

import inspect
import json
import logging
from typing import Any, Callable, Coroutine, get_type_hints

from fastapi import Depends, Request, Response
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from garba.cache.store import MISSING, TTLCache

logger = logging.getLogger(__name__)

CACHE_HEADER = "X-Cache"
CACHEABLE_METHODS = frozenset({"GET"})

_PAYLOAD_PARAM = "_cached_payload"


def get_cache(request: Request) -> TTLCache:
    """FastAPI dependency returning the cache owned by the running app."""
    return request.app.state.cache


def cache_key(request: Request) -> str:
    """Build ``"<METHOD>:<PATH>"``, including the query string when present."""
    query = request.url.query
    if query:
        return f"{request.method}:{request.url.path}?{query}"
    return f"{request.method}:{request.url.path}"


async def lookup_cached_response(request: Request) -> Any:
    """Dependency returning the cached payload for this request, or ``MISSING``."""
    if request.method not in CACHEABLE_METHODS:
        return MISSING
    key = cache_key(request)
    payload = get_cache(request).get(key)
    logger.debug("Cache %s: %s", "miss" if payload is MISSING else "hit", key)
    return payload


def _hit_response(payload: Any) -> JSONResponse:
    return JSONResponse(payload, headers={CACHE_HEADER: "HIT"})


def serve_from_cache(endpoint: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap *endpoint* so a cached payload is returned instead of calling it.

    The wrapper takes the lookup as one more dependency. FastAPI only calls an
    endpoint after every dependency resolved cleanly, so a failing auth or
    validation dependency still rejects the request on a hit.
    """
    hints = get_type_hints(endpoint, include_extras=True)
    signature = inspect.signature(endpoint)
    params = [p.replace(annotation=hints.get(p.name, p.annotation)) for p in signature.parameters.values()]
    lookup = inspect.Parameter(
        _PAYLOAD_PARAM, inspect.Parameter.KEYWORD_ONLY, default=Depends(lookup_cached_response)
    )
    if params and params[-1].kind is inspect.Parameter.VAR_KEYWORD:
        params.insert(len(params) - 1, lookup)
    else:
        params.append(lookup)

    if inspect.iscoroutinefunction(endpoint):
        async def wrapper(*args, **kwargs):
            payload = kwargs.pop(_PAYLOAD_PARAM)
            if payload is not MISSING:
                return _hit_response(payload)
            return await endpoint(*args, **kwargs)
    else:
        def wrapper(*args, **kwargs):
            payload = kwargs.pop(_PAYLOAD_PARAM)
            if payload is not MISSING:
                return _hit_response(payload)
            return endpoint(*args, **kwargs)

    for attr in ("__module__", "__name__", "__qualname__", "__doc__"):
        setattr(wrapper, attr, getattr(endpoint, attr, None))
    wrapper.__signature__ = signature.replace(
        parameters=params,
        return_annotation=hints.get("return", signature.return_annotation),
    )
    return wrapper


def _json_payload(response: Response) -> Any:
    """Decode a JSON response body, or return ``MISSING`` if it is not one."""
    body = getattr(response, "body", None)
    if body is None or not response.headers.get("content-type", "").startswith("application/json"):
        return MISSING
    try:
        return json.loads(body)
    except ValueError:
        logger.warning("Response labelled as JSON could not be decoded, not caching it")
        return MISSING


def cached_route(ttl_ms: int | None = None) -> type[APIRoute]:
    """Return an ``APIRoute`` class that memoizes successful GET responses.

    *ttl_ms* overrides the cache's default TTL for routes built with it.
    """

    class CachedRoute(APIRoute):
        def __init__(self, path: str, endpoint: Callable[..., Any], **kwargs: Any):
            methods = {m.upper() for m in (kwargs.get("methods") or ["GET"])}
            if methods & CACHEABLE_METHODS:
                endpoint = serve_from_cache(endpoint)
            super().__init__(path, endpoint=endpoint, **kwargs)

        def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
            handler = super().get_route_handler()

            async def memoized_handler(request: Request) -> Response:
                response = await handler(request)
                if (
                    request.method in CACHEABLE_METHODS
                    and response.status_code == 200
                    and response.headers.get(CACHE_HEADER) != "HIT"
                ):
                    payload = _json_payload(response)
                    if payload is not MISSING:
                        get_cache(request).set(cache_key(request), payload, ttl_ms)
                        response.headers[CACHE_HEADER] = "MISS"
                return response

            return memoized_handler

    return CachedRoute
