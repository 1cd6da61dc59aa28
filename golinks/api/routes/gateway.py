"""Redirect gateway: turns "/alias arg1 arg2" into a temporary redirect.

Registered last, so every path not claimed by the API falls through here.
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import RedirectResponse

from golinks.api.dependencies import get_registry
from golinks.redirects.registry import RedirectRegistry

logger = logging.getLogger(__name__)

router = APIRouter()

UI_LOCATION = "/_gadget/ui"

# Reserved prefix for management endpoints; never treated as an alias
RESERVED_PREFIX = "_gadget"


def lookup_path(request: Request) -> str:
    """Get the requested path without its leading slash, %20 turned into spaces.

    Uses the raw (still percent-encoded) path so the resolver does the only
    real decode.
    """
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else request.url.path
    return path.removeprefix("/").replace("%20", " ")


@router.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    return Response(status_code=404)


@router.get("/_gadget/{endpoint:path}", include_in_schema=False)
def gadget_not_found(endpoint: str):
    raise HTTPException(status_code=404, detail=f"Endpoint _gadget/{endpoint} not found")


@router.get("/{path:path}", include_in_schema=False)
def find_redirect(
    request: Request,
    registry: RedirectRegistry = Depends(get_registry),
) -> RedirectResponse:
    """Redirect to the alias destination, or to the UI search page on a miss."""
    path = lookup_path(request)

    if not path:
        return RedirectResponse(UI_LOCATION, status_code=307)

    destination = registry.resolve(path)
    if destination is None:
        logger.info("[GATEWAY] No redirect for `%s`, sending to search", path)
        return RedirectResponse(
            f"{UI_LOCATION}?{urlencode({'search': path})}",
            status_code=307,
        )

    logger.debug("[GATEWAY] %s => %s", path, destination)
    return RedirectResponse(destination, status_code=307)
