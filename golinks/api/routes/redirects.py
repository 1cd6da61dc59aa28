"""API routes for managing redirects."""

import logging
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, HTTPException, Query

from golinks.api.dependencies import get_registry, get_username
from golinks.api.models import (
    ApiNewRedirect,
    ApiRedirect,
    ApiUpdateRedirect,
    PaginationState,
    RedirectList,
    ResponseMessage,
)
from golinks.core.errors import RedirectExistsError, RedirectNotFoundError
from golinks.core.types import has_more, normalize_alias
from golinks.redirects.registry import RedirectRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/redirect")


def is_destination_url(destination: str) -> bool:
    """True if destination parses as an absolute URL (scheme and host).

    Template braces and $N markers are allowed anywhere after the host.
    """
    try:
        parts = urlsplit(destination)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def _require_url(destination: str) -> None:
    if not is_destination_url(destination):
        logger.debug("[API] Destination wasn't a URL: %r", destination)
        raise HTTPException(status_code=400, detail=f"Destination {destination} is not a URL")


def is_routable_alias(alias: str) -> bool:
    """True if alias can be reached through the gateway once stored.

    The gateway takes everything before the first space as the alias, so
    whitespace would split it, and "/" alone normalizes to nothing.
    """
    normalized = normalize_alias(alias)
    return bool(normalized) and not any(c.isspace() for c in normalized)


def _require_alias(alias: str) -> None:
    if not is_routable_alias(alias):
        logger.debug("[API] Alias can't be routed: %r", alias)
        raise HTTPException(
            status_code=400,
            detail=f"Alias {alias!r} must be non-empty and contain no whitespace",
        )


@router.get("", response_model=RedirectList)
def list_all_redirects(
    page: int = Query(0, ge=0, description="Page number, from 0"),
    size: int = Query(50, ge=1, le=10000, description="Redirects per page"),
    registry: RedirectRegistry = Depends(get_registry),
):
    """List one page of stored redirects."""
    redirects = registry.list(page, size)
    total = registry.count()
    return RedirectList(
        redirects=[ApiRedirect.from_model(r) for r in redirects],
        page=PaginationState(total=total, has_more=has_more(page, size, total)),
    )


@router.post("", response_model=ApiRedirect, status_code=201)
def create_new_redirect(
    request: ApiNewRedirect,
    registry: RedirectRegistry = Depends(get_registry),
    username: str = Depends(get_username),
):
    """Create a redirect."""
    _require_alias(request.alias)
    _require_url(request.destination)
    try:
        model = registry.create(request.alias, request.destination, username)
    except RedirectExistsError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return ApiRedirect.from_model(model)


@router.get("/{reference}", response_model=ApiRedirect)
def get_redirect_by_reference(
    reference: str,
    registry: RedirectRegistry = Depends(get_registry),
):
    """Get a redirect by alias or public ref."""
    model = registry.get(reference)
    if model is None:
        raise HTTPException(status_code=404, detail=f"Redirect {reference} does not exist")
    return ApiRedirect.from_model(model)


@router.put("/{reference}", response_model=ResponseMessage)
def update_existing_redirect(
    reference: str,
    request: ApiUpdateRedirect,
    registry: RedirectRegistry = Depends(get_registry),
    username: str = Depends(get_username),
):
    """Point a redirect at a new destination."""
    _require_url(request.destination)
    try:
        registry.update(reference, request.destination, username)
    except RedirectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ResponseMessage(message="ok")


@router.delete("/{reference}", response_model=ResponseMessage)
def delete_redirect_by_reference(
    reference: str,
    registry: RedirectRegistry = Depends(get_registry),
):
    """Delete a redirect."""
    try:
        registry.delete(reference)
    except RedirectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return ResponseMessage(message="ok")
