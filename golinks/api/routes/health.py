"""Health check endpoint."""

from fastapi import APIRouter, Depends

from golinks.api.dependencies import get_registry
from golinks.config import VERSION
from golinks.redirects.registry import RedirectRegistry

router = APIRouter()


@router.get("/health")
@router.get("/status")
def health_check(registry: RedirectRegistry = Depends(get_registry)) -> dict:
    """Health check endpoint with backend info."""
    return {
        "status": "healthy",
        "version": VERSION,
        "backend": type(registry.backend).__name__,
        "compiled_redirects": registry.cached_count(),
    }
