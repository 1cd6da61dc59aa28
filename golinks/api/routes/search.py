"""Fuzzy alias search endpoint."""

from fastapi import APIRouter, Depends, Query

from golinks.api.dependencies import get_registry
from golinks.api.models import ApiSuggestion, SuggestionList
from golinks.redirects.registry import RedirectRegistry
from golinks.services.search import suggest_aliases

router = APIRouter()


@router.get("/search", response_model=SuggestionList)
def search_aliases(
    q: str = Query(..., description="What the user typed"),
    limit: int = Query(10, ge=1, le=100),
    threshold: float = Query(60.0, ge=0, le=100),
    registry: RedirectRegistry = Depends(get_registry),
):
    """Suggest aliases resembling a query."""
    suggestions = suggest_aliases(q, registry.list(), limit=limit, threshold=threshold)
    return SuggestionList(
        query=q,
        suggestions=[
            ApiSuggestion(alias=s.alias, destination=s.destination, score=s.score)
            for s in suggestions
        ],
    )
