"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, Field

from golinks.core.types import RedirectModel

# =============================================================================
# Redirects
# =============================================================================


class ApiUser(BaseModel):
    """The user who last wrote a redirect."""

    username: str


class ApiRedirect(BaseModel):
    """Response body for a redirect."""

    alias: str
    destination: str
    created_by: ApiUser | None = None

    @classmethod
    def from_model(cls, model: RedirectModel) -> "ApiRedirect":
        return cls(
            alias=model.alias,
            destination=model.destination,
            created_by=ApiUser(username=model.created_by) if model.created_by else None,
        )


class PaginationState(BaseModel):
    """Where a listed page sits in the full collection."""

    total: int
    has_more: bool


class RedirectList(BaseModel):
    """Response body for listing redirects."""

    redirects: list[ApiRedirect]
    page: PaginationState


class ApiNewRedirect(BaseModel):
    """Request body for creating a redirect."""

    alias: str = Field(..., min_length=1, description="Alias, e.g. 'jira'")
    destination: str = Field(
        ...,
        description="Destination template, e.g. 'https://jira.example.com{/browse/$1}'",
    )


class ApiUpdateRedirect(BaseModel):
    """Request body for pointing a redirect somewhere else."""

    destination: str


class ResponseMessage(BaseModel):
    """Plain status or error message."""

    message: str


# =============================================================================
# Search
# =============================================================================


class ApiSuggestion(BaseModel):
    """One fuzzy search result."""

    alias: str
    destination: str
    score: float


class SuggestionList(BaseModel):
    """Response body for alias search."""

    query: str
    suggestions: list[ApiSuggestion]
