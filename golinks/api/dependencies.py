"""Shared FastAPI dependencies."""

from fastapi import Request

from golinks.redirects.registry import RedirectRegistry

# Identity headers set by the auth proxy in front of the service, in priority order
USER_HEADERS = ("token-claim-sub", "x-amzn-oidc-identity")

UNKNOWN_USER = "unknown"


def get_registry(request: Request) -> RedirectRegistry:
    """Get the redirect registry attached to the app."""
    return request.app.state.registry


def get_username(request: Request) -> str:
    """Get the requesting user from the auth proxy headers."""
    for header in USER_HEADERS:
        if value := request.headers.get(header):
            return value
    return UNKNOWN_USER
