"""Service layer."""

from golinks.services.search import AliasSuggestion, normalize_text, suggest_aliases

__all__ = [
    "AliasSuggestion",
    "normalize_text",
    "suggest_aliases",
]
