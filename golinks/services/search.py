"""Fuzzy alias suggestions.

Uses rapidfuzz to rank stored aliases against a lookup that missed, so the
UI and API can offer "did you mean" results.
"""

import re
from dataclasses import dataclass

from rapidfuzz import fuzz
from unidecode import unidecode

from golinks.core.types import RedirectModel


@dataclass
class AliasSuggestion:
    """A stored redirect that resembles a search query."""

    alias: str
    destination: str
    score: float


def normalize_text(value: str) -> str:
    """Normalize text for matching.

    Applies: unidecode, lowercase, strip punctuation, normalize whitespace.
    """
    normalized = unidecode(value).lower().strip()
    # Hyphens, slashes and underscores all become spaces
    normalized = re.sub(r"[^a-z0-9\s]", " ", normalized)
    return " ".join(normalized.split())


def score_alias(query: str, redirect: RedirectModel) -> float:
    """Score how well a redirect matches a query (0-100).

    The alias counts fully; the destination only at a discount so that
    "jira" finds "/tickets -> https://jira.example.com".
    """
    normalized_query = normalize_text(query)
    if not normalized_query:
        return 0.0

    alias_score = fuzz.WRatio(normalized_query, normalize_text(redirect.alias))
    destination_score = fuzz.partial_ratio(normalized_query, normalize_text(redirect.destination))
    return max(alias_score, destination_score * 0.8)


def suggest_aliases(
    query: str,
    redirects: list[RedirectModel],
    limit: int = 10,
    threshold: float = 60.0,
) -> list[AliasSuggestion]:
    """Rank redirects by similarity to a query.

    Args:
        query: What the user typed (only the first word is the alias)
        redirects: Candidates to rank
        limit: Maximum number of suggestions
        threshold: Minimum score to include (0-100)

    Returns:
        Suggestions sorted by score, best first
    """
    alias_query = query.strip().lstrip("/").split(" ")[0]

    suggestions = []
    for redirect in redirects:
        score = score_alias(alias_query, redirect)
        if score >= threshold:
            suggestions.append(AliasSuggestion(redirect.alias, redirect.destination, score))

    suggestions.sort(key=lambda s: (-s.score, s.alias))
    return suggestions[:limit]
