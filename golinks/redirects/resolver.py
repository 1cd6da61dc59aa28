"""Redirect resolver.

Picks the compiled variant matching the number of arguments typed after
an alias and substitutes them into its $N placeholders.

All functions here are pure and never raise:
- too few arguments leave $N markers in the output
- extra arguments are appended, space-separated
- undecodable input is used as-is
"""

import logging
from urllib.parse import unquote

from golinks.redirects.compiler import CompiledRedirect, Variant

logger = logging.getLogger(__name__)


def decode_input(raw: str) -> str:
    """Percent-decode a lookup string, falling back to the raw text.

    "+" is left alone; only %XX escapes are decoded. Escapes that do not
    form valid UTF-8 make the whole decode fail.
    """
    try:
        return unquote(raw, errors="strict")
    except UnicodeDecodeError:
        return raw


def split_arguments(decoded: str) -> list[str]:
    """Split a decoded argument string into tokens on single spaces.

    An empty string has no tokens, so a bare alias selects the arity-0
    variant. Anything else splits exactly like str.split(" "), keeping
    empty tokens from repeated spaces.
    """
    if decoded == "":
        return []
    return decoded.split(" ")


def select_variant(compiled: CompiledRedirect, token_count: int) -> Variant:
    """Select the variant for a token count, clamped to the highest arity."""
    if token_count < len(compiled.variants):
        return compiled.variants[token_count]
    return compiled.variants[-1]


def substitute(variant: Variant, tokens: list[str]) -> str:
    """Fill $1..$arity from the front of tokens and append the leftovers.

    Every occurrence of each marker is replaced. Note "$1" also matches the
    head of "$10"; markers are substituted in ascending order.
    """
    remaining = list(tokens)
    destination = variant.text

    for i in range(1, variant.arity + 1):
        if not remaining:
            break
        destination = destination.replace(f"${i}", remaining.pop(0))

    if remaining:
        destination = f"{destination} {' '.join(remaining)}"

    return destination


def evaluate(compiled: CompiledRedirect, raw_input: str) -> str:
    """Resolve an argument string (without the alias) to a destination.

    Args:
        compiled: Compiled redirect
        raw_input: Arguments, possibly percent-encoded ("a%20b" or "a b")

    Returns:
        Destination URL string
    """
    parsed_input = decode_input(raw_input)
    logger.debug("[RESOLVE] %s parsed input: %r", compiled.alias, parsed_input)

    tokens = split_arguments(parsed_input)
    variant = select_variant(compiled, len(tokens))
    return substitute(variant, tokens)


def get_destination(compiled: CompiledRedirect, raw_input: str) -> str:
    """Resolve a full lookup string whose first token is the alias.

    "google let me search" -> evaluate(compiled, "let me search")
    """
    parsed_input = decode_input(raw_input)
    tokens = parsed_input.split(" ")
    return evaluate(compiled, " ".join(tokens[1:]))


def matches(compiled: CompiledRedirect, candidate: str) -> bool:
    """Case-insensitive alias match.

    Only the candidate is lower-cased; stored aliases are lower-case by
    convention at write time.
    """
    return compiled.alias == candidate.lower()
