"""Redirect template compiler.

Turns a stored destination template into an ordered family of variants,
one per nesting depth of optional segments:

    compile_redirect("x", "http://google.com{/foo/$1{/bar/$2}}")
    -> (0, "http://google.com")
       (1, "http://google.com/foo/$1")
       (2, "http://google.com/foo/$1/bar/$2")

`{` and `}` are treated as plain separators rather than a bracket grammar,
so only a single linear chain of nested optional segments is supported.
Sibling groups such as "a{b}c{d}" compile, but not into anything meaningful.

Compilation never fails. A malformed template degrades to one arity-0
variant holding the raw text, and a warning goes to the diagnostics sink.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from golinks.core.types import RedirectModel

logger = logging.getLogger(__name__)

# Both delimiters split identically
BRACE_PATTERN = re.compile(r"[{}]")

DiagnosticsSink = Callable[[str], None]


@dataclass(frozen=True)
class Variant:
    """One arity-specific rendering of a destination template.

    `text` may contain the markers $1..$arity. They are plain substrings:
    nothing guarantees each appears exactly once.
    """

    arity: int
    text: str


@dataclass(frozen=True)
class CompiledRedirect:
    """The immutable compiled form of one alias/destination pair.

    Invariants:
    - alias always starts with "/" (case is preserved)
    - variants is non-empty and variants[i].arity == i

    Safe to share between threads; replaced wholesale when the stored
    destination changes, never patched.
    """

    alias: str
    variants: tuple[Variant, ...]

    @property
    def max_arity(self) -> int:
        return self.variants[-1].arity

    @classmethod
    def from_model(
        cls,
        model: "RedirectModel",
        warn: DiagnosticsSink | None = None,
    ) -> "CompiledRedirect":
        """Compile a stored redirect record."""
        return compile_redirect(model.alias, model.destination, warn=warn)

    def evaluate(self, raw_input: str) -> str:
        """Resolve an argument string (no alias prefix) to a destination."""
        from golinks.redirects.resolver import evaluate

        return evaluate(self, raw_input)

    def get_destination(self, raw_input: str) -> str:
        """Resolve a full lookup string whose first token is the alias."""
        from golinks.redirects.resolver import get_destination

        return get_destination(self, raw_input)

    def matches(self, candidate: str) -> bool:
        from golinks.redirects.resolver import matches

        return matches(self, candidate)


def normalize_alias_path(alias: str) -> str:
    """Ensure the alias begins with "/". No case folding."""
    if not alias.startswith("/"):
        return f"/{alias}"
    return alias


def compile_destination(
    destination: str,
    warn: DiagnosticsSink | None = None,
) -> tuple[Variant, ...]:
    """Compile a destination template into variants indexed by arity.

    Args:
        destination: Raw template, e.g. "https://duckduckgo.com/{?q=$1}"
        warn: Diagnostics sink for malformed templates (default: module logger)

    Returns:
        Non-empty tuple of variants, variants[i].arity == i
    """
    if warn is None:
        warn = logger.warning

    fragments = BRACE_PATTERN.split(destination)
    base = fragments.pop(0)

    # str.find/rfind return -1 when absent, so a missing "}" with a present
    # "{" counts as inverted nesting while no braces at all does not
    last_open = destination.rfind("{")
    first_close = destination.find("}")

    if last_open > first_close:
        warn(f"Destination has mismatched params: `{destination}`")
        return (Variant(0, destination),)

    if not fragments:
        return (Variant(0, destination),)

    if len(fragments) % 2 != 0:
        warn(f"Destination has mismatched `{{` | `}}`: `{destination}`")
        return (Variant(0, destination),)

    variants = [Variant(0, base)]
    pre = ""
    post = ""

    # Peel one nesting level per iteration, outermost first
    while fragments:
        post = fragments.pop() + post
        pre = pre + fragments.pop(0)
        variants.append(Variant(len(variants), base + pre + post))

    return tuple(variants)


def compile_redirect(
    alias: str,
    destination: str,
    warn: DiagnosticsSink | None = None,
) -> CompiledRedirect:
    """Compile an alias/destination pair.

    Usage:
        compiled = compile_redirect("google", "https://duckduckgo.com/{?q=$1}")
        compiled.get_destination("google cats")
        # -> "https://duckduckgo.com/?q=cats"
    """
    return CompiledRedirect(
        alias=normalize_alias_path(alias),
        variants=compile_destination(destination, warn=warn),
    )
