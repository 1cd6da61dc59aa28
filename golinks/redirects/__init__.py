"""Redirect template compiler, resolver and compiled-redirect registry."""

from golinks.redirects.compiler import (
    CompiledRedirect,
    DiagnosticsSink,
    Variant,
    compile_destination,
    compile_redirect,
)
from golinks.redirects.registry import RedirectRegistry
from golinks.redirects.resolver import (
    decode_input,
    evaluate,
    get_destination,
    matches,
    select_variant,
    split_arguments,
)

__all__ = [
    # Compiler
    "CompiledRedirect",
    "DiagnosticsSink",
    "Variant",
    "compile_destination",
    "compile_redirect",
    # Resolver
    "decode_input",
    "evaluate",
    "get_destination",
    "matches",
    "select_variant",
    "split_arguments",
    # Registry
    "RedirectRegistry",
]
