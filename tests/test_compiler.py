"""Tests for the redirect template compiler.

Verifies that:
1. Aliases always gain a leading slash, keeping their case
2. Nested optional segments peel into one variant per depth
3. Malformed brace layouts fall back to the raw destination
4. Warnings go to the injected diagnostics sink, not just the logger
"""

import logging

import pytest

from golinks.core.types import RedirectModel
from golinks.redirects.compiler import (
    CompiledRedirect,
    Variant,
    compile_destination,
    compile_redirect,
)

DUCKDUCKGO = "https://duckduckgo.com/{?q=$1}"
NESTED = "http://google.com{/foo/$1{/bar/$2}}"

DESTINATIONS = [
    "https://example.com",
    DUCKDUCKGO,
    NESTED,
    "http://x.com{/a/$1{/b/$2{/c/$3}}}",
    "http://x.com}{",
    "http://x.com{/a/$1",
    "http://x.com/a/$1}",
    "{}",
    "",
    "http://x.com{a}{b}",
]


class Sink:
    """Collects warnings passed to the diagnostics sink."""

    def __init__(self):
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


# =============================================================================
# ALIAS NORMALIZATION
# =============================================================================


class TestAliasNormalization:
    """Test alias normalization during compilation."""

    def test_prepends_slash(self):
        assert compile_redirect("google", DUCKDUCKGO).alias == "/google"

    def test_keeps_existing_slash(self):
        assert compile_redirect("/google", DUCKDUCKGO).alias == "/google"

    def test_does_not_lowercase(self):
        assert compile_redirect("Google", DUCKDUCKGO).alias == "/Google"


# =============================================================================
# VARIANT GENERATION
# =============================================================================


class TestCompileDestination:
    """Test compiling brace templates into variants."""

    def test_single_optional_segment(self):
        compiled = compile_redirect("google", DUCKDUCKGO)
        assert compiled.variants == (
            Variant(0, "https://duckduckgo.com/"),
            Variant(1, "https://duckduckgo.com/?q=$1"),
        )

    def test_nested_optional_segments(self):
        compiled = compile_redirect("x", NESTED)
        assert compiled.variants == (
            Variant(0, "http://google.com"),
            Variant(1, "http://google.com/foo/$1"),
            Variant(2, "http://google.com/foo/$1/bar/$2"),
        )

    def test_three_levels(self):
        variants = compile_destination("http://x.com{/a/$1{/b/$2{/c/$3}}}")
        assert [v.text for v in variants] == [
            "http://x.com",
            "http://x.com/a/$1",
            "http://x.com/a/$1/b/$2",
            "http://x.com/a/$1/b/$2/c/$3",
        ]

    def test_text_after_closing_brace_lands_in_every_expanded_variant(self):
        variants = compile_destination("http://x.com/{$1/}index.html")
        assert variants == (
            Variant(0, "http://x.com/"),
            Variant(1, "http://x.com/$1/index.html"),
        )

    def test_max_arity(self):
        assert compile_redirect("x", NESTED).max_arity == 2
        assert compile_redirect("x", "https://example.com").max_arity == 0

    def test_from_model(self):
        model = RedirectModel.new(1, "google", DUCKDUCKGO)
        compiled = CompiledRedirect.from_model(model)
        assert compiled.alias == "/google"
        assert len(compiled.variants) == 2

    def test_compiled_redirect_is_frozen(self):
        compiled = compile_redirect("google", DUCKDUCKGO)
        with pytest.raises(AttributeError):
            compiled.alias = "/other"  # type: ignore[misc]


# =============================================================================
# FALLBACKS
# =============================================================================


class TestFallback:
    """Test the raw fallback for malformed templates."""

    def test_no_braces_passes_through(self):
        sink = Sink()
        variants = compile_destination("https://example.com/path?x=$1", warn=sink)
        assert variants == (Variant(0, "https://example.com/path?x=$1"),)
        assert sink.messages == []

    def test_inverted_nesting(self):
        sink = Sink()
        variants = compile_destination("http://x.com}{", warn=sink)
        assert variants == (Variant(0, "http://x.com}{"),)
        assert len(sink.messages) == 1
        assert "mismatched params" in sink.messages[0]

    def test_open_without_close_is_inverted(self):
        sink = Sink()
        variants = compile_destination("http://x.com{/a/$1", warn=sink)
        assert variants == (Variant(0, "http://x.com{/a/$1"),)
        assert len(sink.messages) == 1

    def test_odd_fragment_count(self):
        sink = Sink()
        variants = compile_destination("http://x.com/a/$1}", warn=sink)
        assert variants == (Variant(0, "http://x.com/a/$1}"),)
        assert len(sink.messages) == 1
        assert "mismatched `{` | `}`" in sink.messages[0]

    def test_unbalanced_nested_count(self):
        # Three separators: "{a{b}" splits into four fragments
        sink = Sink()
        destination = "http://x.com{a{b}"
        assert compile_destination(destination, warn=sink) == (Variant(0, destination),)
        assert len(sink.messages) == 1

    def test_default_sink_is_module_logger(self, caplog):
        with caplog.at_level(logging.WARNING, logger="golinks.redirects.compiler"):
            compile_destination("http://x.com}{")
        assert "mismatched params" in caplog.text

    def test_empty_destination(self):
        assert compile_destination("") == (Variant(0, ""),)


# =============================================================================
# PROPERTIES
# =============================================================================


class TestProperties:
    """Test invariants that hold for every compiled template."""

    @pytest.mark.parametrize("destination", DESTINATIONS)
    def test_compile_is_idempotent(self, destination):
        first = compile_redirect("alias", destination, warn=Sink())
        second = compile_redirect("alias", destination, warn=Sink())
        assert first == second

    @pytest.mark.parametrize("destination", DESTINATIONS)
    def test_arity_matches_index(self, destination):
        variants = compile_destination(destination, warn=Sink())
        assert variants
        for i, variant in enumerate(variants):
            assert variant.arity == i

    @pytest.mark.parametrize(
        "destination",
        ["http://x.com}{", "}a{", "a{b", "a}b", "a{b}c}", "{a}}"],
    )
    def test_malformed_yields_raw_text(self, destination):
        assert compile_destination(destination, warn=Sink()) == (Variant(0, destination),)

    @pytest.mark.parametrize("destination", DESTINATIONS)
    def test_variants_contain_no_braces_unless_fallback(self, destination):
        variants = compile_destination(destination, warn=Sink())
        if len(variants) > 1:
            assert all("{" not in v.text and "}" not in v.text for v in variants)
