"""Tests for citation resolution."""

from asktabs.core.citations import CitationResolver, QuotedTitleMatcher
from asktabs.core.models import Citation


class TestQuotedTitleMatcher:
    def test_matches_quoted_title_case_insensitively(self):
        assert QuotedTitleMatcher().matches("Rust Book", 'See "rust book" for more.')

    def test_unquoted_title_does_not_match(self):
        assert not QuotedTitleMatcher().matches("Rust Book", "See Rust Book for more.")

    def test_regex_characters_are_literal(self):
        """Titles containing regex metacharacters must match literally."""
        title = "C++ (2024) [draft] $5?"

        assert QuotedTitleMatcher().matches(title, f'Open "{title}" now')
        assert not QuotedTitleMatcher().matches(title, 'Open "C (2024) draft 5" now')


class TestCitationResolver:
    def test_quoted_title_is_cited_exactly_once(self, record_factory):
        """A title quoted several times still yields a single citation."""
        tabs = [record_factory("1", "Rust Book"), record_factory("2", "Go Tour")]
        answer = '"Rust Book" explains ownership. Again, "Rust Book" is great.'

        citations = CitationResolver().resolve(answer, tabs, considered=tabs)

        assert citations == [Citation.from_tab(tabs[0])]

    def test_citations_follow_scan_order(self, record_factory):
        tabs = [
            record_factory("1", "Alpha Article"),
            record_factory("2", "Beta Article"),
        ]
        answer = 'First "Beta Article", then "Alpha Article".'

        citations = CitationResolver().resolve(answer, tabs)

        assert [c.tab_id for c in citations] == ["1", "2"]

    def test_short_titles_are_never_matched(self, record_factory):
        tabs = [record_factory("1", "Docs"), record_factory("2", "Rust Book")]
        answer = 'Open "Docs" and "Rust Book".'

        citations = CitationResolver().match(answer, tabs)

        assert [c.tab_id for c in citations] == ["2"]

    def test_falls_back_to_considered_tabs(self, record_factory):
        candidates = [record_factory(str(i), f"Tab number {i}") for i in range(4)]
        considered = candidates[:2]

        citations = CitationResolver().resolve(
            "Nothing quoted here.", candidates, considered=considered
        )

        assert [c.tab_id for c in citations] == ["0", "1"]

    def test_citations_are_copies(self, record_factory):
        tab = record_factory("7", "Rust Book")

        citation = CitationResolver().match('"Rust Book"', [tab])[0]

        assert citation == Citation(
            title="Rust Book",
            url="https://example.com/7",
            favicon_url="https://example.com/7.ico",
            tab_id="7",
        )

    def test_custom_matcher(self, record_factory):
        class PrefixMatcher:
            def matches(self, title, answer):
                return answer.startswith(title)

        tabs = [record_factory("1", "Rust Book")]
        resolver = CitationResolver(matcher=PrefixMatcher())

        assert resolver.match("Rust Book rules", tabs)[0].tab_id == "1"
