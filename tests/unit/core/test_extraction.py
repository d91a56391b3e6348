"""Unit tests for the page text extraction cascade."""

from asktabs.core.extraction import (
    LOADING_TEXT,
    PageTextExtractor,
    collapse_whitespace,
)

LONG_SENTENCE = "Structured concurrency keeps async code readable and safe. "


class TestMainContentStrategy:
    """Strategy 1: prioritized main-content regions."""

    def test_extracts_main_without_noise(self, sample_article_html):
        """Should keep the article body and drop nav, footer, sidebar and scripts."""
        result = PageTextExtractor().extract(sample_article_html, "complete")

        assert result.success
        assert result.strategy == "main"
        assert result.title == "Rust Book"
        assert "Ownership is Rust's most unique feature" in result.text
        assert "Sign in" not in result.text
        assert "Copyright footer" not in result.text
        assert "sidebar links" not in result.text
        assert "tracking" not in result.text

    def test_longest_candidate_wins(self):
        """The longest region above the floor should be chosen."""
        short = LONG_SENTENCE * 5
        long = "Longer article text about event loops and schedulers. " * 12
        html = f"""
        <html><body>
            <article><p>{short}</p></article>
            <div class="post-content"><p>{long}</p></div>
        </body></html>
        """

        result = PageTextExtractor().extract(html)

        assert result.strategy == "main"
        assert result.text == collapse_whitespace(long)

    def test_whitespace_is_collapsed(self):
        """Runs of whitespace and newlines should become single spaces."""
        html = "<main><p>" + ("alpha \n\n\t beta   " * 40) + "</p></main>"

        result = PageTextExtractor().extract(html)

        assert "  " not in result.text
        assert "\n" not in result.text
        assert result.text.startswith("alpha beta alpha beta")


class TestBodyStrategy:
    """Strategy 2: whole body when main content is too short."""

    def test_falls_back_to_body(self):
        """Pages without main regions should use the stripped body."""
        html = f"""
        <html><body>
            <div id="wrap"><p>{LONG_SENTENCE * 8}</p></div>
            <nav>Menu items everywhere</nav>
            <div class="cookie-consent">Accept all cookies please</div>
        </body></html>
        """

        result = PageTextExtractor().extract(html)

        assert result.strategy == "body"
        assert result.success
        assert "Structured concurrency" in result.text
        assert "Menu items" not in result.text
        assert "Accept all cookies" not in result.text

    def test_short_main_region_uses_body(self):
        """A main region between the floor and 300 chars is not sufficient."""
        main_text = ("x" * 9 + " ") * 25  # 250 chars
        html = f"""
        <html><body>
            <main><p>{main_text}</p></main>
            <section><p>{LONG_SENTENCE * 4}</p></section>
        </body></html>
        """

        result = PageTextExtractor().extract(html)

        assert result.strategy == "body"
        assert "Structured concurrency" in result.text


class TestBlockStrategy:
    """Strategy 3: harvesting paragraph-like blocks."""

    def test_harvests_blocks_when_body_is_empty(self):
        """Content hidden in stripped regions is recovered block by block."""
        paragraph = ("word " * 30).strip()
        html = f"""
        <html><body>
            <header>
                <p>{paragraph}</p>
                <p>{paragraph}</p>
                <p>{paragraph}</p>
                <p>too short</p>
            </header>
        </body></html>
        """

        result = PageTextExtractor().extract(html)

        assert result.strategy == "blocks"
        assert result.success
        assert result.text == " ".join([paragraph] * 3)
        assert "too short" not in result.text

    def test_blocks_are_capped(self):
        """Harvested text should never exceed 8000 characters."""
        paragraph = ("lorem ipsum " * 60).strip()
        html = (
            "<html><body><header>"
            + "".join(f"<p>{paragraph}</p>" for _ in range(30))
            + "</header></body></html>"
        )

        result = PageTextExtractor().extract(html)

        assert result.strategy == "blocks"
        assert len(result.text) == 8000


class TestExtractionOutcome:
    """Success flag, caps and failure modes."""

    def test_tiny_page_is_not_success(self):
        result = PageTextExtractor().extract("<html><body><p>Hi</p></body></html>")

        assert not result.success
        assert result.length < 100

    def test_text_is_capped_at_max_chars(self):
        """Stored text is capped while length reports the full size."""
        html = "<main><p>" + ("a " * 10000) + "</p></main>"

        result = PageTextExtractor().extract(html)

        assert result.success
        assert len(result.text) == 10000
        assert result.length == 19999

    def test_loading_page_is_not_success(self, sample_article_html):
        result = PageTextExtractor().extract(sample_article_html, "loading")

        assert not result.success
        assert result.text == LOADING_TEXT

    def test_empty_input_does_not_raise(self):
        result = PageTextExtractor().extract("")

        assert not result.success
        assert result.text == ""
