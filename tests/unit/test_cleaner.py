"""
Unit tests for the post-selection content cleaner.
"""

import pytest
from contentquarry.readability import ContentCleaner, StrictnessFlags, is_data_table, titles_match

from tests.helpers import make_soup, prose

BASE = "https://example.com/posts/1"

DATA_TABLE = (
    '<table border="1"><thead><tr><th>Name</th><th>Value</th></tr></thead><tbody>'
    "<tr><td>alpha</td><td>1</td></tr>"
    "<tr><td>beta</td><td>2</td></tr>"
    "<tr><td>gamma</td><td>3</td></tr>"
    "</tbody></table>"
)


def _root(inner):
    return make_soup(f'<html><body><div id="root">{inner}</div></body></html>').find(id="root")


class TestContentCleaner:
    """Test cases for ContentCleaner."""

    def setup_method(self):
        self.cleaner = ContentCleaner()

    def test_layout_table_is_unwrapped(self):
        root = _root(f"<p>{prose(100)}</p><table><tr><td>Layout cell text for the page.</td></tr></table>")
        self.cleaner.clean(root)

        assert root.find("table") is None
        assert root.find(["tr", "td", "tbody"]) is None
        assert "Layout cell text for the page." in [p.get_text() for p in root.find_all("p")]

    def test_data_table_is_preserved(self):
        root = _root(f"<p>{prose(100)}</p>{DATA_TABLE}")
        self.cleaner.clean(root)

        table = root.find("table")
        assert table is not None
        assert table.find("thead") is not None
        assert len(table.find_all("tr")) == 4
        assert [td.get_text() for td in table.find_all("td")] == ["alpha", "1", "beta", "2", "gamma", "3"]

    def test_clean_is_idempotent(self):
        root = _root(
            f'<nav><a href="/home">Home</a></nav>'
            f'<div class="share-tools">Share this</div>'
            f'<p class="lead" style="color: red">{prose(200)} <a href="javascript:void(0)">toggle</a></p>'
            f'<div>Just <b>inline</b> <span class="x">text</span></div>'
            f'<p> </p><h2></h2>'
            f'<table><tr><td>Layout <a href="next">cell</a></td></tr></table>'
            f'<p><img src="/a.png" srcset="/a.png 1x, /a@2x.png 2x"></p>'
            f"{DATA_TABLE}"
        )
        cleaner = ContentCleaner(base_url=BASE)
        assert cleaner.clean(root) > 0
        cleaned = str(root)

        assert cleaner.clean(root) == 0
        assert str(root) == cleaned

    def test_removes_navigation_and_share_elements(self):
        root = _root(
            f'<nav><a href="/home">Home</a></nav><div class="share-buttons">Share this</div><p>{prose(100)}</p>'
        )
        self.cleaner.clean(root, StrictnessFlags.NONE)

        assert root.find("nav") is None
        assert "Share this" not in root.get_text()

    def test_unlikely_containers_depend_on_flags(self):
        html = f'<div class="comment-thread"><p>{prose(100)}</p></div><p>{prose(100)}</p>'

        strict = _root(html)
        self.cleaner.clean(strict, StrictnessFlags.STRIP_UNLIKELYS)
        assert len(strict.find_all("p")) == 1

        relaxed = _root(html)
        self.cleaner.clean(relaxed, StrictnessFlags.NONE)
        assert len(relaxed.find_all("p")) == 2

    def test_conditional_cleaning_removes_link_blocks(self):
        html = (
            f"<p>{prose(200)}</p>"
            '<div><p><a href="/1">First related link</a> and <a href="/2">second one</a></p></div>'
        )

        cleaned = _root(html)
        self.cleaner.clean(cleaned, StrictnessFlags.ALL)
        assert "First related link" not in cleaned.get_text()

        lenient = _root(html)
        self.cleaner.clean(lenient, StrictnessFlags.STRIP_UNLIKELYS | StrictnessFlags.WEIGHT_CLASSES)
        assert "First related link" in lenient.get_text()

    def test_presentational_attributes_are_removed(self):
        root = _root('<p style="color: red" align="center">Text</p><img src="a.png" width="10" height="20">')
        self.cleaner.clean(root, StrictnessFlags.NONE)

        paragraph = root.find("p")
        assert "style" not in paragraph.attrs
        assert "align" not in paragraph.attrs
        assert root.find("img")["width"] == "10"

    def test_phrasing_divs_become_paragraphs(self):
        root = _root("<div>Just <b>inline</b> text</div>")
        self.cleaner.clean(root, StrictnessFlags.NONE)

        assert root.find("div") is None
        assert root.find("p").get_text() == "Just inline text"

    def test_empty_blocks_are_removed(self):
        root = _root('<p> </p><h2></h2><p><img src="a.png"></p><p>Kept</p>')
        self.cleaner.clean(root, StrictnessFlags.NONE)

        assert root.find("h2") is None
        assert len(root.find_all("p")) == 2
        assert root.find("img") is not None

    def test_plain_spans_are_unwrapped(self):
        root = _root('<p><span class="x">a</span> <span lang="fr">b</span></p>')
        self.cleaner.clean(root, StrictnessFlags.NONE)

        spans = root.find_all("span")
        assert [span.get("lang") for span in spans] == ["fr"]
        assert root.find("p").get_text() == "a b"

    def test_classes_are_stripped_except_preserved(self):
        root = _root('<p class="lead intro">a</p><section class="page extra"><p>b</p></section>')
        self.cleaner.clean(root, StrictnessFlags.NONE)

        assert "class" not in root.find("p").attrs
        assert root.find("section")["class"] == ["page"]

    def test_keep_classes(self):
        root = _root('<p class="lead intro">a</p>')
        ContentCleaner(keep_classes=True).clean(root, StrictnessFlags.NONE)
        assert root.find("p")["class"] == ["lead", "intro"]

    def test_javascript_links_are_unwrapped(self):
        root = _root(
            '<p>Press <a href="javascript:void(0)">here</a> now.</p>'
            '<p><a href="javascript:open()"><img src="pic.png"></a></p>'
        )
        self.cleaner.clean(root, StrictnessFlags.NONE)

        assert root.find("a") is None
        assert root.find("span") is None
        assert root.find("p").get_text() == "Press here now."
        assert root.find("img") is not None

    def test_urls_are_resolved(self):
        root = _root(
            '<p><a href="next">Next</a> <a href="#top">Top</a> <a href="mailto:a@example.com">Mail</a></p>'
            '<p><img src="/a.png" srcset="/a.png 1x, /a@2x.png 2x"></p>'
        )
        ContentCleaner(base_url=BASE).clean(root, StrictnessFlags.NONE)

        hrefs = [a["href"] for a in root.find_all("a")]
        assert hrefs == ["https://example.com/posts/next", "#top", "mailto:a@example.com"]
        image = root.find("img")
        assert image["src"] == "https://example.com/a.png"
        assert image["srcset"] == "https://example.com/a.png 1x, https://example.com/a@2x.png 2x"

    def test_urls_untouched_without_base(self):
        root = _root('<p><img src="/a.png"></p>')
        self.cleaner.clean(root, StrictnessFlags.NONE)
        assert root.find("img")["src"] == "/a.png"

    def test_media_survives_removed_containers(self):
        images = "".join(f'<img src="/g{i}.png">' for i in range(3))
        root = _root(
            f"<p>{prose(200)}</p>"
            f"<div><p>Gallery</p>{images}</div>"
            '<div><iframe src="https://maps.example.org/embed"></iframe></div>'
        )
        self.cleaner.clean(root, StrictnessFlags.ALL)

        assert [img["src"] for img in root.find_all("img")] == ["/g0.png", "/g1.png", "/g2.png"]
        assert root.find("iframe")["src"] == "https://maps.example.org/embed"

    def test_hidden_media_is_not_kept(self):
        root = _root(
            f"<p>{prose(100)}</p>"
            '<div class="share-tools"><img src="/hidden.png" style="display:none"><img src="/shown.png"></div>'
        )
        self.cleaner.clean(root, StrictnessFlags.NONE)

        assert root.find(class_="share-tools") is None
        assert [img["src"] for img in root.find_all("img")] == ["/shown.png"]

    def test_malformed_urls_are_kept_and_logged(self, caplog):
        root = _root(
            '<p><a href="http://example.com:99999/x">Bad port</a> <a href="next">Next</a></p>'
            '<p><img src="/a.png" srcset="http://example.com:99999/a.png 1x, /b.png 2x"></p>'
        )
        with caplog.at_level("WARNING", logger="contentquarry.readability.cleaner"):
            ContentCleaner(base_url=BASE).clean(root, StrictnessFlags.NONE)

        hrefs = [a["href"] for a in root.find_all("a")]
        assert hrefs == ["http://example.com:99999/x", "https://example.com/posts/next"]
        assert root.find("img")["srcset"] == "http://example.com:99999/a.png 1x, https://example.com/b.png 2x"
        assert "Could not resolve href" in caplog.text


class TestTitleHeading:
    """Test cases for title heading removal."""

    def setup_method(self):
        self.cleaner = ContentCleaner()

    def test_removes_matching_heading_and_empty_header(self):
        root = _root("<header><h1>My Title</h1></header><p>Body text.</p>")
        assert self.cleaner.remove_title_heading(root, "My  title")

        assert root.find("h1") is None
        assert root.find("header") is None
        assert root.find("p") is not None

    def test_keeps_unrelated_heading(self):
        root = _root("<h2>Chapter One</h2><p>Body text.</p>")
        assert not self.cleaner.remove_title_heading(root, "A Completely Different Title")
        assert root.find("h2") is not None

    def test_without_title(self):
        root = _root("<h1>Heading</h1>")
        assert not self.cleaner.remove_title_heading(root, None)

    @pytest.mark.parametrize(
        ("first", "second", "expected"),
        [
            ("My Title", "  my   title ", True),
            ("Breaking News Today", "Breaking News Today!", True),
            ("Chapter One", "Chapter One: The Beginning", False),
            ("", "Anything", False),
        ],
    )
    def test_titles_match(self, first, second, expected):
        assert titles_match(first, second) is expected


class TestDataTableDetection:
    """Test cases for is_data_table."""

    @pytest.mark.parametrize(
        ("markup", "expected"),
        [
            ("<table><tr><td>a</td></tr></table>", False),
            ("<table><tr><td>a</td><td>b</td></tr><tr><td>c</td><td>d</td></tr></table>", True),
            ('<table role="presentation"><thead><tr><th>a</th></tr></thead></table>', False),
            ('<table datatable="0"><caption>x</caption></table>', False),
            ('<table summary="Totals"><tr><td>a</td></tr></table>', True),
            ("<table><caption>Totals</caption><tr><td>a</td></tr></table>", True),
            ("<table><tr><td>x</td><td><table><tr><td>a</td></tr></table></td></tr></table>", False),
        ],
    )
    def test_detection(self, markup, expected):
        table = make_soup(markup).find("table")
        assert is_data_table(table) is expected
