"""Tests for full and reader extraction."""

from bs4 import BeautifulSoup

from tbrowser.extract import (
    extract,
    extract_full,
    extract_reader,
    is_navigation_text,
    should_include_image,
    should_include_link,
)
from tbrowser.models import MediaType, Mode

BASE = "https://site.example/page"
EXAMPLE = '<h1>Title</h1><p>Read <a href="/x">more</a> here.</p>'


def soup_of(html):
    return BeautifulSoup(html, "html.parser")


class TestFullMode:
    """Tests for full-mode extraction."""

    def test_heading_link_and_untouched_prose(self):
        doc = extract_full(soup_of(EXAMPLE), BASE)

        assert doc.mode == Mode.FULL
        assert doc.body.startswith("# Title\n\n")
        assert "Read more here." in doc.body
        assert "[1]" not in doc.body
        assert len(doc.links) == 1
        link = doc.links[0]
        assert link.number == 1
        assert link.text == "more"
        assert link.href == "/x"
        assert link.resolved_url == "https://site.example/x"

    def test_heading_depths_collapse(self):
        html = "<h2>Two</h2><h3>Three</h3><h5>Five</h5><h6>Six</h6>"
        doc = extract_full(soup_of(html), BASE)
        assert "## Two\n\n### Three\n\n#### Five\n\n#### Six\n\n" == doc.body

    def test_non_http_links_dropped_and_numbers_contiguous(self):
        html = """<p>
            <a href="/a">A</a>
            <a href="mailto:x@y.z">mail</a>
            <a href="javascript:void(0)">js</a>
            <a href="">empty</a>
            <a href="https://other.example/b">B</a>
        </p>"""
        doc = extract_full(soup_of(html), BASE)
        assert [(l.number, l.text) for l in doc.links] == [(1, "A"), (2, "B")]

    def test_anchor_label_fallbacks(self):
        html = """<div>
            <a href="/one"><img src="a.png" alt="Logo of site"></a>
            <a href="/two"><img src="b.png"></a>
            <a href="/three"></a>
        </div>"""
        doc = extract_full(soup_of(html), BASE)
        texts = [l.text for l in doc.links]
        assert texts == ["🖼️ Logo of site", "🖼️ Image link", "/three"]

    def test_images_collected_with_link_state(self):
        html = """<div>
            <img src=" /pics/
                cat.jpeg " alt="A cat">
            <a href="/gallery"><img src="/pics/dog.png"></a>
            <img src="">
        </div>"""
        doc = extract_full(soup_of(html), BASE)

        assert len(doc.images) == 2
        cat, dog = doc.images
        assert cat.number == 1
        assert cat.resolved_url == "https://site.example/pics/cat.jpeg"
        assert cat.media_type == MediaType.JPEG
        assert not cat.is_linked
        assert dog.is_linked
        assert dog.link_url == "https://site.example/gallery"
        assert dog.media_type == MediaType.PNG

    def test_images_section_after_body(self):
        html = '<p>Body text</p><img src="/a.gif" alt="Anim"><a href="/l"><img src="/b.svg"></a>'
        doc = extract_full(soup_of(html), BASE)

        body_pos = doc.body.index("Body text")
        section_pos = doc.body.index("Images ---")
        assert body_pos < section_pos
        assert "🖼️ [img1] Anim" in doc.body
        assert "🔗🖼️ [img2] No description" in doc.body
        assert "https://site.example/a.gif" in doc.body

    def test_link_to_image_is_flagged(self):
        doc = extract_full(soup_of('<p><a href="/big.jpg">full size</a></p>'), BASE)
        assert doc.links[0].is_image_target

    def test_numbering_is_idempotent(self):
        html = "<p>" + " ".join(f'<a href="/p{i}">link {i}</a>' for i in range(8)) + "</p>"
        first = extract_full(soup_of(html), BASE)
        second = extract_full(soup_of(html), BASE)
        assert first.links == second.links
        assert [l.number for l in first.links] == list(range(1, 9))

    def test_title_recorded(self):
        doc = extract_full(soup_of("<html><head><title> My  Page </title></head><body><p>x</p></body></html>"), BASE)
        assert doc.title == "My Page"
        assert doc.url == BASE

    def test_uses_main_content(self):
        html = """<body>
            <nav><a href="/n1">Navigation link</a></nav>
            <article><p>Article paragraph</p><a href="/story">Story</a></article>
        </body>"""
        doc = extract_full(soup_of(html), BASE)
        assert [l.text for l in doc.links] == ["Story"]
        assert "Navigation link" not in doc.body


class TestReaderMode:
    """Tests for reader-mode extraction."""

    def test_inline_link_numbers(self):
        doc = extract_reader(soup_of(EXAMPLE), BASE)

        assert doc.mode == Mode.READER
        assert "Read more [1] here." in doc.body
        assert len(doc.links) == 1
        assert doc.links[0].resolved_url == "https://site.example/x"

    def test_boilerplate_removed_from_copy_only(self):
        html = """<body>
            <header><p>This header paragraph should disappear entirely</p></header>
            <article>
              <p>The article body is long enough to be kept in reader mode.</p>
              <aside><p>Aside paragraph that is also long enough to show</p></aside>
            </article>
            <footer><p>Footer text that is long enough to be a paragraph</p></footer>
        </body>"""
        soup = soup_of(html)
        doc = extract_reader(soup, BASE)

        assert "The article body is long enough" in doc.body
        assert "Aside paragraph" not in doc.body
        assert "header paragraph" not in doc.body
        # the caller's soup keeps everything
        assert soup.find("aside") is not None
        assert soup.find("footer") is not None

    def test_short_text_and_short_paragraphs_skipped(self):
        html = "<body><h2>Short</h2><p>Only sixteen chr</p><p>This paragraph is comfortably long.</p></body>"
        doc = extract_reader(soup_of(html), BASE)
        assert "Short" not in doc.body
        assert "Only sixteen" not in doc.body
        assert "This paragraph is comfortably long.\n\n" in doc.body

    def test_navigation_words_drop_blocks(self):
        html = """<body>
            <p>Please subscribe to our newsletter for weekly updates</p>
            <h2>Trending stories this week</h2>
            <p>A paragraph on rivers and their many tributaries.</p>
        </body>"""
        doc = extract_reader(soup_of(html), BASE)
        assert "subscribe" not in doc.body
        assert "Trending" not in doc.body
        assert "rivers" in doc.body

    def test_heading_markers(self):
        html = "<body><h1>First level heading</h1><h6>Sixth level heading</h6></body>"
        doc = extract_reader(soup_of(html), BASE)
        assert "# First level heading\n\n" in doc.body
        assert "#### Sixth level heading\n\n" in doc.body

    def test_lists(self):
        html = """<body><ul>
            <li>First item with enough text</li>
            <li>tiny</li>
            <li>Second item with enough text</li>
        </ul><p>Paragraph after the list is long enough.</p></body>"""
        doc = extract_reader(soup_of(html), BASE)
        assert "- First item with enough text\n- Second item with enough text\n\n" in doc.body
        assert "tiny" not in doc.body

    def test_blockquote(self):
        doc = extract_reader(soup_of("<body><blockquote>To be or not to be</blockquote></body>"), BASE)
        assert "> To be or not to be\n\n" in doc.body

    def test_matched_block_keeps_its_own_text(self):
        html = '<body><p class="post-content">The matched paragraph carries the whole article text.</p></body>'
        doc = extract_reader(soup_of(html), BASE)
        assert doc.body.startswith("The matched paragraph carries the whole article text.\n\n")

    def test_matched_list_keeps_its_items(self):
        html = '<body><ul class="post-body"><li>First item with enough text</li></ul></body>'
        doc = extract_reader(soup_of(html), BASE)
        assert "- First item with enough text\n" in doc.body

    def test_standalone_anchor_flows_inline(self):
        html = """<body>
            <div><a href="/guide">A complete guide to rivers</a></div>
            <p>The next paragraph comes right after it.</p>
        </body>"""
        doc = extract_reader(soup_of(html), BASE)
        assert "A complete guide to rivers [1] The next paragraph" in doc.body

    def test_skip_patterns_reject_links(self):
        html = """<body><p>
            Links: <a href="#top">back to the top</a>,
            <a href="/login">your account page</a>,
            <a href="mailto:me@site.example">write to me</a>,
            <a href="/story">the full story</a>.
        </p></body>"""
        doc = extract_reader(soup_of(html), BASE)
        assert [l.text for l in doc.links] == ["the full story"]
        assert doc.links[0].number == 1
        assert "the full story [1]" in doc.body

    def test_images_from_original_document_with_skip_patterns(self):
        html = """<body>
            <header><img src="/logo.png" alt="Site"></header>
            <nav><img src="/photos/bridge.jpg" alt="Bridge at dusk"></nav>
            <article><p>An article about bridges and how they are built.</p>
            <img src="/icons/share.svg"><img src="/photos/river.webp"></article>
        </body>"""
        doc = extract_reader(soup_of(html), BASE)

        assert [i.resolved_url for i in doc.images] == [
            "https://site.example/photos/bridge.jpg",
            "https://site.example/photos/river.webp",
        ]
        assert [i.number for i in doc.images] == [1, 2]
        assert "--- Images ---" in doc.body
        assert "[img2] Image" in doc.body

    def test_numbering_is_idempotent(self):
        html = "<body><p>" + " ".join(
            f'See <a href="/p{i}">chapter number {i}</a> for details.' for i in range(5)
        ) + "</p></body>"
        first = extract_reader(soup_of(html), BASE)
        second = extract_reader(soup_of(html), BASE)
        assert first.links == second.links
        assert first.body == second.body


class TestFilters:
    """Tests for the reader-mode filters."""

    def test_navigation_text(self):
        assert is_navigation_text("Sign Up today")
        assert is_navigation_text("MENU")
        assert not is_navigation_text("An ordinary sentence")

    def test_should_include_link(self):
        assert should_include_link("the story", "/2024/story")
        assert not should_include_link("the story", "#section")
        assert not should_include_link("the story", "JavaScript:go()")
        assert not should_include_link("the story", "tel:123")
        assert not should_include_link("the story", "https://site.example/shop/item")
        assert not should_include_link("login here", "/account")

    def test_should_include_image(self):
        assert should_include_image("A river", "/photos/river.jpg")
        assert not should_include_image("", "/img/sprite.png")
        assert not should_include_image("Company logo", "/img/brand.png")


class TestDispatch:
    """Tests for extract()."""

    def test_modes(self):
        assert extract(soup_of(EXAMPLE), BASE).mode == Mode.FULL
        assert extract(soup_of(EXAMPLE), BASE, Mode.READER).mode == Mode.READER

    def test_same_link_same_url_in_both_modes(self):
        full = extract(soup_of(EXAMPLE), BASE, Mode.FULL)
        reader = extract(soup_of(EXAMPLE), BASE, Mode.READER)
        assert full.links[0].resolved_url == reader.links[0].resolved_url
