"""
Turn a parsed page into a Document.

Two modes share the numbering rules (1-based, document order, http(s)
targets only) but lay the text out differently:

* full mode keeps the prose untouched and lists links and images as a
  separate index;
* reader mode strips page chrome and writes link numbers inline, right
  after the anchor text.
"""

import copy
import logging
import re

from bs4 import NavigableString, Tag
from bs4.element import Comment

from .locator import locate_main_content, locate_reader_content
from .models import Document, Image, Link, Mode
from .urls import clean_url, is_http_url, is_image_url, media_type_for, resolve

logger = logging.getLogger(__name__)

HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")

READER_STRIP_SELECTORS = (
    "nav, header, footer, aside, .sidebar, .ad, .advertisement, .navbar, "
    ".menu, .navigation, script, style, iframe, .comments, .social-share"
)

NAVIGATION_WORDS = [
    "home", "about", "contact", "login", "sign up", "register", "shop", "buy now",
    "subscribe", "follow", "share", "menu", "navigation", "categories", "tags",
    "archives", "search", "advertise", "sponsored", "popular", "trending",
]

SKIP_HREF_PREFIXES = ("#", "javascript:", "mailto:", "tel:")
SKIP_HREF_PATHS = ["/home", "/about", "/contact", "/login", "/signup",
                   "/register", "/shop", "/buy"]

SKIP_IMAGE_PATTERNS = ["icon", "logo", "sprite", "button", "arrow",
                       "spacer", "pixel", "tracking", "ads"]

IMAGE_MARK = "🖼️"
LINKED_IMAGE_MARK = "🔗🖼️"

MIN_TEXT = 10
MIN_PARAGRAPH = 20


# ========= TEXT HELPERS =========

def clean_paragraph(text):
    text = text.replace("\n", " ")
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def extract_title(soup):
    if soup.title and soup.title.string:
        return clean_paragraph(soup.title.string)
    return ""


def heading_marker(name):
    return "#" * min(int(name[1]), 4)


def is_navigation_text(text):
    low = text.lower()
    return any(word in low for word in NAVIGATION_WORDS)


def should_include_link(text, href):
    if is_navigation_text(text):
        return False
    low = href.strip().lower()
    if low.startswith(SKIP_HREF_PREFIXES):
        return False
    return not any(path in low for path in SKIP_HREF_PATHS)


def should_include_image(alt, src):
    low_src = src.lower()
    low_alt = alt.lower()
    return not any(p in low_src or p in low_alt for p in SKIP_IMAGE_PATTERNS)


def _iter_tags(root, names):
    if root.name in names:
        yield root
    yield from root.find_all(names)


# ========= IMAGES + LINKS =========

def _image_record(number, img, base_url):
    src = clean_url(img.get("src", ""))
    parent_link = img.find_parent("a")
    link_url = ""
    if parent_link is not None:
        href = (parent_link.get("href") or "").strip()
        if href:
            link_url = resolve(base_url, href)

    return Image(
        number=number,
        resolved_url=resolve(base_url, src),
        alt_text=(img.get("alt") or "").strip(),
        media_type=media_type_for(src),
        is_linked=parent_link is not None,
        link_url=link_url,
    )


def collect_images(root, base_url, keep=None):
    images = []
    for img in _iter_tags(root, ["img"]):
        src = clean_url(img.get("src", ""))
        if not src:
            continue
        if keep is not None and not keep(img.get("alt") or "", src):
            continue
        images.append(_image_record(len(images) + 1, img, base_url))
    return images


def anchor_label(a):
    text = clean_paragraph(a.get_text())
    if text:
        return text

    img = a.find("img")
    if img is not None:
        alt = (img.get("alt") or "").strip()
        if alt:
            return f"{IMAGE_MARK} {alt}"
        return f"{IMAGE_MARK} Image link"

    return a.get("href", "")


def make_link(number, text, href, base_url):
    """Build a numbered Link, or None if the target is not http(s)."""
    resolved = resolve(base_url, href)
    if not is_http_url(resolved):
        return None
    return Link(
        number=number,
        text=text,
        href=href,
        resolved_url=resolved,
        is_image_target=is_image_url(resolved),
    )


def collect_links(root, base_url):
    links = []
    for a in _iter_tags(root, ["a"]):
        href = (a.get("href") or "").strip()
        if not href:
            continue
        link = make_link(len(links) + 1, anchor_label(a), href, base_url)
        if link is not None:
            links.append(link)
    return links


def images_section(images, title, placeholder):
    out = [f"\n--- {title} ---\n\n"]
    for img in images:
        alt = img.alt_text or placeholder
        mark = LINKED_IMAGE_MARK if img.is_linked else IMAGE_MARK
        out.append(f"{mark} [img{img.number}] {alt}\n")
        out.append(f"    {img.resolved_url}\n\n")
    return "".join(out)


# ========= FULL MODE =========

def extract_full(soup, base_url):
    main = locate_main_content(soup)

    images = collect_images(main, base_url)
    links = collect_links(main, base_url)

    parts = []
    for el in _iter_tags(main, list(HEADINGS) + ["p"]):
        text = clean_paragraph(el.get_text())
        if not text:
            continue
        if el.name in HEADINGS:
            parts.append(f"{heading_marker(el.name)} {text}\n\n")
        else:
            parts.append(f"{text}\n\n")

    if images:
        parts.append(images_section(images, f"{IMAGE_MARK} Images", "No description"))

    body = "".join(parts)
    logger.debug("Full extraction of %s: %d links, %d images, %d chars",
                 base_url, len(links), len(images), len(body))
    return Document(
        body=body,
        links=tuple(links),
        images=tuple(images),
        mode=Mode.FULL,
        title=extract_title(soup),
        url=base_url,
    )


# ========= READER MODE =========

class _ReaderTranscript:
    """Single walk over the stripped article producing inline-numbered text."""

    def __init__(self, base_url):
        self.base_url = base_url
        self.parts = []
        self.links = []

    def _next_number(self, pending):
        return len(self.links) + len(pending) + 1

    def _accept(self, text, href, pending):
        if not text or not href:
            return None
        if not should_include_link(text, href):
            return None
        return make_link(self._next_number(pending), text, href, self.base_url)

    def _inline(self, el, pending):
        out = []
        for child in el.children:
            if isinstance(child, Tag):
                if child.name == "a":
                    text = clean_paragraph(child.get_text())
                    link = self._accept(text, (child.get("href") or "").strip(), pending)
                    if link is None:
                        out.append(child.get_text())
                    else:
                        pending.append(link)
                        out.append(f"{text} [{link.number}]")
                else:
                    out.append(self._inline(child, pending))
            elif isinstance(child, NavigableString) and not isinstance(child, Comment):
                out.append(str(child))
        return "".join(out)

    def _block(self, el, min_len=MIN_TEXT, allow_short_with_links=False):
        plain = clean_paragraph(el.get_text())
        if len(plain) < MIN_TEXT or is_navigation_text(plain):
            return None
        pending = []
        text = clean_paragraph(self._inline(el, pending))
        if len(plain) <= min_len and not (allow_short_with_links and pending):
            return None
        self.links.extend(pending)
        return text

    def _list(self, el):
        plain = clean_paragraph(el.get_text())
        if len(plain) < MIN_TEXT or is_navigation_text(plain):
            return
        items = el.find_all("li", recursive=False) or el.find_all("li")
        for li in items:
            text = self._block(li)
            if text is not None:
                self.parts.append(f"- {text}\n")
        self.parts.append("\n")

    def _anchor(self, a):
        text = clean_paragraph(a.get_text())
        if len(text) < MIN_TEXT:
            return
        link = self._accept(text, (a.get("href") or "").strip(), [])
        if link is not None:
            self.links.append(link)
            self.parts.append(f"{text} [{link.number}] ")

    def visit(self, el):
        name = el.name
        if name in HEADINGS:
            text = self._block(el, min_len=0)
            if text is not None:
                self.parts.append(f"{heading_marker(name)} {text}\n\n")
        elif name == "p":
            text = self._block(el, min_len=MIN_PARAGRAPH, allow_short_with_links=True)
            if text is not None:
                self.parts.append(f"{text}\n\n")
        elif name == "blockquote":
            text = self._block(el, min_len=0)
            if text is not None:
                self.parts.append(f"> {text}\n\n")
        elif name in ("ul", "ol"):
            self._list(el)
        elif name == "a":
            self._anchor(el)
        else:
            self.walk(el)

    def walk(self, el):
        for child in el.children:
            if isinstance(child, Tag):
                self.visit(child)


def strip_boilerplate(root):
    for el in root.select(READER_STRIP_SELECTORS):
        if not el.decomposed:
            el.decompose()


def extract_reader(soup, base_url):
    # the original soup stays intact for the image pass below
    working = copy.copy(soup)
    main = locate_reader_content(working)
    strip_boilerplate(main)

    transcript = _ReaderTranscript(base_url)
    transcript.visit(main)

    images = collect_images(soup, base_url, keep=should_include_image)

    parts = transcript.parts
    if images:
        parts.append(images_section(images, "Images", "Image"))

    body = "".join(parts)
    logger.debug("Reader extraction of %s: %d links, %d images, %d chars",
                 base_url, len(transcript.links), len(images), len(body))
    return Document(
        body=body,
        links=tuple(transcript.links),
        images=tuple(images),
        mode=Mode.READER,
        title=extract_title(soup),
        url=base_url,
    )


def extract(soup, base_url, mode=Mode.FULL):
    if mode == Mode.READER:
        return extract_reader(soup, base_url)
    return extract_full(soup, base_url)
