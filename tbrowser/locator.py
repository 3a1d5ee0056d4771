"""Find the part of a page that holds the article text."""

import logging

logger = logging.getLogger(__name__)

CONTENT_SELECTORS = [
    "article",
    "main",
    "[role='main']",
    ".content",
    "#content",
    "#main",
    ".main-content",
    ".post-content",
    ".entry-content",
    ".article-content",
    "#mw-content-text",
]

READER_SELECTORS = [
    "article",
    "main",
    "[role='main']",
    ".content",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".post-body",
    ".story-content",
    ".main-content",
]

CANDIDATE_TAGS = ["div", "section", "main", "article"]

MIN_TEXT_LENGTH = 100
MAX_LINK_RATIO = 0.3


def root_of(soup):
    return soup.body or soup


def first_match(soup, selectors):
    for selector in selectors:
        for el in soup.select(selector):
            if el.get_text(strip=True):
                return el
    return None


def score_candidate(el):
    """Return density * word count, or 0 when the block looks like chrome."""
    raw = el.get_text()
    text = raw.strip()
    if len(text) < MIN_TEXT_LENGTH:
        return 0.0

    words = len(text.split())
    if words == 0:
        return 0.0

    anchors = len(el.find_all("a"))
    if anchors / words > MAX_LINK_RATIO:
        return 0.0

    density = len(text) / len(raw)
    return density * words


def densest_block(soup):
    best, best_score = None, 0.0
    for el in soup.find_all(CANDIDATE_TAGS):
        score = score_candidate(el)
        if score > best_score:
            best, best_score = el, score
    return best


def locate_main_content(soup):
    main = first_match(soup, CONTENT_SELECTORS)
    if main is not None:
        return main

    main = densest_block(soup)
    if main is not None:
        logger.debug("Main content from density fallback: <%s>", main.name)
        return main

    return root_of(soup)


def locate_reader_content(soup):
    main = first_match(soup, READER_SELECTORS)
    if main is not None:
        return main
    return root_of(soup)
