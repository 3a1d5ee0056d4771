import logging
from urllib.parse import quote_plus

from .extract import clean_paragraph
from .models import SearchResult
from .urls import is_ad_or_tracker, is_http_url, resolve, unwrap_generic_redirect

logger = logging.getLogger(__name__)

DUCK_HTML = "https://html.duckduckgo.com/html/?q={query}"
FALLBACK_SEARCH = "https://www.google.com/search?q={query}"

RESULT_SELECTOR = ".result"
TITLE_SELECTOR = ".result__a"
SNIPPET_SELECTOR = ".result__snippet"

MAX_RESULTS = 10


def search_url(query):
    return DUCK_HTML.format(query=quote_plus(query))


def fallback_result(query):
    return SearchResult(
        number=1,
        title=f"Search for: {query}",
        url=FALLBACK_SEARCH.format(query=quote_plus(query)),
        snippet="Open this to view the results on Google",
    )


def parse_results(soup, query, safe_mode=True, base_url=DUCK_HTML):
    results = []
    for block in soup.select(RESULT_SELECTOR):
        if len(results) >= MAX_RESULTS:
            break

        a = block.select_one(TITLE_SELECTOR)
        if a is None:
            continue
        title = clean_paragraph(a.get_text())
        href = (a.get("href") or "").strip()
        if not title or not href:
            continue

        href = resolve(base_url, unwrap_generic_redirect(href))
        if not is_http_url(href):
            logger.debug("Skipping non-web result %s", href)
            continue
        if safe_mode and is_ad_or_tracker(href):
            logger.debug("Dropping tracker result %s", href)
            continue

        snippet_el = block.select_one(SNIPPET_SELECTOR)
        snippet = clean_paragraph(snippet_el.get_text()) if snippet_el else ""

        results.append(SearchResult(
            number=len(results) + 1,
            title=title,
            url=href,
            snippet=snippet,
        ))

    if not results:
        logger.debug("No parsable results for %r, using fallback", query)
        results.append(fallback_result(query))

    return results


def search(fetcher, query, safe_mode=True):
    page = fetcher.fetch(search_url(query))
    return parse_results(page.soup, query, safe_mode=safe_mode, base_url=page.url)
