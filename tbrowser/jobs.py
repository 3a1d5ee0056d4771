"""
Units of work run off the owner thread.

Each job takes only immutable inputs and returns one outcome value. Jobs
never touch the Session; the owner thread applies what they return.
"""

from .errors import BrowserError
from .extract import extract
from .models import Action, ContentReady, FetchFailed, Mode, SearchReady
from .search import search
from .viewer import open_external


def load_page(fetcher, url, tab_id, job, mode=Mode.FULL):
    try:
        page = fetcher.fetch(url)
        document = extract(page.soup, url, mode)
    except BrowserError as e:
        return FetchFailed(tab_id=tab_id, job=job, error=e)

    return ContentReady(
        tab_id=tab_id,
        job=job,
        url=url,
        document=document,
        status_code=page.status_code,
        elapsed=page.elapsed,
        size=page.size,
    )


def run_search(fetcher, query, job, safe_mode=True):
    try:
        results = search(fetcher, query, safe_mode=safe_mode)
    except BrowserError as e:
        return FetchFailed(tab_id=None, job=job, error=e, action=Action.SEARCH)
    return SearchReady(job=job, query=query, results=tuple(results))


def open_image(url, tab_id, job, viewers, term=None):
    # success has nothing to apply; only failures come back
    try:
        open_external(url, viewers, term=term)
    except BrowserError as e:
        return FetchFailed(tab_id=tab_id, job=job, error=e, action=Action.OPEN_IMAGE)
    return None
