import logging
import time
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .errors import HTTPStatusError, NetworkError, ParseError

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


@dataclass(frozen=True)
class Page:
    url: str
    soup: BeautifulSoup
    status_code: int
    elapsed: float
    size: int


def make_session():
    session = requests.Session()
    session.headers.update(BROWSER_HEADERS)
    return session


def parse_html(html):
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise ParseError(f"failed to parse HTML: {e}") from e


class Fetcher:
    """One GET per call, no retries. Safe to share between fetch jobs."""

    def __init__(self, timeout=15, session=None):
        self.timeout = timeout
        self.session = session or make_session()

    def get(self, url):
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"failed to fetch {url}: {e}") from e
        if not 200 <= r.status_code < 300:
            raise HTTPStatusError(r.status_code, r.reason or "")
        return r

    def fetch(self, url):
        start = time.monotonic()
        r = self.get(url)
        try:
            html = r.text
        except (UnicodeDecodeError, LookupError) as e:
            raise ParseError(f"unreadable response body: {e}") from e
        soup = parse_html(html)
        elapsed = time.monotonic() - start
        logger.debug("GET %s -> %d (%d bytes, %.2fs)", url, r.status_code, len(html), elapsed)
        return Page(url=url, soup=soup, status_code=r.status_code, elapsed=elapsed, size=len(html))

    def fetch_bytes(self, url):
        return self.get(url).content
