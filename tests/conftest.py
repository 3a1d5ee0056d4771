import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tbrowser.app import Browser
from tbrowser.config import DEFAULT_CONFIG
from tbrowser.fetch import Page, parse_html


class FakeFetcher:
    """Serves canned HTML by URL; values that are exceptions get raised."""

    def __init__(self, pages=None, gates=None):
        self.pages = dict(pages or {})
        self.gates = dict(gates or {})
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.calls.append(url)
        gate = self.gates.get(url)
        if gate is not None:
            gate.wait(5)
        value = self.pages.get(url)
        if value is None:
            value = f"<html><head><title>{url}</title></head><body><p>{url}</p></body></html>"
        if isinstance(value, Exception):
            raise value
        return Page(url=url, soup=parse_html(value), status_code=200, elapsed=0.01, size=len(value))

    def fetch_bytes(self, url):
        raise NotImplementedError


@pytest.fixture
def config(tmp_path):
    cfg = DEFAULT_CONFIG.copy()
    cfg["BOOKMARK_FILE"] = str(tmp_path / "bookmarks")
    cfg["WORKERS"] = 2
    return cfg


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def browser(config, fetcher, tmp_path):
    executor = ThreadPoolExecutor(max_workers=2)
    b = Browser(
        config=config,
        fetcher=fetcher,
        executor=executor,
        bookmark_file=str(tmp_path / "bookmarks"),
        config_file=str(tmp_path / "config.json"),
        term="xterm",
    )
    yield b
    executor.shutdown(wait=True)
