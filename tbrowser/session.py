"""
Tabs, per-tab history and everything else the owner thread mutates.

Only the owner thread touches a Session. Fetch jobs hand back outcome
values and ``apply_outcome`` merges them into the tab that issued them.
"""

import itertools
import logging

from .bookmarks import BookmarkSet
from .errors import HTTPStatusError
from .models import (
    Action,
    ContentReady,
    Document,
    FetchFailed,
    Mode,
    SearchReady,
    Status,
    Tab,
    ViewMode,
)

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, bookmarks=None, first_tab=None):
        self.tabs = [first_tab or Tab(id=0)]
        self.tabs[0].id = 0
        self.active_tab = 0
        self.bookmarks = bookmarks if bookmarks is not None else BookmarkSet()
        self.search_results = []
        self.search_query = ""
        self.view_mode = ViewMode.CONTENT
        self.selected_image = None
        self.status = Status()
        self.pending_search_job = 0
        self._jobs = itertools.count(1)

    # ========= TABS =========

    @property
    def active(self):
        return self.tabs[self.active_tab]

    @property
    def document(self):
        return self.active.document

    def get_tab(self, tab_id):
        if tab_id is not None and 0 <= tab_id < len(self.tabs):
            return self.tabs[tab_id]
        return None

    def new_tab(self, url=""):
        tab = Tab(id=len(self.tabs))
        if url:
            tab.navigate_to(url)
        self.tabs.append(tab)
        self._show_tab(len(self.tabs) - 1)
        return tab

    def close_tab(self, tab_id):
        if len(self.tabs) <= 1 or self.get_tab(tab_id) is None:
            return False

        del self.tabs[tab_id]
        for i, tab in enumerate(self.tabs):
            tab.id = i

        if self.active_tab >= len(self.tabs):
            self.active_tab = len(self.tabs) - 1
        elif self.active_tab >= tab_id:
            self.active_tab = max(0, self.active_tab - 1)

        self._show_tab(self.active_tab)
        return True

    def switch_tab(self, tab_id):
        if self.get_tab(tab_id) is None:
            return False
        self._show_tab(tab_id)
        return True

    def next_tab(self):
        return self.switch_tab((self.active_tab + 1) % len(self.tabs))

    def prev_tab(self):
        return self.switch_tab((self.active_tab - 1) % len(self.tabs))

    def _show_tab(self, tab_id):
        # pure pointer move: the tab's stored document becomes the display
        self.active_tab = tab_id
        self.view_mode = ViewMode.CONTENT
        self.selected_image = None
        tab = self.active
        self.status = Status(
            error=tab.error,
            link_count=len(tab.document.links),
            image_count=len(tab.document.images),
        )

    # ========= VIEWS =========

    def show(self, view_mode):
        self.view_mode = view_mode
        self.selected_image = None

    def numbered_items(self):
        """The list a typed number selects from in the current view."""
        if self.view_mode == ViewMode.SEARCH:
            return list(self.search_results)
        if self.view_mode == ViewMode.BOOKMARKS:
            return list(self.bookmarks)
        if self.view_mode == ViewMode.HISTORY:
            return list(self.active.history)
        if self.view_mode == ViewMode.IMAGES:
            return list(self.document.images)
        return list(self.document.links)

    # ========= BOOKMARKS =========

    def bookmark_current(self):
        """Add the active page; returns the Bookmark or None if nothing was added."""
        tab = self.active
        if tab.cursor < 0:
            return None
        url = tab.current_url
        title = tab.document.title if tab.document.url == url else ""
        if not self.bookmarks.add(title or "Untitled", url):
            return None
        return self.bookmarks[len(self.bookmarks) - 1]

    # ========= JOBS =========

    def next_job(self):
        return next(self._jobs)

    def begin_load(self, tab, stage="Loading"):
        job = self.next_job()
        tab.pending_job = job
        tab.error = ""
        if tab is self.active:
            self.status = Status(loading=True, stage=stage)
        logger.debug("Job %d: load %s in tab %d", job, tab.current_url, tab.id)
        return job

    def begin_search(self, query):
        job = self.next_job()
        self.pending_search_job = job
        self.search_query = query
        self.status = Status(loading=True, stage="Searching")
        logger.debug("Job %d: search %r", job, query)
        return job

    def _tab_waiting_for(self, tab_id, job):
        # ids shift when tabs close, job numbers never repeat
        tab = self.get_tab(tab_id)
        if tab is not None and tab.pending_job == job:
            return tab
        for tab in self.tabs:
            if tab.pending_job == job:
                return tab
        return None

    def apply_outcome(self, outcome):
        """Merge one job outcome; returns False when it was stale and dropped."""
        if isinstance(outcome, ContentReady):
            return self._apply_content(outcome)
        if isinstance(outcome, SearchReady):
            return self._apply_search(outcome)
        if isinstance(outcome, FetchFailed):
            return self._apply_failure(outcome)
        raise TypeError(f"unknown outcome {outcome!r}")

    def _apply_content(self, outcome):
        tab = self._tab_waiting_for(outcome.tab_id, outcome.job)
        if tab is None:
            logger.debug("Discarding stale content for job %d", outcome.job)
            return False

        doc = outcome.document
        tab.document = doc
        tab.title = doc.title or outcome.url
        tab.reader_mode = doc.mode == Mode.READER
        tab.pending_job = 0
        tab.error = ""

        if tab is self.active:
            self.view_mode = ViewMode.CONTENT
            self.selected_image = None
            self.status = Status(
                stage="Loaded",
                status_code=outcome.status_code,
                elapsed=outcome.elapsed,
                size=outcome.size,
                link_count=len(doc.links),
                image_count=len(doc.images),
            )
        return True

    def _apply_search(self, outcome):
        if outcome.job != self.pending_search_job:
            logger.debug("Discarding stale search results for job %d", outcome.job)
            return False
        self.pending_search_job = 0
        self.search_query = outcome.query
        self.search_results = list(outcome.results)
        self.view_mode = ViewMode.SEARCH
        self.status = Status(stage="Search results")
        return True

    def _apply_failure(self, outcome):
        err = outcome.error
        code = err.status_code if isinstance(err, HTTPStatusError) else 0

        if outcome.action == Action.SEARCH:
            if outcome.job != self.pending_search_job:
                return False
            self.pending_search_job = 0
            self.status = Status(error=str(err), status_code=code)
            return True

        if outcome.action == Action.OPEN_IMAGE:
            self.status = Status(error=str(err))
            return True

        tab = self._tab_waiting_for(outcome.tab_id, outcome.job)
        if tab is None:
            logger.debug("Discarding stale failure for job %d", outcome.job)
            return False
        tab.pending_job = 0
        tab.error = str(err)
        if tab.document.url:
            # the previous document stays on screen, so its mode does too
            tab.reader_mode = tab.document.mode == Mode.READER
        if tab is self.active:
            self.view_mode = ViewMode.CONTENT
            self.status = Status(error=str(err), status_code=code)
        return True


def welcome_tab(body):
    tab = Tab(id=0, title="Help")
    tab.document = Document(body=body, title="Help")
    return tab
