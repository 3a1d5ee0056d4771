#!/usr/bin/env python3
import argparse
import logging
import os
import queue
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import wait as wait_futures

from . import __version__
from .bookmarks import BookmarkSet, load_bookmarks, save_bookmarks
from .config import bookmark_path, load_config, save_config
from .errors import BookmarkError, BrowserError, InvalidURLError
from .fetch import Fetcher
from .jobs import load_page, open_image, run_search
from .log import setup_logging
from .models import Action, FetchFailed, Image, Mode, Status, ViewMode
from .render import THEMES, paginate, render_markdown, terminal_width
from .session import Session, welcome_tab
from .urls import is_http_url, is_image_url, looks_like_url, media_type_for, normalize_user_input
from .viewer import show_image_in_terminal
from .views import HELP_TEXT, current_view, status_line, tab_bar

logger = logging.getLogger(__name__)

# how long the prompt lingers for fast results before redrawing
SETTLE_SECONDS = 0.5


class Browser:
    """
    Owner of the Session.

    Every command runs on the calling thread and mutates the session
    directly; network work is submitted to the executor and comes back
    through ``outcomes``, which only ``pump`` drains.
    """

    def __init__(self, config=None, fetcher=None, executor=None, bookmark_file=None,
                 term=None, config_file=None):
        self.config = config or load_config()
        self.fetcher = fetcher or Fetcher(timeout=self.config["TIMEOUT"])
        self.executor = executor or ThreadPoolExecutor(
            max_workers=self.config["WORKERS"], thread_name_prefix="tbrowser-fetch"
        )
        self.term = term
        self.config_file = config_file
        self.outcomes = queue.Queue()
        self.in_flight = 0

        self.bookmark_file = bookmark_file or bookmark_path(self.config)
        bookmarks = BookmarkSet()
        if self.config["ENABLE_BOOKMARKS"]:
            bookmarks = BookmarkSet(load_bookmarks(self.bookmark_file))

        self.session = Session(bookmarks=bookmarks, first_tab=welcome_tab(HELP_TEXT))

    def close(self):
        self.executor.shutdown(wait=False)

    # ========= JOB PLUMBING =========

    def _submit(self, meta, fn, *args, **kwargs):
        self.in_flight += 1
        future = self.executor.submit(fn, *args, **kwargs)
        future.add_done_callback(lambda f: self.outcomes.put((f, meta)))
        return future

    def _outcome_of(self, future, meta):
        tab_id, job, action = meta
        try:
            return future.result()
        except Exception as e:
            logger.exception("Job %d crashed", job)
            return FetchFailed(tab_id=tab_id, job=job, error=BrowserError(str(e)), action=action)

    def _apply_next(self, block, timeout):
        # raises queue.Empty when nothing arrives in time
        future, meta = self.outcomes.get(block=block, timeout=timeout)
        self.in_flight -= 1
        outcome = self._outcome_of(future, meta)
        return outcome is not None and self.session.apply_outcome(outcome)

    def pump(self, block=False, timeout=None):
        """Apply finished outcomes in arrival order; returns how many were applied."""
        applied = 0
        while self.in_flight:
            try:
                applied += self._apply_next(block, timeout)
            except queue.Empty:
                break
        return applied

    def wait(self, timeout=None):
        return self.pump(block=True, timeout=timeout)

    def settle(self, timeout=SETTLE_SECONDS):
        """Apply whatever arrives within ``timeout`` seconds, then give control back."""
        deadline = time.monotonic() + timeout
        applied = 0
        while self.in_flight:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                applied += self._apply_next(True, remaining)
            except queue.Empty:
                break
        return applied

    # ========= HELPERS =========

    def _message(self, text):
        self.session.status = Status(message=text)

    def _error(self, text):
        self.session.status = Status(error=text)

    def _feature(self, key, name):
        if self.config[key]:
            return True
        self._error(f"{name} feature disabled")
        return False

    def _load(self, tab, stage="Loading"):
        mode = Mode.READER if tab.reader_mode else Mode.FULL
        job = self.session.begin_load(tab, stage)
        self._submit((tab.id, job, Action.LOAD), load_page,
                     self.fetcher, tab.current_url, tab.id, job, mode)
        return job

    def _open(self, url, stage="Loading"):
        if not is_http_url(url):
            raise InvalidURLError(f"Invalid URL: {url}")
        tab = self.session.active
        tab.navigate_to(url)
        tab.reader_mode = bool(self.config["START_IN_READER_MODE"])
        self.session.show(ViewMode.CONTENT)
        return self._load(tab, stage)

    def _select_image(self, img):
        self.session.selected_image = img
        self.session.view_mode = ViewMode.IMAGES

    def _target(self, text):
        url = normalize_user_input(text, self.session.active.current_url)
        if not url:
            raise InvalidURLError(f"Invalid URL: {text.strip()}")
        return url

    # ========= COMMANDS =========

    def navigate(self, text):
        try:
            url = self._target(text)
        except InvalidURLError as e:
            self._error(str(e))
            return False

        if is_image_url(url):
            self._select_image(Image(number=0, resolved_url=url, alt_text="Direct image link",
                                     media_type=media_type_for(url)))
            return True

        self._open(url, "Fetching page")
        return True

    def reload(self):
        tab = self.session.active
        if tab.cursor < 0:
            return False
        self.session.show(ViewMode.CONTENT)
        self._load(tab, "Reloading")
        return True

    def go_back(self):
        tab = self.session.active
        if not tab.go_back():
            return False
        tab.reader_mode = bool(self.config["START_IN_READER_MODE"])
        self.session.show(ViewMode.CONTENT)
        self._load(tab, "Going back")
        return True

    def go_forward(self):
        tab = self.session.active
        if not tab.go_forward():
            return False
        tab.reader_mode = bool(self.config["START_IN_READER_MODE"])
        self.session.show(ViewMode.CONTENT)
        self._load(tab, "Going forward")
        return True

    def new_tab(self, text=""):
        if not self._feature("ENABLE_TABS", "Tabs"):
            return False
        if len(self.session.tabs) >= self.config["MAX_TABS"]:
            self._error(f"Max tabs limit: {self.config['MAX_TABS']}")
            return False

        url = ""
        if text.strip():
            try:
                url = self._target(text)
            except InvalidURLError as e:
                self._error(str(e))
                return False

        tab = self.session.new_tab(url)
        if url:
            tab.reader_mode = bool(self.config["START_IN_READER_MODE"])
            self._load(tab, "Fetching page")
        return True

    def close_tab(self, tab_id=None):
        if tab_id is None:
            tab_id = self.session.active_tab
        return self.session.close_tab(tab_id)

    def switch_tab(self, tab_id):
        return self.session.switch_tab(tab_id)

    def next_tab(self):
        return self.session.next_tab()

    def prev_tab(self):
        return self.session.prev_tab()

    def toggle_reader_mode(self):
        if not self._feature("ENABLE_READER_MODE", "Reader mode"):
            return False
        tab = self.session.active
        if tab.cursor < 0:
            return False
        tab.reader_mode = not tab.reader_mode
        self.session.show(ViewMode.CONTENT)
        stage = "Activating reader mode" if tab.reader_mode else "Loading original view"
        self._load(tab, stage)
        return True

    def _save_bookmarks(self):
        try:
            save_bookmarks(self.bookmark_file, self.session.bookmarks)
        except BookmarkError as e:
            logger.warning("%s", e)
            self._error(str(e))
            return False
        return True

    def bookmark_current(self):
        if not self._feature("ENABLE_BOOKMARKS", "Bookmarks"):
            return False
        if self.session.active.cursor < 0:
            return False

        bookmark = self.session.bookmark_current()
        if bookmark is None:
            self._message("✅ Already bookmarked!")
            return False
        if self._save_bookmarks():
            self._message(f"⭐ Bookmarked: {bookmark.title}")
        return True

    def delete_bookmark(self, number):
        if self.session.bookmarks.remove(number - 1) is None:
            self._error("Invalid bookmark number")
            return False
        self._save_bookmarks()
        return True

    def search(self, query):
        query = query.strip()
        if not query or not self._feature("ENABLE_SEARCH", "Search"):
            return False
        job = self.session.begin_search(query)
        self._submit((None, job, Action.SEARCH), run_search,
                     self.fetcher, query, job, bool(self.config["SAFE_MODE"]))
        return True

    def show(self, view_mode):
        if view_mode == ViewMode.HISTORY and not self._feature("ENABLE_HISTORY", "History"):
            return False
        if view_mode == ViewMode.BOOKMARKS and not self._feature("ENABLE_BOOKMARKS", "Bookmarks"):
            return False
        self.session.show(view_mode)
        return True

    def select_image(self, number):
        images = self.session.document.images
        if not 0 < number <= len(images):
            self._error(f"Invalid image number. Available images: 1-{len(images)}")
            return False
        self._select_image(images[number - 1])
        return True

    def select_numbered(self, number):
        session = self.session
        items = session.numbered_items()
        if not 0 < number <= len(items):
            self._error(f"Invalid number. Available: 1-{len(items)}")
            return False

        item = items[number - 1]
        mode = session.view_mode

        try:
            if mode in (ViewMode.SEARCH, ViewMode.BOOKMARKS):
                self._open(item.url, "Opening")
            elif mode == ViewMode.HISTORY:
                tab = session.active
                tab.go_to(number - 1)
                tab.reader_mode = bool(self.config["START_IN_READER_MODE"])
                session.show(ViewMode.CONTENT)
                self._load(tab, "Opening history entry")
            elif mode == ViewMode.IMAGES:
                self._select_image(item)
            elif item.is_image_target:
                self._select_image(Image(number=0, resolved_url=item.resolved_url, alt_text=item.text,
                                         media_type=media_type_for(item.resolved_url)))
            else:
                self._open(item.resolved_url, "Following link")
        except InvalidURLError as e:
            self._error(str(e))
            return False
        return True

    def open_selected_image(self):
        img = self.session.selected_image
        if img is None:
            return False
        job = self.session.next_job()
        tab_id = self.session.active_tab
        self._submit((tab_id, job, Action.OPEN_IMAGE), open_image,
                     img.resolved_url, tab_id, job, list(self.config["IMAGE_VIEWERS"]), self.term)
        self._message(f"📤 Opening image in external viewer: {img.resolved_url}")
        return True

    def follow_image_link(self):
        img = self.session.selected_image
        if img is None or not img.is_linked or not img.link_url:
            return False
        try:
            self._open(img.link_url, "Following image link")
        except InvalidURLError as e:
            self._error(str(e))
            return False
        return True

    def preview_selected_image(self, width):
        img = self.session.selected_image
        if img is None:
            return None
        self._message(f"🖼️ Loading preview: {img.resolved_url}")
        return self.executor.submit(show_image_in_terminal, img.resolved_url, self.fetcher, width)

    def set_theme(self, theme, config_file=None):
        if theme not in THEMES:
            self._error(f"Unknown theme: {theme}")
            return False
        self.config["COLOR_THEME"] = theme
        try:
            save_config(self.config, config_file)
        except OSError as e:
            logger.warning("Could not save config: %s", e)
        return True

    # ========= COMMAND LINE =========

    def start(self, text):
        """Open whatever was given on the command line."""
        if looks_like_url(text):
            return self.navigate(text)
        return self.search(text)

    def handle(self, line):
        """Dispatch one line typed at the prompt. Returns False to quit."""
        raw = line.strip()
        low = raw.lower()
        if not raw:
            return True
        if low == "q":
            return False

        simple = {
            "b": self.go_back,
            "f": self.go_forward,
            "r": self.reload,
            "e": self.toggle_reader_mode,
            "w": self.close_tab,
            "]": self.next_tab,
            "[": self.prev_tab,
            "m": self.bookmark_current,
            "o": self.open_selected_image,
            "l": self.follow_image_link,
        }
        views = {
            "bm": ViewMode.BOOKMARKS,
            "h": ViewMode.HISTORY,
            "i": ViewMode.IMAGES,
            "x": ViewMode.CONTENT,
        }

        if low in simple:
            simple[low]()
        elif low in views:
            self.show(views[low])
        elif low.isdigit():
            self.select_numbered(int(low))
        elif low.startswith("img") and low[3:].strip().isdigit():
            self.select_image(int(low[3:].strip()))
        elif low.startswith("tab ") and low[4:].strip().isdigit():
            self.switch_tab(int(low[4:].strip()) - 1)
        elif low == "t" or low.startswith("t "):
            self.new_tab(raw[1:])
        elif low.startswith("s "):
            self.search(raw[2:])
        elif low.startswith("d ") and low[2:].strip().isdigit():
            self.delete_bookmark(int(low[2:].strip()))
        elif low.startswith("theme"):
            self.set_theme(low[5:].strip() or "default", self.config_file)
        elif looks_like_url(raw):
            self.navigate(raw)
        else:
            self.search(raw)
        return True


# ========= UI =========

def clear_screen():
    os.system("clear")


class Screen:
    """Shows the active view a screenful at a time and reads commands."""

    def __init__(self, browser):
        self.browser = browser
        self.page = 0
        self.help = False
        self._shown = None
        self.pending_preview = None

    def _width(self):
        return self.browser.config["WRAP_WIDTH"] or terminal_width()

    def _height(self):
        rows = self.browser.config["LINES_PER_PAGE"] or shutil.get_terminal_size().lines - 6
        return max(5, rows)

    def pages(self):
        session = self.browser.session
        text = HELP_TEXT if self.help else current_view(session)
        rendered = render_markdown(text, self._width(), self.browser.config["COLOR_THEME"])
        return paginate(rendered.splitlines(), self._height())

    def draw(self):
        session = self.browser.session
        shown = (self.help, session.view_mode, session.active_tab,
                 id(session.document), session.selected_image)
        if shown != self._shown:
            self._shown = shown
            self.page = 0

        pages = self.pages()
        self.page = min(self.page, len(pages) - 1)

        clear_screen()
        print(tab_bar(session))
        print(session.active.current_url or "(no page)")
        print()
        for line in pages[self.page]:
            print(line)
        print()
        print(f"Screen {self.page + 1}/{len(pages)} | {status_line(session)}")

    def preview(self):
        future = self.browser.preview_selected_image(self._width() - 2)
        if future is not None:
            self.pending_preview = future
            wait_futures([future], timeout=SETTLE_SECONDS)

    def show_preview(self):
        """Print a finished preview; returns False once input runs out."""
        future, self.pending_preview = self.pending_preview, None
        clear_screen()
        for line in future.result():
            print(line)
        try:
            input("\nEnter…")
        except EOFError:
            return False
        self.browser.session.status = Status()
        return True

    def run(self):
        while True:
            self.browser.pump()
            if self.pending_preview is not None and self.pending_preview.done():
                if not self.show_preview():
                    break
            self.draw()
            try:
                line = input("> ")
            except EOFError:
                break

            cmd = line.strip().lower()
            if cmd in ("", "n"):
                self.page += 1
                continue
            if cmd == "p":
                self.page = max(0, self.page - 1)
                continue
            if cmd in ("?", "help"):
                self.help = True
                continue
            if cmd == "v":
                self.preview()
                continue

            self.help = False
            if not self.browser.handle(line):
                break
            self.browser.settle()


# ========= MAIN =========

def build_parser():
    parser = argparse.ArgumentParser(prog="tbrowser", description="Terminal text browser")
    parser.add_argument("target", nargs="*", help="URL to open or text to search")
    parser.add_argument("--config", help="path to a JSON config file")
    parser.add_argument("--reader", action="store_true", help="open pages in reader mode")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-file", help="also write log messages to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.reader:
        config["START_IN_READER_MODE"] = True
    setup_logging(args.log_level or config["LOG_LEVEL"], args.log_file or config["LOG_FILE"])

    browser = Browser(config, config_file=args.config)
    try:
        if args.target:
            browser.start(" ".join(args.target))
            browser.settle()
        Screen(browser).run()
    except KeyboardInterrupt:
        pass
    finally:
        browser.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
