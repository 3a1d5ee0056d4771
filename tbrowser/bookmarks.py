import logging
import os

from .errors import BookmarkError
from .models import Bookmark

logger = logging.getLogger(__name__)

SEPARATOR = "|||"


class BookmarkSet:
    """Bookmarks in insertion order, unique by exact URL string."""

    def __init__(self, bookmarks=()):
        self._items = []
        for b in bookmarks:
            self.add(b.title, b.url)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __contains__(self, url):
        return any(b.url == url for b in self._items)

    def add(self, title, url):
        if not url or url in self:
            return False
        self._items.append(Bookmark(title=title or "", url=url))
        return True

    def remove(self, index):
        if 0 <= index < len(self._items):
            return self._items.pop(index)
        return None


# ========= PERSISTENCE =========

def parse_line(line):
    line = line.strip()
    if not line:
        return None

    parts = line.split(SEPARATOR)
    if len(parts) == 3:
        # title|||url|||block
        title, url, _block = parts
    elif len(parts) == 2:
        title, url = parts
        # url|||block from the oldest two-field layout
        if not url.startswith(("http://", "https://")) and title.startswith(("http://", "https://")):
            title, url = "", title
    elif len(parts) == 1:
        title, url = "", parts[0]
    else:
        return None

    url = url.strip()
    if not url:
        return None
    return Bookmark(title=title.strip(), url=url)


def load_bookmarks(path):
    if not os.path.exists(path):
        return []

    bookmarks = []
    try:
        with open(path, encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                b = parse_line(line)
                if b is None:
                    if line.strip():
                        logger.warning("Skipping corrupt bookmark line %d in %s", lineno, path)
                    continue
                bookmarks.append(b)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read bookmarks from %s: %s", path, e)
        return []

    return bookmarks


def save_bookmarks(path, bookmarks):
    try:
        with open(path, "w", encoding="utf-8") as f:
            for b in bookmarks:
                title = b.title.replace(SEPARATOR, " ")
                f.write(f"{title}{SEPARATOR}{b.url}\n")
    except OSError as e:
        raise BookmarkError(f"could not save bookmarks to {path}: {e}") from e
