from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Mode(str, Enum):
    FULL = "full"
    READER = "reader"


class ViewMode(str, Enum):
    CONTENT = "content"
    HISTORY = "history"
    BOOKMARKS = "bookmarks"
    IMAGES = "images"
    SEARCH = "search"


class MediaType(str, Enum):
    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WebP"
    SVG = "SVG"
    BMP = "BMP"
    ICO = "ICO"
    TIFF = "TIFF"
    IMAGE = "Image"


@dataclass(frozen=True)
class Link:
    number: int
    text: str
    href: str
    resolved_url: str
    is_image_target: bool = False


@dataclass(frozen=True)
class Image:
    number: int
    resolved_url: str
    alt_text: str
    media_type: MediaType
    is_linked: bool = False
    link_url: str = ""


@dataclass(frozen=True)
class Document:
    """One extraction pass: body text plus its numbered links and images."""

    body: str = ""
    links: Tuple[Link, ...] = ()
    images: Tuple[Image, ...] = ()
    mode: Mode = Mode.FULL
    title: str = ""
    url: str = ""


EMPTY_DOCUMENT = Document()


@dataclass(frozen=True)
class Bookmark:
    title: str
    url: str


@dataclass(frozen=True)
class SearchResult:
    number: int
    title: str
    url: str
    snippet: str = ""


# ========= JOB OUTCOMES =========
# A fetch job returns exactly one of these. The owner thread matches
# them in Session.apply_outcome.

@dataclass(frozen=True)
class ContentReady:
    tab_id: int
    job: int
    url: str
    document: Document
    status_code: int = 200
    elapsed: float = 0.0
    size: int = 0


class Action(str, Enum):
    LOAD = "load"
    SEARCH = "search"
    OPEN_IMAGE = "open_image"


@dataclass(frozen=True)
class FetchFailed:
    tab_id: Optional[int]
    job: int
    error: Exception
    action: Action = Action.LOAD


@dataclass(frozen=True)
class SearchReady:
    job: int
    query: str
    results: Tuple[SearchResult, ...]


@dataclass
class Status:
    loading: bool = False
    stage: str = "Ready"
    error: str = ""
    status_code: int = 0
    elapsed: float = 0.0
    size: int = 0
    link_count: int = 0
    image_count: int = 0
    message: str = ""


@dataclass
class Tab:
    id: int
    title: str = "New Tab"
    url: str = ""
    document: Document = EMPTY_DOCUMENT
    history: List[str] = field(default_factory=list)
    cursor: int = -1
    reader_mode: bool = False
    error: str = ""
    # number of the job this tab is waiting for, 0 when idle
    pending_job: int = 0

    @property
    def current_url(self):
        if self.cursor < 0:
            return ""
        return self.history[self.cursor]

    def navigate_to(self, url):
        if self.cursor < len(self.history) - 1:
            del self.history[self.cursor + 1:]
        self.history.append(url)
        self.cursor = len(self.history) - 1
        self.url = url

    def can_go_back(self):
        return self.cursor > 0

    def can_go_forward(self):
        return self.cursor < len(self.history) - 1

    def go_back(self):
        if self.can_go_back():
            self.cursor -= 1
            self.url = self.history[self.cursor]
            return True
        return False

    def go_forward(self):
        if self.can_go_forward():
            self.cursor += 1
            self.url = self.history[self.cursor]
            return True
        return False

    def go_to(self, index):
        """Move the cursor to an existing history entry without touching history."""
        if 0 <= index < len(self.history):
            self.cursor = index
            self.url = self.history[index]
            return True
        return False
