class BrowserError(Exception):
    """Base class for every failure the browser reports to the user."""


class InvalidURLError(BrowserError):
    pass


class NetworkError(BrowserError):
    pass


class HTTPStatusError(BrowserError):
    def __init__(self, status_code, reason=""):
        self.status_code = status_code
        self.reason = reason
        msg = f"HTTP {status_code}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ParseError(BrowserError):
    pass


class ExternalViewerError(BrowserError):
    pass


class BookmarkError(BrowserError):
    pass
