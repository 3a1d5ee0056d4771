import re
from urllib.parse import urljoin, urlparse, urlunparse, parse_qs, unquote

from .models import MediaType

ALLOWED_SCHEMES = ("http", "https")

# longest extensions first so ".jpeg" wins over ".jpg"-style partial hits
IMAGE_EXTENSIONS = sorted(
    [
        (".jpeg", MediaType.JPEG),
        (".jpg", MediaType.JPEG),
        (".png", MediaType.PNG),
        (".gif", MediaType.GIF),
        (".webp", MediaType.WEBP),
        (".svg", MediaType.SVG),
        (".bmp", MediaType.BMP),
        (".ico", MediaType.ICO),
        (".tiff", MediaType.TIFF),
        (".tif", MediaType.TIFF),
    ],
    key=lambda pair: len(pair[0]),
    reverse=True,
)

# extensions that mark a URL as pointing at an image even mid-string
# (e.g. "photo.jpg?w=300")
INLINE_IMAGE_HINTS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

TRACKER_HOSTS = ["doubleclick", "adservice", "adsystem", "tracking",
                 "analytics", "pixel", "googlesyndication"]


# ========= RESOLUTION =========

def resolve(base, href):
    try:
        urlparse(base)
    except ValueError:
        return href
    try:
        urlparse(href)
    except ValueError:
        return href
    try:
        return urljoin(base, href)
    except ValueError:
        return href


def is_http_url(url):
    try:
        p = urlparse(url)
    except ValueError:
        return False
    return p.scheme in ALLOWED_SCHEMES and bool(p.netloc)


def _validated(url):
    return url if is_http_url(url) else ""


def normalize_user_input(text, current_url=""):
    """
    Turn whatever the user typed into an absolute http(s) URL.

    Returns "" when the input is empty or cannot become a usable target.
    """
    t = (text or "").strip()
    if not t:
        return ""

    if t.startswith("http://") or t.startswith("https://"):
        return _validated(t)

    if t.startswith("//"):
        return _validated("https:" + t)

    if t.startswith("/"):
        return _validated(resolve(current_url or "", t))

    if "." in t and " " not in t:
        if "://" not in t:
            t = "https://" + t
        return _validated(t)

    return _validated(resolve(current_url or "", t))


def looks_like_url(text):
    t = text.strip()
    if t.startswith(("http://", "https://", "//", "/")):
        return True
    return "." in t and " " not in t


def clean_url(url):
    # src attributes sometimes carry line breaks or padding
    return re.sub(r"\s+", "", url or "")


# ========= IMAGES =========

def media_type_for(url):
    low = (url or "").lower()
    for ext, kind in IMAGE_EXTENSIONS:
        if ext in low:
            return kind
    return MediaType.IMAGE


def is_image_url(url):
    low = (url or "").lower()
    path = low.split("?", 1)[0].split("#", 1)[0]
    if any(path.endswith(ext) for ext, _ in IMAGE_EXTENSIONS):
        return True
    return any(hint in low for hint in INLINE_IMAGE_HINTS)


# ========= REDIRECTS + TRACKERS =========

def strip_duckduckgo_tracking(url):
    p = urlparse(url)
    if "duckduckgo.com" not in p.netloc:
        return url
    return urlunparse(p._replace(query=""))


def unwrap_duckduckgo_redirect(url):
    if url.startswith("//duckduckgo.com/l/?"):
        url = "https:" + url
    p = urlparse(url)
    if "duckduckgo.com" in p.netloc and p.path.startswith("/l"):
        qs = parse_qs(p.query)
        if "uddg" in qs:
            return unquote(qs["uddg"][0])
    return url


def unwrap_generic_redirect(url):
    return strip_duckduckgo_tracking(unwrap_duckduckgo_redirect(url))


def is_ad_or_tracker(url):
    host = urlparse(url).netloc.lower()
    return any(b in host for b in TRACKER_HOSTS)
