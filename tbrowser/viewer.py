import logging
import os
import subprocess
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from .errors import BrowserError, ExternalViewerError

logger = logging.getLogger(__name__)


# ========= EXTERNAL PROGRAMS =========

def viewer_commands(url, viewers, term=""):
    commands = []
    if "kitty" in term:
        commands.append(["kitty", "+kitten", "icat", url])
    for viewer in viewers:
        commands.append([viewer, url])
    return commands


def open_external(url, viewers, term=None):
    """Start the first viewer that launches; returns its program name."""
    if term is None:
        term = os.environ.get("TERM", "")

    for cmd in viewer_commands(url, viewers, term):
        try:
            subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            logger.debug("Viewer %s unavailable: %s", cmd[0], e)
            continue
        logger.info("Opened %s with %s", url, cmd[0])
        return cmd[0]

    raise ExternalViewerError("failed to open image with any viewer")


# ========= INLINE PREVIEW =========

def render_image_halfblocks(img, max_width):
    img = img.convert("RGB")
    new_width = max(1, min(max_width, img.width))
    new_height = max(1, int((img.height / img.width) * new_width * 0.5))
    img = img.resize((new_width, new_height * 2))

    pixels = img.load()
    lines = []

    for y in range(0, img.height, 2):
        line = ""
        for x in range(img.width):
            top = pixels[x, y]
            bottom = pixels[x, y + 1] if y + 1 < img.height else top
            line += (
                f"\033[38;2;{top[0]};{top[1]};{top[2]}m"
                f"\033[48;2;{bottom[0]};{bottom[1]};{bottom[2]}m▀"
            )
        line += "\033[0m"
        lines.append(line)

    return lines


def show_image_in_terminal(url, fetcher, max_width):
    try:
        data = fetcher.fetch_bytes(url)
        img = Image.open(BytesIO(data))
    except (BrowserError, UnidentifiedImageError, OSError) as e:
        return [f"[Image error: {e}]"]

    return render_image_halfblocks(img, max(20, max_width))
