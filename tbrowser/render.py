import logging
import re
import shutil

logger = logging.getLogger(__name__)

THEMES = {
    "default": {
        "RESET": "\033[0m",
        "TITLE": "\033[96m",
        "LINK": "\033[93m",
        "CMD": "\033[92m",
        "ERR": "\033[91m",
        "DIM": "\033[90m",
        "TEXT": "\033[0m",
        "BOLD": "\033[1m",
    },
    "night": {
        "RESET": "\033[0m",
        "TITLE": "\033[38;5;250m",
        "LINK": "\033[38;5;180m",
        "CMD": "\033[38;5;65m",
        "ERR": "\033[38;5;131m",
        "DIM": "\033[38;5;240m",
        "TEXT": "\033[38;5;245m",
        "BOLD": "\033[1m",
    },
}

LINK_REF = re.compile(r"\[(img)?(\d+)\]")
BOLD = re.compile(r"\*\*(.+?)\*\*")


def palette(theme):
    return THEMES.get(theme, THEMES["default"])


def terminal_width():
    return shutil.get_terminal_size().columns


def wrap(text, width):
    words = text.split()
    lines = []
    current = ""

    for w in words:
        if len(current) + len(w) + (1 if current else 0) > width:
            if current:
                lines.append(current)
            current = w
        else:
            current = w if current == "" else current + " " + w

    if current:
        lines.append(current)

    return lines


def shorten_middle(text, max_len):
    if len(text) <= max_len:
        return text
    if max_len < 10:
        return text[:max_len]
    keep = (max_len - 3) // 2
    return text[:keep] + "..." + text[-keep:]


def _highlight(line, c):
    line = LINK_REF.sub(lambda m: f"{c['LINK']}{m.group(0)}{c['RESET']}{c['TEXT']}", line)
    line = BOLD.sub(lambda m: f"{c['BOLD']}{m.group(1)}{c['RESET']}{c['TEXT']}", line)
    return f"{c['TEXT']}{line}{c['RESET']}"


def _style_line(raw, width, c):
    stripped = raw.strip()
    if not stripped:
        return [""]

    if stripped.startswith("#"):
        marks, _, text = stripped.partition(" ")
        return [f"{c['TITLE']}{c['BOLD']}{marks} {line}{c['RESET']}"
                for line in wrap(text, max(10, width - len(marks) - 1))]

    if stripped.startswith("---") and stripped.endswith("---"):
        return [f"{c['TITLE']}{stripped}{c['RESET']}"]

    if stripped.startswith("> "):
        return [f"{c['DIM']}> {line}{c['RESET']}" for line in wrap(stripped[2:], max(10, width - 2))]

    if stripped.startswith("- "):
        lines = wrap(stripped[2:], max(10, width - 2))
        return [_highlight(("- " if i == 0 else "  ") + line, c) for i, line in enumerate(lines)]

    if raw.startswith("    "):
        return [f"    {c['DIM']}{shorten_middle(stripped, max(10, width - 4))}{c['RESET']}"]

    return [_highlight(line, c) for line in wrap(stripped, width)]


def style_text(text, width, theme="default"):
    c = palette(theme)
    lines = []
    for raw in text.splitlines():
        lines.extend(_style_line(raw, width, c))
    return "\n".join(lines)


def render_markdown(text, width=0, theme="default"):
    """Styled terminal text for a markdown-like body, raw text if styling fails."""
    width = width or terminal_width()
    try:
        return style_text(text, max(10, width), theme)
    except Exception:
        logger.exception("Styling failed, showing raw text")
        return text


def paginate(lines, n):
    n = max(1, n)
    return [lines[i:i + n] for i in range(0, len(lines), n)] or [[]]
