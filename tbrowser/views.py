"""Markdown-like text for every view the command loop can show."""

from .models import Mode, ViewMode

HELP_TEXT = """# Terminal Text Browser

## Quick start
- Type a **URL** to visit a website, any other text to search the web
- Type a **number** to follow a link (or pick from the list on screen)
- Type **img N** to look at an image

## Commands
- **n** / **p** next / previous screen
- **b** / **f** back / forward
- **r** reload, **e** reader mode on/off
- **t [url]** new tab, **w** close tab, **tab N** switch, **]** / **[** cycle tabs
- **m** bookmark page, **bm** bookmarks, **d N** delete bookmark
- **h** history, **i** images, **s QUERY** search
- **o** open image externally, **v** preview image, **l** follow image link
- **x** back to the page, **theme** switch colors, **?** help, **q** quit
"""


def content_view(tab):
    doc = tab.document
    parts = []
    if tab.error:
        parts.append(f"❌ Error: {tab.error}\n\nEnter another URL or search.\n\n")
    if tab.pending_job:
        parts.append(f"🔄 Loading {tab.current_url} ...\n\n")

    parts.append(doc.body)

    # full mode keeps its link index apart from the prose
    if doc.mode == Mode.FULL and doc.links:
        parts.append("\n--- Links ---\n\n")
        for link in doc.links:
            parts.append(f"[{link.number}] {link.text}\n")
            parts.append(f"    {link.resolved_url}\n")
    return "".join(parts)


def images_view(images):
    if not images:
        return "# Images\n\nNo images found on this page."

    out = ["# Images on This Page\n\n", "Type a number to view image details.\n\n"]
    for img in images:
        alt = img.alt_text or "No description"
        out.append(f"## {img.number}. {alt}\n")
        out.append(f"Type: {img.media_type.value}\n")
        out.append(f"    {img.resolved_url}\n\n")
    out.append(f"Total: {len(images)} images")
    return "".join(out)


def image_detail_view(img):
    alt = img.alt_text or "No description"
    label = f"Image {img.number}" if img.number else "Image"
    out = [f"# {label}: {alt}\n\n",
           f"URL: {img.resolved_url}\n\n",
           f"Alt text: {alt}\n",
           f"Type: {img.media_type.value}\n"]
    if img.is_linked and img.link_url:
        out.append(f"Links to: {img.link_url}\n")
        out.append("\n**o** open image | **v** preview | **l** follow link | **x** back\n")
    else:
        out.append("\n**o** open image | **v** preview | **x** back\n")
    return "".join(out)


def history_view(tab):
    if not tab.history:
        return "# Browser History\n\nNo history yet. Start browsing to build history!"

    out = ["# Browser History\n\n", "Type a number to jump to that page.\n\n"]
    for i, url in enumerate(tab.history):
        marker = "➤" if i == tab.cursor else " "
        out.append(f"{marker} [{i + 1}] {url}\n")
    out.append(f"\nTotal: {len(tab.history)} pages | Current position: {tab.cursor + 1}")
    return "".join(out)


def bookmarks_view(bookmarks):
    if not len(bookmarks):
        return "# Bookmarks\n\nNo bookmarks yet! Type **m** on a page to save it."

    out = ["# Bookmarks\n\n", "Type a number to open, **d N** to delete.\n\n"]
    for i, b in enumerate(bookmarks, 1):
        out.append(f"[{i}] **{b.title or b.url}**\n")
        out.append(f"    {b.url}\n\n")
    out.append(f"Total: {len(bookmarks)} bookmarks")
    return "".join(out)


def search_view(query, results):
    if not results:
        return f"# Search Results\n\nNo results found for: **{query}**"

    out = ["# Search Results\n\n", f"Query: **{query}**\n\n"]
    for r in results:
        out.append(f"[{r.number}] **{r.title}**\n")
        out.append(f"    {r.url}\n")
        if r.snippet:
            out.append(f"{r.snippet}\n")
        out.append("\n")
    out.append(f"Found {len(results)} results | Type a number to open")
    return "".join(out)


def current_view(session):
    mode = session.view_mode
    if mode == ViewMode.SEARCH:
        return search_view(session.search_query, session.search_results)
    if mode == ViewMode.BOOKMARKS:
        return bookmarks_view(session.bookmarks)
    if mode == ViewMode.HISTORY:
        return history_view(session.active)
    if mode == ViewMode.IMAGES:
        if session.selected_image is not None:
            return image_detail_view(session.selected_image)
        return images_view(session.document.images)
    return content_view(session.active)


def tab_bar(session):
    labels = []
    for tab in session.tabs:
        title = tab.title or "New Tab"
        if len(title) > 15:
            title = title[:12] + "..."
        label = f"{tab.id + 1}: {title}"
        labels.append(f"[{label}]" if tab.id == session.active_tab else f" {label} ")
    return " ".join(labels)


def status_line(session):
    s = session.status
    tab = session.active
    if s.loading:
        return f"🔄 {s.stage}..."
    if s.error:
        return f"❌ {s.error}"
    if s.message:
        return s.message
    if s.elapsed:
        return (f"✅ HTTP {s.status_code} | ⏱️ {s.elapsed:.2f}s | 📄 {s.size // 1024} KB"
                f" | 🔗 {s.link_count} links | 🖼️ {s.image_count} images")

    if tab.cursor < 0:
        return "🌐 Enter a URL or search to start browsing"
    flags = []
    if tab.current_url in session.bookmarks:
        flags.append("⭐")
    if tab.reader_mode:
        flags.append("📖")
    return " ".join(["✅ Ready"] + flags)
