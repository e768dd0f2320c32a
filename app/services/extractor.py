"""Plain-text extraction from a rendered Notion page.

The browser hands over a serialized snapshot of the live DOM; everything here
works on that snapshot with BeautifulSoup.

Every element carrying the block attribute (``data-block-id``) is one block.
Blocks nest (list items inside toggles, columns inside column lists, …), so
each block contributes only its *own* text: text that belongs to a nested
block is emitted by that nested block instead.  This keeps document order and
per-block granularity without emitting nested content twice.
"""

from typing import Iterable, Iterator, List

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from app.config import Settings
from app.models.response import ScrapeResponse

UNTITLED = "Untitled"

# Tags that mark a block as media.  The whole block is skipped, not just the tag.
_MEDIA_TAGS = {"img", "svg", "video", "audio", "iframe", "embed", "object", "picture"}

# Class-name segments Notion uses on media / attachment blocks
_MEDIA_CLASS_HINTS = ("image", "video", "audio", "file", "embed", "pdf")

# Subtrees whose text is never page content
_SKIP_TEXT_TAGS = {"script", "style", "noscript", "template"}


def _own_nodes(node: Tag, block_attribute: str) -> Iterator:
    """Yield the descendants of *node* that do not belong to a nested block."""
    for child in node.children:
        if isinstance(child, Tag):
            if child.has_attr(block_attribute) or child.name in _SKIP_TEXT_TAGS:
                continue
            yield child
            yield from _own_nodes(child, block_attribute)
        else:
            yield child


def _has_media_class(tag: Tag) -> bool:
    """Match hints against whole dash-separated class segments.

    ``notion-file-block`` is media; ``notion-profile-mention`` is not.
    """
    return any(
        hint in cls.lower().split("-")
        for cls in tag.get("class", [])
        for hint in _MEDIA_CLASS_HINTS
    )


def _is_decoration(tag: Tag, block: Tag) -> bool:
    """Return True for icons that accompany text rather than replace it.

    Toggle chevrons are ``<svg>`` inside the toggle button, and inline emoji
    are ``<img class="notion-emoji">``.
    """
    if tag.name == "img" and any("emoji" in cls.lower() for cls in tag.get("class", [])):
        return True
    if tag.name == "svg":
        for parent in tag.parents:
            if parent is block:
                break
            if parent.get("role") == "button":
                return True
    return False


def _is_media_block(block: Tag, block_attribute: str) -> bool:
    if _has_media_class(block):
        return True
    for node in _own_nodes(block, block_attribute):
        if not isinstance(node, Tag):
            continue
        if node.name in _MEDIA_TAGS and not _is_decoration(node, block):
            return True
        if _has_media_class(node):
            return True
    return False


def block_text(block: Tag, block_attribute: str) -> str:
    """Return the trimmed text of *block*, excluding nested blocks."""
    parts = [
        str(node)
        for node in _own_nodes(block, block_attribute)
        if isinstance(node, NavigableString) and not isinstance(node, Comment)
    ]
    return "".join(parts).strip()


def join_blocks(texts: Iterable[str], deduplicate: bool = True) -> str:
    """Join non-empty block texts with a blank line, optionally skipping exact repeats."""
    seen: set = set()
    parts: List[str] = []
    for text in texts:
        if not text:
            continue
        if deduplicate:
            if text in seen:
                continue
            seen.add(text)
        parts.append(text)
    return "\n\n".join(parts)


def extract_title(soup: BeautifulSoup, selectors: Iterable[str]) -> str:
    """Return the text of the first element matched by *selectors*, tried in order."""
    for selector in selectors:
        node = soup.select_one(selector)
        if node is not None:
            return node.get_text().strip() or UNTITLED
    return UNTITLED


def extract_notion_content(html: str, settings: Settings) -> ScrapeResponse:
    """Extract the page title and body text from a rendered Notion page."""
    soup = BeautifulSoup(html, "lxml")
    title = extract_title(soup, settings.title_selectors)

    root = soup.select_one(settings.content_root_selector)
    if root is None:
        return ScrapeResponse(title=title, content="")

    attr = settings.block_attribute
    texts = (
        block_text(block, attr)
        for block in root.find_all(attrs={attr: True})
        if not _is_media_block(block, attr)
    )
    return ScrapeResponse(title=title, content=join_blocks(texts, settings.deduplicate))
