"""
Block walker: enumerate the text blocks that follow a heading in rendered wiki
markup.

The tip extractor only needs two capabilities from a parsed document (find a
heading by anchor id, then list the paragraph/list blocks under it), so they
sit behind a small interface. Tests can drive the extractor with a fake
walker; production uses the BeautifulSoup implementation below.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional, Tuple

from bs4 import BeautifulSoup, Tag

PARAGRAPH = "paragraph"
LIST = "list"

_HEADING_TAG_RE = re.compile(r"^h([1-6])$")

# Elements that never carry tip text
_NOISE_SELECTORS = ("sup.reference", ".mw-editsection", "style", "script", ".noprint")


@dataclass(frozen=True)
class Block:
    """One block of text following a heading."""
    kind: str
    texts: Tuple[str, ...]


@dataclass(frozen=True)
class HeadingRef:
    """A located heading: the node to walk from and its rank (2 for h2, ...)."""
    node: Any
    level: int


class BlockWalker(ABC):
    """Navigation over a parsed document."""

    @abstractmethod
    def find_heading(self, anchor_ids: Iterable[str]) -> Optional[HeadingRef]:
        """Return the first heading matching any anchor id, tried in order."""

    @abstractmethod
    def blocks_after(self, heading: HeadingRef) -> Iterator[Block]:
        """Yield blocks after ``heading`` until a heading of equal or higher rank."""


def heading_level(node: Tag) -> Optional[int]:
    """Rank of a heading node, including ``<div class="mw-heading">`` wrappers."""
    match = _HEADING_TAG_RE.match(node.name or "")
    if match:
        return int(match.group(1))
    if node.name == "div" and "mw-heading" in (node.get("class") or []):
        inner = node.find(_HEADING_TAG_RE)
        if inner is not None:
            return int(inner.name[1])
    return None


class SoupBlockWalker(BlockWalker):
    """BlockWalker over MediaWiki ``action=parse`` HTML.

    Handles the legacy layout (``<h2><span class="mw-headline" id="Eat">``),
    the current one (``<div class="mw-heading"><h2 id="Eat">``) and
    ``<section>``-wrapped output.
    """

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html or "", "html.parser")
        for selector in _NOISE_SELECTORS:
            for node in self.soup.select(selector):
                node.decompose()

    def find_heading(self, anchor_ids: Iterable[str]) -> Optional[HeadingRef]:
        for anchor in anchor_ids:
            element = self.soup.find(id=anchor)
            if element is None:
                continue
            ref = self._heading_ref(element)
            if ref is not None:
                return ref
        return None

    def _heading_ref(self, element: Tag) -> Optional[HeadingRef]:
        if _HEADING_TAG_RE.match(element.name or ""):
            heading = element
        else:
            heading = element.find_parent(_HEADING_TAG_RE)
        if heading is None:
            return None

        node = heading
        parent = heading.parent
        if isinstance(parent, Tag) and "mw-heading" in (parent.get("class") or []):
            node = parent
        return HeadingRef(node=node, level=int(heading.name[1]))

    def blocks_after(self, heading: HeadingRef) -> Iterator[Block]:
        for node in self._following(heading.node):
            level = heading_level(node)
            if level is not None:
                if level <= heading.level:
                    return
                continue
            if node.name == "p":
                text = node.get_text()
                if text.strip():
                    yield Block(kind=PARAGRAPH, texts=(text,))
            elif node.name in ("ul", "ol"):
                items = tuple(li.get_text() for li in node.find_all("li", recursive=False))
                if items:
                    yield Block(kind=LIST, texts=items)

    def _following(self, node: Tag) -> Iterator[Tag]:
        for sibling in node.find_next_siblings():
            if isinstance(sibling, Tag):
                yield from self._flatten(sibling)
        # Parsoid wraps each heading and its body in <section>
        parent = node.parent
        if isinstance(parent, Tag) and parent.name == "section":
            for sibling in parent.find_next_siblings():
                if isinstance(sibling, Tag):
                    yield from self._flatten(sibling)

    def _flatten(self, node: Tag) -> Iterator[Tag]:
        if node.name == "section":
            for child in node.find_all(recursive=False):
                if isinstance(child, Tag):
                    yield from self._flatten(child)
        else:
            yield node
