"""
DocumentTree — typed, read-only query interface over a parsed HTML email.

Wraps BeautifulSoup and exposes a small closed set of traversal
capabilities: by-selector, by-class-substring, text/HTML of a subtree,
closest ancestor, previous sibling row and bounded ancestor walks.
Extraction code only talks to this interface, never to bs4 directly.
"""
import logging
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, Tag

from workout_email.config.settings import HTML_PARSER

logger = logging.getLogger(__name__)

Node = Tag


class DocumentTree:
    """Parsed email document. Owned by one extraction run."""

    def __init__(self, html: str, parser: Optional[str] = None):
        self._soup = BeautifulSoup(html or "", parser or HTML_PARSER)
        self._text: Optional[str] = None

    @property
    def root(self) -> Node:
        return self._soup

    @property
    def text(self) -> str:
        """Rendered text of the whole document (cached)."""
        if self._text is None:
            self._text = self._soup.get_text()
        return self._text

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _within(self, scope: Optional[Node]) -> Node:
        # Tag truthiness follows len(contents), so compare with None.
        return self._soup if scope is None else scope

    def select(self, selector: str, scope: Optional[Node] = None) -> List[Node]:
        """Elements matching a tag/class selector (e.g. ``p.h2.text-gray``), in document order."""
        return self._within(scope).select(selector)

    def by_class_substring(
        self, tag: str, fragment: str, scope: Optional[Node] = None
    ) -> List[Node]:
        """Elements of *tag* whose class attribute contains *fragment*."""
        return self._within(scope).select(f'{tag}[class*="{fragment}"]')

    def find_text(self, fragment: str, tag: Optional[str] = None) -> Optional[Node]:
        """
        Innermost element whose text contains *fragment*.

        Looks at text nodes first so the hit is the element directly holding
        the string, not one of its containers. With *tag*, returns the
        nearest *tag* enclosing the first hit, in document order, that has
        one; hits outside any *tag* (``<title>``, a preheader) are skipped.
        """
        strings = self._soup.find_all(string=lambda s: s is not None and fragment in s)
        for string in strings:
            if string.parent is None:
                continue
            found = string.parent if tag is None else self.closest(string.parent, tag)
            if found is not None:
                return found

        # Fragment split across inline children: first element holding it
        # whose children do not hold it on their own.
        for el in self._soup.find_all(True):
            if fragment not in el.get_text():
                continue
            if any(fragment in child.get_text() for child in el.find_all(True, recursive=False)):
                continue
            found = el if tag is None else self.closest(el, tag)
            if found is not None:
                return found
        return None

    # ------------------------------------------------------------------
    # Node helpers
    # ------------------------------------------------------------------

    @staticmethod
    def text_of(node: Optional[Node]) -> str:
        if node is None:
            return ""
        return node.get_text()

    @staticmethod
    def html_of(node: Optional[Node]) -> str:
        """Serialized inner HTML of *node*."""
        if node is None:
            return ""
        return node.decode_contents()

    @staticmethod
    def matches(node: Optional[Node], selector: str) -> bool:
        if node is None or not isinstance(node, Tag):
            return False
        return node.css.match(selector)

    @staticmethod
    def classes_of(node: Node) -> List[str]:
        return list(node.get("class") or [])

    def closest(self, node: Optional[Node], tag: str) -> Optional[Node]:
        """Nearest ancestor-or-self named *tag*."""
        current = node
        while current is not None and isinstance(current, Tag):
            if current.name == tag:
                return current
            current = current.parent
        return None

    def previous_sibling_row(self, node: Optional[Node]) -> Optional[Node]:
        """The ``<tr>`` preceding the row that encloses *node*."""
        row = self.closest(node, "tr")
        if row is None:
            return None
        return row.find_previous_sibling("tr")

    def previous_sibling_matching(self, node: Optional[Node], selector: str) -> Optional[Node]:
        """Immediately previous element sibling, only if it matches *selector*."""
        if node is None:
            return None
        sibling = node.find_previous_sibling()
        return sibling if self.matches(sibling, selector) else None

    @staticmethod
    def first_descendant(node: Optional[Node], selector: str) -> Optional[Node]:
        if node is None:
            return None
        return node.select_one(selector)

    @staticmethod
    def ancestors(node: Optional[Node], limit: int) -> Iterator[Node]:
        """Up to *limit* ancestors of *node*, nearest first."""
        if node is None:
            return
        current = node.parent
        steps = 0
        while current is not None and steps < limit:
            yield current
            current = current.parent
            steps += 1


def parse_document(html: str, parser: Optional[str] = None) -> DocumentTree:
    """Parse normalized HTML into a DocumentTree. Never raises on bad markup."""
    tree = DocumentTree(html, parser)
    logger.debug("Parsed document: %d chars of HTML", len(html or ""))
    return tree
