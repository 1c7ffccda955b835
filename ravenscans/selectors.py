"""
Selector resolution over the parse tree.

A SelectorSet lists alternative CSS selectors for one extraction target. The
site serves several theme generations at once, so each target is resolved by
trying the alternatives in order and keeping the first that matches.
"""

from typing import Optional

from bs4 import Tag
from soupsieve import SelectorSyntaxError

from .schemas import SelectorSet
from .logger import get_module_logger

logger = get_module_logger("selectors")


class SelectorResolver:
    """Applies SelectorSets to a document or a sub-node."""

    def __init__(self):
        # Selectors the CSS engine rejected; each is reported once
        self._rejected: set[str] = set()

    def _select(self, scope: Tag, css: str) -> list[Tag]:
        try:
            return scope.select(css)
        except SelectorSyntaxError as e:
            if css not in self._rejected:
                self._rejected.add(css)
                logger.warning(f"Invalid CSS '{css}': {e}")
            return []

    def resolve(self, scope: Optional[Tag], target: SelectorSet) -> list[Tag]:
        """
        Return the matches of the first alternative that matches anything.

        Args:
            scope: Document root or sub-node to search under
            target: Ordered selector alternatives

        Returns:
            Matching nodes in document order, or [] when no alternative
            matches (or scope is None)
        """
        if scope is None:
            return []

        for css in target.selectors:
            matches = self._select(scope, css)
            if matches:
                logger.debug(f"{target.name}: '{css}' matched {len(matches)} node(s)")
                return matches

        logger.debug(f"{target.name}: no alternative matched")
        return []

    def resolve_first(self, scope: Optional[Tag], target: SelectorSet) -> Optional[Tag]:
        """Return the first node resolve() would return, or None."""
        matches = self.resolve(scope, target)
        return matches[0] if matches else None
