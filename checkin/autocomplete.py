"""
autocomplete.py - Name Suggestions
===================================
Derives suggestions from the already-loaded NameIndex while the user types a
name. It never touches the network, and it is inert unless the active
criteria is SearchCriteria.NAME.

Keyboard Contract:
------------------
- Enter  : submit the current term under the active criteria, hide suggestions
- Escape : hide suggestions, keep the term
"""

from typing import Iterable, List

from .models import SearchCriteria
from .name_index import NameIndex


KEY_ENTER = "Enter"
KEY_ESCAPE = "Escape"


def filter_names(names: Iterable[str], partial: str, limit: int = 0) -> List[str]:
    """
    Every name containing `partial` as a case-insensitive substring.

    Index order is preserved and nothing is ranked. A positive `limit` caps
    the result.

    Examples:
        filter_names(["John Doe", "Joan Smith", "Mark Lee"], "jo")
            -> ["John Doe", "Joan Smith"]
    """
    needle = partial.strip().casefold()
    if not needle:
        return []

    matches = []
    for name in names:
        if needle in name.casefold():
            matches.append(name)
            if limit > 0 and len(matches) >= limit:
                break
    return matches


class AutocompleteFilter:
    """Search-term input state with suggestions for name lookups."""

    def __init__(self, index: NameIndex, criteria: SearchCriteria = SearchCriteria.UNIQUE_ID,
                 limit: int = 0):
        self.index = index
        self.criteria = criteria
        self.limit = limit
        self.term = ""
        self.suggestions: List[str] = []
        self.visible = False

    @property
    def active(self) -> bool:
        return self.criteria is SearchCriteria.NAME

    def set_criteria(self, criteria: SearchCriteria):
        """Switching criteria starts over with an empty term."""
        self.criteria = criteria
        self.term = ""
        self.hide()

    def on_input(self, text: str) -> List[str]:
        """Record the new input and recompute suggestions. Returns what is visible."""
        self.term = text
        if not self.active or not text.strip():
            self.hide()
            return []

        self.suggestions = filter_names(self.index, text, self.limit)
        self.visible = True
        return self.suggestions

    def choose(self, name: str):
        """Take a suggestion as the term. Does not submit."""
        self.term = name
        self.hide()

    def handle_key(self, key: str) -> bool:
        """Returns True when the key asks for the current term to be submitted."""
        if key == KEY_ENTER:
            self.hide()
            return True
        if key == KEY_ESCAPE:
            self.hide()
        return False

    def hide(self):
        self.suggestions = []
        self.visible = False
