from __future__ import annotations

from typing import Dict, List, Optional

from .cards import CATALOG, Card, UnknownCardError, cards_of_level

MAX_COPIES = 5


class Deck:
    """A player's unplaced cards: copy counts per card name, capped at MAX_COPIES."""

    def __init__(self, counts: Optional[Dict[str, int]] = None) -> None:
        self._counts: Dict[str, int] = {}
        for name, n in (counts or {}).items():
            if name not in CATALOG:
                raise UnknownCardError(name)
            if n > 0:
                self._counts[name] = min(int(n), MAX_COPIES)

    def grant(self, name: str) -> None:
        if name not in CATALOG:
            raise UnknownCardError(name)
        self._counts[name] = min(self._counts.get(name, 0) + 1, MAX_COPIES)

    def grant_level(self, level: int) -> None:
        for card in cards_of_level(level):
            self._counts[card.name] = MAX_COPIES

    def consume(self, name: str) -> Optional[Card]:
        """Takes one copy out of the deck; None (and no change) when none is left."""
        if self._counts.get(name, 0) <= 0:
            return None
        self._counts[name] -= 1
        return CATALOG[name]

    def restore(self, name: str) -> None:
        # Only undo puts cards back.
        self._counts[name] = min(self._counts.get(name, 0) + 1, MAX_COPIES)

    def count(self, name: str) -> int:
        return self._counts.get(name, 0)

    def available_names(self) -> List[str]:
        """Names with at least one copy left, in catalog order."""
        return [name for name in CATALOG if self._counts.get(name, 0) > 0]

    def remaining(self) -> int:
        return sum(self._counts.values())

    def counts(self) -> Dict[str, int]:
        return {name: n for name, n in self._counts.items() if n > 0}

    def copy(self) -> 'Deck':
        return Deck(self.counts())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Deck):
            return NotImplemented
        return self.counts() == other.counts()

    def __repr__(self) -> str:
        return f'Deck({self.counts()!r})'
