from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .grid import Direction


class Element(Enum):
    NONE = 'none'
    FIRE = 'fire'
    ICE = 'ice'
    THUNDER = 'thunder'
    POISON = 'poison'
    EARTH = 'earth'
    WIND = 'wind'
    WATER = 'water'
    HOLY = 'holy'

    @classmethod
    def parse(cls, text: str) -> 'Element':
        """Maps a case-insensitive element name to its member."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(f'Unknown element: {text!r}') from None


class UnknownCardError(KeyError):
    """Raised when a card name is not present in the catalog."""


@dataclass(frozen=True)
class Card:
    """A named card type with four directional strengths."""
    name: str
    level: int
    top: int
    right: int
    bottom: int
    left: int
    element: Element = Element.NONE

    def strength(self, direction: Direction) -> int:
        """Returns the strength on the side facing `direction`."""
        if direction is Direction.NORTH:
            return self.top
        if direction is Direction.EAST:
            return self.right
        if direction is Direction.SOUTH:
            return self.bottom
        return self.left


# (level, name, top, right, bottom, left, element)
_CARD_TABLE: Tuple[Tuple[int, str, int, int, int, int, Element], ...] = (
    (1, 'Geezard', 1, 1, 5, 4, Element.NONE),
    (1, 'Funguar', 5, 1, 3, 1, Element.NONE),
    (1, 'Bite Bug', 1, 3, 5, 3, Element.NONE),
    (1, 'Red Bat', 6, 1, 2, 1, Element.NONE),
    (1, 'Blobra', 2, 1, 5, 3, Element.NONE),
    (1, 'Gayla', 2, 4, 4, 1, Element.THUNDER),
    (1, 'Gesper', 1, 4, 1, 5, Element.NONE),
    (1, 'Fastitocalon-F', 3, 2, 1, 5, Element.EARTH),
    (1, 'Blood Soul', 2, 6, 1, 1, Element.NONE),
    (1, 'Caterchipillar', 4, 4, 3, 2, Element.NONE),
    (1, 'Cockatrice', 2, 2, 6, 1, Element.THUNDER),
    (2, 'Grat', 7, 3, 1, 1, Element.NONE),
    (2, 'Buel', 6, 3, 2, 2, Element.NONE),
    (2, 'Mesmerize', 5, 4, 3, 3, Element.NONE),
    (2, 'Glacial Eye', 6, 3, 1, 4, Element.ICE),
    (2, 'Belhelmel', 3, 3, 4, 5, Element.NONE),
    (2, 'Thrustaevis', 5, 5, 3, 2, Element.WIND),
    (2, 'Anacondaur', 5, 5, 1, 3, Element.POISON),
    (2, 'Creeps', 5, 2, 5, 2, Element.THUNDER),
    (2, 'Grendel', 4, 2, 4, 5, Element.THUNDER),
    (2, 'Jelleye', 3, 7, 2, 1, Element.NONE),
    (2, 'Grand Mantis', 5, 3, 2, 5, Element.NONE),
)


def _build_catalog() -> Mapping[str, Card]:
    cards = {}
    for level, name, top, right, bottom, left, element in _CARD_TABLE:
        cards[name] = Card(name=name, level=level, top=top, right=right, bottom=bottom, left=left, element=element)
    return MappingProxyType(cards)


# Built once at import; read-only afterwards. Iteration order is table order.
CATALOG: Mapping[str, Card] = _build_catalog()


def lookup_card(name: str) -> Card:
    """Returns the catalog entry for `name` or raises UnknownCardError."""
    try:
        return CATALOG[name]
    except KeyError:
        raise UnknownCardError(name) from None


def cards_of_level(level: int) -> List[Card]:
    return [card for card in CATALOG.values() if card.level == level]
