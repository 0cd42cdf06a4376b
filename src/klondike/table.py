"""Piles and the table that owns them.

A ``TableState`` holds every card of one game: the stock, the waste, seven
tableau columns and four foundations, plus the current selection. Cards only
ever move between piles; ``move_selection`` is the single relocation path so
a card is always owned by exactly one pile.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from klondike.cards import BACK_ASSET_KEY, Card, Rank, Suit, make_deck

logger = logging.getLogger(__name__)

TABLEAU_COUNT = 7
FOUNDATION_COUNT = 4
DECK_SIZE = 52


class PileKind(Enum):
    STOCK = "stock"
    WASTE = "waste"
    TABLEAU = "tableau"
    FOUNDATION = "foundation"


# Kinds that only ever expose their top card.
_TOP_ONLY = {PileKind.STOCK, PileKind.WASTE, PileKind.FOUNDATION}


class Pile:
    __slots__ = ("kind", "index", "cards")

    def __init__(self, kind: PileKind, index: int = 0, cards: Optional[List[Card]] = None):
        self.kind = kind
        self.index = index
        self.cards: List[Card] = list(cards) if cards else []

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __repr__(self):
        return f"Pile({self.kind.value}[{self.index}], {self.cards!r})"

    @property
    def top(self) -> Optional[Card]:
        return self.cards[-1] if self.cards else None

    def is_top_index(self, idx: int) -> bool:
        return bool(self.cards) and idx == len(self.cards) - 1

    def run_from(self, idx: int) -> List[Card]:
        """Cards that may be picked up starting at ``idx`` (empty if none)."""
        if idx < 0 or idx >= len(self.cards):
            return []
        if self.kind in _TOP_ONLY:
            return [self.cards[idx]] if self.is_top_index(idx) else []
        run = self.cards[idx:]
        if not all(c.face_up for c in run):
            return []
        return run

    def reveal_top(self) -> bool:
        """Flip the top card face up. Returns True when a card was flipped."""
        top = self.top
        if top is not None and not top.face_up:
            top.reveal()
            return True
        return False


@dataclass(frozen=True)
class Selection:
    source: Pile
    cards: Tuple[Card, ...]

    def __contains__(self, card) -> bool:
        return card in self.cards

    @property
    def lead(self) -> Card:
        return self.cards[0]


# ---------- Read-only views for the renderer ----------
@dataclass(frozen=True)
class CardView:
    suit: Suit
    rank: Rank
    face_up: bool
    selected: bool
    asset_key: str


@dataclass(frozen=True)
class PileView:
    kind: PileKind
    index: int
    cards: Tuple[CardView, ...]


@dataclass(frozen=True)
class TableView:
    stock: PileView
    waste: PileView
    tableau: Tuple[PileView, ...]
    foundations: Tuple[PileView, ...]
    notice: str
    won: bool
    selection_label: str


def _card_view(card: Card) -> CardView:
    key = card.asset_key if card.face_up else BACK_ASSET_KEY
    return CardView(card.suit, card.rank, card.face_up, card.selected, key)


def _pile_view(pile: Pile) -> PileView:
    return PileView(pile.kind, pile.index, tuple(_card_view(c) for c in pile.cards))


class TableState:
    def __init__(self):
        self.stock = Pile(PileKind.STOCK)
        self.waste = Pile(PileKind.WASTE)
        self.tableau = [Pile(PileKind.TABLEAU, i) for i in range(TABLEAU_COUNT)]
        self.foundations = [Pile(PileKind.FOUNDATION, i) for i in range(FOUNDATION_COUNT)]
        self.selection: Optional[Selection] = None
        self.notice = ""
        self.won = False

    def piles(self) -> Iterator[Pile]:
        yield self.stock
        yield self.waste
        yield from self.tableau
        yield from self.foundations

    def tableau_pile(self, index: int) -> Pile:
        if not 0 <= index < TABLEAU_COUNT:
            raise IndexError(f"tableau column {index} out of range")
        return self.tableau[index]

    def foundation_pile(self, index: int) -> Pile:
        if not 0 <= index < FOUNDATION_COUNT:
            raise IndexError(f"foundation {index} out of range")
        return self.foundations[index]

    # ---------- Selection ----------
    def select(self, source: Pile, cards: Sequence[Card]):
        self.clear_selection()
        if not cards:
            return
        for c in cards:
            c.selected = True
        self.selection = Selection(source, tuple(cards))

    def clear_selection(self):
        if self.selection is not None:
            for c in self.selection.cards:
                c.selected = False
        self.selection = None

    def is_selected(self, card: Optional[Card]) -> bool:
        return card is not None and self.selection is not None and card in self.selection

    # ---------- Moves ----------
    def move_selection(self, destination: Pile) -> List[Card]:
        """
        Relocate the selected run from its source onto ``destination`` in
        order. The run is always the source's top suffix, so this is a slice
        off the end followed by an extend. Clears the selection.
        """
        sel = self.selection
        if sel is None:
            return []
        source = sel.source
        n = len(sel.cards)
        if source.cards[-n:] != list(sel.cards):
            raise ValueError("selection is no longer the top of its pile")
        moved = source.cards[-n:]
        del source.cards[-n:]
        destination.cards.extend(moved)
        self.clear_selection()
        logger.debug("moved %s from %s[%d] to %s[%d]", moved, source.kind.value, source.index,
                     destination.kind.value, destination.index)
        return moved

    def draw_from_stock(self) -> Optional[Card]:
        if not self.stock.cards:
            return None
        card = self.stock.cards.pop()
        card.face_up = True
        self.waste.cards.append(card)
        return card

    def recycle_waste(self) -> int:
        """
        Turn the waste back over onto the stock. The waste top goes to the
        stock bottom, so the next pass draws in the same order as before.
        """
        n = len(self.waste.cards)
        self.stock.cards = list(reversed(self.waste.cards))
        for c in self.stock.cards:
            c.face_up = False
        self.waste.cards = []
        return n

    def reveal_tops(self):
        for p in self.tableau:
            p.reveal_top()

    # ---------- Invariants ----------
    def all_cards(self) -> List[Card]:
        out: List[Card] = []
        for p in self.piles():
            out.extend(p.cards)
        return out

    def check_conservation(self):
        cards = self.all_cards()
        if len(cards) != DECK_SIZE or set(cards) != set(make_deck()):
            raise ValueError(f"table holds {len(cards)} cards ({len(set(cards))} distinct), expected {DECK_SIZE}")

    # ---------- Rendering ----------
    def snapshot(self) -> TableView:
        label = "None" if self.selection is None else self.selection.lead.asset_key
        return TableView(
            stock=_pile_view(self.stock),
            waste=_pile_view(self.waste),
            tableau=tuple(_pile_view(p) for p in self.tableau),
            foundations=tuple(_pile_view(p) for p in self.foundations),
            notice=self.notice,
            won=self.won,
            selection_label=label,
        )


def deal(deck: Sequence[Card]) -> TableState:
    """
    Lay out a fresh table from a 52-card deck: column i receives i+1 cards
    popped off the end of the deck, the rest become the stock. Only the top
    card of each column starts face up.
    """
    if len(deck) != DECK_SIZE:
        raise ValueError(f"expected a {DECK_SIZE}-card deck, got {len(deck)}")
    cards = list(deck)
    table = TableState()
    for col in range(TABLEAU_COUNT):
        for r in range(col + 1):
            c = cards.pop()
            c.face_up = (r == col)
            c.selected = False
            table.tableau[col].cards.append(c)

    # Remaining cards go to stock, face down
    for c in cards:
        c.face_up = False
        c.selected = False
    table.stock.cards = cards
    return table
