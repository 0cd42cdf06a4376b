"""Click-driven state machine for a Klondike table.

The presentation layer resolves raw pointer input into one of the event
types below and hands it to ``InteractionController``. The controller is
the only writer of the table's selection: it is either idle (no selection)
or holds one run of cards taken from a single pile. A click while a run is
selected either cancels it, commits a legal move, or rejects the move with
a notice; every path ends with the selection cleared.
"""

from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Union

from klondike import rules
from klondike.cards import new_shuffled_deck
from klondike.table import Pile, TableState, TableView, deal

logger = logging.getLogger(__name__)

INVALID_MOVE = "Invalid move!"


@dataclass(frozen=True)
class StockClicked:
    pass


@dataclass(frozen=True)
class WasteClicked:
    pass


@dataclass(frozen=True)
class TableauClicked:
    column: int
    # None means the click landed on the column itself (e.g. an empty slot).
    card_index: Optional[int] = None


@dataclass(frozen=True)
class FoundationClicked:
    index: int


@dataclass(frozen=True)
class BackgroundClicked:
    pass


ClickEvent = Union[StockClicked, WasteClicked, TableauClicked, FoundationClicked, BackgroundClicked]


class InteractionController:
    def __init__(self, seed: Optional[int] = None):
        self.seed: Optional[int] = None
        self.table: TableState = TableState()
        self._handling = False
        self.new_game(seed)

    # ---------- Lifecycle ----------
    def new_game(self, seed: Optional[int] = None):
        """Discard the current table and deal a freshly shuffled one."""
        if seed is None:
            seed = random.randrange(2 ** 32)
        self.seed = seed
        self.table = deal(new_shuffled_deck(seed))
        logger.info("new game dealt with seed %d", seed)

    def snapshot(self) -> TableView:
        return self.table.snapshot()

    @property
    def won(self) -> bool:
        return self.table.won

    # ---------- Event entry points ----------
    def dispatch(self, event: ClickEvent):
        if isinstance(event, StockClicked):
            self.stock_clicked()
        elif isinstance(event, WasteClicked):
            self.waste_clicked()
        elif isinstance(event, TableauClicked):
            self.tableau_clicked(event.column, event.card_index)
        elif isinstance(event, FoundationClicked):
            self.foundation_clicked(event.index)
        elif isinstance(event, BackgroundClicked):
            self.background_clicked()
        else:
            raise TypeError(f"unknown event {event!r}")

    def stock_clicked(self):
        with self._event():
            t = self.table
            if t.stock.cards:
                card = t.draw_from_stock()
                logger.debug("drew %r", card)
            else:
                n = t.recycle_waste()
                logger.debug("recycled %d waste cards to stock", n)
            t.clear_selection()

    def waste_clicked(self):
        with self._event():
            t = self.table
            card = t.waste.top
            if card is None or t.is_selected(card):
                t.clear_selection()
                return
            t.select(t.waste, [card])

    def tableau_clicked(self, column: int, card_index: Optional[int] = None):
        with self._event():
            t = self.table
            pile = t.tableau_pile(column)
            if card_index is None:
                card_index = len(pile) - 1
            card = None
            if not pile.cards and card_index != -1:
                # only the empty slot itself is a target on an empty column
                t.clear_selection()
                return
            if pile.cards:
                if not 0 <= card_index < len(pile):
                    t.clear_selection()
                    return
                card = pile.cards[card_index]
                if not card.face_up:
                    # face-down cards are not interactive
                    t.clear_selection()
                    return

            if t.selection is None:
                t.select(pile, pile.run_from(card_index))
                return
            if t.is_selected(card):
                t.clear_selection()
                return
            on_target = card is None or pile.is_top_index(card_index)
            if on_target and rules.is_valid_tableau_move(pile.top, t.selection.lead):
                self._commit(pile)
            else:
                self._reject(pile)

    def foundation_clicked(self, index: int):
        with self._event():
            t = self.table
            pile = t.foundation_pile(index)
            card = pile.top
            if t.selection is None:
                if card is not None:
                    t.select(pile, [card])
                return
            if t.is_selected(card):
                t.clear_selection()
                return
            sel = t.selection
            if len(sel.cards) == 1 and rules.is_valid_foundation_move(card, sel.lead):
                self._commit(pile)
            else:
                self._reject(pile)

    def background_clicked(self):
        with self._event():
            self.table.clear_selection()

    # ---------- Internals ----------
    def _commit(self, destination: Pile):
        t = self.table
        t.move_selection(destination)
        t.reveal_tops()
        if not t.won and rules.is_game_won(t.foundations):
            t.won = True
            logger.info("game won (seed %d)", self.seed)

    def _reject(self, destination: Pile):
        t = self.table
        logger.debug("rejected %r onto %s[%d]", t.selection.lead, destination.kind.value, destination.index)
        t.notice = INVALID_MOVE
        t.clear_selection()

    @contextmanager
    def _event(self):
        # Events are handled one at a time; a nested event is a caller bug.
        if self._handling:
            raise RuntimeError("event dispatched while another event is being handled")
        self._handling = True
        self.table.notice = ""
        try:
            yield self.table
        finally:
            self._handling = False
