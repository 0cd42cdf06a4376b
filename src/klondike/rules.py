# rules.py - move legality and win detection
from typing import Optional, Sequence

from klondike.cards import Card, Rank

FOUNDATION_SIZE = len(Rank)


def is_valid_tableau_move(destination: Optional[Card], moving: Card) -> bool:
    """Kings go on empty columns; otherwise alternate colours, one rank lower."""
    if destination is None:
        return moving.rank == Rank.KING
    if destination.color == moving.color:
        return False
    return destination.rank == moving.rank + 1


def is_valid_foundation_move(destination: Optional[Card], moving: Card) -> bool:
    """Aces start a foundation; otherwise same suit, one rank higher."""
    if destination is None:
        return moving.rank == Rank.ACE
    if destination.suit != moving.suit:
        return False
    return destination.rank == moving.rank - 1


def is_game_won(foundations: Sequence[Sequence[Card]]) -> bool:
    return all(len(f) == FOUNDATION_SIZE for f in foundations)
