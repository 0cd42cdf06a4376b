# cards.py - card identity, colours and the shuffled pack
import random
from enum import Enum, IntEnum
from typing import List, Optional


class Suit(Enum):
    CLUB = "club"
    DIAMOND = "diamond"
    HEART = "heart"
    SPADE = "spade"


class Rank(IntEnum):
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


class Color(Enum):
    RED = "red"
    BLACK = "black"


SUIT_SYMBOLS = {Suit.CLUB: "♣", Suit.DIAMOND: "♦", Suit.HEART: "♥", Suit.SPADE: "♠"}
RANK_TO_TEXT = {Rank.ACE: "A", Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K"}
for _r in Rank:
    RANK_TO_TEXT.setdefault(_r, str(int(_r)))

BACK_ASSET_KEY = "cardback"


def color_of(suit: Suit) -> Color:
    return Color.RED if suit in (Suit.HEART, Suit.DIAMOND) else Color.BLACK


class Card:
    """
    One of the 52 cards. Identity is (suit, rank); equality and hashing use
    only that pair so a card can be looked up in a selection by value.
    face_up / selected are the only mutable parts.
    """
    __slots__ = ("suit", "rank", "face_up", "selected")

    def __init__(self, suit: Suit, rank: Rank, face_up: bool = False):
        self.suit = suit
        self.rank = Rank(rank)
        self.face_up = face_up
        self.selected = False

    @property
    def color(self) -> Color:
        return color_of(self.suit)

    @property
    def identity(self):
        return (self.suit, self.rank)

    @property
    def asset_key(self) -> str:
        # e.g. "aceofspades", "tenofhearts"
        return f"{self.rank.name.lower()}of{self.suit.value}s"

    def reveal(self):
        self.face_up = True

    def __eq__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self.identity == other.identity

    def __hash__(self):
        return hash(self.identity)

    def __repr__(self):
        return f"{RANK_TO_TEXT[self.rank]}{SUIT_SYMBOLS[self.suit]}{'↑' if self.face_up else '↓'}"


def make_deck() -> List[Card]:
    """All 52 cards, face down, in suit-major order."""
    return [Card(suit, rank) for suit in Suit for rank in Rank]


def new_shuffled_deck(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> List[Card]:
    """
    Build the pack and shuffle it with Fisher-Yates. The same seed always
    yields the same order.
    """
    if rng is None:
        rng = random.Random(seed)
    deck = make_deck()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck
