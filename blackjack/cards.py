"""Card and Deck classes for single-deck play."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import Iterator

from blackjack.exceptions import DeckExhaustedError

logger = logging.getLogger(__name__)

FACE_RANKS = ("jack", "queen", "king")


class Suit(Enum):
    """Card suits."""

    CLUBS = "clubs"
    DIAMONDS = "diamonds"
    HEARTS = "hearts"
    SPADES = "spades"

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks, valued by their rank string."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "jack"
    QUEEN = "queen"
    KING = "king"
    ACE = "ace"

    def __str__(self) -> str:
        if self.value.isdigit():
            return self.value
        return self.value[0].upper()

    @property
    def blackjack_value(self) -> int | None:
        """
        Return the fixed point value of this rank.

        Face cards count 10, numerals their number. Aces have no fixed value
        and return None; the owning hand decides between 1 and 11.
        """
        if self == Rank.ACE:
            return None
        if self.value in FACE_RANKS:
            return 10
        try:
            return int(self.value)
        except ValueError:
            return 10

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(slots=True)
class Card:
    """
    A playing card.

    Rank and suit never change. The value of a non-ace is derived once at
    construction; an ace starts unresolved (value None) and is resolved
    exactly once by the hand holding it.
    """

    rank: Rank
    suit: Suit
    value: int | None = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))
        object.__setattr__(self, "value", self.rank.blackjack_value)

    def __setattr__(self, name: str, value: object) -> None:
        if name in ("rank", "suit") and hasattr(self, name):
            raise AttributeError(f"Card {name} cannot be reassigned")
        if name == "value" and hasattr(self, name):
            raise AttributeError("Use resolve() to set an ace's value")
        object.__setattr__(self, name, value)

    def __hash__(self) -> int:
        return hash((self.rank, self.suit))

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name}, value={self.value})"

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @property
    def is_resolved(self) -> bool:
        """Check if this card has a settled point value."""
        return self.value is not None

    def resolve(self, value: int) -> None:
        """Fix an unresolved ace at 1 or 11."""
        if not self.is_ace:
            raise ValueError(f"Only aces can be resolved, not {self!r}")
        if self.is_resolved:
            raise ValueError(f"{self!r} has already been resolved")
        if value not in (1, 11):
            raise ValueError(f"An ace counts 1 or 11, not {value}")
        object.__setattr__(self, "value", value)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {str(rank): rank for rank in Rank}
        rank_map["T"] = Rank.TEN

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


class Deck:
    """A standard 52-card deck that deals at random without replacement."""

    def __init__(self, rng: Random | None = None) -> None:
        """
        Initialize a full deck.

        Args:
            rng: Random number generator used for draws; pass a seeded one
                for reproducible games
        """
        self._rng = rng or Random()
        self._cards: list[Card] = [Card(rank, suit) for suit in Suit for rank in Rank]

    def draw_card(self) -> Card:
        """Remove and return a card chosen uniformly from those remaining."""
        if not self._cards:
            raise DeckExhaustedError("No cards left in the deck")
        card = self._cards.pop(self._rng.randrange(len(self._cards)))
        logger.debug("Drew %s, %d cards remaining", card, len(self._cards))
        return card

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)
