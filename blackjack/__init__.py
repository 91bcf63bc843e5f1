"""Single-deck blackjack rules engine - 100% UI-agnostic."""

import logging

from blackjack.cards import Card, Deck, Rank, Suit
from blackjack.config import GameConfig
from blackjack.events import EventEmitter, GameEvent, HandEvent, RoundEvent
from blackjack.exceptions import (
    ActiveHandsRemainError,
    BlackjackError,
    DeckExhaustedError,
    InactiveHandError,
    InvalidBetError,
    MissingBetError,
    NoExistingBetError,
    NotSplittableError,
    RoundSettledError,
)
from blackjack.game import BetLedger, BlackjackGame, Outcome, Settlement
from blackjack.hand import Hand
from blackjack.state import HandStatus, RoundState

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Hand",
    "HandStatus",
    "RoundState",
    "BlackjackGame",
    "Settlement",
    "Outcome",
    "BetLedger",
    "GameConfig",
    "EventEmitter",
    "GameEvent",
    "HandEvent",
    "RoundEvent",
    "BlackjackError",
    "DeckExhaustedError",
    "InactiveHandError",
    "MissingBetError",
    "NotSplittableError",
    "ActiveHandsRemainError",
    "RoundSettledError",
    "InvalidBetError",
    "NoExistingBetError",
]
