"""Round orchestration and bet bookkeeping."""

from blackjack.game.engine import BlackjackGame, Outcome, Settlement, settle_hand
from blackjack.game.ledger import BetLedger

__all__ = [
    "BlackjackGame",
    "Outcome",
    "Settlement",
    "settle_hand",
    "BetLedger",
]
