"""Bet bookkeeping keyed by player identifier."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from collections.abc import Hashable

from blackjack.exceptions import InvalidBetError, NoExistingBetError

logger = logging.getLogger(__name__)

Amount = int | Decimal


@dataclass
class BetLedger:
    """
    Tracks one stake per player.

    The ledger is independent of the hands: doubling or splitting a hand
    changes only that hand's ``bet``. Callers that use both keep them in
    step and apply payouts from a round's settlement.
    """

    bets: dict[Hashable, Amount] = field(default_factory=dict)

    def place(self, user_id: Hashable, amount: Amount) -> None:
        """Place (or replace) a user's bet."""
        if amount <= 0:
            raise InvalidBetError(f"Bet amount must be positive, got {amount}")
        self.bets[user_id] = amount
        logger.debug("Bet of %s placed for %r", amount, user_id)

    def get(self, user_id: Hashable) -> Amount | None:
        """Return a user's bet, or None if there is none."""
        return self.bets.get(user_id)

    def remove(self, user_id: Hashable) -> None:
        """Remove a user's bet if present."""
        self.bets.pop(user_id, None)

    def double(self, user_id: Hashable) -> Amount:
        """Double a user's existing bet and return the new amount."""
        if user_id not in self.bets:
            raise NoExistingBetError(f"No existing bet found for {user_id!r}")
        self.bets[user_id] *= 2
        return self.bets[user_id]

    def clear(self) -> None:
        """Clear all bets."""
        self.bets.clear()

    def __len__(self) -> int:
        return len(self.bets)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.bets
