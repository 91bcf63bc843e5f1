"""Errors raised by the blackjack engine.

Every error is a caller-correctable precondition violation. Each one also
derives from the builtin exception closest to its meaning, so callers may
catch either the specific class, ``BlackjackError`` or the builtin.
"""


class BlackjackError(Exception):
    """Base class for all blackjack engine errors."""


class DeckExhaustedError(BlackjackError, IndexError):
    """A card was requested from an empty deck."""


class InactiveHandError(BlackjackError, RuntimeError):
    """An action was requested on a hand that has already stood, busted or hit 21."""


class MissingBetError(BlackjackError, ValueError):
    """Double down or split was requested on a hand dealt without a bet."""


class NotSplittableError(BlackjackError, ValueError):
    """Split was requested on a hand that is not a two-card pair of equal value."""


class ActiveHandsRemainError(BlackjackError, RuntimeError):
    """Settlement was requested while a player hand is still active."""


class RoundSettledError(BlackjackError, RuntimeError):
    """The round has already been settled and cannot be played further."""


class InvalidBetError(BlackjackError, ValueError):
    """A bet amount was zero or negative."""


class NoExistingBetError(BlackjackError, KeyError):
    """A bet was doubled for a user who has not placed one."""
