"""Hand and round state enumerations."""

from enum import Enum, auto


class HandStatus(Enum):
    """
    Hand state machine states.

    Flow: ACTIVE → STAND | BUST | BLACKJACK (all three are terminal)
    """

    ACTIVE = auto()
    STAND = auto()
    BUST = auto()
    BLACKJACK = auto()

    def __str__(self) -> str:
        return self.name.title()


class RoundState(Enum):
    """
    Round state machine states.

    Flow: IN_PROGRESS → SETTLED
    """

    IN_PROGRESS = auto()
    SETTLED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Machine transitions, in transitions' dict format. Terminal states have no
# outgoing transitions, so the machine rejects any second status change.
HAND_TRANSITIONS = [
    {"trigger": "mark_stood", "source": "active", "dest": "stand"},
    {"trigger": "mark_bust", "source": "active", "dest": "bust"},
    {"trigger": "mark_blackjack", "source": "active", "dest": "blackjack"},
]

ROUND_TRANSITIONS = [
    {"trigger": "settle", "source": "in_progress", "dest": "settled"},
]
