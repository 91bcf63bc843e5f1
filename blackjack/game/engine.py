"""Blackjack round: one dealer hand, any number of player hands, one deck."""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from random import Random

from transitions import Machine

from blackjack.cards import Deck
from blackjack.config import GameConfig
from blackjack.events import EventEmitter, EventHandler, EventType, RoundEvent
from blackjack.exceptions import ActiveHandsRemainError, RoundSettledError
from blackjack.hand import BLACKJACK, Bet, Hand
from blackjack.state import ROUND_TRANSITIONS, HandStatus, RoundState

logger = logging.getLogger(__name__)

DEALER_IDENTIFIER = "dealer"


class Outcome(Enum):
    """Result of one player hand against the dealer."""

    WIN = auto()
    LOSE = auto()
    PUSH = auto()


@dataclass(frozen=True)
class Settlement:
    """Player hands partitioned by result at the end of a round."""

    winning_hands: tuple[Hand, ...]
    losing_hands: tuple[Hand, ...]
    tied_hands: tuple[Hand, ...]
    dealer_value: int

    def outcome_for(self, hand: Hand) -> Outcome:
        """
        Look up the result of a settled hand.

        Raises:
            ValueError: If the hand was not part of this settlement
        """
        if any(h is hand for h in self.winning_hands):
            return Outcome.WIN
        if any(h is hand for h in self.losing_hands):
            return Outcome.LOSE
        if any(h is hand for h in self.tied_hands):
            return Outcome.PUSH
        raise ValueError(f"{hand!r} was not settled in this round")


def settle_hand(player_value: int, dealer_value: int) -> Outcome:
    """
    Compare a final player value with the dealer's.

    A bust player loses even if the dealer also busts. A player under a
    standing dealer loses, an equal value pushes, anything else wins.
    """
    if player_value > BLACKJACK:
        return Outcome.LOSE
    if player_value < dealer_value <= BLACKJACK:
        return Outcome.LOSE
    if player_value == dealer_value:
        return Outcome.PUSH
    return Outcome.WIN


class BlackjackGame:
    """
    A single round of blackjack.

    The dealer hand is dealt when the round is created; player hands are
    added with ``create_new_hand``. Once every player hand has finished,
    ``finalize_game`` plays the dealer out and settles the round. A round
    is settled once and is not reused.
    """

    STATES = [s.name.lower() for s in RoundState]

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: Random | None = None,
        deck: Deck | None = None,
    ) -> None:
        """
        Start a new round.

        Args:
            config: Game configuration (read from the environment if not provided)
            rng: Random number generator for the deck; defaults to one seeded
                from ``config.seed``
            deck: Pre-built deck to deal from, overriding ``rng``
        """
        self.config = config or GameConfig()
        self.deck = deck if deck is not None else Deck(rng=rng or Random(self.config.seed))
        self.events = EventEmitter()
        self.dealer_hand = self._deal_hand(identifier=DEALER_IDENTIFIER)
        self.player_hands: list[Hand] = []

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=ROUND_TRANSITIONS,
            initial="in_progress",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_log_transition",
        )
        logger.debug("Round started, dealer dealt %s", self.dealer_hand)

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to round events."""
        self.events.subscribe(handler, event_type)

    def remove_all_handlers(self, event_type: EventType | None = None) -> None:
        """Remove round event handlers."""
        self.events.remove_all_handlers(event_type)

    def create_new_hand(self, bet: Bet | None = None, identifier: str | None = None) -> Hand:
        """
        Deal a new player hand from the round's deck.

        Raises:
            RoundSettledError: If the round has already been settled
        """
        self._require_in_progress()

        hand = self._deal_hand(bet=bet, identifier=identifier)
        self.player_hands.append(hand)
        logger.debug("New hand %r", hand)
        self.events.emit_new(RoundEvent.NEW_HAND_CREATED, hand=hand)
        return hand

    def split_hand(self, hand: Hand) -> list[Hand]:
        """
        Split a player hand and put its two children in its place.

        Raises:
            ValueError: If the hand is not a player hand of this round
            RoundSettledError: If the round has already been settled
        """
        self._require_in_progress()
        index = next((i for i, h in enumerate(self.player_hands) if h is hand), None)
        if index is None:
            raise ValueError(f"{hand!r} is not a player hand in this round")

        children = hand.split()
        self.player_hands[index : index + 1] = children
        for child in children:
            self.events.emit_new(RoundEvent.NEW_HAND_CREATED, hand=child)
        return children

    def stand_all(self) -> list[Hand]:
        """
        Force every active player hand to stand.

        Raises:
            RoundSettledError: If the round has already been settled
        """
        self._require_in_progress()
        stood_hands = [h for h in self.player_hands if h.status == HandStatus.ACTIVE]
        for hand in stood_hands:
            hand.mark_stood()

        self.events.emit_new(RoundEvent.STOOD_ALL, hands=stood_hands)
        return stood_hands

    def finalize_game(self) -> Settlement:
        """
        Play the dealer out and settle every player hand.

        The dealer hits while below ``config.dealer_stands_on`` and stands if
        still active afterwards.

        Raises:
            ActiveHandsRemainError: If any player hand is still active
            RoundSettledError: If the round has already been settled
        """
        self._require_in_progress()
        if any(h.status == HandStatus.ACTIVE for h in self.player_hands):
            raise ActiveHandsRemainError("Active hands still exist")

        dealer = self.dealer_hand
        while dealer.hand_value < self.config.dealer_stands_on:
            dealer.hit()
        if dealer.status == HandStatus.ACTIVE:
            dealer.stand()

        winning: list[Hand] = []
        losing: list[Hand] = []
        tied: list[Hand] = []
        partitions = {Outcome.WIN: winning, Outcome.LOSE: losing, Outcome.PUSH: tied}
        for hand in self.player_hands:
            partitions[settle_hand(hand.hand_value, dealer.hand_value)].append(hand)

        settlement = Settlement(
            winning_hands=tuple(winning),
            losing_hands=tuple(losing),
            tied_hands=tuple(tied),
            dealer_value=dealer.hand_value,
        )
        self.settle()
        logger.debug(
            "Round settled against dealer %d: %d won, %d lost, %d tied",
            dealer.hand_value,
            len(winning),
            len(losing),
            len(tied),
        )
        self.events.emit_new(RoundEvent.END, settlement=settlement)
        return settlement

    def _deal_hand(self, bet: Bet | None = None, identifier: str | None = None) -> Hand:
        return Hand(
            self.deck,
            bet,
            identifier,
            buffer_events=self.config.buffer_hand_events,
        )

    def _log_transition(self) -> None:
        logger.debug("Round is now %s", self.state)

    def _require_in_progress(self) -> None:
        if self.state == RoundState.SETTLED:
            raise RoundSettledError("This round has already been settled")
