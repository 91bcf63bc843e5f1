"""A blackjack hand: its cards, value, status and per-hand actions."""

import logging
from decimal import Decimal
from typing import Iterator

from transitions import Machine

from blackjack.cards import Card, Deck
from blackjack.events import EventEmitter, EventHandler, EventType, HandEvent
from blackjack.exceptions import InactiveHandError, MissingBetError, NotSplittableError
from blackjack.state import HAND_TRANSITIONS, HandStatus

logger = logging.getLogger(__name__)

BLACKJACK = 21

Bet = int | Decimal


class Hand:
    """
    A hand dealt from a shared deck.

    The hand is dealt two cards on construction and then driven by ``hit``,
    ``stand``, ``double_down`` and ``split``. Its status follows a small
    state machine: it starts ACTIVE and moves once to STAND, BUST or
    BLACKJACK, never back.
    """

    STATES = [s.name.lower() for s in HandStatus]

    def __init__(
        self,
        deck: Deck,
        bet: Bet | None = None,
        identifier: str | None = None,
        *,
        first_card: Card | None = None,
        buffer_events: bool = True,
    ) -> None:
        """
        Deal a new hand.

        Args:
            deck: Deck the cards are drawn from
            bet: Stake riding on this hand (None for the dealer)
            identifier: Opaque label, e.g. a player id
            first_card: Card carried over from a split; only one card is drawn
            buffer_events: Hold events fired before any handler subscribes
        """
        self.deck = deck
        self.bet = bet
        self.identifier = identifier
        self.cards: list[Card] = []
        self.hand_value = 0
        self._play_count = 0
        self._buffer_events = buffer_events
        self.events = EventEmitter(buffer_unheard=buffer_events)

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=HAND_TRANSITIONS,
            initial="active",
            auto_transitions=False,
            model_attribute="_machine_state",
            after_state_change="_log_transition",
        )

        if first_card is None:
            self._add_card()
        else:
            self.cards.append(first_card)
            self._validate()
        self._add_card()

        if self.hand_value == BLACKJACK:
            self.mark_blackjack()
            self.events.emit_new(HandEvent.BLACKJACK, hand=self, hand_value=self.hand_value)

    @property
    def status(self) -> HandStatus:
        """Get current hand status as enum."""
        return HandStatus[self._machine_state.upper()]  # type: ignore

    @property
    def play_count(self) -> int:
        """Return the number of hits taken on this hand."""
        return self._play_count

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to hand events, receiving any that were buffered."""
        self.events.subscribe(handler, event_type)

    def hit(self) -> None:
        """
        Draw one more card.

        The hand busts above 21 and becomes BLACKJACK at exactly 21;
        otherwise it stays active.

        Raises:
            InactiveHandError: If the hand has already finished
        """
        self._require_active("hit")

        self._add_card()
        self._play_count += 1
        logger.debug("Hit %r: drew %s, value %d", self.identifier, self.cards[-1], self.hand_value)

        if self.hand_value > BLACKJACK:
            self.mark_bust()
            self.events.emit_new(HandEvent.BUST, hand=self, hand_value=self.hand_value)
        elif self.hand_value == BLACKJACK:
            self.mark_blackjack()
            self.events.emit_new(HandEvent.BLACKJACK, hand=self, hand_value=self.hand_value)
        else:
            self.events.emit_new(HandEvent.CHANGED, hand=self, hand_value=self.hand_value)

    def stand(self, force_validation: bool = False) -> None:
        """
        End this hand's turn.

        Args:
            force_validation: Re-run ace valuation before standing

        Raises:
            InactiveHandError: If the hand has already finished
        """
        self._require_active("stand")

        if force_validation:
            self._validate()
        self.mark_stood()

    def double_down(self) -> None:
        """
        Double the bet and take exactly one card.

        Raises:
            MissingBetError: If the hand was dealt without a bet
            InactiveHandError: If the hand has already finished
        """
        if not self.bet:
            raise MissingBetError("Double down is not available when no bet has been provided")
        self._require_active("double down")

        self.bet *= 2
        self.hit()

    def split(self) -> list["Hand"]:
        """
        Split a pair into two new hands.

        Each child keeps one card of the pair, draws one more and carries
        the full original bet. This hand is left as it was; callers should
        treat it as replaced by the children.

        Raises:
            MissingBetError: If the hand was dealt without a bet
            NotSplittableError: If ``can_split()`` is false
        """
        if not self.bet:
            raise MissingBetError("Split is not available when no bet has been provided")
        if not self.can_split():
            raise NotSplittableError(f"Hand cannot be split: {self}")

        children = [
            Hand(
                self.deck,
                self.bet,
                self.identifier,
                first_card=card,
                buffer_events=self._buffer_events,
            )
            for card in self.cards
        ]
        logger.debug("Split %r into %r", self, children)
        self.events.emit_new(HandEvent.NEW_HAND, hands=children, parent=self)
        return children

    def can_split(self) -> bool:
        """Check if the hand is exactly two cards of equal point value."""
        if len(self.cards) != 2:
            return False
        if not all(card.is_resolved for card in self.cards):
            self._validate()
        return self.cards[0].value == self.cards[1].value

    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.status == HandStatus.ACTIVE

    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.status == HandStatus.ACTIVE

    def can_double_down(self) -> bool:
        """Check if no hit has been taken yet."""
        return self._play_count == 0

    def _require_active(self, action: str) -> None:
        if self.status != HandStatus.ACTIVE:
            raise InactiveHandError(f"Cannot {action}: hand is no longer active ({self.status})")

    def _add_card(self) -> None:
        """Draw a card from the deck and revalue the hand."""
        self.cards.append(self.deck.draw_card())
        self._validate()

    def _validate(self) -> None:
        """
        Recompute the hand value, resolving any unresolved aces.

        Resolved cards are summed first. Unresolved aces are then settled in
        hand order: 11 if that keeps the running total at or under 21,
        otherwise 1. An ace keeps its value once resolved.
        """
        total = sum(card.value for card in self.cards if card.value is not None)
        for card in self.cards:
            if card.value is None:
                card.resolve(11 if total + 11 <= BLACKJACK else 1)
                total += card.value
        self.hand_value = total

    def _log_transition(self) -> None:
        logger.debug("Hand %r is now %s at %d", self.identifier, self.status, self.hand_value)

    def __bool__(self) -> bool:
        # A hand is truthy even before its first card is dealt
        return True

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        return f"{cards_str} ({self.hand_value}, {self.status})"

    def __repr__(self) -> str:
        return (
            f"Hand({self.cards!r}, value={self.hand_value}, "
            f"status={self.status.name}, bet={self.bet!r}, identifier={self.identifier!r})"
        )
