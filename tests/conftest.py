"""Pytest fixtures for blackjack engine tests."""

from random import Random

import pytest

from blackjack.cards import Card, Deck
from blackjack.config import GameConfig


class FirstCardRandom(Random):
    """Random whose draws always pick the first remaining card."""

    def randrange(self, *args, **kwargs):
        return 0


def stack_deck(*codes: str) -> Deck:
    """Build a full deck that deals the given cards first, in order."""
    deck = Deck(rng=FirstCardRandom())
    front = []
    for code in codes:
        wanted = Card.from_string(code)
        card = next(c for c in deck._cards if c == wanted)
        deck._cards.remove(card)
        front.append(card)
    deck._cards[:0] = front
    return deck


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A full seeded deck."""
    return Deck(rng=rng)


@pytest.fixture
def stacked_deck():
    """Factory for decks that deal a known sequence of cards."""
    return stack_deck


@pytest.fixture
def config():
    """Default configuration, independent of the environment."""
    return GameConfig(dealer_stands_on=17, seed=None, buffer_hand_events=True)


@pytest.fixture
def recorder():
    """Handler that records every event it receives."""

    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event):
            self.events.append(event)

        @property
        def types(self):
            return [e.event_type for e in self.events]

    return Recorder()
