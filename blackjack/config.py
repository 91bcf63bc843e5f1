"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field


def _parse_seed() -> int | None:
    """Parse BLACKJACK_SEED environment variable."""
    seed = os.getenv("BLACKJACK_SEED", "").strip()
    return int(seed) if seed else None


@dataclass(frozen=True)
class GameConfig:
    """Game configuration."""

    # Dealer draws while below this value
    dealer_stands_on: int = field(
        default_factory=lambda: int(os.getenv("BLACKJACK_DEALER_STANDS_ON", "17"))
    )

    # Seed for the deck's random number generator (None = unseeded)
    seed: int | None = field(default_factory=_parse_seed)

    # Hold hand events fired before anyone subscribed
    buffer_hand_events: bool = field(
        default_factory=lambda: os.getenv("BLACKJACK_BUFFER_HAND_EVENTS", "true").lower() == "true"
    )

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 12 <= self.dealer_stands_on <= 21:
            raise ValueError("dealer_stands_on must be between 12 and 21")
