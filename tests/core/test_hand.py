"""Tests for Hand play and valuation."""

from decimal import Decimal
from random import Random

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from blackjack.cards import Deck, Rank
from blackjack.events import HandEvent
from blackjack.exceptions import InactiveHandError, MissingBetError, NotSplittableError
from blackjack.hand import Hand
from blackjack.state import HandStatus


class TestDeal:
    """Tests for the two-card deal."""

    def test_deal_two_cards(self, stacked_deck):
        """Test that a new hand draws two cards."""
        deck = stacked_deck("10S", "7H")
        hand = Hand(deck)
        assert len(hand) == 2
        assert hand.hand_value == 17
        assert hand.status == HandStatus.ACTIVE
        assert len(deck) == 50

    def test_new_hand_has_status(self, stacked_deck):
        """Test that a fresh hand is wired to its status machine."""
        hand = Hand(stacked_deck("10S", "7H"))
        assert hand.status == HandStatus.ACTIVE
        assert hand.can_hit()
        assert bool(hand)

    def test_bet_and_identifier(self, stacked_deck):
        """Test that bet and identifier are kept."""
        hand = Hand(stacked_deck("10S", "7H"), bet=25, identifier="alice")
        assert hand.bet == 25
        assert hand.identifier == "alice"

    def test_natural_blackjack(self, stacked_deck):
        """Test that ace and king is blackjack on the deal."""
        hand = Hand(stacked_deck("AS", "KH"))
        assert hand.status == HandStatus.BLACKJACK
        assert hand.hand_value == 21
        assert hand.cards[0].value == 11

    def test_ten_first_then_ace(self, stacked_deck):
        """Test that order does not matter for a two-card 21."""
        hand = Hand(stacked_deck("10S", "AH"))
        assert hand.status == HandStatus.BLACKJACK
        assert hand.cards[1].value == 11

    def test_pair_of_aces(self, stacked_deck):
        """Test that the second ace drops to 1."""
        hand = Hand(stacked_deck("AS", "AH"))
        assert hand.hand_value == 12
        assert [c.value for c in hand] == [11, 1]
        assert hand.status == HandStatus.ACTIVE

    def test_two_aces_then_nine(self, stacked_deck):
        """Test aces resolve left to right and then hit to 21."""
        hand = Hand(stacked_deck("AS", "AH", "9D"))
        hand.hit()
        assert [c.value for c in hand] == [11, 1, 9]
        assert hand.hand_value == 21
        assert hand.status == HandStatus.BLACKJACK


class TestHit:
    """Tests for hitting."""

    def test_hit_stays_active(self, stacked_deck, recorder):
        """Test a hit under 21."""
        hand = Hand(stacked_deck("2S", "3H", "4C"))
        hand.subscribe(recorder)
        hand.hit()
        assert hand.hand_value == 9
        assert hand.status == HandStatus.ACTIVE
        assert hand.play_count == 1
        assert recorder.types == [HandEvent.CHANGED]

    def test_hit_to_21(self, stacked_deck, recorder):
        """Test that reaching 21 by hitting is blackjack."""
        hand = Hand(stacked_deck("10S", "5H", "6C"))
        hand.subscribe(recorder)
        hand.hit()
        assert hand.hand_value == 21
        assert hand.status == HandStatus.BLACKJACK
        assert recorder.types == [HandEvent.BLACKJACK]

    def test_hit_bust(self, stacked_deck, recorder):
        """Test busting."""
        hand = Hand(stacked_deck("10S", "6H", "KC"))
        hand.subscribe(recorder, HandEvent.BUST)
        hand.hit()
        assert hand.hand_value == 26
        assert hand.status == HandStatus.BUST
        assert recorder.events[0].data["hand"] is hand
        assert recorder.events[0].data["hand_value"] == 26

    def test_late_ace_counts_one(self, stacked_deck):
        """Test an ace drawn onto a high hand."""
        hand = Hand(stacked_deck("10S", "6H", "AC"))
        hand.hit()
        assert hand.cards[2].value == 1
        assert hand.hand_value == 17

    def test_resolved_ace_keeps_value(self, stacked_deck):
        """Test that an ace counted 11 is not revalued by later cards."""
        hand = Hand(stacked_deck("AS", "5H", "9C"))
        assert hand.hand_value == 16
        hand.hit()
        assert hand.cards[0].value == 11
        assert hand.hand_value == 25
        assert hand.status == HandStatus.BUST

    @pytest.mark.parametrize("finish", ["stand", "bust", "blackjack"])
    def test_hit_inactive_hand(self, stacked_deck, finish):
        """Test that hitting a finished hand fails."""
        codes = {
            "stand": ("10S", "7H"),
            "bust": ("10S", "6H", "KC"),
            "blackjack": ("AS", "KH"),
        }[finish]
        hand = Hand(stacked_deck(*codes))
        if finish == "stand":
            hand.stand()
        elif finish == "bust":
            hand.hit()

        assert not hand.can_hit()
        with pytest.raises(InactiveHandError):
            hand.hit()


class TestStand:
    """Tests for standing."""

    def test_stand(self, stacked_deck):
        """Test standing ends the hand."""
        hand = Hand(stacked_deck("10S", "7H"))
        assert hand.can_stand()
        hand.stand()
        assert hand.status == HandStatus.STAND
        assert not hand.can_stand()

    def test_stand_twice(self, stacked_deck):
        """Test that a stood hand cannot stand again."""
        hand = Hand(stacked_deck("10S", "7H"))
        hand.stand()
        with pytest.raises(InactiveHandError):
            hand.stand()

    def test_stand_on_blackjack(self, stacked_deck):
        """Test that a blackjack cannot stand."""
        hand = Hand(stacked_deck("AS", "KH"))
        with pytest.raises(InactiveHandError):
            hand.stand()
        assert hand.status == HandStatus.BLACKJACK

    def test_stand_with_validation(self, stacked_deck):
        """Test that forced validation leaves a valued hand unchanged."""
        hand = Hand(stacked_deck("AS", "6H"))
        hand.stand(force_validation=True)
        assert hand.hand_value == 17
        assert hand.status == HandStatus.STAND


class TestDoubleDown:
    """Tests for doubling down."""

    def test_double_down(self, stacked_deck):
        """Test doubling the bet and drawing once."""
        hand = Hand(stacked_deck("5S", "6H", "9C"), bet=10)
        assert hand.can_double_down()
        hand.double_down()
        assert hand.bet == 20
        assert len(hand) == 3
        assert hand.hand_value == 20
        assert hand.play_count == 1
        assert not hand.can_double_down()

    def test_double_down_decimal_bet(self, stacked_deck):
        """Test doubling a decimal stake."""
        hand = Hand(stacked_deck("5S", "6H", "KC"), bet=Decimal("7.50"))
        hand.double_down()
        assert hand.bet == Decimal("15.00")
        assert hand.status == HandStatus.BLACKJACK

    def test_double_down_without_bet(self, stacked_deck):
        """Test that doubling needs a stake."""
        hand = Hand(stacked_deck("5S", "6H"))
        with pytest.raises(MissingBetError):
            hand.double_down()
        assert len(hand) == 2

    def test_double_down_inactive(self, stacked_deck):
        """Test that a finished hand cannot double and keeps its bet."""
        hand = Hand(stacked_deck("5S", "6H"), bet=10)
        hand.stand()
        with pytest.raises(InactiveHandError):
            hand.double_down()
        assert hand.bet == 10

    def test_can_double_down_only_before_hit(self, stacked_deck):
        """Test double-down eligibility."""
        hand = Hand(stacked_deck("2S", "3H", "4C"), bet=10)
        assert hand.can_double_down()
        hand.hit()
        assert not hand.can_double_down()


class TestSplit:
    """Tests for splitting."""

    def test_can_split_pair(self, stacked_deck):
        """Test a pair of eights."""
        assert Hand(stacked_deck("8S", "8H")).can_split()

    def test_can_split_mixed_ten_values(self, stacked_deck):
        """Test that equal point values split regardless of rank."""
        assert Hand(stacked_deck("KS", "QH")).can_split()

    def test_cannot_split_different_values(self, stacked_deck):
        """Test an unpaired hand."""
        assert not Hand(stacked_deck("8S", "9H")).can_split()

    def test_cannot_split_aces(self, stacked_deck):
        """Test that aces resolved to 11 and 1 do not match."""
        assert not Hand(stacked_deck("AS", "AH")).can_split()

    def test_cannot_split_three_cards(self, stacked_deck):
        """Test that only two-card hands split."""
        hand = Hand(stacked_deck("2S", "2H", "3C"))
        hand.hit()
        assert not hand.can_split()

    def test_split(self, stacked_deck, recorder):
        """Test splitting into two hands with full bets."""
        deck = stacked_deck("8S", "8H", "2C", "3D")
        hand = Hand(deck, bet=10, identifier="bob")
        hand.subscribe(recorder, HandEvent.NEW_HAND)

        first, second = hand.split()

        assert [str(c) for c in first] == ["8♠", "2♣"]
        assert [str(c) for c in second] == ["8♥", "3♦"]
        assert first.hand_value == 10
        assert second.hand_value == 11
        assert first.bet == second.bet == 10
        assert first.identifier == second.identifier == "bob"
        assert first.deck is deck and second.deck is deck
        assert len(deck) == 48
        assert recorder.events[0].data["hands"] == [first, second]

    def test_split_child_can_be_blackjack(self, stacked_deck):
        """Test that a split child reaching 21 is blackjack."""
        hand = Hand(stacked_deck("KS", "QH", "AC", "5D"), bet=10)
        first, second = hand.split()
        assert first.status == HandStatus.BLACKJACK
        assert second.status == HandStatus.ACTIVE
        assert second.hand_value == 15

    def test_split_without_bet(self, stacked_deck):
        """Test that splitting needs a stake."""
        with pytest.raises(MissingBetError):
            Hand(stacked_deck("8S", "8H")).split()

    def test_split_unpaired(self, stacked_deck):
        """Test that an unpaired hand cannot split."""
        hand = Hand(stacked_deck("8S", "9H"), bet=10)
        with pytest.raises(NotSplittableError):
            hand.split()
        assert len(hand.deck) == 50


class TestEvents:
    """Tests for hand event delivery."""

    def test_blackjack_on_deal_is_buffered(self, stacked_deck, recorder):
        """Test that a late subscriber receives the deal's blackjack."""
        hand = Hand(stacked_deck("AS", "KH"))
        hand.subscribe(recorder, HandEvent.BLACKJACK)
        assert recorder.types == [HandEvent.BLACKJACK]

        second = []
        hand.subscribe(second.append, HandEvent.BLACKJACK)
        assert second == []

    def test_unbuffered_hand_drops_early_events(self, stacked_deck, recorder):
        """Test that buffering can be turned off."""
        hand = Hand(stacked_deck("AS", "KH"), buffer_events=False)
        hand.subscribe(recorder, HandEvent.BLACKJACK)
        assert recorder.events == []


class TestValuation:
    """Property tests for hand valuation."""

    @given(seed=st.integers(), hits=st.integers(min_value=0, max_value=10))
    @settings(max_examples=100)
    def test_value_matches_card_sum(self, seed, hits):
        """Property: the hand value is always the sum of resolved card values."""
        hand = Hand(Deck(rng=Random(seed)))
        for _ in range(hits):
            if not hand.can_hit():
                break
            hand.hit()

        assert all(card.is_resolved for card in hand)
        assert hand.hand_value == sum(card.value for card in hand)
        if hand.hand_value > 21:
            assert hand.status == HandStatus.BUST
        elif hand.hand_value == 21:
            assert hand.status == HandStatus.BLACKJACK

    @given(seed=st.integers())
    @settings(max_examples=100)
    def test_at_most_one_ace_counts_eleven(self, seed):
        """Property: two aces can never both count 11."""
        hand = Hand(Deck(rng=Random(seed)))
        while hand.can_hit():
            hand.hit()
        aces = [card for card in hand if card.rank == Rank.ACE]
        assert sum(1 for ace in aces if ace.value == 11) <= 1
