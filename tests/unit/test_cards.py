"""牌定义测试"""
import pytest
import numpy as np

from core.cards import (
    Card,
    Suit,
    Rank,
    DECK,
    STACK_SIZE,
    WORTH_TABLE,
    card_worth,
    cards_by_color,
    cards_by_type,
    cards_to_str,
    str_to_card,
    str_to_cards,
    cards_to_array,
    array_to_cards,
)


class TestCard:
    """Card 测试"""

    def test_deck_size(self):
        assert len(DECK) == STACK_SIZE == 32
        assert len(set(DECK)) == 32

    def test_index_matches_deck_position(self):
        for i, card in enumerate(DECK):
            assert card.index == i
            assert Card.from_index(i) == card

    def test_index_layout(self):
        assert Card(Suit.DIAMONDS, Rank.SEVEN).index == 0
        assert Card(Suit.HEARTS, Rank.EIGHT).index == 9
        assert Card(Suit.CLUBS, Rank.ACE).index == 31

    def test_invalid_index(self):
        with pytest.raises(ValueError):
            Card.from_index(32)
        with pytest.raises(ValueError):
            Card.from_index(-1)

    def test_worth(self):
        assert Card(Suit.SPADES, Rank.SEVEN).worth == 7
        assert Card(Suit.SPADES, Rank.TEN).worth == 10
        assert Card(Suit.SPADES, Rank.JACK).worth == 10
        assert Card(Suit.SPADES, Rank.KING).worth == 10
        assert card_worth(Card(Suit.SPADES, Rank.ACE)) == 11

    def test_worth_table(self):
        assert WORTH_TABLE.shape == (32,)
        assert WORTH_TABLE[Card(Suit.HEARTS, Rank.ACE).index] == 11
        assert WORTH_TABLE.sum() == 4 * (7 + 8 + 9 + 10 + 10 + 10 + 10 + 11)

    def test_ordering(self):
        cards = [Card(Suit.CLUBS, Rank.SEVEN), Card(Suit.DIAMONDS, Rank.ACE), Card(Suit.DIAMONDS, Rank.SEVEN)]
        assert [c.index for c in sorted(cards)] == [0, 7, 24]

    def test_str(self):
        assert str(Card(Suit.DIAMONDS, Rank.SEVEN)) == "[♦7]"
        assert str(Card(Suit.HEARTS, Rank.TEN)) == "[♥10]"
        assert str(Card(Suit.CLUBS, Rank.ACE)) == "[♣A]"

    def test_frozen(self):
        card = Card(Suit.DIAMONDS, Rank.SEVEN)
        with pytest.raises(Exception):
            card.suit = Suit.HEARTS


class TestPartitions:
    """按花色/牌面分组测试"""

    def test_cards_by_color(self):
        hearts = cards_by_color(Suit.HEARTS)
        assert len(hearts) == 8
        assert all(c.suit == Suit.HEARTS for c in hearts)
        assert [c.index for c in hearts] == list(range(8, 16))

    def test_cards_by_type(self):
        aces = cards_by_type(Rank.ACE)
        assert len(aces) == 4
        assert [c.index for c in aces] == [7, 15, 23, 31]


class TestConversion:
    """转换函数测试"""

    def test_str_to_card(self):
        assert str_to_card("♥10") == Card(Suit.HEARTS, Rank.TEN)
        assert str_to_card("[♠Q]") == Card(Suit.SPADES, Rank.QUEEN)

    def test_str_to_cards(self):
        cards = str_to_cards("[♦7][♥A]")
        assert cards == [Card(Suit.DIAMONDS, Rank.SEVEN), Card(Suit.HEARTS, Rank.ACE)]
        assert str_to_cards("♦7 ♥A") == cards

    def test_cards_to_str(self):
        cards = [Card(Suit.HEARTS, Rank.ACE), Card(Suit.DIAMONDS, Rank.SEVEN)]
        assert cards_to_str(cards) == "[♦7][♥A]"

    def test_array_roundtrip(self):
        cards = str_to_cards("♦7 ♥A ♣K")
        array = cards_to_array(cards)
        assert array.dtype == np.int8
        assert array.sum() == 3
        assert array_to_cards(array) == sorted(cards)
