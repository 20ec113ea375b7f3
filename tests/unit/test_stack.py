"""牌堆测试"""
import random

import pytest

from core.cards import Card, Suit, Rank, DECK, str_to_cards
from core.exceptions import CardNotOwnedError, EmptyStackError
from core.stack import CardStack, UNINITIALIZED, NO_CARD, HAS_CARD


class TestCardStack:
    """CardStack 测试"""

    def test_empty(self):
        stack = CardStack()
        assert len(stack) == 0
        assert stack.is_empty
        assert all(stack.get_value(card) == UNINITIALIZED for card in DECK)

    def test_filled(self):
        stack = CardStack(filled=True)
        assert len(stack) == 32
        assert all(stack.has_card(card) for card in DECK)

    def test_add_card_idempotent(self):
        stack = CardStack()
        card = Card(Suit.HEARTS, Rank.ACE)
        stack.add_card(card)
        stack.add_card(card)
        assert len(stack) == 1
        assert card in stack

    def test_remove_card(self):
        stack = CardStack.from_cards(str_to_cards("♦7 ♦8 ♦9"))
        stack.remove_card(Card(Suit.DIAMONDS, Rank.EIGHT))
        assert len(stack) == 2
        assert stack.get_value(Card(Suit.DIAMONDS, Rank.EIGHT)) == NO_CARD

    def test_remove_card_not_owned(self):
        stack = CardStack.from_cards(str_to_cards("♦7"))
        with pytest.raises(CardNotOwnedError):
            stack.remove_card(Card(Suit.CLUBS, Rank.ACE))
        assert len(stack) == 1

    def test_remove_twice(self):
        stack = CardStack.from_cards(str_to_cards("♦7"))
        stack.remove_card(Card(Suit.DIAMONDS, Rank.SEVEN))
        with pytest.raises(CardNotOwnedError):
            stack.remove_card(Card(Suit.DIAMONDS, Rank.SEVEN))

    def test_set_value_clamped(self):
        stack = CardStack()
        card = Card(Suit.SPADES, Rank.KING)
        stack.set_value(card, 200)
        assert stack.get_value(card) == 127
        stack.set_value(card, -5)
        assert stack.get_value(card) == 0
        stack.set_value(card, 42)
        assert stack.get_value(card) == 42

    def test_set_value_keeps_count(self):
        stack = CardStack.from_cards(str_to_cards("♦7 ♦8"))
        stack.set_value(Card(Suit.DIAMONDS, Rank.SEVEN), 50)
        assert len(stack) == 1

    def test_fill(self):
        stack = CardStack(filled=True)
        stack.fill(NO_CARD)
        assert len(stack) == 0
        stack.fill(HAS_CARD)
        assert len(stack) == 32

    def test_get_random_card(self):
        stack = CardStack(filled=True)
        rng = random.Random(0)
        drawn = [stack.get_random_card(rng) for _ in range(32)]
        assert len(set(drawn)) == 32
        assert len(stack) == 0
        with pytest.raises(EmptyStackError):
            stack.get_random_card(rng)

    def test_get_random_card_removes(self):
        stack = CardStack.from_cards(str_to_cards("♦7 ♥A"))
        card = stack.get_random_card(random.Random(1))
        assert card not in stack
        assert len(stack) == 1

    def test_get_cards_in_deck_order(self):
        stack = CardStack.from_cards(str_to_cards("♣A ♦7 ♥8"))
        assert [c.index for c in stack.get_cards()] == [0, 9, 31]

    def test_calculate_value(self):
        assert CardStack.from_cards(str_to_cards("♦7 ♦8 ♦9")).calculate_value() == 24
        assert CardStack.from_cards(str_to_cards("♥A ♥10 ♥K")).calculate_value() == 31

    def test_as_matrix(self):
        stack = CardStack.from_cards(str_to_cards("♥A"))
        matrix = stack.as_matrix()
        assert matrix.shape == (4, 8)
        assert matrix[Suit.HEARTS, Rank.ACE]
        assert matrix.sum() == 1

    def test_copy_is_independent(self):
        stack = CardStack.from_cards(str_to_cards("♦7"))
        copy = stack.copy()
        copy.add_card(Card(Suit.HEARTS, Rank.ACE))
        assert len(stack) == 1
        assert len(copy) == 2

    def test_dump(self):
        dump = CardStack(filled=True).dump()
        lines = dump.split("\n")
        assert len(lines) == 7
        assert "♦" in lines[2]

    def test_str(self):
        assert str(CardStack.from_cards(str_to_cards("♥A ♦7"))) == "[♦7][♥A]"
