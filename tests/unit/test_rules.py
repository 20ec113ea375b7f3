"""规则引擎测试"""
import pytest

from core.cards import str_to_cards
from core.rules import RuleEngine, STACKVALUE_MIN, STACKVALUE_MAX, WORTH_THREE_OF_SAME_TYPE


class TestVerifyGoal:
    """目标牌型检测测试"""

    def test_three_of_a_color(self):
        assert RuleEngine.verify_goal(str_to_cards("♦7 ♦9 ♦A"))

    def test_three_of_a_type(self):
        assert RuleEngine.verify_goal(str_to_cards("♦Q ♥Q ♣Q"))

    def test_mixed(self):
        assert not RuleEngine.verify_goal(str_to_cards("♦7 ♦9 ♥A"))
        assert not RuleEngine.verify_goal(str_to_cards("♦7 ♥7 ♠8"))

    def test_too_few_cards(self):
        assert not RuleEngine.verify_goal(str_to_cards("♦7 ♦9"))
        assert not RuleEngine.verify_goal([])


class TestCalculateValue:
    """手牌结算测试"""

    def test_lowest_color(self):
        assert RuleEngine.calculate_value(str_to_cards("♦7 ♦8 ♦9")) == STACKVALUE_MIN == 24

    def test_highest_color(self):
        assert RuleEngine.calculate_value(str_to_cards("♥A ♥10 ♥K")) == STACKVALUE_MAX == 31

    def test_three_of_a_type(self):
        assert RuleEngine.calculate_value(str_to_cards("♦7 ♥7 ♠7")) == WORTH_THREE_OF_SAME_TYPE == 30.5

    def test_three_aces_still_fixed(self):
        assert RuleEngine.calculate_value(str_to_cards("♦A ♥A ♠A")) == 30.5

    def test_best_color_wins(self):
        assert RuleEngine.calculate_value(str_to_cards("♦A ♦K ♥7")) == 21

    def test_all_different_colors(self):
        assert RuleEngine.calculate_value(str_to_cards("♦A ♥K ♠Q")) == 11

    def test_empty(self):
        assert RuleEngine.calculate_value([]) == 0


class TestCounts:
    """同花色/同牌面计数测试"""

    def test_best_color_count(self):
        assert RuleEngine.best_color_count(str_to_cards("♦A ♦K ♥7")) == 2

    def test_best_type_count(self):
        assert RuleEngine.best_type_count(str_to_cards("♦7 ♥7 ♠7")) == 3


class TestRankPlayers:
    """排名测试"""

    def test_descending(self):
        assert RuleEngine.rank_players([10.0, 30.5, 20.0]) == [1, 2, 0]

    def test_ties_keep_order(self):
        assert RuleEngine.rank_players([10.0, 20.0, 10.0, 20.0]) == [1, 3, 0, 2]
