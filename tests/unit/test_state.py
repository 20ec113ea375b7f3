"""牌局状态测试"""
import random

import pytest

from core.cards import str_to_cards
from core.config import TableConfig
from core.events import NotificationSink
from core.exceptions import CardsNotDroppableError, NoGameLeftError
from core.state import Game, PlayerIterator, Round, Seat, TableContext


class Named:
    def __init__(self, name):
        self.name = name


def make_seats(n: int):
    return [Seat(player=Named(f"p{i}"), index=i) for i in range(n)]


def make_context(n_players: int = 3, **config) -> TableContext:
    return TableContext(
        config=TableConfig(**config),
        sink=NotificationSink(),
        rng=random.Random(0),
        seats=make_seats(n_players),
    )


class TestPlayerIterator:
    """座位迭代器测试"""

    def test_wraparound(self):
        seats = make_seats(3)
        it = PlayerIterator(seats, wrap_around=True)
        order = [it.next().index for _ in range(7)]
        assert order == [0, 1, 2, 0, 1, 2, 0]

    def test_has_wrapped(self):
        it = PlayerIterator(make_seats(2))
        it.next()
        assert not it.has_wrapped()
        it.next()
        assert not it.has_wrapped()
        it.next()
        assert it.has_wrapped()
        it.next()
        assert not it.has_wrapped()

    def test_never_ends(self):
        it = PlayerIterator(make_seats(2))
        for _ in range(100):
            assert it.has_next()
            it.next()

    def test_without_wrap(self):
        it = PlayerIterator(make_seats(3), wrap_around=False)
        assert [seat.index for seat in it] == [0, 1, 2]

    def test_without_wrap_stops_at_closing(self):
        it = PlayerIterator(make_seats(3), wrap_around=False)
        it.next()
        it.next()
        it.set_pointer(0)
        assert it.set_as_closing()
        it.set_pointer(-1)
        # 位置 0 为敲桌位置
        assert not it.has_next()

    def test_set_pointer(self):
        it = PlayerIterator(make_seats(3))
        it.set_pointer(1)
        assert it.next().index == 2

    def test_index_before_first_next(self):
        seats = make_seats(3)
        it = PlayerIterator(seats)
        assert it.index == 0
        assert it.get() is seats[0]

    def test_closing_set_once(self):
        it = PlayerIterator(make_seats(3))
        it.next()
        assert it.set_as_closing()
        it.next()
        assert not it.set_as_closing()
        assert it.closing_pointer == 0

    def test_reset(self):
        it = PlayerIterator(make_seats(3))
        it.next()
        it.set_as_closing()
        it.reset()
        assert it.pointer == -1
        assert it.closing_pointer == -1


class TestRound:
    """轮次测试"""

    def test_starting_player_first(self):
        context = make_context(3)
        round_ = Round(context)
        round_.reset(1)
        assert round_.current is context.seats[1]
        assert round_.next_player() is context.seats[1]
        assert round_.next_player() is context.seats[2]
        assert round_.current_round == 0
        assert round_.next_player() is context.seats[0]
        assert round_.current_round == 1

    def test_next_player_clears_turn_flags(self):
        context = make_context(2)
        round_ = Round(context)
        round_.reset(0)
        seat = context.seats[0]
        seat.took_action = seat.dropped = seat.picked = True
        round_.next_player()
        assert not seat.took_action
        assert not seat.dropped
        assert not seat.picked

    def test_forced_end(self):
        context = make_context(2, max_rounds=2)
        round_ = Round(context)
        round_.reset(0)
        turns = 0
        while True:
            round_.next_player()
            if round_.is_finished():
                break
            turns += 1
        assert turns == 4
        assert round_.current_round == 2
        assert round_.closing_seat is None

    def test_close_requires_goal(self):
        context = make_context(3)
        round_ = Round(context)
        round_.reset(0)
        round_.next_player()
        with pytest.raises(CardsNotDroppableError):
            round_.close(str_to_cards("♦7 ♥8 ♠9"))
        assert not round_.is_closing

    def test_close_set_once(self):
        context = make_context(3)
        round_ = Round(context)
        round_.reset(0)
        seat = round_.next_player()
        assert round_.close(str_to_cards("♦7 ♦8 ♦9"))
        assert round_.is_closed_by(seat)
        round_.next_player()
        assert not round_.close(str_to_cards("♥7 ♥8 ♥9"))
        assert round_.is_closed_by(seat)

    def test_closing_player_reached_after_full_rotation(self):
        context = make_context(3)
        round_ = Round(context)
        round_.reset(1)
        closer = round_.next_player()
        round_.close(str_to_cards("♦7 ♦8 ♦9"))
        others = [round_.next_player(), round_.next_player()]
        assert closer not in others
        assert round_.is_closed_by(round_.next_player())

    def test_reset_clears_closing(self):
        context = make_context(3)
        round_ = Round(context)
        round_.reset(0)
        round_.next_player()
        round_.close(str_to_cards("♦7 ♦8 ♦9"))
        round_.reset(2)
        assert not round_.is_closing
        assert round_.current_round == 0
        assert not round_.is_finished()

    def test_reset_clears_initial_drop(self):
        round_ = Round(make_context(2))
        round_.reset(0)
        round_.initial_dropped = True
        round_.reset(1)
        assert not round_.initial_dropped


class TestGame:
    """局测试"""

    def test_rotates_starting_player(self):
        context = make_context(3, games_to_play=4)
        game = Game(context)
        starters = [game.next().index for _ in range(4)]
        assert starters == [0, 1, 2, 0]

    def test_no_game_left(self):
        context = make_context(2, games_to_play=1)
        game = Game(context)
        assert game.has_next()
        game.next()
        assert not game.has_next()
        with pytest.raises(NoGameLeftError):
            game.next()
