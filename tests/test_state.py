import random
from snake_qlearning.snake_game import SnakeGame, Direction
from snake_qlearning.state import State, get_state


def new_game(start, length, direction, food, width=10, height=10):
    game = SnakeGame(width, height, rng=random.Random(1))
    game.reset(start[0], start[1], length, direction, width, height)
    game._food = food
    return game


def test_food_offset_signs():
    game = new_game((5, 5), 1, Direction.UP, food=(5, 3))
    state = get_state(game)
    assert state.food_dx_sign == 0
    assert state.food_dy_sign == -1

    game._food = (1, 8)
    state = get_state(game)
    assert state.food_dx_sign == -1
    assert state.food_dy_sign == 1


def test_top_wall_is_straight_ahead_when_heading_up():
    game = new_game((5, 0), 3, Direction.UP, food=(9, 9))
    state = get_state(game)
    assert state.obstacle_straight
    assert not state.obstacle_left
    assert not state.obstacle_right
    assert state.direction is Direction.UP


def test_side_walls_relative_to_heading():
    # heading down in the bottom-left corner: left turn is east, right turn is west
    game = new_game((0, 9), 3, Direction.DOWN, food=(5, 5))
    state = get_state(game)
    assert state.obstacle_straight
    assert state.obstacle_right
    assert not state.obstacle_left


def test_tail_counts_as_obstacle():
    game = new_game((1, 1), 1, Direction.LEFT, food=(4, 4), width=5, height=5)
    game._snake = [(1, 1), (2, 1), (2, 2), (1, 2)]
    state = get_state(game)
    # turning left from LEFT goes down, onto the tail that would vacate
    assert state.obstacle_left
    assert not state.obstacle_straight
    assert not state.obstacle_right


def test_encoding_is_deterministic_and_pure():
    first = new_game((4, 4), 4, Direction.RIGHT, food=(7, 2))
    second = new_game((4, 4), 4, Direction.RIGHT, food=(7, 2))
    body_before = list(first.snake)
    assert get_state(first) == get_state(second)
    assert get_state(first) == get_state(first)
    assert first.snake == body_before
    assert get_state(first) == State(1, -1, False, False, False, Direction.RIGHT)


def test_state_is_hashable_key():
    game = new_game((4, 4), 4, Direction.RIGHT, food=(7, 2))
    table = {get_state(game): 1}
    assert table[get_state(game)] == 1
