from typing import NamedTuple
from .snake_game import Direction, TURN_LEFT, STRAIGHT, TURN_RIGHT, turn
from .utils import unit, rel_to_abs


class State(NamedTuple):
    food_dx_sign: int
    food_dy_sign: int
    obstacle_left: bool
    obstacle_straight: bool
    obstacle_right: bool
    direction: Direction


def is_obstacle(game, cell):
    # the whole current body counts, including a tail that is about to move away
    return not game.in_bounds(cell) or cell in game.snake


def get_state(game):
    head = game.head
    food = game.food
    direction = game.direction

    left, straight, right = (
        rel_to_abs(head, turn(direction, action).value)
        for action in (TURN_LEFT, STRAIGHT, TURN_RIGHT)
    )

    return State(
        unit(food[0] - head[0]),
        unit(food[1] - head[1]),
        is_obstacle(game, left),
        is_obstacle(game, straight),
        is_obstacle(game, right),
        direction,
    )
