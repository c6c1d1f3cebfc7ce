import random
from enum import Enum
from .config import *
from .utils import rel_to_abs


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def reverse(self):
        dx, dy = self.value
        return Direction((-dx, -dy))


# Relative actions
TURN_LEFT, STRAIGHT, TURN_RIGHT = 0, 1, 2
ACTIONS = (TURN_LEFT, STRAIGHT, TURN_RIGHT)

# (heading, relative action) -> new heading
TURNS = {
    (Direction.UP, TURN_LEFT): Direction.LEFT,
    (Direction.UP, STRAIGHT): Direction.UP,
    (Direction.UP, TURN_RIGHT): Direction.RIGHT,
    (Direction.DOWN, TURN_LEFT): Direction.RIGHT,
    (Direction.DOWN, STRAIGHT): Direction.DOWN,
    (Direction.DOWN, TURN_RIGHT): Direction.LEFT,
    (Direction.LEFT, TURN_LEFT): Direction.DOWN,
    (Direction.LEFT, STRAIGHT): Direction.LEFT,
    (Direction.LEFT, TURN_RIGHT): Direction.UP,
    (Direction.RIGHT, TURN_LEFT): Direction.UP,
    (Direction.RIGHT, STRAIGHT): Direction.RIGHT,
    (Direction.RIGHT, TURN_RIGHT): Direction.DOWN,
}


def turn(direction, action):
    if action not in ACTIONS:
        raise ValueError(f"Invalid action {action!r}, expected one of {ACTIONS}")
    return TURNS[(direction, action)]


class NotInitializedError(RuntimeError):
    pass


class SnakeGame:
    """Grid-world snake. Coordinates are board units, (0, 0) is the top-left cell.

    The game only moves the snake; the caller decides when to check
    collisions and food, and in which order.
    """

    def __init__(self, width=BOARD_WIDTH, height=BOARD_HEIGHT, rng=None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self._snake = None
        self._food = None
        self._direction = None
        self.grow = False
        self.done = False
        self.won = False

    def reset(self, start_x, start_y, initial_length, initial_direction, width=None, height=None):
        if width is not None:
            self.width = width
        if height is not None:
            self.height = height
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Board must be at least 1x1, got {self.width}x{self.height}")
        if initial_length < 1:
            raise ValueError(f"Initial length must be positive, got {initial_length}")

        # body trails behind the head, opposite to the heading
        tail_step = initial_direction.reverse.value
        snake = [(start_x + tail_step[0] * i, start_y + tail_step[1] * i) for i in range(initial_length)]
        if any(not self.in_bounds(cell) for cell in snake):
            raise ValueError(f"Initial snake {snake} does not fit on a {self.width}x{self.height} board")

        self._snake = snake
        self._direction = initial_direction
        self.grow = False
        self.done = False
        self.won = False
        self._food = self.place_food()
        if self._food is None:
            self.won = True
            self.done = True

    def _require_reset(self):
        if self._snake is None:
            raise NotInitializedError("SnakeGame.reset() must be called before the game is queried")

    @property
    def snake(self):
        self._require_reset()
        return self._snake

    @property
    def head(self):
        return self.snake[0]

    @property
    def food(self):
        self._require_reset()
        return self._food

    @property
    def direction(self):
        self._require_reset()
        return self._direction

    def in_bounds(self, cell):
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def place_food(self):
        occupied = set(self.snake)
        free = [(x, y) for x in range(self.width) for y in range(self.height) if (x, y) not in occupied]
        if not free:
            return None
        return self.rng.choice(free)

    def set_direction(self, direction):
        if direction == self.direction.reverse:
            return
        self._direction = direction

    def step(self):
        new_head = rel_to_abs(self.head, self.direction.value)
        self._snake.insert(0, new_head)
        if self.grow:
            self.grow = False
        else:
            self._snake.pop()

    def is_wall_collision(self):
        return not self.in_bounds(self.head)

    def is_self_collision(self):
        return self.head in self.snake[1:]

    def check_collision(self):
        if self.is_wall_collision() or self.is_self_collision():
            self.done = True
        return self.done

    def consume_food_if_present(self):
        if self.head != self.food:
            return False
        self.grow = True
        self._food = self.place_food()
        if self._food is None:
            # nowhere left to put food: the board is full
            self.won = True
            self.done = True
        return True

    def get_render_data(self):
        return list(self.snake), self.food, self.direction
