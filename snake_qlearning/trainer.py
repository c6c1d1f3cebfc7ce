import logging
import random
from collections import deque
from enum import Enum
from typing import NamedTuple
from .config import *
from .persistence import load_q_table, save_q_table
from .qlearning import initialize_q_table, choose_action, update_q_value, decay_epsilon
from .snake_game import SnakeGame, Direction, turn
from .state import get_state

logger = logging.getLogger(__name__)


class GameMode(Enum):
    MANUAL = "manual"
    TRAIN = "train"
    WATCH = "watch"


class TickResult(NamedTuple):
    running: bool
    score: int
    just_ate: bool


class TrainingStats(NamedTuple):
    episodes_played: int
    average_score: float
    epsilon: float
    q_table_size: int


class Trainer:
    """
    Owns the game, the Q-table and the exploration rate, and advances them
    one tick at a time. Whoever drives the ticks (a pygame loop, a headless
    training loop, a test) only talks to this class.
    """

    def __init__(self, width=BOARD_WIDTH, height=BOARD_HEIGHT, q_table_path=Q_TABLE_FILE, rng=None):
        self.rng = rng or random.Random()
        self.game = SnakeGame(width, height, rng=self.rng)
        self.q_table_path = q_table_path
        self.Q = initialize_q_table()
        self.epsilon = INITIAL_EPSILON
        self.mode = None

        self.running = False
        self.score = 0
        self.best_score = 0
        self.pending_directions = deque()

        self.episodes_played = 0
        self.recent_scores = deque()
        self.average_score = 0.0

    def load_on_startup(self):
        self.Q = load_q_table(self.q_table_path)
        return len(self.Q)

    def persist_now(self):
        return save_q_table(self.Q, self.q_table_path)

    def set_epsilon(self, value):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"Exploration rate must be in [0, 1], got {value}")
        self.epsilon = value

    def reset_environment(self, width=None, height=None):
        width = self.game.width if width is None else width
        height = self.game.height if height is None else height
        # shorten and shift the starting snake on narrow boards so its tail stays on the board
        length = min(INITIAL_LENGTH, width)
        start_x = min(max(width // 4, length - 1), width - 1)
        self.game.reset(start_x, height // 2, length, Direction[INITIAL_DIRECTION], width, height)
        self.score = 0
        self.pending_directions.clear()
        self.running = not self.game.done

    def queue_direction(self, direction):
        self.pending_directions.append(direction)

    def start(self, mode):
        self.mode = mode
        if mode is GameMode.TRAIN:
            self.set_epsilon(INITIAL_EPSILON)
            self.episodes_played = 0
            self.recent_scores.clear()
            self.average_score = 0.0
        elif mode is GameMode.WATCH:
            self.set_epsilon(0.0)  # pure exploitation
        logger.info("Starting %s mode", mode.value)
        self.reset_environment()

    def tick(self, mode=None, manual_direction=None):
        mode = mode or self.mode
        if mode is None:
            raise ValueError("No game mode given and none started")
        if not self.running:
            return TickResult(False, self.score, False)

        game = self.game
        state = action = None
        if mode is GameMode.MANUAL:
            # key presses that arrived between ticks are applied one per tick
            if manual_direction is None and self.pending_directions:
                manual_direction = self.pending_directions.popleft()
            if manual_direction is not None:
                game.set_direction(manual_direction)
        else:
            state = get_state(game)
            action = choose_action(self.Q, state, self.epsilon, explore=mode is GameMode.TRAIN, rng=self.rng)
            game.set_direction(turn(game.direction, action))

        game.step()

        game_over = game.check_collision()
        just_ate = False
        reward = STEP_REWARD
        if not game_over and game.consume_food_if_present():
            just_ate = True
            self.score += 1
            self.best_score = max(self.best_score, self.score)
            reward = FOOD_REWARD
            if game.won:
                logger.info("Board filled with a score of %d", self.score)
        if game_over:
            reward = GAMEOVER_REWARD

        done = game.done
        if mode is GameMode.TRAIN:
            next_state = None if done else get_state(game)
            update_q_value(self.Q, state, action, reward, next_state, done)

        if done:
            self.running = False
            score = self.score
            if mode is GameMode.TRAIN:
                self.end_episode(score)
                self.reset_environment()  # auto-restart
            return TickResult(False, score, just_ate)

        return TickResult(True, self.score, just_ate)

    def end_episode(self, score):
        self.episodes_played += 1
        self.recent_scores.append(score)
        if len(self.recent_scores) > SCORE_WINDOW:
            self.recent_scores.popleft()
        self.average_score = sum(self.recent_scores) / len(self.recent_scores)

        self.epsilon = decay_epsilon(self.epsilon)

        if self.episodes_played % CHECKPOINT_EVERY == 0:
            logger.info("Checkpoint at episode %d, epsilon=%.3f", self.episodes_played, self.epsilon)
            self.persist_now()

    def get_render_data(self):
        return self.game.get_render_data()

    def get_training_stats(self):
        return TrainingStats(self.episodes_played, self.average_score, self.epsilon, len(self.Q))
