import random
import numpy as np
from .config import *
from .snake_game import ACTIONS


def initialize_q_table():
    return {}


def ensure_state(Q, state):
    if state not in Q:
        Q[state] = np.zeros(N_ACTIONS)
    return Q[state]


def get_q_value(Q, state, action):
    return float(ensure_state(Q, state)[action])


def set_q_value(Q, state, action, value):
    ensure_state(Q, state)[action] = value


def best_action(Q, state):
    # np.argmax returns the first maximum, so ties go to the lowest action
    return int(np.argmax(ensure_state(Q, state)))


def max_q_value(Q, state):
    return float(np.max(ensure_state(Q, state)))


def choose_action(Q, state, epsilon, explore=True, rng=random):
    ensure_state(Q, state)
    if explore and rng.random() < epsilon:
        return rng.choice(ACTIONS)  # explore
    return best_action(Q, state)  # exploit


def update_q_value(Q, state, action, reward, next_state, done):
    old_value = get_q_value(Q, state, action)
    if done or next_state is None:
        next_max = 0.0
    else:
        next_max = max_q_value(Q, next_state)
    new_value = old_value + ALPHA * (reward + GAMMA * next_max - old_value)
    set_q_value(Q, state, action, new_value)
    return new_value


def decay_epsilon(epsilon):
    return max(MIN_EPSILON, epsilon * EPSILON_DECAY)
