"""
Durable storage for the Q-table.

The table is written as a pickle of plain python values (ints, bools,
strings, floats), never of our own classes, so a file from an older build
either loads cleanly or is rejected as a whole.
"""

import logging
import math
import os
import pickle
import tempfile
import numpy as np
from datetime import datetime
from .config import *
from .qlearning import initialize_q_table
from .snake_game import Direction
from .state import State

logger = logging.getLogger(__name__)

FORMAT_NAME = "snake-q-table"
FORMAT_VERSION = 1


class QTableFormatError(ValueError):
    pass


class PlainUnpickler(pickle.Unpickler):
    # the file holds only builtins, so any global reference means it was tampered with
    def find_class(self, module, name):
        raise pickle.UnpicklingError(f"Refusing to load global {module}.{name}")


def encode_q_table(Q):
    states = []
    for state, values in Q.items():
        key = (
            int(state.food_dx_sign),
            int(state.food_dy_sign),
            bool(state.obstacle_left),
            bool(state.obstacle_straight),
            bool(state.obstacle_right),
            state.direction.name,
        )
        states.append((key, [float(v) for v in values]))
    return {"format": FORMAT_NAME, "version": FORMAT_VERSION, "states": states}


def _decode_state(key):
    if not isinstance(key, tuple) or len(key) != 6:
        raise QTableFormatError(f"Bad state key {key!r}")
    dx, dy, left, straight, right, direction = key
    if dx not in (-1, 0, 1) or dy not in (-1, 0, 1):
        raise QTableFormatError(f"Bad food offset in state key {key!r}")
    if not all(isinstance(flag, bool) for flag in (left, straight, right)):
        raise QTableFormatError(f"Bad obstacle flags in state key {key!r}")
    if direction not in Direction.__members__:
        raise QTableFormatError(f"Unknown direction in state key {key!r}")
    return State(int(dx), int(dy), left, straight, right, Direction[direction])


def decode_q_table(data):
    if not isinstance(data, dict) or data.get("format") != FORMAT_NAME:
        raise QTableFormatError("Not a q-table file")
    if data.get("version") != FORMAT_VERSION:
        raise QTableFormatError(f"Unsupported q-table version {data.get('version')!r}")
    states = data.get("states")
    if not isinstance(states, list):
        raise QTableFormatError("Missing state list")

    Q = initialize_q_table()
    for entry in states:
        if not isinstance(entry, tuple) or len(entry) != 2:
            raise QTableFormatError(f"Bad entry {entry!r}")
        key, values = entry
        state = _decode_state(key)
        if state in Q:
            raise QTableFormatError(f"Duplicate state {key!r}")
        if not isinstance(values, list) or len(values) != N_ACTIONS:
            raise QTableFormatError(f"Expected {N_ACTIONS} values for {key!r}, got {values!r}")
        if not all(isinstance(v, float) and math.isfinite(v) for v in values):
            raise QTableFormatError(f"Non-numeric values for {key!r}: {values!r}")
        Q[state] = np.array(values)
    return Q


def save_q_table(Q, path=Q_TABLE_FILE):
    """
    Write the whole table to `path`, replacing any previous file.
    The data goes to a temp file next to `path` first and is then renamed
    over it, so readers see either the old table or the new one.
    Returns True on success; I/O problems are logged and reported as False.
    """
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile("wb", dir=directory, prefix=os.path.basename(path) + ".",
                                         suffix=".tmp", delete=False) as f:
            tmp_path = f.name
            pickle.dump(encode_q_table(Q), f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except (OSError, pickle.PicklingError) as e:
        logger.warning("Could not save q-table to %s: %s", path, e)
        if tmp_path is not None and os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError as cleanup_error:
                logger.warning("Could not remove temp file %s: %s", tmp_path, cleanup_error)
        return False

    logger.info("Saved q-table to %s (%d states)", path, len(Q))
    return True


def quarantine(path):
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = f"{path}.corrupted_{timestamp}"
    os.replace(path, backup_path)
    return backup_path


def load_q_table(path=Q_TABLE_FILE):
    """
    Load the table from `path`.
    A missing file is a cold start. A file that can't be read or decoded is
    moved aside to `<path>.corrupted_<timestamp>` and an empty table is
    returned, so training can always carry on.
    """
    if not os.path.exists(path):
        logger.info("No q-table found at %s, starting with an empty table", path)
        return initialize_q_table()

    try:
        with open(path, "rb") as f:
            Q = decode_q_table(PlainUnpickler(f).load())
    except Exception as e:
        # a damaged file can fail to unpickle or decode in many ways, none of which may stop training
        try:
            backup_path = quarantine(path)
        except OSError as rename_error:
            logger.error("Could not load q-table from %s (%s) and could not move it aside: %s",
                         path, e, rename_error)
        else:
            logger.error("Could not load q-table from %s (%s), moved it to %s", path, e, backup_path)
        return initialize_q_table()

    logger.info("Loaded q-table from %s (%d states)", path, len(Q))
    return Q
