
# Board dimensions (game units)
BOARD_WIDTH, BOARD_HEIGHT = 24, 24
CELL_SIZE = 25

# Screen dimensions
WIDTH, HEIGHT = BOARD_WIDTH * CELL_SIZE, BOARD_HEIGHT * CELL_SIZE

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
RED = (255, 0, 0)
GREEN = (0, 255, 0)
DARK_GREEN = (45, 180, 0)
DARK_GRAY = (64, 64, 64)
CYAN = (0, 255, 255)

# Initial snake
INITIAL_LENGTH = 5
INITIAL_DIRECTION = "RIGHT"  # head starts at (width // 4, height // 2)

# Rewards
STEP_REWARD = -1.0
FOOD_REWARD = 50.0
GAMEOVER_REWARD = -100.0

# Q-learning parameters
ALPHA = 0.1  # learning rate
GAMMA = 0.9  # discount factor
INITIAL_EPSILON = 1.0
MIN_EPSILON = 0.01
EPSILON_DECAY = 0.999  # per finished episode

N_ACTIONS = 3  # turn left, straight, turn right

# Training bookkeeping
SCORE_WINDOW = 100
CHECKPOINT_EVERY = 1000  # episodes
Q_TABLE_FILE = "q_table.pkl"

EPISODES = 100_000
PRINT_EVERY = 500

# Game speed
FPS = 1000 // 150  # manual / watch, one move every 150ms
TRAIN_FPS = 60
TRAIN_TICKS_PER_FRAME = 200

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
