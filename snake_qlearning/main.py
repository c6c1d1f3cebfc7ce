
import logging
import sys
import time
from .config import *
from .trainer import Trainer, GameMode


def train_snake(num_episodes=EPISODES, q_table_path=Q_TABLE_FILE):
    trainer = Trainer(BOARD_WIDTH, BOARD_HEIGHT, q_table_path=q_table_path)
    trainer.load_on_startup()
    trainer.start(GameMode.TRAIN)

    max_score = 0
    total_steps = 0
    last_print_time = time.time()

    while trainer.episodes_played < num_episodes:
        steps = 0
        while True:
            result = trainer.tick(GameMode.TRAIN)
            steps += 1
            if not result.running:
                break
        total_steps += steps

        if result.score > max_score:
            max_score = result.score

        episode = trainer.episodes_played
        if episode % PRINT_EVERY == 0:
            now = time.time()
            stats = trainer.get_training_stats()
            print(f"Episode {episode}/{num_episodes}, e/s={PRINT_EVERY/max(now - last_print_time, 1e-9):5.2f}")
            print(f"score={result.score}, avg={stats.average_score:0.2f} max={max_score} "
                  f"epsilon={stats.epsilon:0.4f} states={stats.q_table_size} steps={total_steps}")
            last_print_time = now

    trainer.persist_now()
    return trainer


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    if not argv:
        from .snake_game_player import play_snake_game
        play_snake_game()
    elif argv[0] == "train":
        episodes = int(argv[1]) if len(argv) > 1 else EPISODES
        train_snake(episodes)
    elif argv[0] in ("watch", "play"):
        from .snake_game_player import play_snake_game
        play_snake_game(GameMode.WATCH if argv[0] == "watch" else GameMode.MANUAL)
    else:
        print("Invalid argument. Use 'train [episodes]', 'watch' or 'play'")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
