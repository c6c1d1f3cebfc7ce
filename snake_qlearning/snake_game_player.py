import pygame
from .config import *
from .renderer import Renderer
from .snake_game import Direction
from .trainer import Trainer, GameMode

KEY_DIRECTIONS = {
    pygame.K_UP: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
}

KEY_MODES = {
    pygame.K_1: GameMode.MANUAL,
    pygame.K_2: GameMode.TRAIN,
    pygame.K_3: GameMode.WATCH,
}


def play_snake_game(mode=None, q_table_path=Q_TABLE_FILE):
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption('Snake Q-learning')
    clock = pygame.time.Clock()
    renderer = Renderer(screen)

    trainer = Trainer(BOARD_WIDTH, BOARD_HEIGHT, q_table_path=q_table_path)
    trainer.load_on_startup()
    if mode is not None:
        trainer.start(mode)

    trained = False
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in KEY_MODES:
                    trainer.start(KEY_MODES[event.key])
                elif event.key == pygame.K_s:
                    trainer.persist_now()
                elif event.key == pygame.K_RETURN and not trainer.running and trainer.mode is not None:
                    trainer.start(trainer.mode)
                elif event.key in KEY_DIRECTIONS and trainer.mode is GameMode.MANUAL:
                    trainer.queue_direction(KEY_DIRECTIONS[event.key])

        if trainer.mode is GameMode.TRAIN:
            trained = True
            for _ in range(TRAIN_TICKS_PER_FRAME):
                trainer.tick(GameMode.TRAIN)
            renderer.render(trainer)
            clock.tick(TRAIN_FPS)
        else:
            if trainer.running:
                result = trainer.tick(trainer.mode)
                if not result.running:
                    print(f"Game Over! Score: {result.score}")
            renderer.render(trainer)
            clock.tick(FPS)

    if trained:
        trainer.persist_now()
    pygame.quit()


if __name__ == "__main__":
    play_snake_game()
