import pygame
from .config import *
from .trainer import GameMode


class Renderer:
    def __init__(self, screen):
        self.screen = screen
        self.font_small = pygame.font.SysFont("sans", 16, bold=True)
        self.font = pygame.font.SysFont("sans", 20, bold=True)
        self.font_medium = pygame.font.SysFont("sans", 30, bold=True)
        self.font_large = pygame.font.SysFont("sans", 65, bold=True)

    def render(self, trainer):
        self.screen.fill(BLACK)
        if trainer.running:
            snake, food, _ = trainer.get_render_data()
            self.draw_grid(trainer.game.width, trainer.game.height)
            self.draw_food(food)
            self.draw_snake(snake)
            self.draw_scores(trainer)
        elif trainer.mode is not None:
            self.draw_game_over(trainer)
        else:
            self.draw_scores(trainer)
            self.draw_centered("Select a mode to start!", self.font_medium, WHITE, HEIGHT // 2)
            self.draw_centered("[1] Manual  [2] Train AI  [3] Watch AI", self.font, WHITE, HEIGHT // 2 + 40)
        pygame.display.flip()

    def draw_centered(self, text, font, color, y):
        surface = font.render(text, True, color)
        self.screen.blit(surface, ((WIDTH - surface.get_width()) // 2, y))

    def draw_grid(self, width, height):
        for i in range(width + 1):
            pygame.draw.line(self.screen, DARK_GRAY, (i * CELL_SIZE, 0), (i * CELL_SIZE, height * CELL_SIZE))
        for i in range(height + 1):
            pygame.draw.line(self.screen, DARK_GRAY, (0, i * CELL_SIZE), (width * CELL_SIZE, i * CELL_SIZE))

    def draw_food(self, food):
        if food is None:
            return
        pygame.draw.ellipse(self.screen, RED, pygame.Rect(food[0] * CELL_SIZE, food[1] * CELL_SIZE, CELL_SIZE, CELL_SIZE))

    def draw_snake(self, snake):
        for i, segment in enumerate(snake):
            color = GREEN if i == 0 else DARK_GREEN
            pygame.draw.rect(self.screen, color, pygame.Rect(segment[0] * CELL_SIZE, segment[1] * CELL_SIZE, CELL_SIZE, CELL_SIZE))

    def draw_scores(self, trainer):
        score = self.font.render(f"Score: {trainer.score}", True, WHITE)
        self.screen.blit(score, ((WIDTH - score.get_width()) // 2, 4))
        best = self.font.render(f"Best: {trainer.best_score}", True, WHITE)
        self.screen.blit(best, (WIDTH - best.get_width() - 10, 4))

        if trainer.mode is GameMode.TRAIN:
            stats = trainer.get_training_stats()
            lines = [
                f"Games: {stats.episodes_played}",
                f"Avg Score (last {SCORE_WINDOW}): {stats.average_score:.2f}",
                f"Epsilon: {stats.epsilon:.3f}",
                f"QTable Size: {stats.q_table_size}",
            ]
            for i, line in enumerate(lines):
                surface = self.font_small.render(line, True, CYAN)
                self.screen.blit(surface, (10, HEIGHT - 20 * (len(lines) - i) - 4))

    def draw_game_over(self, trainer):
        title = "You Win" if trainer.game.won else "Game Over"
        self.draw_centered(title, self.font_large, RED, HEIGHT // 3)
        self.draw_centered(f"Final Score: {trainer.score}", self.font_medium, WHITE, HEIGHT // 2)
        self.draw_centered("Press Enter to Restart", self.font, WHITE, HEIGHT - HEIGHT // 4)
