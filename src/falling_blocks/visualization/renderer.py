from __future__ import annotations

from typing import Tuple

import numpy as np
import pygame

from falling_blocks.game import CellState, GameSnapshot, Phase

BACKGROUND = (0, 0, 0)
TEXT_COLOR = (255, 255, 255)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        CellState.ACTIVE: (255, 255, 255),
        CellState.LOCKED: (169, 169, 169),
    }
    return palette.get(v, (200, 200, 200))


class Renderer:
    def __init__(self, font: pygame.font.Font, cell_size: int = 30) -> None:
        self.font = font
        self.cell_size = cell_size

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return width * self.cell_size, height * self.cell_size

    def _draw_grid(self, screen: pygame.Surface, state: np.ndarray) -> None:
        h, w = state.shape
        for y in range(h):
            for x in range(w):
                v = int(state[y, x])
                if v == CellState.EMPTY:
                    continue
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size, self.cell_size)
                pygame.draw.rect(screen, _color_for_value(v), rect)

    def _blit_text(self, screen: pygame.Surface, text: str, center: Tuple[int, int]) -> None:
        img = self.font.render(text, True, TEXT_COLOR)
        screen.blit(img, img.get_rect(center=center))

    def draw_start_screen(self, screen: pygame.Surface) -> None:
        screen.fill(BACKGROUND)
        self._blit_text(screen, "Press Enter to Start", screen.get_rect().center)

    def draw_game_over(self, screen: pygame.Surface, score: int) -> None:
        screen.fill(BACKGROUND)
        cx, cy = screen.get_rect().center
        self._blit_text(screen, "Game Over!", (cx, cy - 40))
        self._blit_text(screen, "R to Restart, ESC to Exit", (cx, cy))
        self._blit_text(screen, f"Final Score: {score}", (cx, cy + 50))

    def draw_board(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        screen.fill(BACKGROUND)
        self._draw_grid(screen, snapshot.grid)
        img = self.font.render(f"Score: {snapshot.score}", True, TEXT_COLOR)
        screen.blit(img, (10, 10))

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        if snapshot.phase is Phase.NOT_STARTED:
            self.draw_start_screen(screen)
        elif snapshot.phase is Phase.GAME_OVER:
            self.draw_game_over(screen, snapshot.score)
        else:
            self.draw_board(screen, snapshot)
        pygame.display.flip()
