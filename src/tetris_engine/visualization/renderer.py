from __future__ import annotations

from typing import Optional, Tuple

import pygame

from tetris_engine.game import GameState, Piece, TetrominoType, core
from tetris_engine.game.pieces import COLORS, hex_to_rgb

BACKGROUND = (10, 10, 14)
EMPTY_CELL = (30, 30, 36)
TEXT = (230, 230, 230)
PANEL_CELLS = 6


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return EMPTY_CELL
    return hex_to_rgb(COLORS[TetrominoType(abs(v))])


class Renderer:
    def __init__(self, width: int, height: int, cell_size: int = 30, margin: int = 20) -> None:
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None

    @property
    def window_size(self) -> Tuple[int, int]:
        board_w = self.width * self.cell_size
        board_h = self.height * self.cell_size
        panel_w = PANEL_CELLS * self.cell_size
        return board_w + panel_w + self.margin * 3, board_h + self.margin * 2

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 28)
        return self._font

    def _cell_rect(self, x0: int, y0: int, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            x0 + x * self.cell_size,
            y0 + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _draw_board(self, screen: pygame.Surface, state: GameState) -> None:
        grid = state.render_grid()
        h, w = grid.shape
        for y in range(h):
            for x in range(w):
                rect = self._cell_rect(self.margin, self.margin, x, y)
                pygame.draw.rect(screen, _color_for_value(int(grid[y, x])), rect)

    def _draw_ghost(self, screen: pygame.Surface, state: GameState) -> None:
        ghost = core.ghost_piece(state)
        if ghost is None or state.is_game_over or ghost == state.current_piece:
            return
        color = hex_to_rgb(ghost.color)
        for x, y in ghost.cells():
            if state.grid.is_inside(x, y):
                pygame.draw.rect(screen, color, self._cell_rect(self.margin, self.margin, x, y), 1)

    def _draw_preview(self, screen: pygame.Surface, piece: Optional[Piece], x0: int, y0: int) -> None:
        if piece is None:
            return
        color = hex_to_rgb(piece.color)
        shape = piece.shape
        for py in range(shape.shape[0]):
            for px in range(shape.shape[1]):
                if shape[py, px]:
                    pygame.draw.rect(screen, color, self._cell_rect(x0, y0, px, py))

    def _draw_panel(self, screen: pygame.Surface, state: GameState) -> None:
        x0 = self.margin * 2 + self.width * self.cell_size
        y = self.margin
        screen.blit(self.font.render("Next", True, TEXT), (x0, y))
        y += 30
        self._draw_preview(screen, state.next_piece, x0, y)
        y += 5 * self.cell_size
        for label, value in (("Score", state.score), ("Level", state.level), ("Lines", state.lines)):
            screen.blit(self.font.render(f"{label}: {value}", True, TEXT), (x0, y))
            y += 30

    def _draw_banner(self, screen: pygame.Surface, message: str) -> None:
        text = self.font.render(message, True, (255, 255, 255))
        rect = text.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        backdrop = rect.inflate(20, 12)
        pygame.draw.rect(screen, BACKGROUND, backdrop)
        screen.blit(text, rect)

    def draw(self, screen: pygame.Surface, state: GameState) -> None:
        screen.fill(BACKGROUND)
        self._draw_board(screen, state)
        self._draw_ghost(screen, state)
        self._draw_panel(screen, state)
        if not state.is_started:
            self._draw_banner(screen, "Press Enter to start")
        elif state.is_game_over:
            self._draw_banner(screen, "Game Over - R to restart, ESC to quit")
        elif state.is_paused:
            self._draw_banner(screen, "Paused - P to resume")
        pygame.display.flip()
