from __future__ import annotations

from typing import List, Optional

import pygame

from blockfall.game import GamePhase, GameSnapshot, Piece
from blockfall.game.pieces import color_for_value

from .controls import Button


BORDER_COLOR = (44, 62, 80)
BACKGROUND = (10, 10, 14)
BOARD_BACKGROUND = (30, 30, 36)
TEXT_COLOR = (230, 230, 230)


class Renderer:
    """Paints engine snapshots onto pygame surfaces.

    Every occupied cell becomes a `block_size` square at
    (col * block_size, row * block_size) relative to the board origin,
    outlined with a `border`-pixel stroke.
    """

    def __init__(self, rows: int = 20, columns: int = 10, block_size: int = 20, margin: int = 20,
                 border: int = 1) -> None:
        self.rows = rows
        self.columns = columns
        self.block_size = block_size
        self.margin = margin
        self.border = border
        self.preview_cell = max(2, block_size // 2)

    @property
    def board_width(self) -> int:
        return self.columns * self.block_size

    @property
    def board_height(self) -> int:
        return self.rows * self.block_size

    @property
    def panel_x(self) -> int:
        return self.margin * 2 + self.board_width

    def window_size(self, panel_width: int = 160) -> tuple[int, int]:
        return self.panel_x + panel_width + self.margin, self.board_height + self.margin * 2

    def draw_block(self, surface: pygame.Surface, col: int, row: int, color_value: int, size: Optional[int] = None,
                   origin: tuple[int, int] = (0, 0)) -> None:
        size = size or self.block_size
        rect = pygame.Rect(origin[0] + col * size, origin[1] + row * size, size, size)
        pygame.draw.rect(surface, color_for_value(color_value), rect)
        if self.border > 0:
            pygame.draw.rect(surface, BORDER_COLOR, rect, self.border)

    def draw_board(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Draw locked and falling cells onto a board-sized surface."""
        surface.fill(BOARD_BACKGROUND)
        for col, row, color in snapshot.cells:
            if row < 0:
                continue
            self.draw_block(surface, col, row, color)

    def draw_preview(self, surface: pygame.Surface, piece: Optional[Piece]) -> None:
        # Next piece centred in a 4x4 box at half scale
        surface.fill(BOARD_BACKGROUND)
        if piece is None:
            return
        cell = self.preview_cell
        offset_x = (4 - piece.width) * cell // 2
        offset_y = (4 - piece.height) * cell // 2
        for col, row in piece.cells_at(0, 0):
            self.draw_block(surface, col, row, piece.color, size=cell, origin=(offset_x, offset_y))

    def _make_board_surface(self) -> pygame.Surface:
        return pygame.Surface((self.board_width, self.board_height))

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot, font: Optional[pygame.font.Font] = None,
             buttons: Optional[List[Button]] = None, message: Optional[str] = None) -> None:
        screen.fill(BACKGROUND)
        board_surf = self._make_board_surface()
        self.draw_board(board_surf, snapshot)
        screen.blit(board_surf, (self.margin, self.margin))

        preview = pygame.Surface((self.preview_cell * 4, self.preview_cell * 4))
        self.draw_preview(preview, snapshot.next_piece)
        preview_y = self.margin + 50
        screen.blit(preview, (self.panel_x, preview_y))

        if font is not None:
            lines = [f"Score: {snapshot.score}", f"Lines: {snapshot.lines_cleared}"]
            if snapshot.phase is GamePhase.PAUSED:
                lines.append("Paused")
            for i, txt in enumerate(lines):
                img = font.render(txt, True, TEXT_COLOR)
                screen.blit(img, (self.panel_x, self.margin + i * 20 - 4))
            for button in buttons or []:
                pygame.draw.rect(screen, (60, 60, 72), button.rect)
                pygame.draw.rect(screen, BORDER_COLOR, button.rect, 1)
                img = font.render(button.label, True, TEXT_COLOR)
                screen.blit(img, img.get_rect(center=button.rect.center))
            if message:
                img = font.render(message, True, (255, 100, 100))
                rect = img.get_rect(center=(self.margin + self.board_width // 2, self.margin + self.board_height // 2))
                screen.blit(img, rect)
