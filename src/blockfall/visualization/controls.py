from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import pygame

from blockfall.game import Command


KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_UP: Command.ROTATE,
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_DOWN: Command.SOFT_DROP,
}

KEY_TO_CONTROL: Dict[int, str] = {
    pygame.K_s: "start",
    pygame.K_RETURN: "start",
    pygame.K_p: "pause",
    pygame.K_r: "restart",
}


def classify_swipe(dx: float, dy: float, min_distance: float = 0.0) -> Optional[Command]:
    """Map a pointer/touch displacement to a command by its dominant axis.

    Horizontal drags move the piece, downward drags soft-drop and upward
    drags rotate. Displacements shorter than `min_distance` on both axes
    return None.
    """
    if abs(dx) < min_distance and abs(dy) < min_distance:
        return None
    if abs(dx) > abs(dy):
        return Command.MOVE_RIGHT if dx > 0 else Command.MOVE_LEFT
    if dy > 0:
        return Command.SOFT_DROP
    return Command.ROTATE


@dataclass
class Button:
    label: str
    rect: pygame.Rect
    action: str  # "start" | "pause" | "restart" | a Command name

    def command(self) -> Optional[Command]:
        return Command[self.action] if self.action in Command.__members__ else None


def build_buttons(x0: int, y0: int, width: int, height: int = 28, gap: int = 6) -> List[Button]:
    """Lay out the control and directional buttons as a vertical strip."""
    layout: List[Tuple[str, str]] = [
        ("Start", "start"),
        ("Pause", "pause"),
        ("Restart", "restart"),
        ("Left", Command.MOVE_LEFT.name),
        ("Right", Command.MOVE_RIGHT.name),
        ("Rotate", Command.ROTATE.name),
        ("Down", Command.SOFT_DROP.name),
    ]
    buttons: List[Button] = []
    for i, (label, action) in enumerate(layout):
        rect = pygame.Rect(x0, y0 + i * (height + gap), width, height)
        buttons.append(Button(label, rect, action))
    return buttons


def button_at(buttons: List[Button], pos: Tuple[int, int]) -> Optional[Button]:
    for button in buttons:
        if button.rect.collidepoint(pos):
            return button
    return None
