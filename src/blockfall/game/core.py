from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .collision import collides
from .grid import Board, CellPaint
from .pieces import Piece, PieceCatalog, rotate_shape
from .rules import ScoringRules
from .scheduler import RepeatingTask, TickScheduler


logger = logging.getLogger(__name__)


class Command(IntEnum):
    ROTATE = 0
    MOVE_LEFT = 1
    MOVE_RIGHT = 2
    SOFT_DROP = 3


class GamePhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class LifecycleEvent(Enum):
    START = "start"
    PAUSE = "pause"
    RESTART = "restart"
    TOP_OUT = "top_out"


# Pairs missing from the table are ignored.
TRANSITIONS: Dict[Tuple[GamePhase, LifecycleEvent], GamePhase] = {
    (GamePhase.IDLE, LifecycleEvent.START): GamePhase.RUNNING,
    (GamePhase.GAME_OVER, LifecycleEvent.START): GamePhase.RUNNING,
    (GamePhase.RUNNING, LifecycleEvent.PAUSE): GamePhase.PAUSED,
    (GamePhase.PAUSED, LifecycleEvent.PAUSE): GamePhase.RUNNING,
    (GamePhase.IDLE, LifecycleEvent.RESTART): GamePhase.RUNNING,
    (GamePhase.RUNNING, LifecycleEvent.RESTART): GamePhase.RUNNING,
    (GamePhase.PAUSED, LifecycleEvent.RESTART): GamePhase.RUNNING,
    (GamePhase.GAME_OVER, LifecycleEvent.RESTART): GamePhase.RUNNING,
    (GamePhase.RUNNING, LifecycleEvent.TOP_OUT): GamePhase.GAME_OVER,
}


@dataclass
class GameConfig:
    rows: int = 20
    columns: int = 10
    tick_interval_ms: int = 1000
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.columns <= 0:
            raise ValueError(f"board size must be positive, got {self.rows}x{self.columns}")
        if self.tick_interval_ms <= 0:
            raise ValueError(f"tick interval must be positive, got {self.tick_interval_ms}")


@dataclass
class GameState:
    """Everything the engine mutates, in one place."""

    board: Board
    active: Optional[Piece] = None
    next_piece: Optional[Piece] = None
    score: int = 0
    lines_cleared: int = 0
    phase: GamePhase = GamePhase.IDLE


@dataclass
class GameSnapshot:
    board_cells: List[CellPaint]
    active_cells: List[CellPaint]
    next_piece: Optional[Piece]
    score: int
    phase: GamePhase
    lines_cleared: int = 0

    @property
    def cells(self) -> List[CellPaint]:
        return self.board_cells + self.active_cells


class BlockfallGame:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[TickScheduler] = None,
        catalog: Optional[PieceCatalog] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler = scheduler or TickScheduler()
        self.catalog = catalog or PieceCatalog(self.config.columns, random.Random(self.config.random_seed))
        self.state = GameState(board=Board(self.config.rows, self.config.columns))
        self.on_render: Optional[Callable[[GameSnapshot], None]] = None
        self.on_game_over: Optional[Callable[[int], None]] = None
        self._tick_task: Optional[RepeatingTask] = None

    # ---------- Convenience accessors ----------
    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def active(self) -> Optional[Piece]:
        return self.state.active

    @property
    def next_piece(self) -> Optional[Piece]:
        return self.state.next_piece

    # ---------- Lifecycle ----------
    def _transition(self, event: LifecycleEvent) -> Optional[GamePhase]:
        old = self.state.phase
        new = TRANSITIONS.get((old, event))
        if new is None:
            logger.debug("ignoring %s while %s", event.value, old.value)
            return None
        self.state.phase = new
        logger.info("%s: %s -> %s", event.value, old.value, new.value)
        return new

    def _cancel_tick(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            self._tick_task = None

    def _arm_tick(self) -> None:
        self._cancel_tick()
        self._tick_task = self.scheduler.schedule_repeating(self.config.tick_interval_ms, self.tick)

    def _begin(self) -> None:
        self.state.score = 0
        self.state.lines_cleared = 0
        self.state.board.reset()
        self.state.active = None
        self.state.next_piece = None
        self._spawn_piece()
        if self.state.phase is GamePhase.RUNNING:
            self._arm_tick()
        self._notify_render()

    def start(self) -> bool:
        if self._transition(LifecycleEvent.START) is None:
            return False
        self._begin()
        return True

    def pause(self) -> bool:
        """Toggle between RUNNING and PAUSED.

        Resuming arms a fresh tick at the full interval; time that elapsed
        before the pause is not carried over.
        """
        new = self._transition(LifecycleEvent.PAUSE)
        if new is None:
            return False
        if new is GamePhase.PAUSED:
            self._cancel_tick()
        else:
            self._arm_tick()
        self._notify_render()
        return True

    toggle_pause = pause

    def resume(self) -> bool:
        if self.state.phase is not GamePhase.PAUSED:
            return False
        return self.pause()

    def restart(self) -> bool:
        self._cancel_tick()
        if self._transition(LifecycleEvent.RESTART) is None:
            return False
        self._begin()
        return True

    def _top_out(self) -> None:
        self._transition(LifecycleEvent.TOP_OUT)
        self._cancel_tick()
        self.state.active = None
        logger.info("game over, final score %d", self.state.score)
        if self.on_game_over is not None:
            self.on_game_over(self.state.score)

    # ---------- Spawning and locking ----------
    def _spawn_piece(self) -> None:
        self.state.active = self.state.next_piece or self.catalog.random_piece()
        self.state.next_piece = self.catalog.random_piece()
        piece = self.state.active
        logger.debug("spawned %s at (%d, %d), next %s", piece.kind.name, piece.x, piece.y, self.state.next_piece.kind.name)
        if collides(self.state.board, piece):
            self._top_out()

    def _lock_piece(self) -> int:
        piece = self.state.active
        assert piece is not None
        board = self.state.board
        for col, row in piece.cells():
            if row >= 0:
                board.set_cell(row, col, piece.color)
        lines = board.clear_completed_rows()
        self.state.lines_cleared += lines
        self.state.score += self.rules.score_for_lines(lines)
        logger.debug("locked %s at (%d, %d), cleared %d", piece.kind.name, piece.x, piece.y, lines)
        self.state.active = None
        self._spawn_piece()
        return lines

    def tick(self) -> bool:
        """One gravity step: fall by a row, or lock when blocked."""
        if self.state.phase is not GamePhase.RUNNING or self.state.active is None:
            return False
        piece = self.state.active
        if not collides(self.state.board, piece, 0, 1):
            piece.y += 1
        else:
            self._lock_piece()
        self._notify_render()
        return True

    def advance(self, elapsed_ms: int) -> int:
        return self.scheduler.advance(elapsed_ms)

    # ---------- Player commands ----------
    def _accepting_input(self) -> bool:
        return self.state.phase is GamePhase.RUNNING and self.state.active is not None

    def _move(self, dx: int, dy: int) -> bool:
        if not self._accepting_input():
            return False
        piece = self.state.active
        if collides(self.state.board, piece, dx, dy):
            return False
        piece.x += dx
        piece.y += dy
        self._notify_render()
        return True

    def move_left(self) -> bool:
        return self._move(-1, 0)

    def move_right(self) -> bool:
        return self._move(1, 0)

    def soft_drop(self) -> bool:
        return self._move(0, 1)

    def rotate(self) -> bool:
        if not self._accepting_input():
            return False
        piece = self.state.active
        rotated = rotate_shape(piece.shape)
        if collides(self.state.board, piece, 0, 0, rotated):
            return False
        piece.shape = rotated
        self._notify_render()
        return True

    def handle_command(self, command: Command) -> bool:
        handlers = {
            Command.ROTATE: self.rotate,
            Command.MOVE_LEFT: self.move_left,
            Command.MOVE_RIGHT: self.move_right,
            Command.SOFT_DROP: self.soft_drop,
        }
        return handlers[Command(command)]()

    # ---------- Observation ----------
    def snapshot(self) -> GameSnapshot:
        active_cells: List[CellPaint] = []
        piece = self.state.active
        if piece is not None:
            active_cells = [(col, row, piece.color) for col, row in piece.cells()]
        return GameSnapshot(
            board_cells=self.state.board.occupied_cells(),
            active_cells=active_cells,
            next_piece=self.state.next_piece,
            score=self.state.score,
            phase=self.state.phase,
            lines_cleared=self.state.lines_cleared,
        )

    def _notify_render(self) -> None:
        if self.on_render is not None:
            self.on_render(self.snapshot())

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the board for observation
        state = self.state.board.clone_state()
        piece = self.state.active
        if piece is not None:
            for x, y in piece.cells():
                if self.state.board.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -piece.color
        return state
