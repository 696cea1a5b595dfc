from __future__ import annotations

import os
import random
from typing import Callable, List, Optional

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from blockfall.game import BlockfallGame, GameConfig, PieceCatalog, TetrominoType


class SequenceRandom(random.Random):
    """Random source whose choice() walks a fixed list of tetromino kinds."""

    def __init__(self, kinds: List[TetrominoType]) -> None:
        super().__init__(0)
        self.kinds = list(kinds)
        self.index = 0

    def choice(self, seq):  # type: ignore[override]
        kind = self.kinds[self.index % len(self.kinds)]
        self.index += 1
        return kind


@pytest.fixture
def make_game() -> Callable[..., BlockfallGame]:
    def factory(*kinds: TetrominoType, config: Optional[GameConfig] = None) -> BlockfallGame:
        config = config or GameConfig(random_seed=1)
        catalog = None
        if kinds:
            catalog = PieceCatalog(config.columns, SequenceRandom(list(kinds)))
        return BlockfallGame(config, catalog=catalog)

    return factory


@pytest.fixture
def game(make_game) -> BlockfallGame:
    return make_game()


@pytest.fixture
def fill_row() -> Callable[..., None]:
    def fill(game: BlockfallGame, row: int, skip: tuple = (), color: int = int(TetrominoType.T)) -> None:
        for col in range(game.board.columns):
            if col not in skip:
                game.board.set_cell(row, col, color)

    return fill
