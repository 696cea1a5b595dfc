from __future__ import annotations

import argparse
import logging
from typing import Optional, Tuple

import pygame

from blockfall.game import BlockfallGame, GameConfig, GamePhase
from .controls import KEY_TO_COMMAND, KEY_TO_CONTROL, build_buttons, button_at, classify_swipe
from .renderer import Renderer


logger = logging.getLogger(__name__)

# Pointer drags shorter than this count as clicks, not swipes
SWIPE_MIN_PX = 12


def _control(game: BlockfallGame, action: str) -> None:
    if action == "start":
        game.start()
    elif action == "pause":
        game.toggle_pause()
    elif action == "restart":
        game.restart()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Blockfall with keyboard, buttons or mouse swipes")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--block-size", type=int, default=28)
    p.add_argument("--tick-ms", type=int, default=1000)
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def run(config: Optional[GameConfig] = None, block_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockfallGame(config)
        renderer = Renderer(game.config.rows, game.config.columns, block_size=block_size)
        screen = pygame.display.set_mode(renderer.window_size())
        pygame.display.set_caption("Blockfall - Human Play")
        font = pygame.font.SysFont(None, 24)
        buttons = build_buttons(renderer.panel_x, renderer.margin + 70 + renderer.preview_cell * 4, 120)

        final_score: Optional[int] = None

        def on_game_over(score: int) -> None:
            nonlocal final_score
            final_score = score

        game.on_game_over = on_game_over
        press_at: Optional[Tuple[int, int]] = None

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_TO_COMMAND:
                        game.handle_command(KEY_TO_COMMAND[event.key])
                    elif event.key in KEY_TO_CONTROL:
                        _control(game, KEY_TO_CONTROL[event.key])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    press_at = event.pos
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and press_at is not None:
                    dx = event.pos[0] - press_at[0]
                    dy = event.pos[1] - press_at[1]
                    button = button_at(buttons, press_at)
                    if button is not None and abs(dx) < SWIPE_MIN_PX and abs(dy) < SWIPE_MIN_PX:
                        command = button.command()
                        if command is not None:
                            game.handle_command(command)
                        else:
                            _control(game, button.action)
                    elif button is None:
                        command = classify_swipe(dx, dy, SWIPE_MIN_PX)
                        if command is not None:
                            game.handle_command(command)
                    press_at = None

            # Gravity: feed real frame time to the scheduler
            game.advance(clock.tick(60))

            message = None
            if game.phase is GamePhase.GAME_OVER and final_score is not None:
                message = f"Game Over! Final score {final_score}"
            elif game.phase is GamePhase.IDLE:
                message = "Press S or Start"
            renderer.draw(screen, game.snapshot(), font, buttons, message)
            pygame.display.flip()
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    config = GameConfig(tick_interval_ms=args.tick_ms, random_seed=args.seed)
    logger.info("starting human play, seed=%s", args.seed)
    run(config, block_size=args.block_size)


if __name__ == "__main__":  # pragma: no cover
    main()
