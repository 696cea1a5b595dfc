from __future__ import annotations

import argparse

import gymnasium as gym
import pygame

import blockfall.env  # ensure registration
from blockfall.visualization.renderer import Renderer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=10)
    p.add_argument("--block-size", type=int, default=24)
    return p


def main() -> None:
    args = build_parser().parse_args()
    from stable_baselines3 import PPO

    env = gym.make("Blockfall-20x10-v0")
    model = PPO.load(args.model, device="auto")

    game = env.unwrapped.game
    renderer = Renderer(game.config.rows, game.config.columns, block_size=args.block_size)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size())
        pygame.display.set_caption("Blockfall - Agent Eval")
        font = pygame.font.SysFont(None, 24)
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            action, _ = model.predict(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += float(reward)
            steps += 1
            if terminated or truncated:
                obs, info = env.reset()

            renderer.draw(screen, game.snapshot(), font, message=f"step {steps}/{args.steps}  reward {total_reward:.1f}")
            pygame.display.flip()
            clock.tick(args.fps)
    finally:
        pygame.quit()
        env.close()


if __name__ == "__main__":  # pragma: no cover
    main()
