"""Gymnasium environments for Blockfall."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .blockfall_env import BlockfallEnv

register(
    id="Blockfall-20x10-v0",
    entry_point="blockfall.env.blockfall_env:BlockfallEnv",
)

__all__ = ["BlockfallEnv"]
