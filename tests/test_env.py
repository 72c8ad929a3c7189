from __future__ import annotations

import gymnasium as gym
import numpy as np
import pytest

import falling_blocks.env  # noqa: F401
from falling_blocks.env.falling_blocks_env import Action, FallingBlocksEnv
from falling_blocks.game import CellState, Phase


def test_reset_starts_a_running_game():
    env = FallingBlocksEnv()
    obs, info = env.reset(seed=0)
    assert obs.shape == (20, 10)
    assert obs.dtype == np.int8
    assert env.observation_space.contains(obs)
    assert int(np.count_nonzero(obs == CellState.ACTIVE)) == 4
    assert env.game.phase is Phase.RUNNING
    assert info["score"] == 0


def test_gravity_applies_every_step():
    env = FallingBlocksEnv()
    env.reset(seed=1)
    y0 = env.game.piece.y
    env.step(Action.NONE)
    assert env.game.piece.y == y0 + 1


def test_same_seed_gives_same_episode():
    def rollout(seed):
        env = FallingBlocksEnv()
        env.reset(seed=seed)
        kinds = []
        for _ in range(200):
            _, _, terminated, _, _ = env.step(Action.SOFT_DROP)
            if env.game.piece is not None:
                kinds.append(env.game.piece.kind)
            if terminated:
                break
        return kinds

    assert rollout(7) == rollout(7)


def test_stacking_in_the_middle_terminates_with_penalty():
    env = FallingBlocksEnv(terminal_penalty=-5.0)
    env.reset(seed=3)
    for _ in range(2000):
        obs, reward, terminated, truncated, info = env.step(Action.SOFT_DROP)
        if terminated:
            break
    assert terminated
    assert not truncated
    assert reward <= -5.0 + info["lines_cleared"]
    assert info["pieces_locked"] > 0


def test_truncates_after_max_steps():
    env = FallingBlocksEnv(max_episode_steps=3)
    env.reset(seed=0)
    results = [env.step(Action.NONE) for _ in range(3)]
    assert not results[1][3]
    assert results[2][3]


def test_rgb_render():
    env = FallingBlocksEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (20 * 12, 10 * 12, 3)
    assert img.max() == 255


def test_registered_with_gymnasium():
    env = gym.make("FallingBlocks-10x20-v0")
    obs, _ = env.reset(seed=0)
    obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
    assert obs.shape == (20, 10)
    assert isinstance(reward, float)
    env.close()


def test_invalid_action_raises():
    env = FallingBlocksEnv()
    env.reset(seed=0)
    with pytest.raises(ValueError):
        env.step(42)
