from __future__ import annotations

import gymnasium as gym

import falling_blocks.env  # noqa: F401


def run_random(steps: int = 2000, seed: int | None = None) -> float:
    env = gym.make("FallingBlocks-10x20-v0")
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"Episode {episodes}: score={info['score']} lines={info['lines_cleared_total']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    run_random()
