from __future__ import annotations

from typing import Callable, Iterable, Optional

import pytest

from falling_blocks.game import FallingBlocksGame, GameConfig, TetrominoType


class SequenceRng:
    """Stands in for random.Random: hands out a fixed, repeating piece sequence."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        self.kinds = list(kinds)
        self.draws = 0

    def randrange(self, n: int) -> int:
        kind = self.kinds[self.draws % len(self.kinds)]
        self.draws += 1
        return int(kind) - 1


@pytest.fixture
def make_game() -> Callable[..., FallingBlocksGame]:
    def factory(*kinds: TetrominoType, config: Optional[GameConfig] = None) -> FallingBlocksGame:
        return FallingBlocksGame(config, rng=SequenceRng(kinds or [TetrominoType.O]))

    return factory
