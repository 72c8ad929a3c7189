from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

import numpy as np

from .events import InputEvent, Key, KeyPress, Quit
from .grid import CellState, GameGrid
from .pieces import Piece, TetrominoType
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class Phase(Enum):
    NOT_STARTED = auto()
    RUNNING = auto()
    GAME_OVER = auto()
    EXITED = auto()


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    gravity_ms: int = 500
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        if self.gravity_ms <= 0:
            raise ValueError(f"gravity_ms must be positive, got {self.gravity_ms}")


@dataclass(frozen=True)
class GameSnapshot:
    """What the presentation layer gets to see for one frame."""

    grid: np.ndarray
    piece: Optional[Piece]
    score: int
    phase: Phase
    lines_cleared_total: int


class FallingBlocksGame:
    """Owns the grid, the falling piece, the score and the phase.

    Every move is proposed as a candidate piece, checked with
    `GameGrid.collides`, and only then committed. Timestamps (`now`) are
    milliseconds from whatever monotonic clock the caller uses.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.width, self.config.height)
        self.piece: Optional[Piece] = None
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.phase = Phase.NOT_STARTED
        self.last_tick = 0

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    # ---------- Phase transitions ----------
    def start(self, now: int = 0) -> None:
        if self.phase is not Phase.NOT_STARTED:
            return
        self.phase = Phase.RUNNING
        self.last_tick = now
        logger.info("Game started")
        self._spawn_piece()

    def restart(self, now: int = 0) -> None:
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.phase = Phase.RUNNING
        self.last_tick = now
        logger.info("Game restarted")
        self._spawn_piece()

    def exit(self) -> None:
        self.phase = Phase.EXITED
        logger.info("Exiting with score %d", self.score)

    # ---------- Piece handling ----------
    def _random_kind(self) -> TetrominoType:
        return TetrominoType.from_index(self.rng.randrange(len(TetrominoType)))

    def _spawn_piece(self) -> None:
        candidate = Piece.spawn(self._random_kind(), self.grid.width)
        if self.grid.collides(candidate):
            # The colliding spawn is never merged
            self.piece = None
            self.phase = Phase.GAME_OVER
            logger.info(
                "Game over: score=%d lines=%d pieces=%d",
                self.score,
                self.lines_cleared_total,
                self.pieces_locked,
            )
            return
        self.piece = candidate

    def _try_commit(self, candidate: Piece) -> bool:
        if self.grid.collides(candidate):
            return False
        self.piece = candidate
        return True

    def move(self, dx: int) -> bool:
        if not self.running or self.piece is None:
            return False
        return self._try_commit(self.piece.moved(dx, 0))

    def rotate(self, clockwise: bool = True) -> bool:
        if not self.running or self.piece is None:
            return False
        return self._try_commit(self.piece.rotated(clockwise))

    def _lock_piece(self) -> int:
        assert self.piece is not None
        self.grid.merge(self.piece)
        self.pieces_locked += 1
        lines = self.grid.clear_lines()
        if lines:
            self.lines_cleared_total += lines
            self.score += self.rules.score_for_lines(lines)
            logger.debug("Cleared %d line(s), score=%d", lines, self.score)
        self._spawn_piece()
        return lines

    def step_down(self) -> int:
        """Move the piece down one row, locking it if it cannot move.

        Returns the number of rows cleared by the lock (0 if the piece just fell).
        """
        if not self.running or self.piece is None:
            return 0
        if self._try_commit(self.piece.moved(0, 1)):
            return 0
        return self._lock_piece()

    def soft_drop(self) -> int:
        # Same as a gravity step, but the gravity timer keeps running
        return self.step_down()

    def tick(self, now: int) -> int:
        """Apply gravity once if more than `gravity_ms` has passed since the last gravity step."""
        if not self.running:
            return 0
        if now - self.last_tick <= self.config.gravity_ms:
            return 0
        lines = self.step_down()
        self.last_tick = now
        return lines

    # ---------- Input ----------
    def handle_event(self, event: InputEvent, now: int = 0) -> None:
        if isinstance(event, Quit):
            self.exit()
            return
        if not isinstance(event, KeyPress):
            return
        key = event.key
        if self.phase is Phase.NOT_STARTED:
            if key is Key.START:
                self.start(now)
        elif self.phase is Phase.RUNNING:
            if key is Key.LEFT:
                self.move(-1)
            elif key is Key.RIGHT:
                self.move(1)
            elif key is Key.SOFT_DROP:
                self.soft_drop()
            elif key is Key.ROTATE_CW:
                self.rotate(clockwise=True)
            elif key is Key.ROTATE_CCW:
                self.rotate(clockwise=False)
        elif self.phase is Phase.GAME_OVER:
            if key is Key.RESTART:
                self.restart(now)
            elif key is Key.EXIT:
                self.exit()

    def handle_events(self, events: Iterable[InputEvent], now: int = 0) -> None:
        for event in events:
            if self.phase is Phase.EXITED:
                break
            self.handle_event(event, now)

    def update(self, events: Iterable[InputEvent], now: int) -> None:
        """One loop iteration: drain input, then at most one gravity step."""
        self.handle_events(events, now)
        self.tick(now)

    # ---------- Observation ----------
    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid
        state = self.grid.clone_state()
        if self.piece is not None and self.running:
            for x, y in self.piece.cells():
                if self.grid.is_inside(x, y):
                    state[y, x] = CellState.ACTIVE
        return state

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            grid=self.get_state(),
            piece=self.piece,
            score=self.score,
            phase=self.phase,
            lines_cleared_total=self.lines_cleared_total,
        )
