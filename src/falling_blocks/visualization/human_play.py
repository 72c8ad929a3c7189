from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

import pygame

from falling_blocks.game import FallingBlocksGame, GameConfig, InputEvent, Key, KeyPress, Phase, Quit
from .renderer import Renderer


KEY_TO_INPUT: Dict[int, Key] = {
    pygame.K_RETURN: Key.START,
    pygame.K_KP_ENTER: Key.START,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_DOWN: Key.SOFT_DROP,
    pygame.K_UP: Key.ROTATE_CW,
    pygame.K_q: Key.ROTATE_CW,
    pygame.K_e: Key.ROTATE_CCW,
    pygame.K_r: Key.RESTART,
    pygame.K_ESCAPE: Key.EXIT,
}


def translate_event(event: pygame.event.Event) -> Optional[InputEvent]:
    """Map a pygame event onto the engine's input vocabulary; None for anything it ignores."""
    if event.type == pygame.QUIT:
        return Quit()
    if event.type == pygame.KEYDOWN:
        key = KEY_TO_INPUT.get(event.key)
        if key is not None:
            return KeyPress(key)
    return None


def poll_events() -> List[InputEvent]:
    events: List[InputEvent] = []
    for event in pygame.event.get():
        translated = translate_event(event)
        if translated is not None:
            events.append(translated)
    return events


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--fps", type=int, default=60)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def run(cell_size: int = 30, fps: int = 60, seed: Optional[int] = None) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlocksGame(GameConfig(random_seed=seed))
        font = pygame.font.SysFont(None, 24)
        renderer = Renderer(font, cell_size=cell_size)

        screen = pygame.display.set_mode(renderer.window_size(game.grid.width, game.grid.height))
        pygame.display.set_caption("Falling Blocks")

        while game.phase is not Phase.EXITED:
            game.update(poll_events(), pygame.time.get_ticks())
            if game.phase is Phase.EXITED:
                break
            renderer.draw(screen, game.snapshot())
            clock.tick(fps)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run(cell_size=args.cell_size, fps=args.fps, seed=args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
