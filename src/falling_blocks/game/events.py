"""Input vocabulary understood by the game engine.

Adapters translate device events into these before handing them over.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


class Key(Enum):
    START = auto()
    LEFT = auto()
    RIGHT = auto()
    SOFT_DROP = auto()
    ROTATE_CW = auto()
    ROTATE_CCW = auto()
    RESTART = auto()
    EXIT = auto()


@dataclass(frozen=True)
class KeyPress:
    key: Key


@dataclass(frozen=True)
class Quit:
    pass


InputEvent = Union[KeyPress, Quit]
