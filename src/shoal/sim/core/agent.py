from __future__ import annotations

from dataclasses import dataclass

from pygame.math import Vector3


@dataclass(slots=True)
class Agent:
    id: int
    position: Vector3
    velocity: Vector3
