from __future__ import annotations

import math
from dataclasses import dataclass

from pygame.math import Vector3


@dataclass
class GoalPath:
    """
    Moving target traced by ``(A sin T, B sin T cos T, (A/B) cos T sin T tan T)``.

    The school chases this point; the path is owned by the host and is never
    read by the simulation itself, which only receives the sampled position.
    """

    amplitude_a: float = 50.0
    amplitude_b: float = 50.0
    elapsed: float = 0.0

    def position_at(self, t: float) -> Vector3:
        a = self.amplitude_a
        b = self.amplitude_b
        sin_t = math.sin(t)
        cos_t = math.cos(t)
        ratio = a / b if b != 0.0 else 0.0
        return Vector3(a * sin_t, b * sin_t * cos_t, ratio * cos_t * sin_t * math.tan(t))

    def advance(self, dt: float) -> Vector3:
        self.elapsed += dt
        return self.position_at(self.elapsed)

    def current(self) -> Vector3:
        return self.position_at(self.elapsed)

    def reset(self) -> None:
        self.elapsed = 0.0
