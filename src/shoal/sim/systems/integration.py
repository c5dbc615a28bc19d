from __future__ import annotations

from typing import Sequence

from pygame.math import Vector3

from ..core.agent import Agent
from ..core.config import SimulationConfig
from ..utils.math3d import _clamp_length, _sign


def reflect(position: Vector3, velocity: Vector3, center: Vector3, limits: Sequence[float]) -> None:
    """Clamp each axis to ``center +/- limit`` and flip that axis' velocity on contact."""
    for axis in range(3):
        offset = position[axis] - center[axis]
        limit = limits[axis]
        if abs(offset) > limit:
            position[axis] = center[axis] + limit * _sign(offset)
            velocity[axis] = -velocity[axis]


def integrate_agent(
    agent: Agent,
    acceleration: Vector3,
    force: Vector3,
    config: SimulationConfig,
    dt: float,
    center: Vector3,
    limits: Sequence[float],
) -> None:
    velocity = agent.velocity + (acceleration + force) * dt
    velocity *= config.damping
    velocity = _clamp_length(velocity, config.max_speed)
    position = agent.position + velocity * dt
    reflect(position, velocity, center, limits)
    agent.velocity.update(velocity)
    agent.position.update(position)


def integrate(
    agents: Sequence[Agent],
    accelerations: Sequence[Vector3],
    forces: Sequence[Vector3],
    config: SimulationConfig,
    dt: float,
    center: Vector3,
) -> None:
    # Negative elapsed time is treated as no elapsed time.
    dt = max(0.0, dt)
    limits = config.boundary_limits()
    for agent, acceleration, force in zip(agents, accelerations, forces):
        integrate_agent(agent, acceleration, force, config, dt, center, limits)
