from __future__ import annotations

from typing import List, Sequence

from pygame.math import Vector3

from ..core.agent import Agent
from ..core.config import SimulationConfig
from ..core.rng import DeterministicRng
from ..utils.math3d import _clamp_length, _safe_normalize
from .neighbors import NeighborSums


def seek(target_offset: Vector3, velocity: Vector3, max_speed: float, max_force: float) -> Vector3:
    """Reynolds steering toward ``target_offset``; a zero offset yields zero steering."""
    if target_offset.length_squared() <= 0.0:
        return Vector3()
    desired = _safe_normalize(target_offset) * max_speed
    return _clamp_length(desired - velocity, max_force)


def alignment(agent: Agent, sums: NeighborSums, config: SimulationConfig) -> Vector3:
    if sums.total <= 0:
        return Vector3()
    average = sums.alignment / sums.total
    target = _safe_normalize(average) * config.max_speed
    return _clamp_length(target - agent.velocity, config.max_force)


def separation(sums: NeighborSums) -> Vector3:
    # Already weighted by inverse distance; averaged but not re-normalized.
    if sums.total <= 0:
        return Vector3()
    return sums.separation / sums.total


def cohesion(agent: Agent, sums: NeighborSums, config: SimulationConfig) -> Vector3:
    if sums.total <= 0:
        return Vector3()
    centroid = sums.cohesion / sums.total
    return seek(centroid - agent.position, agent.velocity, config.max_speed, config.max_force)


def goal_seek(agent: Agent, goal: Vector3, config: SimulationConfig) -> Vector3:
    return seek(goal - agent.position, agent.velocity, config.max_speed, config.max_force)


def compute_acceleration(
    agent: Agent,
    sums: NeighborSums,
    goal: Vector3,
    config: SimulationConfig,
    rng: DeterministicRng,
) -> Vector3:
    acceleration = Vector3()
    if sums.total > 0:
        acceleration += separation(sums) * config.separation_weight
        acceleration += alignment(agent, sums, config) * config.alignment_weight
        if config.cohesion_weight != 0.0:
            acceleration += cohesion(agent, sums, config) * config.cohesion_weight
    acceleration += goal_seek(agent, goal, config) * config.goal_weight
    acceleration += rng.next_in_unit_sphere() * config.wander_jitter
    return acceleration


def compute_accelerations(
    agents: Sequence[Agent],
    neighbor_sums: Sequence[NeighborSums],
    goal: Vector3,
    config: SimulationConfig,
    rng: DeterministicRng,
    out: List[Vector3],
) -> None:
    """Stage one acceleration per agent into ``out``; velocities are left untouched."""
    del out[:]
    for agent, sums in zip(agents, neighbor_sums):
        out.append(compute_acceleration(agent, sums, goal, config, rng))
