from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from pygame.math import Vector3

from ..core.agent import Agent
from ..core.config import SimulationConfig


def resolve_collisions(
    agents: Sequence[Agent],
    config: SimulationConfig,
    out_forces: List[Vector3],
) -> Tuple[int, int]:
    """
    Accumulate pairwise repulsion for overlapping agents into ``out_forces``.

    Every unique pair is visited once and the force is applied with opposite
    signs to both members, so the sum of all collision forces is zero.
    Returns ``(pair_checks, colliding_pairs)``.
    """

    count = len(agents)
    while len(out_forces) < count:
        out_forces.append(Vector3())
    del out_forces[count:]
    for force in out_forces:
        force.update(0.0, 0.0, 0.0)

    min_dist = config.min_collision_distance
    strength = config.repulsion_strength
    checks = 0
    collisions = 0

    for i in range(count):
        pos_i = agents[i].position
        force_i = out_forces[i]
        for j in range(i + 1, count):
            checks += 1
            pos_j = agents[j].position
            dx = pos_i.x - pos_j.x
            dy = pos_i.y - pos_j.y
            dz = pos_i.z - pos_j.z
            dist_sq = dx * dx + dy * dy + dz * dz
            if dist_sq <= 0.0:
                continue
            dist = math.sqrt(dist_sq)
            if dist >= min_dist:
                continue
            scale = (min_dist - dist) * strength / dist
            rx = dx * scale
            ry = dy * scale
            rz = dz * scale
            force_i.x += rx
            force_i.y += ry
            force_i.z += rz
            force_j = out_forces[j]
            force_j.x -= rx
            force_j.y -= ry
            force_j.z -= rz
            collisions += 1

    return checks, collisions
