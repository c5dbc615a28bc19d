from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from pygame.math import Vector3

from ..core.agent import Agent
from ..core.config import SimulationConfig


@dataclass(slots=True)
class NeighborSums:
    """Running sums gathered for one agent from every neighbor in perception range.

    A ``total`` of zero means the sums carry no information and must not be
    used as steering targets.
    """

    separation: Vector3 = field(default_factory=Vector3)
    alignment: Vector3 = field(default_factory=Vector3)
    cohesion: Vector3 = field(default_factory=Vector3)
    total: int = 0


def ensure_buffers(buffers: List[NeighborSums], count: int) -> List[NeighborSums]:
    while len(buffers) < count:
        buffers.append(NeighborSums())
    del buffers[count:]
    return buffers


def aggregate_neighbors(
    agents: Sequence[Agent],
    config: SimulationConfig,
    out: List[NeighborSums],
) -> Tuple[int, int]:
    """
    Fill ``out`` with separation/alignment/cohesion sums for every agent.

    Exhaustive pairwise scan; coincident agents are skipped because their
    offset has no direction. Returns ``(pair_checks, neighbor_links)``.
    """

    ensure_buffers(out, len(agents))
    radius = config.perception_radius
    checks = 0
    links = 0

    for index, agent in enumerate(agents):
        sums = out[index]
        px, py, pz = agent.position.x, agent.position.y, agent.position.z
        sep_x = sep_y = sep_z = 0.0
        ali_x = ali_y = ali_z = 0.0
        coh_x = coh_y = coh_z = 0.0
        total = 0
        for other_index, other in enumerate(agents):
            if other_index == index:
                continue
            checks += 1
            other_pos = other.position
            dx = px - other_pos.x
            dy = py - other_pos.y
            dz = pz - other_pos.z
            dist_sq = dx * dx + dy * dy + dz * dz
            if dist_sq <= 0.0:
                continue
            dist = math.sqrt(dist_sq)
            if dist >= radius:
                continue
            # normalized(diff) / dist == diff / dist^2
            sep_x += dx / dist_sq
            sep_y += dy / dist_sq
            sep_z += dz / dist_sq
            other_vel = other.velocity
            ali_x += other_vel.x
            ali_y += other_vel.y
            ali_z += other_vel.z
            coh_x += other_pos.x
            coh_y += other_pos.y
            coh_z += other_pos.z
            total += 1
        sums.separation.update(sep_x, sep_y, sep_z)
        sums.alignment.update(ali_x, ali_y, ali_z)
        sums.cohesion.update(coh_x, coh_y, coh_z)
        sums.total = total
        links += total

    return checks, links
