from __future__ import annotations

from typing import Sequence

from ..core.agent import Agent
from ..types.metrics import TickMetrics


def create_metrics(
    tick: int,
    agents: Sequence[Agent],
    neighbor_checks: int,
    neighbor_links: int,
    collision_checks: int,
    collisions: int,
    duration_ms: float,
) -> TickMetrics:
    speed_sum = 0.0
    top_speed = 0.0
    for agent in agents:
        speed = agent.velocity.length()
        speed_sum += speed
        if speed > top_speed:
            top_speed = speed
    population = len(agents)
    return TickMetrics(
        tick=tick,
        population=population,
        neighbor_checks=neighbor_checks,
        neighbor_links=neighbor_links,
        collision_checks=collision_checks,
        collisions=collisions,
        average_speed=speed_sum / population if population else 0.0,
        max_speed=top_speed,
        tick_duration_ms=duration_ms,
    )
