from __future__ import annotations

import logging
from dataclasses import replace
from time import perf_counter
from typing import Any, Dict, List, Optional, Sequence, Union

from pygame.math import Vector3

from .agent import Agent
from .config import ConfigError, SimulationConfig
from .rng import DeterministicRng
from ..systems import collisions, integration, neighbors, steering
from ..systems import metrics as metrics_system
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld

logger = logging.getLogger(__name__)

Vec3Like = Union[Vector3, Sequence[float]]


def _xyz(vector: Vector3) -> Dict[str, float]:
    return {"x": vector.x, "y": vector.y, "z": vector.z}


class Simulation:
    """
    Fixed-size school of fish advanced by explicit ``step(goal, dt)`` calls.

    Each tick runs neighbor aggregation, steering, collision resolution and
    integration in that order. Every phase before integration reads only the
    state left by the previous tick; accelerations and collision forces are
    staged in per-instance buffers and applied together by the integrator.
    """

    def __init__(self, config: SimulationConfig, center: Optional[Vec3Like] = None):
        if config.fish_count <= 0:
            raise ConfigError(f"fish_count must be positive, got {config.fish_count}")
        self._config = config
        self._center = Vector3(center) if center is not None else Vector3()
        self._rng = DeterministicRng(config.seed)
        self._agents: List[Agent] = []
        self._neighbor_sums: List[neighbors.NeighborSums] = []
        self._accelerations: List[Vector3] = []
        self._forces: List[Vector3] = []
        self._metrics: TickMetrics | None = None
        self._tick = 0
        self._bootstrap_population()
        logger.debug(
            "Spawned %d fish around (%.2f, %.2f, %.2f) with seed %d",
            config.fish_count,
            self._center.x,
            self._center.y,
            self._center.z,
            config.seed,
        )

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def center(self) -> Vector3:
        return Vector3(self._center)

    @property
    def agents(self) -> List[Agent]:
        return self._agents

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def positions(self) -> List[Vector3]:
        return [Vector3(agent.position) for agent in self._agents]

    def velocities(self) -> List[Vector3]:
        return [Vector3(agent.velocity) for agent in self._agents]

    def reset(self) -> None:
        self._agents.clear()
        self._neighbor_sums.clear()
        self._accelerations.clear()
        self._forces.clear()
        self._rng.reset()
        self._metrics = None
        self._tick = 0
        self._bootstrap_population()
        logger.debug("Simulation reset with seed %d", self._config.seed)

    def step(self, goal: Vec3Like, dt: float) -> TickMetrics:
        start = perf_counter()
        config = self._config
        goal_vec = Vector3(goal)

        neighbor_checks, neighbor_links = neighbors.aggregate_neighbors(
            self._agents, config, self._neighbor_sums
        )
        steering.compute_accelerations(
            self._agents, self._neighbor_sums, goal_vec, config, self._rng, self._accelerations
        )
        collision_checks, collision_count = collisions.resolve_collisions(self._agents, config, self._forces)
        integration.integrate(self._agents, self._accelerations, self._forces, config, dt, self._center)

        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = metrics_system.create_metrics(
            self._tick,
            self._agents,
            neighbor_checks,
            neighbor_links,
            collision_checks,
            collision_count,
            elapsed_ms,
        )
        self._metrics = metrics
        self._tick += 1
        return metrics

    def snapshot(self, goal: Optional[Vec3Like] = None) -> Snapshot:
        config = self._config
        agents_payload = [self._agent_snapshot(agent) for agent in self._agents]
        metadata = SnapshotMetadata(
            population=len(self._agents),
            sim_dt=config.time_step,
            tick_rate=0.0 if config.time_step <= 0 else 1.0 / config.time_step,
            seed=config.seed,
            config_version=config.config_version,
        )
        world = SnapshotWorld(
            center=_xyz(self._center),
            bounds={"x": config.bounds[0], "y": config.bounds[1], "z": config.bounds[2]},
        )
        return Snapshot(
            tick=self._tick,
            metrics=self._metrics,
            agents=agents_payload,
            goal=_xyz(Vector3(goal)) if goal is not None else None,
            world=world,
            metadata=metadata,
        )

    def _bootstrap_population(self) -> None:
        config = self._config
        for index in range(config.fish_count):
            position = self._center + self._rng.next_in_unit_sphere() * config.spawn_radius
            speed = self._rng.next_range(config.spawn_speed_min, config.spawn_speed_max)
            velocity = self._rng.next_on_unit_sphere() * speed
            self._agents.append(Agent(id=index, position=position, velocity=velocity))

    @staticmethod
    def _agent_snapshot(agent: Agent) -> Dict[str, Any]:
        position = agent.position
        velocity = agent.velocity
        return {
            "id": agent.id,
            "x": position.x,
            "y": position.y,
            "z": position.z,
            "vx": velocity.x,
            "vy": velocity.y,
            "vz": velocity.z,
            "speed": velocity.length(),
        }


def create(
    center: Vec3Like,
    count: int,
    bounds: Vec3Like,
    config: Optional[SimulationConfig] = None,
) -> Simulation:
    """Build a simulation of ``count`` fish spawned around ``center`` inside ``bounds``."""
    base = config if config is not None else SimulationConfig()
    run_config = replace(base, fish_count=count, bounds=tuple(bounds))
    return Simulation(run_config, center=center)


def step(state: Simulation, goal: Vec3Like, dt: float) -> TickMetrics:
    return state.step(goal, dt)
