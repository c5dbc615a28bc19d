from __future__ import annotations

from pygame.math import Vector3
from pytest import approx

from shoal.sim.core.agent import Agent
from shoal.sim.core.config import SimulationConfig
from shoal.sim.systems.collisions import resolve_collisions


def _agent(agent_id: int, position) -> Agent:
    return Agent(id=agent_id, position=Vector3(position), velocity=Vector3())


def test_overlapping_pair_gets_equal_and_opposite_repulsion():
    config = SimulationConfig(min_collision_distance=5.25, repulsion_strength=80.0)
    agents = [_agent(0, (0.0, 0.0, 0.0)), _agent(1, (3.0, 0.0, 0.0))]
    forces: list[Vector3] = []

    checks, collisions = resolve_collisions(agents, config, forces)

    assert checks == 1
    assert collisions == 1
    assert forces[0].length() == approx(180.0)
    assert forces[1].length() == approx(180.0)
    assert tuple(forces[0]) == approx((-180.0, 0.0, 0.0))
    assert tuple(forces[1]) == approx((180.0, 0.0, 0.0))


def test_forces_cancel_across_the_whole_population():
    config = SimulationConfig()
    agents = [
        _agent(0, (0.0, 0.0, 0.0)),
        _agent(1, (1.0, 2.0, 0.0)),
        _agent(2, (-1.5, 0.5, 1.0)),
        _agent(3, (0.5, -2.0, -1.0)),
    ]
    forces: list[Vector3] = []

    resolve_collisions(agents, config, forces)

    total = Vector3()
    for force in forces:
        total += force
    assert total.length() == approx(0.0, abs=1e-9)


def test_coincident_and_separated_pairs_produce_no_force():
    config = SimulationConfig(min_collision_distance=5.25)
    agents = [
        _agent(0, (0.0, 0.0, 0.0)),
        _agent(1, (0.0, 0.0, 0.0)),
        _agent(2, (0.0, 5.25, 0.0)),
    ]
    forces = [Vector3(7.0, 7.0, 7.0)]

    checks, collisions = resolve_collisions(agents, config, forces)

    assert checks == 3
    assert collisions == 0
    assert len(forces) == 3
    assert all(force.length_squared() == 0.0 for force in forces)
