from __future__ import annotations

from pygame.math import Vector3
from pytest import approx

from shoal.sim.core.agent import Agent
from shoal.sim.core.config import SimulationConfig
from shoal.sim.core.rng import DeterministicRng
from shoal.sim.systems import steering
from shoal.sim.systems.neighbors import NeighborSums


def _agent(position=(0.0, 0.0, 0.0), velocity=(0.0, 0.0, 0.0)) -> Agent:
    return Agent(id=0, position=Vector3(position), velocity=Vector3(velocity))


def test_seek_is_zero_when_already_at_target():
    result = steering.seek(Vector3(), Vector3(1.0, 2.0, 3.0), max_speed=8.0, max_force=0.5)
    assert result.length_squared() == 0.0


def test_goal_steering_is_clamped_to_max_force():
    config = SimulationConfig(max_speed=8.0, max_force=0.5)
    agent = _agent(velocity=(0.0, 0.0, 0.0))

    result = steering.goal_seek(agent, Vector3(100.0, 0.0, 0.0), config)

    assert tuple(result) == approx((0.5, 0.0, 0.0))


def test_goal_steering_small_correction_is_not_clamped():
    config = SimulationConfig(max_speed=8.0, max_force=0.5)
    agent = _agent(velocity=(7.8, 0.0, 0.0))

    result = steering.goal_seek(agent, Vector3(100.0, 0.0, 0.0), config)

    assert tuple(result) == approx((0.2, 0.0, 0.0))


def test_alignment_with_stationary_neighbors_steers_against_own_velocity():
    config = SimulationConfig(max_speed=8.0, max_force=0.5)
    agent = _agent(velocity=(0.3, 0.0, 0.0))
    sums = NeighborSums(total=2)

    result = steering.alignment(agent, sums, config)

    assert tuple(result) == approx((-0.3, 0.0, 0.0))


def test_separation_is_averaged_but_not_normalized():
    sums = NeighborSums(separation=Vector3(4.0, 0.0, 0.0), total=2)
    assert tuple(steering.separation(sums)) == approx((2.0, 0.0, 0.0))


def test_empty_neighborhood_contributes_nothing():
    config = SimulationConfig()
    agent = _agent(velocity=(1.0, 0.0, 0.0))
    sums = NeighborSums(separation=Vector3(9.0, 9.0, 9.0), alignment=Vector3(5.0, 0.0, 0.0), total=0)

    assert steering.separation(sums).length_squared() == 0.0
    assert steering.alignment(agent, sums, config).length_squared() == 0.0
    assert steering.cohesion(agent, sums, config).length_squared() == 0.0


def test_single_agent_acceleration_is_goal_steering_only_without_jitter():
    config = SimulationConfig(wander_jitter=0.0)
    agent = _agent(position=(1.0, 2.0, 3.0), velocity=(0.5, 0.0, 0.0))
    goal = Vector3(10.0, -4.0, 2.0)

    acceleration = steering.compute_acceleration(agent, NeighborSums(), goal, config, DeterministicRng(1))
    expected = steering.goal_seek(agent, goal, config) * config.goal_weight

    assert tuple(acceleration) == approx(tuple(expected))


def test_cohesion_is_ignored_while_weight_is_zero():
    config = SimulationConfig(wander_jitter=0.0, cohesion_weight=0.0)
    agent = _agent(velocity=(1.0, 0.0, 0.0))
    sums = NeighborSums(
        separation=Vector3(0.2, 0.0, 0.0),
        alignment=Vector3(0.0, 2.0, 0.0),
        cohesion=Vector3(0.0, 0.0, 6.0),
        total=1,
    )
    goal = Vector3(0.0, 0.0, -20.0)

    acceleration = steering.compute_acceleration(agent, sums, goal, config, DeterministicRng(1))
    expected = (
        steering.separation(sums) * config.separation_weight
        + steering.alignment(agent, sums, config) * config.alignment_weight
        + steering.goal_seek(agent, goal, config) * config.goal_weight
    )

    assert tuple(acceleration) == approx(tuple(expected))


def test_cohesion_weight_pulls_toward_neighbor_centroid():
    config = SimulationConfig(
        wander_jitter=0.0,
        separation_weight=0.0,
        alignment_weight=0.0,
        goal_weight=0.0,
        cohesion_weight=2.0,
        max_force=0.5,
    )
    agent = _agent()
    sums = NeighborSums(cohesion=Vector3(0.0, 12.0, 0.0), total=2)

    acceleration = steering.compute_acceleration(agent, sums, Vector3(), config, DeterministicRng(1))

    assert tuple(acceleration) == approx((0.0, 1.0, 0.0))


def test_jitter_stays_within_configured_magnitude():
    config = SimulationConfig(separation_weight=0.0, alignment_weight=0.0, goal_weight=0.0, wander_jitter=0.1)
    rng = DeterministicRng(3)
    agent = _agent()

    for _ in range(200):
        acceleration = steering.compute_acceleration(agent, NeighborSums(), Vector3(), config, rng)
        assert acceleration.length() <= 0.1 + 1e-12


def test_compute_accelerations_stages_without_touching_velocity():
    config = SimulationConfig()
    agents = [_agent(position=(0.0, 0.0, 0.0), velocity=(1.0, 0.0, 0.0))]
    out = [Vector3(9.0, 9.0, 9.0), Vector3()]

    steering.compute_accelerations(agents, [NeighborSums()], Vector3(5.0, 0.0, 0.0), config, DeterministicRng(2), out)

    assert len(out) == 1
    assert tuple(agents[0].velocity) == (1.0, 0.0, 0.0)
