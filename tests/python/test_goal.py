from __future__ import annotations

import math

from pytest import approx

from shoal.app.goal import GoalPath


def test_path_starts_at_origin():
    assert tuple(GoalPath().position_at(0.0)) == approx((0.0, 0.0, 0.0))


def test_path_matches_closed_form():
    path = GoalPath(amplitude_a=50.0, amplitude_b=25.0)
    t = 0.7
    expected = (
        50.0 * math.sin(t),
        25.0 * math.sin(t) * math.cos(t),
        2.0 * math.cos(t) * math.sin(t) * math.tan(t),
    )
    assert tuple(path.position_at(t)) == approx(expected)


def test_advance_accumulates_elapsed_time():
    path = GoalPath()
    path.advance(0.25)
    position = path.advance(0.25)

    assert path.elapsed == approx(0.5)
    assert tuple(position) == approx(tuple(path.position_at(0.5)))
    path.reset()
    assert path.elapsed == 0.0
