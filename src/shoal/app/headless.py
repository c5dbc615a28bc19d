from __future__ import annotations

import argparse
import csv
import json
import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Optional

from pygame.math import Vector3

from ..sim.core.config import SimulationConfig
from ..sim.core.simulation import Simulation
from ..sim.types.metrics import TickMetrics
from .goal import GoalPath

logger = logging.getLogger(__name__)


_BASIC_HEADER = [
    "tick",
    "population",
    "neighbor_links",
    "collisions",
    "avg_speed",
    "max_speed",
    "tick_ms",
]

_DETAILED_HEADER = [
    "tick",
    "population",
    "neighbor_links",
    "collisions",
    "avg_speed",
    "max_speed",
    "tick_ms",
    "neighbor_checks",
    "collision_checks",
    "avg_neighbors",
    "goal_x",
    "goal_y",
    "goal_z",
    "centroid_x",
    "centroid_y",
    "centroid_z",
    "mean_goal_distance",
    "polarization",
]


def _format_basic_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.neighbor_links,
        metrics.collisions,
        f"{metrics.average_speed:.4f}",
        f"{metrics.max_speed:.4f}",
        f"{tick_ms:.3f}",
    ]


def _format_detailed_row(
    simulation: Simulation, metrics: TickMetrics, goal: Vector3, tick_ms: float
) -> list[object]:
    population = metrics.population
    centroid = Vector3()
    heading_sum = Vector3()
    goal_distance_sum = 0.0
    for agent in simulation.agents:
        centroid += agent.position
        goal_distance_sum += agent.position.distance_to(goal)
        speed_sq = agent.velocity.length_squared()
        if speed_sq > 0.0:
            heading_sum += agent.velocity / math.sqrt(speed_sq)
    if population > 0:
        centroid /= population
        mean_goal_distance = goal_distance_sum / population
        # 1.0 when every fish swims the same way, near 0.0 when headings cancel out.
        polarization = heading_sum.length() / population
        avg_neighbors = metrics.neighbor_links / population
    else:
        mean_goal_distance = 0.0
        polarization = 0.0
        avg_neighbors = 0.0

    return _format_basic_row(metrics, tick_ms) + [
        metrics.neighbor_checks,
        metrics.collision_checks,
        f"{avg_neighbors:.4f}",
        f"{goal.x:.4f}",
        f"{goal.y:.4f}",
        f"{goal.z:.4f}",
        f"{centroid.x:.4f}",
        f"{centroid.y:.4f}",
        f"{centroid.z:.4f}",
        f"{mean_goal_distance:.4f}",
        f"{polarization:.4f}",
    ]


def _percentile(sorted_values: list[float], percentile: float) -> float:
    if not sorted_values:
        return 0.0
    if len(sorted_values) == 1:
        return float(sorted_values[0])
    pos = (len(sorted_values) - 1) * percentile
    low = int(math.floor(pos))
    high = int(math.ceil(pos))
    if low == high:
        return float(sorted_values[low])
    weight = pos - low
    return float(sorted_values[low] + (sorted_values[high] - sorted_values[low]) * weight)


def _summary_stats(values: list[float]) -> dict[str, float]:
    if not values:
        return {"min": 0.0, "max": 0.0, "avg": 0.0, "p50": 0.0, "p90": 0.0, "p95": 0.0, "p99": 0.0}
    sorted_values = sorted(values)
    return {
        "min": float(sorted_values[0]),
        "max": float(sorted_values[-1]),
        "avg": float(sum(values) / len(values)),
        "p50": _percentile(sorted_values, 0.50),
        "p90": _percentile(sorted_values, 0.90),
        "p95": _percentile(sorted_values, 0.95),
        "p99": _percentile(sorted_values, 0.99),
    }


def _correlation(xs: list[float], ys: list[float]) -> float:
    if len(xs) != len(ys) or len(xs) < 2:
        return 0.0
    mean_x = sum(xs) / len(xs)
    mean_y = sum(ys) / len(ys)
    num = 0.0
    denom_x = 0.0
    denom_y = 0.0
    for x, y in zip(xs, ys):
        dx = x - mean_x
        dy = y - mean_y
        num += dx * dy
        denom_x += dx * dx
        denom_y += dy * dy
    denom = math.sqrt(denom_x * denom_y)
    if denom == 0.0:
        return 0.0
    return float(num / denom)


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    log_format: str = "detailed",
    summary_path: Optional[Path] = None,
    summary_window: int = 5000,
    config_path: Optional[Path] = None,
) -> None:
    log_mode = log_format.lower().strip()
    if log_mode not in {"basic", "detailed"}:
        raise ValueError(f"Unknown log format: {log_format}")

    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config = replace(config, seed=seed)
    simulation = Simulation(config)
    goal_path = GoalPath()
    dt = config.time_step
    logger.info(
        "Running %d steps with %d fish (seed=%d, dt=%.4f)", steps, config.fish_count, config.seed, dt
    )

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_DETAILED_HEADER if log_mode == "detailed" else _BASIC_HEADER)

    tick_ms_series: list[float] = []
    speed_series: list[float] = []
    collision_series: list[float] = []
    link_series: list[float] = []
    max_tick_ms = (-1.0, -1)
    max_collisions = (-1, -1)

    try:
        for tick in range(steps):
            goal = goal_path.advance(dt)
            metrics = simulation.step(goal, dt)
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms

            if summary_path:
                tick_ms_series.append(tick_ms)
                speed_series.append(metrics.average_speed)
                collision_series.append(float(metrics.collisions))
                link_series.append(float(metrics.neighbor_links))
                if tick_ms > max_tick_ms[0]:
                    max_tick_ms = (tick_ms, tick)
                if metrics.collisions > max_collisions[0]:
                    max_collisions = (metrics.collisions, tick)

            if writer:
                if log_mode == "detailed":
                    writer.writerow(_format_detailed_row(simulation, metrics, goal, tick_ms))
                else:
                    writer.writerow(_format_basic_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        window = max(1, int(summary_window))
        tail_slice = slice(max(0, len(tick_ms_series) - window), len(tick_ms_series))
        summary = {
            "steps": steps,
            "seed": config.seed,
            "population": config.fish_count,
            "log_format": log_mode,
            "deterministic_log": deterministic_log,
            "tick_ms": _summary_stats(tick_ms_series),
            "avg_speed": _summary_stats(speed_series),
            "collisions": _summary_stats(collision_series),
            "neighbor_links": _summary_stats(link_series),
            "correlations": {
                "tick_ms_vs_collisions": _correlation(tick_ms_series, collision_series),
                "tick_ms_vs_neighbor_links": _correlation(tick_ms_series, link_series),
            },
            "peaks": {
                "tick_ms": {"value": float(max_tick_ms[0]), "tick": max_tick_ms[1]},
                "collisions": {"value": max_collisions[0], "tick": max_collisions[1]},
            },
            "tail_window": {
                "window": window,
                "tick_ms": _summary_stats(tick_ms_series[tail_slice]),
                "avg_speed": _summary_stats(speed_series[tail_slice]),
                "collisions": _summary_stats(collision_series[tail_slice]),
            },
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
        logger.info("Wrote run summary to %s", summary_path)


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless fish school simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument(
        "--log-format",
        choices=["basic", "detailed"],
        default="detailed",
        help="CSV format to write when --log is provided.",
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help="Optional JSON file to write summary stats for the run.",
    )
    parser.add_argument(
        "--summary-window",
        type=int,
        default=5000,
        help="Tail window size (ticks) for summary stats.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write deterministic CSV (tick_ms is forced to 0.000 so identical seeds match).",
    )
    parser.add_argument("--log-level", default="INFO", help="Python logging level (DEBUG, INFO, ...)")
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        log_format=args.log_format,
        summary_path=args.summary,
        summary_window=args.summary_window,
        config_path=args.config,
    )


if __name__ == "__main__":
    main()
