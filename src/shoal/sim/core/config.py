from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigError(ValueError):
    """Raised when a simulation configuration cannot be built."""


@dataclass(frozen=True)
class SimulationConfig:
    time_step: float = 1.0 / 60.0
    fish_count: int = 100
    bounds: tuple[float, float, float] = (50.0, 50.0, 50.0)
    perception_radius: float = 10.0
    max_speed: float = 8.0
    max_force: float = 0.5
    separation_weight: float = 5.5
    alignment_weight: float = 0.5
    # Cohesion stays off unless a run opts in.
    cohesion_weight: float = 0.0
    goal_weight: float = 5.5
    min_collision_distance: float = 5.25
    repulsion_strength: float = 80.0
    damping: float = 0.98
    agent_radius: float = 0.5
    wander_jitter: float = 0.1
    spawn_radius: float = 20.0
    spawn_speed_min: float = 3.0
    spawn_speed_max: float = 8.0
    seed: int = 42
    config_version: str = "v1"

    def __post_init__(self) -> None:
        object.__setattr__(self, "bounds", _triple(self.bounds, "bounds"))

    def boundary_limits(self) -> tuple[float, float, float]:
        return tuple(extent / 2.0 - self.agent_radius for extent in self.bounds)  # type: ignore[return-value]

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text())
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
        return load_config(data)


@dataclass
class AppConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    broadcast_interval: int = 2


def _triple(value: Any, name: str) -> tuple[float, float, float]:
    if isinstance(value, (tuple, list)) and len(value) == 3:
        try:
            return (float(value[0]), float(value[1]), float(value[2]))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{name} must hold three numbers, got {value!r}") from exc
    raise ConfigError(f"{name} must be a sequence of three numbers, got {value!r}")


def load_config(raw: Mapping[str, Any]) -> SimulationConfig:
    known = {item.name for item in fields(SimulationConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown simulation config keys: {', '.join(unknown)}")
    return SimulationConfig(**dict(raw))
