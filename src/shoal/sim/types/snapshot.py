from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    metrics: Optional[TickMetrics]
    agents: List[Dict[str, Any]]
    goal: Optional[Dict[str, float]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotWorld:
    center: Dict[str, float]
    bounds: Dict[str, float]


@dataclass(slots=True)
class SnapshotMetadata:
    population: int
    sim_dt: float
    tick_rate: float
    seed: int
    config_version: str
