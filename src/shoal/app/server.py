from __future__ import annotations

import argparse
import asyncio
import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional, Set

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..sim.core.config import AppConfig, SimulationConfig
from ..sim.core.simulation import Simulation
from .goal import GoalPath

logger = logging.getLogger(__name__)

MAX_QUEUED_SNAPSHOTS = 256


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SimulationController:
    def __init__(self, app_config: AppConfig):
        self.config = app_config.simulation
        self.simulation = Simulation(self.config)
        self.goal_path = GoalPath()
        self.broadcast_interval = max(1, app_config.broadcast_interval)
        self.running = False
        self.speed_multiplier = 1.0
        self.clients: Set[WebSocket] = set()
        self._client_last_sent: Dict[WebSocket, int] = {}
        self._snapshot_queue: deque[QueuedSnapshot] = deque(maxlen=MAX_QUEUED_SNAPSHOTS)
        self._lock = asyncio.Lock()
        self._queue_lock = asyncio.Lock()
        self._broadcast_task: asyncio.Task | None = None

    @property
    def tick(self) -> int:
        return self.simulation.tick

    async def start(self) -> None:
        if self._broadcast_task is None:
            self._broadcast_task = asyncio.create_task(self._loop())
        self.running = True

    async def stop(self) -> None:
        self.running = False

    async def reset(self) -> None:
        async with self._lock:
            self.simulation.reset()
            self.goal_path.reset()
        async with self._queue_lock:
            self._snapshot_queue.clear()
        for client in self._client_last_sent:
            self._client_last_sent[client] = -1
        logger.info("Simulation reset")
        await self._broadcast_snapshot()

    async def advance(self) -> None:
        dt = self.config.time_step
        async with self._lock:
            goal = self.goal_path.advance(dt)
            self.simulation.step(goal, dt)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.time_step / self.speed_multiplier)
            if not self.running:
                continue
            await self.advance()
            if self.tick % self.broadcast_interval == 0:
                await self._broadcast_snapshot()

    async def acknowledge(self, tick: int) -> None:
        async with self._queue_lock:
            while self._snapshot_queue and self._snapshot_queue[0].tick <= tick:
                self._snapshot_queue.popleft()

    def _serialize_snapshot(self) -> QueuedSnapshot:
        snapshot = self.simulation.snapshot(self.goal_path.current())
        payload = {
            "type": "snapshot",
            "tick": snapshot.tick,
            "payload": {
                "tick": snapshot.tick,
                "metrics": asdict(snapshot.metrics) if snapshot.metrics is not None else None,
                "agents": snapshot.agents,
                "goal": snapshot.goal,
                "world": asdict(snapshot.world),
                "metadata": asdict(snapshot.metadata),
            },
        }
        return QueuedSnapshot(tick=snapshot.tick, payload=json.dumps(payload))

    async def _send_pending_snapshots(self, client: WebSocket) -> None:
        last_sent = self._client_last_sent.get(client, -1)
        async with self._queue_lock:
            pending = [item for item in self._snapshot_queue if item.tick > last_sent]
        for item in pending:
            await client.send_text(item.payload)
            last_sent = item.tick
        self._client_last_sent[client] = last_sent

    def _trim_queue(self) -> None:
        # Keep the newest snapshot so late joiners get a frame right away.
        if self.clients:
            floor = min(self._client_last_sent.get(client, -1) for client in self.clients)
        else:
            floor = None
        while len(self._snapshot_queue) > 1 and (floor is None or self._snapshot_queue[0].tick <= floor):
            self._snapshot_queue.popleft()

    async def _broadcast_snapshot(self) -> None:
        queued = self._serialize_snapshot()
        async with self._queue_lock:
            self._snapshot_queue.append(queued)
        stale: Set[WebSocket] = set()
        for client in list(self.clients):
            try:
                await self._send_pending_snapshots(client)
            except (WebSocketDisconnect, RuntimeError):
                stale.add(client)
        for client in stale:
            logger.info("Dropping disconnected client")
            self.clients.discard(client)
            self._client_last_sent.pop(client, None)
        async with self._queue_lock:
            self._trim_queue()


app = FastAPI(title="Shoal Fish School Simulation")
controller = SimulationController(AppConfig())


@app.on_event("startup")
async def _startup() -> None:
    await controller.start()


@app.get("/api/status")
async def status() -> JSONResponse:
    metrics = controller.simulation.metrics
    return JSONResponse(
        {
            "running": controller.running,
            "tick": controller.tick,
            "population": len(controller.simulation.agents),
            "metrics": asdict(metrics) if metrics is not None else None,
        }
    )


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    controller.running = True
    return JSONResponse({"running": True})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    controller.running = False
    return JSONResponse({"running": False})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "tick": controller.tick})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    controller.clients.add(websocket)
    controller._client_last_sent[websocket] = -1
    await controller._send_pending_snapshots(websocket)
    try:
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if payload.get("type") == "ack":
                tick = payload.get("tick")
                if isinstance(tick, int):
                    await controller.acknowledge(tick)
    except WebSocketDisconnect:
        controller.clients.discard(websocket)
        controller._client_last_sent.pop(websocket, None)


def configure(config_path: Optional[Path] = None, broadcast_interval: int = 2) -> SimulationController:
    """Replace the module controller with one built from ``config_path`` (defaults when omitted)."""
    global controller
    simulation_config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    controller = SimulationController(AppConfig(simulation=simulation_config, broadcast_interval=broadcast_interval))
    logger.info(
        "Serving %d fish (seed=%d, dt=%.4f)",
        simulation_config.fish_count,
        simulation_config.seed,
        simulation_config.time_step,
    )
    return controller


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve fish school snapshots over WebSocket")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--config", type=Path, default=None, help="YAML file with simulation settings")
    parser.add_argument("--broadcast-interval", type=int, default=2, help="Ticks between snapshot broadcasts")
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    configure(args.config, broadcast_interval=args.broadcast_interval)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


__all__ = ["app", "configure", "controller", "main"]


if __name__ == "__main__":
    main()
