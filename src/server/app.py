from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from dataclasses import replace
from typing import List, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from liftcore import Building, BuildingConfig, Direction, ElevatorFactory, FloorFactory, load_config

logger = logging.getLogger(__name__)


class CallRequest(BaseModel):
    floor: int = Field(..., ge=1)
    direction: Direction
    people: int = Field(1, ge=1)


class StepRequest(BaseModel):
    ticks: int = Field(1, ge=1, le=1000)


class FaultRequest(BaseModel):
    reason: Optional[str] = None


DEFAULT_CONFIG = BuildingConfig(
    number_of_floors=10,
    number_of_elevators=3,
    max_elevator_capacity=8,
    default_starting_floor=1,
)


def with_defaults(config: BuildingConfig) -> BuildingConfig:
    """Fill unset values from ``DEFAULT_CONFIG``; the server never prompts."""
    return replace(
        config,
        **{name: getattr(DEFAULT_CONFIG, name) for name in config.missing_settings()},
    )


class SimulationManager:
    """Owns one building; every mutation goes through a single lock."""

    def __init__(self, config: Optional[BuildingConfig] = None) -> None:
        config = with_defaults(config or BuildingConfig())
        if not config.starting_floor_in_range():
            raise ValueError(
                f"Starting floor {config.default_starting_floor} is outside floors 1-{config.number_of_floors}"
            )
        floors = FloorFactory(config).create_floors()
        elevators = ElevatorFactory(config).create_elevators()
        self.building = Building(scheduler_name=config.scheduler, random_seed=config.random_seed)
        self.building.initialise(elevators, floors)
        self.clients: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    def current_state(self) -> dict:
        return self.building.snapshot()

    async def request_elevator(self, floor: int, direction: Direction, people: int) -> dict:
        async with self._lock:
            elevator = self.building.request_elevator(floor, direction, people)
            state = self.current_state()
        state["assigned_elevator"] = elevator.elevator_id if elevator else None
        return state

    async def step(self, ticks: int) -> dict:
        async with self._lock:
            for _ in range(ticks):
                self.building.step_simulation()
            payload = self.current_state()
        await self.broadcast(payload)
        return payload

    async def fault(self, elevator_id: int, reason: Optional[str]) -> dict:
        async with self._lock:
            elevator = self.building.fault_elevator(elevator_id, reason)
            if elevator is None:
                raise KeyError(elevator_id)
            state = self.current_state()
        state["elevator_id"] = elevator_id
        state["reason"] = reason
        return state

    def status_lines(self) -> List[str]:
        return self.building.status_lines()

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()


def create_app(manager: SimulationManager) -> FastAPI:
    app = FastAPI(title="LiftCore Simulation API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.manager = manager

    @app.get("/state")
    async def get_state() -> dict:
        return manager.current_state()

    @app.get("/status")
    async def get_status() -> dict:
        return {"lines": manager.status_lines()}

    @app.post("/calls")
    async def request_elevator(request: CallRequest) -> dict:
        if not request.direction.is_travel:
            raise HTTPException(status_code=400, detail="Call direction must be Up or Down.")
        return await manager.request_elevator(request.floor, request.direction, request.people)

    @app.post("/step")
    async def step(request: StepRequest) -> dict:
        return await manager.step(request.ticks)

    @app.post("/elevators/{elevator_id}/fault")
    async def fault_elevator(elevator_id: int, request: FaultRequest) -> dict:
        try:
            return await manager.fault(elevator_id, request.reason)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown elevator {elevator_id}")

    @app.websocket("/ws/stream")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await manager.register(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            await manager.unregister(websocket)

    return app


manager = SimulationManager(load_config(os.environ.get("LIFTCORE_CONFIG")))
app = create_app(manager)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
