"""
FastAPI adapter: control routes and the live particle push channel.

This layer is a thin wrapper. Every route delegates to SimulationService,
and the websocket endpoint only registers a subscriber handle with the
BroadcastScheduler and waits for the client to go away.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, WebSocket
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel, Field

from orbsim.analysis import compute_diagnostics
from orbsim.codec import encode_snapshot
from orbsim.config import BROADCAST_PERIOD, FORCE_LAW, SIMULATION_DT, WEB_HOST, WEB_PORT
from orbsim.core.forces import create_force_law
from orbsim.core.integrator import IntegratorConfig
from orbsim.core.particle import InvalidParticleError, Particle
from orbsim.core.scheduler import BroadcastScheduler, SchedulerConfig
from orbsim.core.service import SimulationService
from orbsim.core.store import ParticleIndexError
from orbsim.logging_config import setup_logging

logger = logging.getLogger(__name__)


class ParticleRequest(BaseModel):
    """Body of POST /simulation/add."""

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    mass: float = Field(1.0, gt=0)


class WebSocketSubscriber:
    """
    Subscriber handle for one websocket connection.

    send() is called from the scheduler thread; it schedules the write on
    the connection's event loop and returns immediately.
    """

    def __init__(self, websocket: WebSocket, loop: asyncio.AbstractEventLoop):
        self.websocket = websocket
        self.loop = loop

    def send(self, payload: str) -> None:
        future = asyncio.run_coroutine_threadsafe(self.websocket.send_text(payload), self.loop)
        future.add_done_callback(self._on_sent)

    def _on_sent(self, future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("Websocket send failed for %r: %s", self, exc)

    def __repr__(self) -> str:
        client = self.websocket.client
        peer = f"{client.host}:{client.port}" if client else "unknown"
        return f"WebSocketSubscriber({peer}, id={id(self):#x})"


def create_service() -> SimulationService:
    """Build a SimulationService from environment settings."""
    return SimulationService(
        force_law=create_force_law(FORCE_LAW),
        integrator_config=IntegratorConfig(dt=SIMULATION_DT),
    )


def create_app(
    service: Optional[SimulationService] = None,
    scheduler: Optional[BroadcastScheduler] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Simulation to expose (built from settings if None)
        scheduler: Broadcast driver (built around `service` if None)
    """
    if service is None:
        service = scheduler.service if scheduler is not None else create_service()
    if scheduler is None:
        scheduler = BroadcastScheduler(service, SchedulerConfig(period=BROADCAST_PERIOD))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Simulation server starting (force law: %s)", service.force_law.name)
        yield
        logger.info("Simulation server shutting down")
        scheduler.shutdown()

    app = FastAPI(title="orbsim", lifespan=lifespan)
    app.state.service = service
    app.state.scheduler = scheduler

    @app.post("/simulation/add")
    def add_particle(request: ParticleRequest):
        try:
            particle = Particle(**request.model_dump())
        except InvalidParticleError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        index = service.add_particle(particle)
        return {"message": "Particle added successfully", "index": index}

    @app.delete("/simulation/remove/{index}")
    def remove_particle(index: int):
        try:
            service.remove_particle(index)
        except ParticleIndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return {"message": "Particle removed successfully"}

    @app.get("/simulation/particles/{index}")
    def get_particle(index: int):
        try:
            return service.get_particle(index).to_dict()
        except ParticleIndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc))

    @app.post("/simulation/start/{num_particles}")
    def start_simulation(num_particles: int):
        try:
            service.start(num_particles)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        return {"message": f"Simulation started with {num_particles} particles."}

    @app.post("/simulation/toggle")
    def toggle_simulation():
        running = service.toggle()
        state = "Running" if running else "Paused"
        return {"message": f"Simulation is now: {state}", "running": running}

    @app.post("/simulation/reset")
    def reset_simulation():
        service.reset()
        return {"message": "Simulation reset successfully"}

    @app.get("/simulation/state")
    def simulation_state():
        return Response(content=encode_snapshot(service.snapshot()), media_type="application/json")

    @app.get("/simulation/stats")
    def simulation_stats():
        stats = compute_diagnostics(service.snapshot()).to_dict()
        stats["running"] = service.running
        stats["subscribers"] = scheduler.subscriber_count
        return stats

    @app.websocket("/ws/particles")
    async def particle_stream(websocket: WebSocket):
        await websocket.accept()
        handle = WebSocketSubscriber(websocket, asyncio.get_running_loop())
        # subscribe/unsubscribe take the simulation lock; keep that wait off the event loop
        await run_in_threadpool(scheduler.subscribe, handle)
        try:
            # Send-only channel: inbound frames are drained and ignored
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            await run_in_threadpool(scheduler.unsubscribe, handle)

    return app


def main() -> None:
    """Run the simulation server."""
    setup_logging()
    uvicorn.run(create_app(), host=WEB_HOST, port=WEB_PORT)


if __name__ == "__main__":
    main()
