"""FastAPI application with CORS, lifespan, and routes."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .agent.controller import AgentBridge
from .api.routes import router
from .api.websocket import broadcaster
from .engine.editing import NodeIdAllocator
from .engine.store import EvaluationStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level.upper())
    # One store per process, shared by the editor routes and the agent
    store = EvaluationStore()
    app.state.store = store
    app.state.allocator = NodeIdAllocator([n.id for n in store.graph.nodes])
    app.state.agent = AgentBridge(store, settings.action_threshold)
    yield


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.websocket("/ws/network")
async def websocket_endpoint(websocket: WebSocket):
    await broadcaster.connect(websocket)
    try:
        while True:
            # Keep connection alive, handle any client messages
            await websocket.receive_text()
    except WebSocketDisconnect:
        broadcaster.disconnect(websocket)
