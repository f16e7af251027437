"""REST API routes."""
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request

from ..activations import ActivationRegistry
from ..agent.controller import AgentBridge
from ..config import settings
from ..engine import editing
from ..engine.editing import NodeIdAllocator
from ..engine.executor import EvaluationResult
from ..engine.graph import Node, NodeRole
from ..engine.store import EvaluationStore
from ..engine.validator import validate_graph
from ..models.schemas import (
    ActionsSchema, ConnectionCreateRequest, ConnectionUpdateRequest,
    DiagnosticsResponse, EdgeSchema, NetworkResponse, NetworkSchema,
    NodeCreateRequest, NodeSchema, NodeStateSchema, NodeUpdateRequest,
    ObservationRequest, ObservationResponse,
)
from .websocket import broadcaster

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _store(request: Request) -> EvaluationStore:
    return request.app.state.store


def _allocator(request: Request) -> NodeIdAllocator:
    return request.app.state.allocator


def _bridge(request: Request) -> AgentBridge:
    return request.app.state.agent


def _encode_states(states: EvaluationResult) -> dict[str, dict[str, float | None]]:
    return {nid: s.to_dict() for nid, s in states.items()}


def _network_response(store: EvaluationStore) -> NetworkResponse:
    return NetworkResponse(
        revision=store.revision,
        nodes=[NodeSchema.from_node(n) for n in store.graph.nodes],
        edges=[
            EdgeSchema(id=edge_id, source_id=c.source_id, target_id=c.target_id, weight=c.weight)
            for edge_id, c in store.graph.connections()
        ],
        states={nid: NodeStateSchema(**s) for nid, s in _encode_states(store.states).items()},
    )


def _update_message(response: NetworkResponse | ObservationResponse) -> dict[str, Any]:
    return {
        "type": "network_update",
        "revision": response.revision,
        "states": {nid: s.model_dump() for nid, s in response.states.items()},
    }


async def _publish(response: NetworkResponse | ObservationResponse):
    """Push a response built before any await, so it describes one commit."""
    await broadcaster.broadcast(_update_message(response))
    return response


async def _commit(request: Request, nodes: list[Node]) -> NetworkResponse:
    store = _store(request)
    store.replace_graph(nodes)
    _allocator(request).reserve(n.id for n in store.graph.nodes)
    return await _publish(_network_response(store))


def _require_node(store: EvaluationStore, node_id: str) -> Node:
    node = store.graph.get(node_id)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Node '{node_id}' not found")
    return node


@router.get("/activations")
async def list_activations():
    """Return the registered activation names."""
    return {"activations": ActivationRegistry.names()}


@router.get("/network", response_model=NetworkResponse)
async def get_network(request: Request):
    return _network_response(_store(request))


@router.put("/network", response_model=NetworkResponse)
async def replace_network(request: Request, network: NetworkSchema):
    """Replace the whole network with the submitted nodes."""
    return await _commit(request, [n.to_node() for n in network.nodes])


@router.post("/network/reset", response_model=NetworkResponse)
async def reset_network(request: Request):
    store = _store(request)
    store.reset()
    _allocator(request).reserve(n.id for n in store.graph.nodes)
    return await _publish(_network_response(store))


@router.post("/nodes", response_model=NetworkResponse)
async def create_node(request: Request, body: NodeCreateRequest):
    store = _store(request)
    allocator = _allocator(request)
    if body.id is None:
        node_id = allocator.allocate(settings.new_node_prefix)
    elif allocator.is_used(body.id):
        raise HTTPException(status_code=409, detail=f"Node id '{body.id}' already used")
    else:
        node_id = body.id
        allocator.reserve([node_id])

    if body.role == NodeRole.INPUT:
        node = Node.input(node_id, x=body.x, y=body.y)
    else:
        node = Node.computed(
            node_id, body.role,
            activation=body.activation or settings.new_node_activation,
            bias=body.bias, x=body.x, y=body.y,
        )
    return await _commit(request, editing.add_node(store.graph.nodes, node))


@router.patch("/nodes/{node_id}", response_model=NetworkResponse)
async def update_node(request: Request, node_id: str, body: NodeUpdateRequest):
    store = _store(request)
    node = _require_node(store, node_id)
    nodes = store.nodes
    if body.bias_delta is not None:
        nodes = editing.adjust_bias(nodes, node_id, body.bias_delta)
    if body.bias_steps is not None:
        nodes = editing.adjust_bias(nodes, node_id, body.bias_steps * settings.nudge_step)
    position = None
    if body.x is not None or body.y is not None:
        position = (
            node.x if body.x is None else body.x,
            node.y if body.y is None else body.y,
        )
    nodes = editing.update_node(
        nodes, node_id, bias=body.bias, activation=body.activation, position=position,
    )
    return await _commit(request, nodes)


@router.delete("/nodes/{node_id}", response_model=NetworkResponse)
async def delete_node(request: Request, node_id: str):
    store = _store(request)
    node = _require_node(store, node_id)
    if not node.is_removable:
        raise HTTPException(
            status_code=409, detail=f"{node.role.value} node '{node_id}' cannot be deleted",
        )
    return await _commit(request, editing.remove_nodes(store.graph.nodes, [node_id]))


@router.post("/connections", response_model=NetworkResponse)
async def create_connection(request: Request, body: ConnectionCreateRequest):
    store = _store(request)
    _require_node(store, body.source_id)
    weight = settings.default_weight if body.weight is None else body.weight
    return await _commit(
        request, editing.add_connection(store.graph.nodes, body.source_id, body.target_id, weight),
    )


@router.patch("/connections/{source_id}/{target_id}", response_model=NetworkResponse)
async def update_connection(
    request: Request, source_id: str, target_id: str, body: ConnectionUpdateRequest,
):
    store = _store(request)
    source = _require_node(store, source_id)
    if not any(c.target_id == target_id for c in source.connections):
        raise HTTPException(status_code=404, detail=f"Connection {source_id}-{target_id} not found")
    if body.weight is not None:
        nodes = editing.set_weight(store.graph.nodes, source_id, target_id, body.weight)
    elif body.delta is not None:
        nodes = editing.adjust_weight(store.graph.nodes, source_id, target_id, body.delta)
    elif body.steps is not None:
        nodes = editing.adjust_weight(
            store.graph.nodes, source_id, target_id, body.steps * settings.nudge_step,
        )
    else:
        raise HTTPException(status_code=400, detail="One of weight, delta or steps is required")
    return await _commit(request, nodes)


@router.delete("/connections/{source_id}/{target_id}", response_model=NetworkResponse)
async def delete_connection(
    request: Request, source_id: str, target_id: str,
    index: int | None = Query(None, ge=0),
):
    store = _store(request)
    _require_node(store, source_id)
    return await _commit(
        request, editing.remove_connection(store.graph.nodes, source_id, target_id, index),
    )


@router.get("/states")
async def get_states(request: Request) -> dict[str, Any]:
    store = _store(request)
    return {
        "revision": store.revision,
        "states": _encode_states(store.states),
    }


@router.put("/observations", response_model=ObservationResponse)
async def set_observations(request: Request, body: ObservationRequest):
    """Agent tick: submit sensor readings, get the steering decision back."""
    store = _store(request)
    actions = _bridge(request).tick(body.observations)
    response = ObservationResponse(
        revision=store.revision,
        states={nid: NodeStateSchema(**s) for nid, s in _encode_states(store.states).items()},
        actions=ActionsSchema(**actions.to_dict()),
    )
    return await _publish(response)


@router.get("/actions", response_model=ActionsSchema)
async def get_actions(request: Request):
    return ActionsSchema(**_bridge(request).actions().to_dict())


@router.get("/diagnostics", response_model=DiagnosticsResponse)
async def get_diagnostics(request: Request):
    errors = validate_graph(_store(request).graph.nodes)
    if errors:
        logger.debug("Network diagnostics: %s", errors)
    return DiagnosticsResponse(errors=errors)
