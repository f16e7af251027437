"""Pydantic schemas for API request/response models."""
from pydantic import BaseModel

from ..engine.graph import Connection, Node, NodeRole


class ConnectionSchema(BaseModel):
    source_id: str
    target_id: str
    weight: float


class NodeSchema(BaseModel):
    id: str
    role: NodeRole
    x: float = 0.0
    y: float = 0.0
    bias: float | None = None
    activation: str | None = None
    connections: list[ConnectionSchema] = []

    def to_node(self) -> Node:
        computed = self.role != NodeRole.INPUT
        return Node(
            id=self.id, role=self.role, x=self.x, y=self.y,
            bias=(self.bias or 0.0) if computed else None,
            activation=(self.activation or "sigmoid") if computed else None,
            connections=[
                # Connections live on their source node
                Connection(self.id, c.target_id, c.weight) for c in self.connections
            ],
        )

    @classmethod
    def from_node(cls, node: Node) -> "NodeSchema":
        return cls(
            id=node.id, role=node.role, x=node.x, y=node.y,
            bias=node.bias, activation=node.activation,
            connections=[
                ConnectionSchema(source_id=c.source_id, target_id=c.target_id, weight=c.weight)
                for c in node.connections
            ],
        )


class NetworkSchema(BaseModel):
    nodes: list[NodeSchema]


class EdgeSchema(BaseModel):
    id: str
    source_id: str
    target_id: str
    weight: float


class NodeStateSchema(BaseModel):
    # null when the value overflowed or is NaN
    input_value: float | None
    output_value: float | None


class ActionsSchema(BaseModel):
    forward: bool
    backward: bool
    left: bool
    right: bool


class NetworkResponse(BaseModel):
    revision: int
    nodes: list[NodeSchema]
    edges: list[EdgeSchema]
    states: dict[str, NodeStateSchema]


class NodeCreateRequest(BaseModel):
    id: str | None = None
    role: NodeRole = NodeRole.HIDDEN
    x: float = 450.0
    y: float = 300.0
    bias: float = 0.0
    activation: str | None = None


class NodeUpdateRequest(BaseModel):
    bias: float | None = None
    bias_delta: float | None = None
    # Signed wheel ticks, each worth settings.nudge_step
    bias_steps: int | None = None
    activation: str | None = None
    x: float | None = None
    y: float | None = None


class ConnectionCreateRequest(BaseModel):
    source_id: str
    target_id: str
    weight: float | None = None


class ConnectionUpdateRequest(BaseModel):
    weight: float | None = None
    delta: float | None = None
    steps: int | None = None


class ObservationRequest(BaseModel):
    observations: dict[str, float]


class ObservationResponse(BaseModel):
    revision: int
    states: dict[str, NodeStateSchema]
    actions: ActionsSchema


class DiagnosticsResponse(BaseModel):
    errors: list[str]
