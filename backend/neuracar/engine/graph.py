"""Graph data structures for the evaluation engine."""
import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


class NodeRole(str, Enum):
    INPUT = "input"
    HIDDEN = "hidden"
    OUTPUT = "output"


@dataclass
class Connection:
    source_id: str
    target_id: str
    weight: float


@dataclass
class Node:
    """A network node.

    Input nodes carry no bias or activation; their value is supplied from
    outside on every evaluation. Hidden and output nodes compute
    ``activation(bias + sum(weight * source_output))``.
    """
    id: str
    role: NodeRole
    x: float = 0.0
    y: float = 0.0
    bias: float | None = None
    activation: str | None = None
    connections: list[Connection] = field(default_factory=list)

    @property
    def is_input(self) -> bool:
        return self.role == NodeRole.INPUT

    @property
    def is_removable(self) -> bool:
        return self.role == NodeRole.HIDDEN

    @classmethod
    def input(cls, node_id: str, x: float = 0.0, y: float = 0.0) -> "Node":
        return cls(id=node_id, role=NodeRole.INPUT, x=x, y=y)

    @classmethod
    def computed(
        cls,
        node_id: str,
        role: NodeRole = NodeRole.HIDDEN,
        activation: str = "sigmoid",
        bias: float = 0.0,
        x: float = 0.0,
        y: float = 0.0,
    ) -> "Node":
        return cls(id=node_id, role=role, x=x, y=y, bias=bias, activation=activation)

    def connect(self, target_id: str, weight: float) -> "Node":
        self.connections.append(Connection(self.id, target_id, weight))
        return self


class Graph:
    """Committed node set with its outgoing connection lists.

    The graph keeps its own deep copy of whatever it is given, and the only
    way to change it is a whole replacement through ``set_graph``.
    """

    def __init__(self, nodes: Iterable[Node] = ()):
        self._nodes: tuple[Node, ...] = ()
        self.set_graph(nodes)

    def set_graph(self, nodes: Iterable[Node]) -> None:
        self._nodes = tuple(copy.deepcopy(list(nodes)))

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    def clone(self) -> list[Node]:
        return copy.deepcopy(list(self._nodes))

    def get(self, node_id: str) -> Node | None:
        found = None
        for node in self._nodes:
            if node.id == node_id:
                found = node  # last write wins on duplicate ids
        return found

    def connections(self) -> list[tuple[str, Connection]]:
        """Every connection in declaration order, keyed by a render id."""
        result: list[tuple[str, Connection]] = []
        for node in self._nodes:
            for index, conn in enumerate(node.connections):
                result.append((f"{node.id}-{conn.target_id}-{index}", conn))
        return result

    def __contains__(self, node_id: object) -> bool:
        return any(node.id == node_id for node in self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)
