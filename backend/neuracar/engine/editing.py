"""Clone-edit helpers for the editor surface.

Each helper takes the current node sequence and returns a new list with one
edit applied; its argument is never touched. The result is meant to be
submitted whole with ``EvaluationStore.replace_graph``.
"""
import copy
from typing import Iterable, Sequence

from .graph import Connection, Node


def clone_nodes(nodes: Iterable[Node]) -> list[Node]:
    return copy.deepcopy(list(nodes))


def _find(nodes: list[Node], node_id: str) -> Node | None:
    found = None
    for node in nodes:
        if node.id == node_id:
            found = node
    return found


def add_node(nodes: Iterable[Node], node: Node) -> list[Node]:
    return clone_nodes(nodes) + [copy.deepcopy(node)]


def remove_nodes(nodes: Iterable[Node], node_ids: Iterable[str]) -> list[Node]:
    """Drop hidden nodes and every connection pointing at them.

    Input and output nodes are never removed here; their ids are ignored.
    """
    updated = clone_nodes(nodes)
    requested = set(node_ids)
    removed = {n.id for n in updated if n.id in requested and n.is_removable}
    updated = [n for n in updated if n.id not in removed]
    for node in updated:
        node.connections = [c for c in node.connections if c.target_id not in removed]
    return updated


def add_connection(
    nodes: Iterable[Node], source_id: str, target_id: str, weight: float = 1.0,
) -> list[Node]:
    """Append ``source -> target``. A missing target is stored as-is."""
    updated = clone_nodes(nodes)
    source = _find(updated, source_id)
    if source is not None:
        source.connections.append(Connection(source_id, target_id, weight))
    return updated


def remove_connection(
    nodes: Iterable[Node], source_id: str, target_id: str, index: int | None = None,
) -> list[Node]:
    """Remove every ``source -> target`` connection, or just the one at ``index``
    in the source's outgoing list."""
    updated = clone_nodes(nodes)
    source = _find(updated, source_id)
    if source is None:
        return updated
    source.connections = [
        c for i, c in enumerate(source.connections)
        if not (c.target_id == target_id and (index is None or i == index))
    ]
    return updated


def _matching_connections(nodes: list[Node], source_id: str, target_id: str) -> list[Connection]:
    source = _find(nodes, source_id)
    if source is None:
        return []
    return [c for c in source.connections if c.target_id == target_id]


def adjust_weight(
    nodes: Iterable[Node], source_id: str, target_id: str, delta: float,
) -> list[Node]:
    """Nudge every parallel ``source -> target`` connection by ``delta``."""
    updated = clone_nodes(nodes)
    for conn in _matching_connections(updated, source_id, target_id):
        conn.weight += delta
    return updated


def set_weight(
    nodes: Iterable[Node], source_id: str, target_id: str, weight: float,
) -> list[Node]:
    updated = clone_nodes(nodes)
    for conn in _matching_connections(updated, source_id, target_id):
        conn.weight = weight
    return updated


def adjust_bias(nodes: Iterable[Node], node_id: str, delta: float) -> list[Node]:
    updated = clone_nodes(nodes)
    node = _find(updated, node_id)
    if node is not None and not node.is_input:
        node.bias = (node.bias or 0.0) + delta
    return updated


def update_node(
    nodes: Iterable[Node],
    node_id: str,
    *,
    bias: float | None = None,
    activation: str | None = None,
    position: tuple[float, float] | None = None,
) -> list[Node]:
    """Set node fields. Bias and activation are ignored on input nodes."""
    updated = clone_nodes(nodes)
    node = _find(updated, node_id)
    if node is None:
        return updated
    if not node.is_input:
        if bias is not None:
            node.bias = bias
        if activation is not None:
            node.activation = activation
    if position is not None:
        node.x, node.y = position
    return updated


class NodeIdAllocator:
    """Hands out node ids that are never reused within a session.

    Every id the allocator has seen, whether issued or present in a graph
    it was shown, stays reserved after the node is deleted.
    """

    def __init__(self, existing: Sequence[str] = ()):
        self._used: set[str] = set(existing)
        self._counter = len(self._used)

    def reserve(self, node_ids: Iterable[str]) -> None:
        self._used.update(node_ids)

    def is_used(self, node_id: str) -> bool:
        return node_id in self._used

    def allocate(self, prefix: str = "Hidden") -> str:
        while f"{prefix}{self._counter}" in self._used:
            self._counter += 1
        node_id = f"{prefix}{self._counter}"
        self._used.add(node_id)
        return node_id
