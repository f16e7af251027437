"""Evaluation engine: one topological forward pass over the network."""
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Mapping

from ..activations import ActivationRegistry
from .graph import Connection, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeState:
    input_value: float   # bias + weighted sum, before activation
    output_value: float  # after activation

    def to_dict(self) -> dict[str, float | None]:
        """JSON-safe form; overflowed or NaN values become None."""
        return {
            "input_value": _finite_or_none(self.input_value),
            "output_value": _finite_or_none(self.output_value),
        }


def _finite_or_none(value: float) -> float | None:
    return value if math.isfinite(value) else None


EvaluationResult = dict[str, NodeState]


@dataclass
class _Adjacency:
    nodes: dict[str, Node]
    in_degree: dict[str, int]
    incoming: dict[str, list[Connection]]
    outgoing: dict[str, list[str]]


def _build_adjacency(nodes: Iterable[Node]) -> _Adjacency:
    node_by_id: dict[str, Node] = {}
    for node in nodes:
        # Last write wins; the id keeps its first declaration position
        node_by_id[node.id] = node

    in_degree: dict[str, int] = {nid: 0 for nid in node_by_id}
    incoming: dict[str, list[Connection]] = {nid: [] for nid in node_by_id}
    outgoing: dict[str, list[str]] = {nid: [] for nid in node_by_id}
    for node in node_by_id.values():
        for conn in node.connections:
            target = node_by_id.get(conn.target_id)
            # Dangling targets are inert; inputs ignore incoming edges
            if target is None or target.is_input:
                continue
            in_degree[target.id] += 1
            # The owning node is the source, whatever conn.source_id says
            incoming[target.id].append(Connection(node.id, target.id, conn.weight))
            outgoing[node.id].append(target.id)
    return _Adjacency(node_by_id, in_degree, incoming, outgoing)


def _kahn(adj: _Adjacency) -> Iterable[str]:
    """Kahn's algorithm yielding node IDs in evaluation order.

    Nodes on or downstream of a cycle never reach in-degree 0 and are
    never yielded.
    """
    in_degree = dict(adj.in_degree)
    queue = deque(nid for nid, deg in in_degree.items() if deg == 0)
    while queue:
        node_id = queue.popleft()
        yield node_id
        for succ in adj.outgoing[node_id]:
            in_degree[succ] -= 1
            if in_degree[succ] == 0:
                queue.append(succ)


def topological_order(nodes: Iterable[Node]) -> list[str]:
    """Evaluation order of every node that can be resolved."""
    return list(_kahn(_build_adjacency(nodes)))


def evaluate_network(
    nodes: Iterable[Node],
    observations: Mapping[str, float] | None = None,
) -> EvaluationResult:
    """Evaluate every resolvable node, return {node_id: NodeState}.

    Input nodes take their value from ``observations`` (0.0 when absent).
    Nodes that cannot be ordered because of a cycle are left out of the
    result rather than reported as an error.
    """
    observations = observations or {}
    adj = _build_adjacency(nodes)
    results: EvaluationResult = {}

    for node_id in _kahn(adj):
        node = adj.nodes[node_id]
        if node.is_input:
            value = float(observations.get(node_id, 0.0))
            results[node_id] = NodeState(value, value)
            continue

        input_sum = node.bias or 0.0
        for conn in adj.incoming[node_id]:
            input_sum += conn.weight * results[conn.source_id].output_value
        output = ActivationRegistry.apply(node.activation, input_sum)
        results[node_id] = NodeState(input_sum, output)

    unresolved = len(adj.nodes) - len(results)
    if unresolved:
        logger.debug(
            "%d of %d nodes left unevaluated (cycle)", unresolved, len(adj.nodes)
        )
    return results
