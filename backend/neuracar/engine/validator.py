"""Graph diagnostics: cycles, dangling connections, unknown activations.

Nothing here blocks evaluation. The evaluator already degrades on every
anomaly listed; these messages only tell the editor why a node shows no value.
"""
from collections import Counter
from typing import Sequence

from ..activations import ActivationRegistry
from .executor import topological_order
from .graph import Node


def validate_graph(nodes: Sequence[Node]) -> list[str]:
    """Return a list of diagnostic messages (empty = clean)."""
    errors: list[str] = []
    errors.extend(_check_duplicate_ids(nodes))
    errors.extend(_check_cycles(nodes))
    errors.extend(_check_connections(nodes))
    errors.extend(_check_activations(nodes))
    return errors


def _check_duplicate_ids(nodes: Sequence[Node]) -> list[str]:
    counts = Counter(n.id for n in nodes)
    return [
        f"Node id '{nid}' declared {count} times; the last declaration is used"
        for nid, count in counts.items() if count > 1
    ]


def _check_cycles(nodes: Sequence[Node]) -> list[str]:
    resolved = set(topological_order(nodes))
    unresolved = []
    for node in nodes:
        if node.id not in resolved and node.id not in unresolved:
            unresolved.append(node.id)
    if not unresolved:
        return []
    return [f"Graph contains a cycle; unevaluated nodes: {', '.join(unresolved)}"]


def _check_connections(nodes: Sequence[Node]) -> list[str]:
    errors: list[str] = []
    by_id = {n.id: n for n in nodes}
    for node in nodes:
        for index, conn in enumerate(node.connections):
            edge_id = f"{node.id}-{conn.target_id}-{index}"
            target = by_id.get(conn.target_id)
            if target is None:
                errors.append(f"Connection {edge_id} references missing node '{conn.target_id}'")
            elif target.is_input:
                errors.append(f"Connection {edge_id} targets input node '{target.id}' and is ignored")
    return errors


def _check_activations(nodes: Sequence[Node]) -> list[str]:
    return [
        f"Node '{n.id}': unknown activation '{n.activation}', using identity"
        for n in nodes
        if not n.is_input and not ActivationRegistry.is_known(n.activation)
    ]
