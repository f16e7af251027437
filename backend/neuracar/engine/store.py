"""Evaluation store: the committed network, observations and latest result."""
import logging
from typing import Callable, Iterable, Mapping

from .defaults import default_nodes
from .executor import EvaluationResult, NodeState, evaluate_network
from .graph import Graph, Node

logger = logging.getLogger(__name__)

Listener = Callable[[EvaluationResult], None]
Evaluator = Callable[[Iterable[Node], Mapping[str, float]], EvaluationResult]


class EvaluationStore:
    """Single owner of the network state.

    Every public mutation replaces the graph or the observation vector
    whole, then re-evaluates before returning. A failed evaluation keeps
    the previous result in place; it is logged and never raised.
    """

    def __init__(
        self,
        nodes: Iterable[Node] | None = None,
        observations: Mapping[str, float] | None = None,
        evaluator: Evaluator = evaluate_network,
    ):
        self._graph = Graph(default_nodes() if nodes is None else nodes)
        self._observations: dict[str, float] = dict(observations or {})
        self._states: EvaluationResult = {}
        self._evaluator = evaluator
        self._listeners: list[Listener] = []
        self._revision = 0
        self._recalculate()

    # -- mutations ---------------------------------------------------------

    def replace_graph(self, nodes: Iterable[Node]) -> EvaluationResult:
        self._graph.set_graph(nodes)
        return self._recalculate()

    def set_observations(self, observations: Mapping[str, float]) -> EvaluationResult:
        self._observations = dict(observations)
        return self._recalculate()

    def reset(self) -> EvaluationResult:
        """Restore the default network."""
        return self.replace_graph(default_nodes())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # -- queries -----------------------------------------------------------

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def nodes(self) -> list[Node]:
        """Editable copy of the committed nodes."""
        return self._graph.clone()

    @property
    def observations(self) -> dict[str, float]:
        return dict(self._observations)

    @property
    def states(self) -> EvaluationResult:
        return dict(self._states)

    @property
    def revision(self) -> int:
        """Number of commits applied so far."""
        return self._revision

    def state(self, node_id: str) -> NodeState | None:
        return self._states.get(node_id)

    def output_value(self, node_id: str, default: float = 0.0) -> float:
        state = self._states.get(node_id)
        return default if state is None else state.output_value

    # -- internals ---------------------------------------------------------

    def _recalculate(self) -> EvaluationResult:
        self._revision += 1
        try:
            states = self._evaluator(self._graph.nodes, self._observations)
        except Exception:
            logger.exception(
                "Error processing neural network (revision %d), keeping previous outputs",
                self._revision,
            )
            return self.states

        self._states = states
        logger.debug(
            "Revision %d evaluated %d/%d nodes",
            self._revision, len(states), len(self._graph),
        )
        for listener in list(self._listeners):
            try:
                listener(self.states)
            except Exception:
                logger.exception("Network listener %r failed", listener)
        return self.states
