"""Network-driven control: sensor readings in, steering decisions out."""
from dataclasses import asdict, dataclass
from typing import Mapping

from ..engine.defaults import LEFT, RIGHT
from ..engine.executor import EvaluationResult
from ..engine.store import EvaluationStore


@dataclass
class PlayerActions:
    forward: bool = False
    backward: bool = False
    left: bool = False
    right: bool = False

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


def _pressed(states: EvaluationResult, node_id: str, threshold: float) -> bool:
    state = states.get(node_id)
    # An unevaluated output (cycle, deleted node) means "do nothing"
    return state is not None and state.output_value > threshold


def decide_actions(states: EvaluationResult, threshold: float = 0.5) -> PlayerActions:
    """The network always drives forward and only steers."""
    return PlayerActions(
        forward=True,
        backward=False,
        left=_pressed(states, LEFT, threshold),
        right=_pressed(states, RIGHT, threshold),
    )


class AgentBridge:
    """Connects the car simulation tick to the evaluation store."""

    def __init__(self, store: EvaluationStore, threshold: float = 0.5):
        self.store = store
        self.threshold = threshold

    def tick(self, observations: Mapping[str, float]) -> PlayerActions:
        states = self.store.set_observations(observations)
        return decide_actions(states, self.threshold)

    def actions(self) -> PlayerActions:
        return decide_actions(self.store.states, self.threshold)
