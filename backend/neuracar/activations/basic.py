"""Built-in activation functions."""
import math

from .registry import ActivationRegistry

# exp overflows a double just above 709
_EXP_LIMIT = 500.0


@ActivationRegistry.register()
def identity(x: float) -> float:
    return x


@ActivationRegistry.register()
def sigmoid(x: float) -> float:
    z = min(max(x, -_EXP_LIMIT), _EXP_LIMIT)  # to prevent overflow in exp
    return 1.0 / (1.0 + math.exp(-z))


@ActivationRegistry.register()
def step(x: float) -> float:
    return 1.0 if x > 0.5 else 0.0


# Per-node placeholder: a node only ever sees its own scalar, never the
# sibling group a real softmax would normalize over.
ActivationRegistry.register("softmax")(identity)
