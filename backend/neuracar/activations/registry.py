"""Activation registry: named scalar functions applied at computed nodes."""
from typing import Callable

ActivationFn = Callable[[float], float]

FALLBACK_ACTIVATION = "identity"


class ActivationRegistry:
    """Registry mapping activation names to pure ``float -> float`` functions.

    Unknown names resolve to the identity function, so a node carrying a
    label the registry does not know still evaluates.
    """

    _functions: dict[str, ActivationFn] = {}

    @classmethod
    def register(cls, name: str | None = None):
        """Decorator to register an activation function.

        Usage:
            @ActivationRegistry.register()
            def sigmoid(x): ...

            @ActivationRegistry.register("softmax")
            def softmax_placeholder(x): ...
        """
        def decorator(fn: ActivationFn) -> ActivationFn:
            cls._functions[name or fn.__name__] = fn
            return fn
        return decorator

    @classmethod
    def get(cls, name: str | None) -> ActivationFn:
        if name in cls._functions:
            return cls._functions[name]
        return cls._functions[FALLBACK_ACTIVATION]

    @classmethod
    def apply(cls, name: str | None, x: float) -> float:
        return cls.get(name)(x)

    @classmethod
    def is_known(cls, name: str | None) -> bool:
        return name in cls._functions

    @classmethod
    def names(cls) -> list[str]:
        return list(cls._functions)
