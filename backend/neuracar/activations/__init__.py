"""Register the built-in activation functions on import."""
from .registry import ActivationRegistry
from . import basic  # noqa: F401

__all__ = ["ActivationRegistry"]
