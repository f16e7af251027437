"""Shared test fixtures for NeuraCar backend tests."""
import sys
from pathlib import Path

import pytest

# Ensure neuracar package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from neuracar.engine.defaults import default_nodes
from neuracar.engine.graph import Node, NodeRole


@pytest.fixture
def default_network():
    """The bootstrap 3-2-2 network."""
    return default_nodes()


@pytest.fixture
def zero_observations():
    return {"ForwardHit": 0.0, "RightHit": 0.0, "LeftHit": 0.0}


@pytest.fixture
def chain_network():
    """in -> h1 -> h2 -> out, identity activations."""
    return [
        Node.input("in").connect("h1", 2.0),
        Node.computed("h1", activation="identity", bias=1.0).connect("h2", 3.0),
        Node.computed("h2", activation="identity", bias=0.5).connect("out", 1.0),
        Node.computed("out", NodeRole.OUTPUT, activation="identity", bias=0.0),
    ]


@pytest.fixture
def cyclic_network():
    """in -> a <-> b -> out, plus an unrelated in -> c branch."""
    return [
        Node.input("in").connect("a", 1.0).connect("c", 1.0),
        Node.computed("a", activation="identity").connect("b", 1.0),
        Node.computed("b", activation="identity").connect("a", 1.0).connect("out", 1.0),
        Node.computed("c", activation="identity", bias=0.25),
        Node.computed("out", NodeRole.OUTPUT, activation="step"),
    ]
