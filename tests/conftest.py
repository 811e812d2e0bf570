"""Shared fixtures for the cypher_builder test suite."""

import logfire
import pytest

from cypher_builder.expressions import ParameterStack
from cypher_builder.pattern.store import GraphPatternStore
from cypher_builder.structure import QueryStructure

# Spans created by the execution context stay in-process
logfire.configure(send_to_logfire=False, console=False)


def _normalize(cypher: str) -> str:
    return " ".join(cypher.split())


@pytest.fixture
def normalize():
    """Collapse whitespace so multi-line expectations compare with compiled text."""
    return _normalize


@pytest.fixture
def store():
    return GraphPatternStore()


@pytest.fixture
def parameters():
    return ParameterStack()


@pytest.fixture
def structure(parameters, store):
    """Structure matching ``(n:Node)`` with ``n`` as entry."""
    node = store.add_matching_node("Node", "n")
    return QueryStructure(parameters, store, node.name)
