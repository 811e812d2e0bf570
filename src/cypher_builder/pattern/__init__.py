"""Graph pattern store and the fluent pattern builder over it."""

from .builder import GraphPatternBuilder, NodeContext, PatternContext, RelationshipContext
from .decoding import Direction
from .store import ChunkKind, GraphPatternStore, IntentMode, Node, Relationship

__all__ = [
    "ChunkKind",
    "Direction",
    "GraphPatternBuilder",
    "GraphPatternStore",
    "IntentMode",
    "Node",
    "NodeContext",
    "PatternContext",
    "Relationship",
    "RelationshipContext",
]
