"""Module name resolution for build-graph construction."""

from .graph_builder import BuildGraphResult
from .graph_builder import GraphBuilder
from .name_resolution import NamespacedNameResolver
from .name_resolution import NameResolver
from .name_resolution import SimpleNameResolver

__all__ = [
    "BuildGraphResult",
    "GraphBuilder",
    "NameResolver",
    "NamespacedNameResolver",
    "SimpleNameResolver",
]
