from .loader import load_graph_directory, load_graphs
from .model import DEFAULT_PORT, Connection, Node, NodeCategory, ScriptGraph
from .validator import IncompleteNode, ValidationReport, validate_graph

__all__ = [
    "DEFAULT_PORT",
    "Connection",
    "IncompleteNode",
    "Node",
    "NodeCategory",
    "ScriptGraph",
    "ValidationReport",
    "load_graph_directory",
    "load_graphs",
    "validate_graph",
]
