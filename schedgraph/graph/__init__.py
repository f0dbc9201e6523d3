"""Graph primitives and helpers.

This package provides the dense-id weighted multigraph `TaskGraph` and a
conversion module (`convert`) for exchanging graphs with plain NetworkX.
"""

from schedgraph.graph.task_graph import Edge, TaskGraph

__all__ = ["Edge", "TaskGraph"]
