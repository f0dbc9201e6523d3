"""Exception types raised by schedgraph.

Three families exist:

- ``StructuralError``: the graph shape makes the request impossible, e.g. a
  topological order was requested for a cyclic graph.
- ``PreconditionViolation``: the caller passed inconsistent input such as an
  out-of-range vertex id or an order that does not match the graph. It also
  derives from ``ValueError`` so generic callers can catch it as such.
- ``NoPathError``: only raised by the strict path accessor; the regular path
  reconstruction returns ``None`` for unreachable targets.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from schedgraph.algorithms.types import Metrics


class SchedGraphError(Exception):
    """Base class for all schedgraph errors."""


class StructuralError(SchedGraphError):
    """The graph structure does not admit the requested result."""


class CycleDetectedError(StructuralError):
    """A cycle was found where an acyclic graph was required.

    Attributes:
        remaining: Vertices involved. For Kahn's algorithm these are the
            vertices that were never emitted; for the DFS strategy it is the
            cycle itself, in traversal order.
        metrics: Counters collected up to the point of detection.
    """

    def __init__(
        self,
        remaining: Sequence[int],
        metrics: Optional["Metrics"] = None,
        method: str = "kahn",
    ) -> None:
        self.remaining: List[int] = list(remaining)
        self.metrics = metrics
        self.method = method
        super().__init__(
            f"Cycle detected ({method}): {len(self.remaining)} vertex(es) "
            f"involved in circular dependencies"
        )


class PreconditionViolation(SchedGraphError, ValueError):
    """Caller-supplied input is inconsistent with the graph."""


class VertexRangeError(PreconditionViolation):
    """A vertex id lies outside ``0..n-1``."""

    def __init__(self, vertex: object, vertex_count: int, role: str = "vertex") -> None:
        self.vertex = vertex
        self.vertex_count = vertex_count
        super().__init__(
            f"{role.capitalize()} {vertex!r} out of range for graph with "
            f"{vertex_count} vertices"
        )


class OrderMismatchError(PreconditionViolation):
    """An order or component partition does not match the graph it is used with."""


class NoPathError(SchedGraphError, LookupError):
    """A path was strictly required to a vertex that was never reached."""

    def __init__(self, target: int) -> None:
        self.target = target
        super().__init__(f"No path to vertex {target}")
