"""Result containers, enums and per-call counters for the analysis algorithms."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from schedgraph.errors import NoPathError, VertexRangeError

_E = TypeVar("_E", bound="_ParsableEnum")


class _ParsableEnum(IntEnum):
    @classmethod
    def from_string(cls: Type[_E], value: str) -> _E:
        """Parse a case-insensitive member name.

        Raises:
            ValueError: If the string doesn't match any member.
        """
        try:
            return cls[value.upper()]
        except KeyError:
            valid = ", ".join(e.name.lower() for e in cls)
            raise ValueError(
                f"Invalid {cls.__name__} '{value}'. Valid values are: {valid}"
            ) from None

    @classmethod
    def coerce(cls: Type[_E], value: Any) -> _E:
        """Accept a member, its integer value, or its name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        return cls(value)


class TopoMethod(_ParsableEnum):
    """Strategy used to compute a topological order."""

    #: In-degree driven FIFO processing.
    KAHN = 1
    #: Depth-first search with reversed completion order.
    DFS = 2


class PathMode(_ParsableEnum):
    """Which relaxation produced a `PathResult`."""

    SHORTEST = 1
    LONGEST = 2
    #: Longest path ending at each vertex, starting from any vertex.
    CRITICAL = 3


class WeightPolicy(_ParsableEnum):
    """How parallel inter-component edges are weighted in a condensation."""

    #: Weight of the first original edge encountered.
    FIRST = 1
    MIN = 2
    MAX = 3


@dataclass
class Metrics:
    """Operation counters and elapsed time for one algorithm call.

    Attributes:
        elapsed_ns: Wall-clock time spent inside the timed region.
        dfs_visits: Vertices discovered by a depth-first traversal.
        edges_explored: Edges examined.
        relaxations: Successful distance updates.
        pushes: Vertices enqueued (Kahn).
        pops: Vertices dequeued (Kahn).
    """

    elapsed_ns: int = 0
    dfs_visits: int = 0
    edges_explored: int = 0
    relaxations: int = 0
    pushes: int = 0
    pops: int = 0

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0

    @contextmanager
    def timed(self) -> Iterator[Metrics]:
        """Add the wall-clock time of the ``with`` body to ``elapsed_ns``."""
        start = time.perf_counter_ns()
        try:
            yield self
        finally:
            self.elapsed_ns += time.perf_counter_ns() - start

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["elapsed_ms"] = self.elapsed_ms
        return data

    def __str__(self) -> str:
        return (
            f"Metrics(time={self.elapsed_ms:.3f}ms, dfs_visits={self.dfs_visits}, "
            f"edges={self.edges_explored}, relaxations={self.relaxations}, "
            f"pushes={self.pushes}, pops={self.pops})"
        )


@dataclass
class SCCResult:
    """Strongly connected components of a graph.

    Attributes:
        components: Member lists in emission order. Within a component the
            members are in stack-pop order, so the component root is last.
        membership: ``membership[v]`` is the index of the component holding ``v``.
        metrics: Counters for the decomposition.
    """

    components: List[List[int]]
    membership: List[int]
    metrics: Metrics = field(default_factory=Metrics)

    def __len__(self) -> int:
        return len(self.components)

    def __iter__(self) -> Iterator[List[int]]:
        return iter(self.components)

    def __getitem__(self, idx: int) -> List[int]:
        return self.components[idx]

    def component_of(self, vertex: int) -> int:
        if not 0 <= vertex < len(self.membership):
            raise VertexRangeError(vertex, len(self.membership))
        return self.membership[vertex]

    def sizes(self) -> List[int]:
        return [len(c) for c in self.components]

    def nontrivial(self) -> List[List[int]]:
        """Components with more than one member (the actual cycles)."""
        return [c for c in self.components if len(c) > 1]


@dataclass
class OrderResult:
    """A topological order and the counters collected while computing it."""

    order: List[int]
    method: TopoMethod
    metrics: Metrics = field(default_factory=Metrics)

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self) -> Iterator[int]:
        return iter(self.order)

    def __getitem__(self, idx: int) -> int:
        return self.order[idx]

    def positions(self) -> Dict[int, int]:
        """Map each vertex to its position in the order."""
        return {v: i for i, v in enumerate(self.order)}


@dataclass
class PathResult:
    """Distances and predecessor links from one DAG relaxation pass.

    ``None`` in ``distances`` means the vertex was never reached; ``None`` in
    ``parents`` means the vertex has no predecessor (the source itself, a
    path start in critical mode, or an unreached vertex).

    Attributes:
        distances: Accumulated weight per vertex, or None when unreached.
        parents: Predecessor per vertex, or None.
        source: Source vertex; None for critical-path mode.
        mode: Relaxation that produced the result.
        metrics: Counters for the relaxation pass.
    """

    distances: List[Optional[int]]
    parents: List[Optional[int]]
    source: Optional[int]
    mode: PathMode
    metrics: Metrics = field(default_factory=Metrics)

    def reachable(self, vertex: int) -> bool:
        self._check(vertex)
        return self.distances[vertex] is not None

    def path_to(self, target: int) -> Optional[List[int]]:
        """Return the vertex sequence ending at ``target``, or None if unreached.

        Parents are followed back to the vertex without a predecessor and the
        walk is reversed, so the path starts at the source (or, in critical
        mode, at the start of the heaviest chain ending at ``target``).
        """
        self._check(target)
        if self.distances[target] is None:
            return None

        path: List[int] = []
        current: Optional[int] = target
        while current is not None:
            path.append(current)
            current = self.parents[current]
        path.reverse()
        return path

    def require_path(self, target: int) -> List[int]:
        """Like `path_to` but raise `NoPathError` when ``target`` is unreached."""
        path = self.path_to(target)
        if path is None:
            raise NoPathError(target)
        return path

    @property
    def endpoint(self) -> Optional[int]:
        """Reached vertex with the largest distance; lowest id wins ties.

        For critical-path results this is the end of the critical path.
        """
        best: Optional[int] = None
        best_dist: Optional[int] = None
        for v, dist in enumerate(self.distances):
            if dist is None:
                continue
            if best_dist is None or dist > best_dist:
                best, best_dist = v, dist
        return best

    @property
    def length(self) -> Optional[int]:
        """Distance at `endpoint`, or None for an empty result."""
        end = self.endpoint
        return None if end is None else self.distances[end]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.name.lower(),
            "source": self.source,
            "distances": list(self.distances),
            "parents": list(self.parents),
            "metrics": self.metrics.to_dict(),
        }

    def _check(self, vertex: int) -> None:
        if not 0 <= vertex < len(self.distances):
            raise VertexRangeError(vertex, len(self.distances), "target")
