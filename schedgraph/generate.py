"""Synthetic task graph datasets.

Each dataset starts from a connected backbone and is then padded with random
extra edges until it reaches its target edge count:

- DAG datasets link every vertex ``i`` to a random later vertex and orient
  all extra edges from lower to higher id, so they stay acyclic.
- Cyclic datasets chain a shuffled permutation of the vertices and add a
  back edge every few steps, creating small strongly connected groups.

Ordered vertex pairs are never repeated and self-loops are never generated.
Edge weights are uniform integers in ``1..10``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple, Union

from schedgraph.io import DEFAULT_WEIGHT_MODEL, dump_graph_file
from schedgraph.logging import get_logger
from schedgraph.seed_manager import SeedManager

logger = get_logger(__name__)

MIN_WEIGHT = 1
MAX_WEIGHT = 10
DEFAULT_SEED = 42


@dataclass(frozen=True)
class DatasetSpec:
    """Shape of one generated dataset."""

    name: str
    n: int
    target_edges: int
    allow_cycles: bool
    description: str


DEFAULT_DATASETS: Tuple[DatasetSpec, ...] = (
    DatasetSpec("small_dag_1", 6, 7, False, "Small DAG"),
    DatasetSpec("small_cyclic_1", 8, 12, True, "Small with cycles"),
    DatasetSpec("small_dag_2", 10, 15, False, "Small sparse DAG"),
    DatasetSpec("medium_mixed_1", 12, 20, True, "Medium mixed"),
    DatasetSpec("medium_dag_1", 15, 25, False, "Medium DAG"),
    DatasetSpec("medium_dense_1", 18, 45, True, "Medium dense with SCCs"),
    DatasetSpec("large_sparse_1", 25, 40, False, "Large sparse DAG"),
    DatasetSpec("large_cyclic_1", 35, 80, True, "Large with multiple SCCs"),
    DatasetSpec("large_dense_1", 50, 150, True, "Large dense"),
)


class _EdgeCollector:
    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._seen: Set[Tuple[int, int]] = set()
        self.edges: List[Dict[str, int]] = []

    def add(self, u: int, v: int) -> None:
        if (u, v) in self._seen:
            return
        self._seen.add((u, v))
        self.edges.append(
            {"u": u, "v": v, "w": self._rng.randint(MIN_WEIGHT, MAX_WEIGHT)}
        )


def generate_document(spec: DatasetSpec, rng: random.Random) -> Dict[str, Any]:
    """Generate one graph document for ``spec`` using ``rng``.

    Returns:
        Graph document mapping (see `schedgraph.io`) with ``source`` 0.
    """
    n = spec.n
    collector = _EdgeCollector(rng)

    if spec.allow_cycles:
        perm = list(range(n))
        rng.shuffle(perm)
        group_size = min(4, n // 2)
        for i in range(n - 1):
            collector.add(perm[i], perm[i + 1])
            if group_size and i > 0 and i % group_size == group_size - 1:
                collector.add(perm[i], perm[i - group_size + 1])
    else:
        for i in range(n - 1):
            collector.add(i, rng.randrange(i + 1, n))

    attempts = 0
    max_attempts = spec.target_edges * 10 if n > 1 else 0
    while len(collector.edges) < spec.target_edges and attempts < max_attempts:
        attempts += 1
        u = rng.randrange(n)
        v = rng.randrange(n)
        if u == v:
            continue
        if not spec.allow_cycles and u > v:
            u, v = v, u
        collector.add(u, v)

    return {
        "directed": True,
        "n": n,
        "edges": collector.edges,
        "source": 0,
        "weight_model": DEFAULT_WEIGHT_MODEL,
        "description": spec.description,
    }


def generate_datasets(
    output_dir: Union[str, Path],
    seed: Optional[int] = DEFAULT_SEED,
    specs: Optional[Sequence[DatasetSpec]] = None,
) -> List[Path]:
    """Write one ``<name>.json`` graph document per spec into ``output_dir``.

    Each dataset draws from its own random state derived from ``seed`` and
    the dataset name, so a dataset's content does not depend on which other
    datasets are generated.

    Returns:
        Paths of the written files, in spec order.
    """
    out = Path(output_dir)
    seeds = SeedManager(seed)
    written: List[Path] = []
    for spec in specs if specs is not None else DEFAULT_DATASETS:
        rng = seeds.create_random_state("dataset", spec.name)
        document = generate_document(spec, rng)
        path = dump_graph_file(document, out / f"{spec.name}.json")
        logger.info(
            f"Generated {path.name}: {spec.description}, "
            f"{spec.n} nodes, {len(document['edges'])} edges"
        )
        written.append(path)
    return written
