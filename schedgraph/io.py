"""Reading and writing task graph documents.

A graph document is a mapping of the form::

    {
      "directed": true,
      "n": 4,
      "edges": [{"u": 0, "v": 1, "w": 3}, ...],
      "source": 0,
      "weight_model": "edge",
      "description": "optional free text"
    }

Documents are validated against the packaged JSON schema
``schedgraph/schemas/graph.json`` before conversion. Integer and boolean
fields may also be given as strings (``"6"``, ``"true"``), which older
generated datasets use. ``weight_model`` and ``description`` are carried for
display only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema
import yaml

from schedgraph.errors import VertexRangeError
from schedgraph.graph.task_graph import TaskGraph
from schedgraph.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WEIGHT_MODEL = "edge"
DEFAULT_EDGE_WEIGHT = 1

_TRUE_STRINGS = {"true", "yes", "1"}
_FALSE_STRINGS = {"false", "no", "0"}


@dataclass
class GraphDocument:
    """A task graph together with the metadata stored next to it.

    Attributes:
        graph: The task graph.
        source: Source task for path analysis, if the document names one.
        weight_model: Free-text description of what edge weights mean.
        description: Optional human-readable description.
    """

    graph: TaskGraph
    source: Optional[int] = None
    weight_model: str = DEFAULT_WEIGHT_MODEL
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return graph_to_document(
            self.graph,
            source=self.source,
            weight_model=self.weight_model,
            description=self.description,
        )


@lru_cache(maxsize=1)
def _graph_schema() -> Dict[str, Any]:
    with (
        resources.files("schedgraph")
        .joinpath("schemas/graph.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Field '{field}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(
                f"Field '{field}' must be an integer, got {value!r}"
            ) from None
    raise ValueError(f"Field '{field}' must be an integer, got {value!r}")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"Field '{field}' must be a boolean, got {value!r}")


def load_graph_document(data: Dict[str, Any]) -> GraphDocument:
    """Validate a graph document mapping and build the `TaskGraph`.

    Args:
        data: Parsed JSON or YAML mapping.

    Returns:
        GraphDocument with the graph and its metadata.

    Raises:
        jsonschema.ValidationError: If the mapping does not match the schema.
        ValueError: If a field cannot be coerced, or ``n`` is negative.
        VertexRangeError: If an edge endpoint or the source is out of range.
    """
    if not isinstance(data, dict):
        raise ValueError("A graph document must be a mapping at top-level.")
    jsonschema.validate(data, _graph_schema())

    n = _as_int(data["n"], "n")
    if n < 0:
        raise ValueError(f"Field 'n' must be non-negative, got {n}")
    directed = _as_bool(data.get("directed", True), "directed")
    graph = TaskGraph(n, directed=directed)

    for idx, edge in enumerate(data["edges"]):
        u = _as_int(edge["u"], f"edges[{idx}].u")
        v = _as_int(edge["v"], f"edges[{idx}].v")
        w = _as_int(edge.get("w", DEFAULT_EDGE_WEIGHT), f"edges[{idx}].w")
        graph.add_edge(u, v, w)

    source: Optional[int] = None
    if data.get("source") is not None:
        source = _as_int(data["source"], "source")
        if not 0 <= source < n:
            raise VertexRangeError(source, n, "source")

    doc = GraphDocument(
        graph=graph,
        source=source,
        weight_model=data.get("weight_model", DEFAULT_WEIGHT_MODEL),
        description=data.get("description"),
    )
    logger.debug(
        f"Loaded graph document: n={n}, edges={len(data['edges'])}, "
        f"directed={directed}, source={source}"
    )
    return doc


def load_graph_file(path: Union[str, Path]) -> GraphDocument:
    """Load a graph document from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: For unsupported suffixes or invalid content.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = json.loads(text)
    elif suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text)
        if data is None:
            data = {}
    else:
        raise ValueError(
            f"Unsupported graph file type '{path.suffix}'; use .json, .yaml or .yml"
        )
    return load_graph_document(data)


def graph_to_document(
    graph: TaskGraph,
    source: Optional[int] = None,
    weight_model: str = DEFAULT_WEIGHT_MODEL,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the graph document for ``graph``.

    Mirrored edges of undirected graphs are not written; loading the document
    recreates them.
    """
    doc: Dict[str, Any] = {
        "directed": graph.directed,
        "n": graph.vertex_count,
        "edges": [
            {"u": e.source, "v": e.target, "w": e.weight} for e in graph.input_edges()
        ],
    }
    if source is not None:
        doc["source"] = source
    doc["weight_model"] = weight_model
    if description is not None:
        doc["description"] = description
    return doc


def dump_graph_file(document: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Write a graph document as JSON (indent 2) or YAML depending on suffix.

    Parent directories are created as needed.

    Returns:
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        text = yaml.safe_dump(document, sort_keys=False)
    elif suffix == ".json":
        text = json.dumps(document, indent=2) + "\n"
    else:
        raise ValueError(
            f"Unsupported graph file type '{path.suffix}'; use .json, .yaml or .yml"
        )
    path.write_text(text, encoding="utf-8")
    return path
