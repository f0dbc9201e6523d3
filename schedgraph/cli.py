"""Command-line interface for schedgraph."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

import jsonschema

from schedgraph.algorithms.topo import has_cycle
from schedgraph.algorithms.types import Metrics, TopoMethod, WeightPolicy
from schedgraph.config import DEFAULT_CONFIG
from schedgraph.errors import SchedGraphError
from schedgraph.generate import DEFAULT_SEED, generate_datasets
from schedgraph.io import GraphDocument, load_graph_file
from schedgraph.logging import get_logger, set_verbosity
from schedgraph.pipeline import ScheduleAnalysis, analyze

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 6,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers.
        rows: Data rows.
        min_width: Minimum column width.
        max_col_width: Clip cells longer than this with an ASCII ellipsis.

    Returns:
        Formatted table string, or an empty string when there are no rows.
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = [
        max(max(len(row[i]) for row in all_data), min_width)
        for i in range(len(clipped_headers))
    ]

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in clipped_rows)
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _plural(n: int, singular: str, plural: Optional[str] = None) -> str:
    """Return the singular or plural unit for count ``n``."""
    if n == 1:
        return singular
    return plural or (singular + "s")


def _format_metrics(metrics: Metrics) -> str:
    return f"   Metrics: {metrics}"


def _print_analysis(doc: GraphDocument, result: ScheduleAnalysis, path: Path) -> None:
    """Print the step-by-step text report for one analysis."""
    graph = result.graph
    n_sccs = len(result.scc)
    cyclic = len(result.scc.nontrivial())

    print("\n=== Task Graph Analysis ===")
    print(f"File: {path}")
    vertices = _plural(graph.vertex_count, "vertex", "vertices")
    kind = "directed" if graph.directed else "undirected"
    print(
        f"Graph: {graph.vertex_count} {vertices}, "
        f"{graph.edge_count} {_plural(graph.edge_count, 'edge')} ({kind})"
    )
    print(f"Weight model: {doc.weight_model}")
    if doc.description:
        print(f"Description: {doc.description}")

    print("\n=== Step 1: Strongly Connected Components ===")
    print(f"Found {n_sccs} {_plural(n_sccs, 'SCC')} ({cyclic} cyclic)")
    table = _format_table(
        ["SCC", "Size", "Members"],
        [[i, len(c), c] for i, c in enumerate(result.scc.components)],
        max_col_width=60,
    )
    if table:
        print(table)
    print(_format_metrics(result.scc.metrics))

    print("\n=== Step 2: Condensation DAG ===")
    cond = result.condensation
    print(
        f"Condensation graph has {cond.vertex_count} "
        f"{_plural(cond.vertex_count, 'vertex', 'vertices')} and "
        f"{cond.edge_count} {_plural(cond.edge_count, 'edge')} "
        f"(weight policy: {result.config.weight_policy.name.lower()})"
    )

    print(
        f"\n=== Step 3: Topological Ordering "
        f"({result.scc_order.method.name.lower()}) ==="
    )
    print(f"SCC order: {result.scc_order.order}")
    print(f"Task execution order: {result.task_order}")
    print(_format_metrics(result.scc_order.metrics))

    shortest = result.shortest
    if shortest is not None:
        print(
            f"\n=== Step 4: Shortest Paths from SCC {result.source_component} "
            f"(task {result.source}) ==="
        )
        rows = [
            [c, shortest.distances[c], shortest.path_to(c)]
            for c in cond.vertices()
            if shortest.reachable(c)
        ]
        print(_format_table(["SCC", "Distance", "Path"], rows, max_col_width=60))
        print(_format_metrics(shortest.metrics))

    print("\n=== Step 5: Critical Path ===")
    print(f"Critical path length: {result.critical_length}")
    print(f"Critical path (SCCs): {result.critical_path}")
    print(f"Critical path (tasks): {result.critical_tasks}")
    print(_format_metrics(result.critical.metrics))


def _run_analyze(
    path: Path,
    method: Optional[str] = None,
    weight_policy: Optional[str] = None,
    source: Optional[int] = None,
    as_json: bool = False,
    output: Optional[Path] = None,
) -> None:
    """Load a graph file, run the pipeline and report the results.

    Args:
        path: Graph document (.json/.yaml/.yml).
        method: Topological ordering strategy name.
        weight_policy: Condensation weight policy name.
        source: Source task; overrides the document's ``source``.
        as_json: Print the JSON summary instead of the text report.
        output: Also write the JSON summary to this file.
    """
    logger.info(f"Loading graph from: {path}")
    _start_time = perf_counter()

    try:
        doc = load_graph_file(path)
        config = DEFAULT_CONFIG.with_overrides(
            topo_method=method, weight_policy=weight_policy
        )
        effective_source = source if source is not None else doc.source
        result = analyze(doc.graph, source=effective_source, config=config)

        payload = result.to_dict()
        payload["weight_model"] = doc.weight_model
        if output is not None:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
            logger.info(f"Analysis written to: {output}")

        if as_json:
            print(json.dumps(payload, indent=2))
        else:
            _print_analysis(doc, result, path)
            if output is not None:
                print(f"\n✅ Results written to: {output}")

        _elapsed = perf_counter() - _start_time
        logger.info(f"Analysis completed in {_format_duration(_elapsed)}")

    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"❌ ERROR: Graph file not found: {path}")
        sys.exit(1)
    except jsonschema.ValidationError as e:
        logger.error(f"Invalid graph document: {e.message}")
        print(f"❌ ERROR: Invalid graph document: {e.message}")
        sys.exit(1)
    except (SchedGraphError, ValueError) as e:
        logger.error(f"Failed to analyze graph: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to analyze graph: {type(e).__name__}: {e}")
        sys.exit(1)


def _inspect_graph(path: Path) -> None:
    """Validate a graph file and print a short structural summary."""
    try:
        doc = load_graph_file(path)
    except FileNotFoundError:
        logger.error(f"Graph file not found: {path}")
        print(f"❌ ERROR: Graph file not found: {path}")
        sys.exit(1)
    except jsonschema.ValidationError as e:
        logger.error(f"Invalid graph document: {e.message}")
        print(f"❌ ERROR: Invalid graph document: {e.message}")
        sys.exit(1)
    except (SchedGraphError, ValueError) as e:
        logger.error(f"Failed to load graph: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to load graph: {type(e).__name__}: {e}")
        sys.exit(1)

    graph = doc.graph
    in_deg = graph.in_degrees()
    out_deg = [len(graph.out_edges_of(v)) for v in graph.vertices()]
    rows = [
        ["Vertices", graph.vertex_count],
        ["Edges", graph.edge_count],
        ["Directed", graph.directed],
        ["Weight model", doc.weight_model],
        ["Source", doc.source if doc.source is not None else "-"],
        ["Roots (in-degree 0)", sum(1 for d in in_deg if d == 0)],
        ["Sinks (out-degree 0)", sum(1 for d in out_deg if d == 0)],
        ["Acyclic", not has_cycle(graph)],
    ]
    print(f"\n✅ Graph file is valid: {path}")
    if doc.description:
        print(f"Description: {doc.description}")
    print(_format_table(["Property", "Value"], rows))


def _run_generate(output_dir: Path, seed: int) -> None:
    try:
        paths = generate_datasets(output_dir, seed=seed)
    except OSError as e:
        logger.error(f"Failed to write datasets: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to write datasets: {type(e).__name__}: {e}")
        sys.exit(1)
    print(f"✅ Generated {len(paths)} {_plural(len(paths), 'dataset')} in {output_dir}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``schedgraph`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="schedgraph",
        description="Analyze task dependency graphs for scheduling.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{analyze,inspect,generate}",
        help="Available commands",
    )

    analyze_parser = subparsers.add_parser(
        "analyze", help="Run SCC, ordering and path analysis on a graph file"
    )
    analyze_parser.add_argument("graph", type=Path, help="Path to graph JSON/YAML")
    analyze_parser.add_argument(
        "--method",
        "-m",
        choices=[m.name.lower() for m in TopoMethod],
        default=None,
        help="Topological ordering strategy (default: kahn)",
    )
    analyze_parser.add_argument(
        "--weight-policy",
        choices=[p.name.lower() for p in WeightPolicy],
        default=None,
        help="Weight kept for merged inter-SCC edges (default: first)",
    )
    analyze_parser.add_argument(
        "--source",
        "-s",
        type=int,
        default=None,
        help="Source task for shortest paths (default: the file's 'source' or 0)",
    )
    analyze_parser.add_argument(
        "--json", action="store_true", help="Print results as JSON"
    )
    analyze_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Also write the JSON results to this file",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate a graph file and summarize its structure"
    )
    inspect_parser.add_argument("graph", type=Path, help="Path to graph JSON/YAML")

    generate_parser = subparsers.add_parser(
        "generate", help="Write the synthetic benchmark datasets"
    )
    generate_parser.add_argument(
        "output_dir", type=Path, help="Directory to write the dataset files into"
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        default=DEFAULT_SEED,
        help=f"Master random seed (default: {DEFAULT_SEED})",
    )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if set_verbosity(args.verbose, args.quiet) == logging.DEBUG:
        logger.debug("Debug logging enabled")

    if args.command == "analyze":
        _run_analyze(
            path=args.graph,
            method=args.method,
            weight_policy=args.weight_policy,
            source=args.source,
            as_json=args.json,
            output=args.output,
        )
    elif args.command == "inspect":
        _inspect_graph(args.graph)
    elif args.command == "generate":
        _run_generate(args.output_dir, args.seed)


if __name__ == "__main__":
    main()
