#!/usr/bin/env python3
"""
PathEngine Micro-benchmark Harness.

Benchmarks `PathEngine.find_route()` on deterministic synthetic grid graphs
to make the quadratic cost of linear-scan vertex selection visible.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
import json
import random
import statistics
import time
from typing import Any

from graphroute.core import EngineSettings, GraphEdge, GraphVertex, PathEngine


@dataclass(frozen=True)
class ScenarioConfig:
    """Benchmark scenario configuration."""

    grid_size: int
    warmup_runs: int
    measured_runs: int
    seed: int


def build_synthetic_graph(grid_size: int, seed: int) -> tuple[list[GraphVertex], list[GraphEdge]]:
    """
    Build a deterministic grid graph.

    Vertices sit on integer coordinates; edge lengths are jittered so that
    shortest paths are unique in practice.
    """
    rng = random.Random(seed)
    vertices = [
        GraphVertex(id=row * grid_size + col, x=float(col), y=float(row))
        for row in range(grid_size)
        for col in range(grid_size)
    ]

    edges: list[GraphEdge] = []
    for row in range(grid_size):
        for col in range(grid_size):
            node = row * grid_size + col
            neighbours = []
            if col < grid_size - 1:
                neighbours.append(node + 1)
            if row < grid_size - 1:
                neighbours.append(node + grid_size)
            for other in neighbours:
                edges.append(GraphEdge(
                    id=len(edges),
                    start_vertex_id=node,
                    end_vertex_id=other,
                    length=100.0 * rng.uniform(0.9, 1.1),
                ))

    return vertices, edges


def p95(values: list[float]) -> float:
    """95th percentile, interpolated between the two nearest samples."""
    if len(values) < 2:
        return values[0] if values else 0.0
    return statistics.quantiles(values, n=20, method="inclusive")[-1]


def run_scenario(config: ScenarioConfig) -> dict[str, Any]:
    """Run one benchmark scenario and return structured metrics."""
    vertices, edges = build_synthetic_graph(config.grid_size, config.seed)

    engine = PathEngine(settings=EngineSettings(verbose=False))
    started = time.perf_counter()
    engine.initialize(vertices, edges)
    initialize_ms = (time.perf_counter() - started) * 1000.0

    # opposite corners force the search to settle almost every vertex
    start_id = 0
    end_id = config.grid_size * config.grid_size - 1

    for _ in range(config.warmup_runs):
        engine.find_route(start_id, end_id)

    latencies_ms: list[float] = []
    route = None
    for _ in range(config.measured_runs):
        started = time.perf_counter()
        route = engine.find_route(start_id, end_id)
        latencies_ms.append((time.perf_counter() - started) * 1000.0)

    return {
        "scenario": {
            "grid_size": config.grid_size,
            "seed": config.seed,
            "warmup_runs": config.warmup_runs,
            "measured_runs": config.measured_runs,
        },
        "graph": {
            "vertices": engine.vertex_count,
            "edges": engine.edge_count,
        },
        "initialize_ms": initialize_ms,
        "latency_ms": {
            "min": min(latencies_ms),
            "max": max(latencies_ms),
            "mean": statistics.mean(latencies_ms),
            "median": statistics.median(latencies_ms),
            "p95": p95(latencies_ms),
        },
        "route": {
            "hops": len(route.edge_ids) if route else 0,
            "length": route.length if route else 0.0,
        },
    }


def print_human_summary(result: dict[str, Any]) -> None:
    """Print compact human-readable summary for CLI runs."""
    scenario = result["scenario"]
    graph = result["graph"]
    latency = result["latency_ms"]

    print(
        f"[Scenario] grid={scenario['grid_size']}x{scenario['grid_size']}, "
        f"runs={scenario['measured_runs']}"
    )
    print(f"  Graph: vertices={graph['vertices']}, edges={graph['edges']}, "
          f"initialize={result['initialize_ms']:.2f} ms")
    print(
        "  Latency(ms): "
        f"mean={latency['mean']:.2f}, median={latency['median']:.2f}, p95={latency['p95']:.2f}, "
        f"min={latency['min']:.2f}, max={latency['max']:.2f}"
    )
    print(f"  Route: hops={result['route']['hops']}, length={result['route']['length']:.1f}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark PathEngine shortest-path queries.")
    parser.add_argument("--grid-sizes", nargs="+", type=int, default=[10, 20, 40],
                        help="grid sizes; N gives N*N vertices")
    parser.add_argument("--warmup-runs", type=int, default=1)
    parser.add_argument("--runs", type=int, default=5)
    parser.add_argument("--seed", type=int, default=7, help="seed for the edge length jitter")
    parser.add_argument("--output", default="", help="write JSON results to this path")
    args = parser.parse_args()

    results = []
    for grid_size in args.grid_sizes:
        result = run_scenario(ScenarioConfig(
            grid_size=grid_size,
            warmup_runs=args.warmup_runs,
            measured_runs=args.runs,
            seed=args.seed,
        ))
        results.append(result)
        print_human_summary(result)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as handle:
            json.dump({"benchmark": "path_engine_microbench", "results": results}, handle, indent=2)
        print(f"[Output] wrote JSON results to {args.output}")


if __name__ == "__main__":
    main()
