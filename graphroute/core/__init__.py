"""
graphroute Core: Shortest-Path Graph Engine
===========================================

This package provides an in-memory engine that ingests a vertex/edge
description of a planar graph and answers shortest-path queries.

Public API:
- PathEngine: The main engine class
- GraphVertex / GraphEdge / Point2D: Input value records
- RouteResult: Path plus derived edge ids and length
- EngineSettings: Runtime configuration
- edge_length / build_edge: Polyline length helpers for callers
"""

from graphroute.core.schema import Point2D, GraphVertex, GraphEdge
from graphroute.core.errors import (
    PathEngineError,
    InvalidInputError,
    VertexNotFoundError,
    InvalidQueryError,
    BrokenRouteError,
    EngineNotInitializedError,
)
from graphroute.core.settings import EngineSettings
from graphroute.core.geometry import polyline_length, edge_length, build_edge
from graphroute.core.engine import PathEngine, GraphSnapshot, RouteResult

__all__ = [
    "PathEngine",
    "GraphSnapshot",
    "RouteResult",
    "Point2D",
    "GraphVertex",
    "GraphEdge",
    "EngineSettings",
    "polyline_length",
    "edge_length",
    "build_edge",
    "PathEngineError",
    "InvalidInputError",
    "VertexNotFoundError",
    "InvalidQueryError",
    "BrokenRouteError",
    "EngineNotInitializedError",
]
