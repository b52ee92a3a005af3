"""
Engine Errors
=============

Exception taxonomy for the path engine.

Every error derives from PathEngineError and from the builtin exception
that best describes the caller mistake, so callers may catch either.
Unreachable targets are not errors: they produce an empty path.
"""

from typing import Optional


class PathEngineError(Exception):
    """Base class for all path engine failures."""


class InvalidInputError(PathEngineError, ValueError):
    """A required collection is missing or unusable."""

    def __init__(self, message: str, argument: Optional[str] = None):
        super().__init__(message)
        self.argument = argument


class VertexNotFoundError(PathEngineError, LookupError):
    """A query names a vertex id absent from the current graph."""

    def __init__(self, vertex_id: int):
        super().__init__(f"Vertex {vertex_id} not found")
        self.vertex_id = vertex_id


class InvalidQueryError(PathEngineError, ValueError):
    """Start and end vertex of a shortest-path query coincide."""

    def __init__(self, vertex_id: int):
        super().__init__(f"Start and end vertex coincide: {vertex_id}")
        self.vertex_id = vertex_id


class BrokenRouteError(PathEngineError, LookupError):
    """A route contains a consecutive vertex pair with no edge between them."""

    def __init__(self, start_id: int, end_id: int):
        super().__init__(f"Edge between vertices {start_id} and {end_id} not found")
        self.start_id = start_id
        self.end_id = end_id


class EngineNotInitializedError(PathEngineError, RuntimeError):
    """A query was issued before initialize() published a graph."""

    def __init__(self):
        super().__init__("No graph loaded. Call initialize() first.")
