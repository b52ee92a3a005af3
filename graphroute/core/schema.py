"""
Graph Schema
============

Plain value records exchanged with the path engine.

These schemas carry no drawing or persistence concerns. The caller
extracts them from whatever host application owns the geometry and
hands them to PathEngine.initialize().

Records:
- Point2D: a 2D position (used for edge break points)
- GraphVertex: a uniquely identified graph node with a position
- GraphEdge: a uniquely identified undirected, weighted connection
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Point2D(BaseModel):
    """A position in the drawing plane."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


class GraphVertex(BaseModel):
    """
    A graph vertex.

    Identity is the ``id`` alone: two vertices with the same id compare
    equal and hash equally regardless of their coordinates. Coordinates
    are carried through for the caller and never read by the routing
    algorithm.

    Examples
    --------
    >>> GraphVertex(id=1, x=0.0, y=0.0) == GraphVertex(id=1, x=5.0, y=5.0)
    True
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=INT64_MIN, le=INT64_MAX)
    """Unique vertex identifier, stable for the lifetime of a graph."""

    x: float
    y: float

    @property
    def point(self) -> Point2D:
        """Position of the vertex as a Point2D."""
        return Point2D(x=self.x, y=self.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphVertex):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"GraphVertex(id={self.id}, x={self.x}, y={self.y})"


class GraphEdge(BaseModel):
    """
    An undirected edge between two vertices.

    ``length`` is the traversal weight and must be a finite, non-negative
    number. It is precomputed by the caller (see
    ``graphroute.core.geometry.edge_length``); the engine never derives
    it from coordinates.

    ``intermediate_points`` are the break points of the drawn polyline.
    They are payload only and are not used for routing.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=INT64_MIN, le=INT64_MAX)
    """Unique edge identifier. Unrelated to vertex ids."""

    start_vertex_id: int = Field(ge=INT64_MIN, le=INT64_MAX)
    end_vertex_id: int = Field(ge=INT64_MIN, le=INT64_MAX)

    length: float = Field(ge=0.0, allow_inf_nan=False)
    """Edge weight. Same cost in both directions."""

    intermediate_points: tuple[Point2D, ...] = ()

    @field_validator("intermediate_points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> Any:
        """Accept bare (x, y) pairs alongside Point2D records."""
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(
                {"x": p[0], "y": p[1]} if isinstance(p, (list, tuple)) else p
                for p in value
            )
        return value

    @property
    def endpoints(self) -> tuple[int, int]:
        return (self.start_vertex_id, self.end_vertex_id)

    def other_end(self, vertex_id: int) -> int:
        """
        Return the endpoint opposite ``vertex_id``.

        Raises
        ------
        ValueError
            If ``vertex_id`` is not an endpoint of this edge
        """
        if vertex_id == self.start_vertex_id:
            return self.end_vertex_id
        if vertex_id == self.end_vertex_id:
            return self.start_vertex_id
        raise ValueError(f"Vertex {vertex_id} is not an endpoint of edge {self.id}")

    def __repr__(self) -> str:
        return (
            f"GraphEdge(id={self.id}, {self.start_vertex_id}<->{self.end_vertex_id}, "
            f"length={self.length})"
        )
