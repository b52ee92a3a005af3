"""
Edge Geometry
=============

Caller-side helpers for deriving edge lengths from drawn geometry.

The engine itself is purely topological. A drawn edge runs from its
start vertex through any break points to its end vertex, and its
routing weight is the length of that polyline.
"""

from typing import Iterable, Sequence, Union

from shapely.geometry import LineString

from graphroute.core.schema import GraphEdge, GraphVertex, Point2D


PointLike = Union[Point2D, GraphVertex, Sequence[float]]


def _xy(point: PointLike) -> tuple[float, float]:
    if isinstance(point, (Point2D, GraphVertex)):
        return (float(point.x), float(point.y))
    return (float(point[0]), float(point[1]))


def polyline_length(points: Iterable[PointLike]) -> float:
    """
    Length of the polyline through ``points``.

    Parameters
    ----------
    points : iterable
        Point2D records, vertices or (x, y) pairs, in drawing order

    Returns
    -------
    float
        Sum of segment lengths; 0.0 for fewer than two points
    """
    coords = [_xy(p) for p in points]
    if len(coords) < 2:
        return 0.0
    return float(LineString(coords).length)


def edge_length(
    start: PointLike,
    end: PointLike,
    intermediate_points: Iterable[PointLike] = (),
) -> float:
    """Length of start -> break points -> end."""
    return polyline_length([start, *intermediate_points, end])


def build_edge(
    edge_id: int,
    start: GraphVertex,
    end: GraphVertex,
    intermediate_points: Iterable[PointLike] = (),
) -> GraphEdge:
    """
    Build a GraphEdge whose length is measured along its polyline.

    Examples
    --------
    >>> a = GraphVertex(id=1, x=0.0, y=0.0)
    >>> b = GraphVertex(id=2, x=3.0, y=4.0)
    >>> build_edge(10, a, b).length
    5.0
    """
    breaks = [Point2D(x=x, y=y) for x, y in (_xy(p) for p in intermediate_points)]
    return GraphEdge(
        id=edge_id,
        start_vertex_id=start.id,
        end_vertex_id=end.id,
        length=edge_length(start, end, breaks),
        intermediate_points=tuple(breaks),
    )
