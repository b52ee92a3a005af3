"""
Path Engine
===========

The core engine that owns an undirected weighted graph and answers
shortest-path queries against it.

Key Design Principles:
1. initialize() builds a fresh GraphSnapshot and publishes it atomically
2. A published snapshot is IMMUTABLE; queries only read it
3. Edges are indexed in both directions so route lookups are direction-agnostic
4. Unreachable targets are a normal outcome (empty path), never an error

Scaling limit: vertex selection is a linear scan over the unvisited set,
so one search costs O(V^2 + E). This is intended for small to moderate
graphs (drawings with up to a few thousand vertices). See
benchmarks/path_engine_microbench.py.
"""

from dataclasses import dataclass, field
import math
from threading import Lock
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

import networkx as nx
from pydantic import ValidationError

from graphroute.core.errors import (
    BrokenRouteError,
    EngineNotInitializedError,
    InvalidInputError,
    InvalidQueryError,
    VertexNotFoundError,
)
from graphroute.core.schema import GraphEdge, GraphVertex
from graphroute.core.settings import EngineSettings


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Derived lookup structures for one initialized graph.

    Invariants:
    - every adjacency key and every edge_index endpoint is in ``vertices``
    - edge_index holds exactly two entries per accepted edge
    - the mappings are read-only views and adjacency rows are tuples
    """

    vertices: Mapping[int, GraphVertex]
    adjacency: Mapping[int, tuple[tuple[int, float], ...]]
    edge_index: Mapping[tuple[int, int], GraphEdge]
    skipped_edges: int = 0

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def edge_count(self) -> int:
        return len(self.edge_index) // 2

    def find_edge(self, a: int, b: int) -> Optional[GraphEdge]:
        """Edge between ``a`` and ``b`` in either direction, or None."""
        edge = self.edge_index.get((a, b))
        if edge is None:
            edge = self.edge_index.get((b, a))
        return edge


@dataclass
class RouteResult:
    """Shortest route between two vertices with its derived metadata."""

    start_id: int
    end_id: int
    vertex_ids: list[int] = field(default_factory=list)
    edge_ids: list[int] = field(default_factory=list)
    length: float = 0.0

    @property
    def found(self) -> bool:
        """False when the target is unreachable from the start."""
        return bool(self.vertex_ids)

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "start_id": self.start_id,
            "end_id": self.end_id,
            "found": self.found,
            "vertex_ids": list(self.vertex_ids),
            "edge_ids": list(self.edge_ids),
            "length": self.length,
        }


class PathEngine:
    """
    Shortest-path engine over an undirected, non-negatively weighted graph.

    The engine has two states. Before the first initialize() it is
    uninitialized and every query raises EngineNotInitializedError.
    Afterwards it answers queries against the last published snapshot.

    Example
    -------
    >>> engine = PathEngine(EngineSettings(verbose=False))
    >>> engine.initialize(
    ...     [GraphVertex(id=1, x=0, y=0), GraphVertex(id=2, x=10, y=0)],
    ...     [GraphEdge(id=7, start_vertex_id=1, end_vertex_id=2, length=10.0)],
    ... )
    >>> engine.find_shortest_path(1, 2)
    [1, 2]
    >>> engine.get_route_edge_ids([1, 2])
    [7]
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        """
        Initialize the engine.

        Parameters
        ----------
        settings : EngineSettings, optional
            Behavioural switches. If None, uses defaults.
        """
        self._settings = settings or EngineSettings()
        self._snapshot: Optional[GraphSnapshot] = None
        self._publish_lock = Lock()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    @property
    def is_ready(self) -> bool:
        """True once a graph has been initialized."""
        return self._snapshot is not None

    @property
    def snapshot(self) -> GraphSnapshot:
        """The current snapshot. Its mappings are read-only views."""
        return self._current()

    @property
    def vertex_count(self) -> int:
        return self._current().vertex_count

    @property
    def edge_count(self) -> int:
        """Number of accepted edges."""
        return self._current().edge_count

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def initialize(
        self,
        vertices: Optional[Iterable[GraphVertex]],
        edges: Optional[Iterable[GraphEdge]],
    ) -> None:
        """
        Replace the graph with the given vertex and edge sets.

        Edges whose start or end vertex is not in ``vertices`` are skipped
        silently, as are self-loops. When several edges join the same pair
        of vertices only the shortest is kept. Under the default duplicate
        policy a later vertex or edge replaces an earlier one with the same
        id. Nothing is published unless the whole call succeeds.

        Parameters
        ----------
        vertices : iterable of GraphVertex
            Full vertex set
        edges : iterable of GraphEdge
            Full edge set

        Raises
        ------
        InvalidInputError
            If either collection is None, or if duplicate ids are present
            and the duplicate policy is "reject"
        """
        if vertices is None:
            raise InvalidInputError("vertices collection is required", argument="vertices")
        if edges is None:
            raise InvalidInputError("edges collection is required", argument="edges")

        snapshot = self._build_snapshot(list(vertices), list(edges))

        with self._publish_lock:
            self._snapshot = snapshot

        if self._settings.verbose:
            print(f"[PathEngine] Loaded {snapshot.vertex_count} vertices, "
                  f"{snapshot.edge_count} edges ({snapshot.skipped_edges} skipped)")

    def load_from_graph(self, graph: nx.Graph) -> None:
        """
        Load from an existing NetworkX graph.

        Parameters
        ----------
        graph : nx.Graph
            Graph with 'x' and 'y' attributes on nodes and a 'length'
            attribute on edges. Optional edge attributes: 'id' and
            'intermediate_points'. Either every edge carries an 'id' or
            none does; in the latter case ids are the enumeration index.

        Raises
        ------
        InvalidInputError
            If a node lacks coordinates, an edge lacks a length, only some
            edges carry an id, or a node/edge does not form a valid record
            (non-integer node, negative length, ...)
        """
        if graph is None:
            raise InvalidInputError("graph is required", argument="graph")
        if graph.is_directed():
            raise InvalidInputError("directed graphs are not supported", argument="graph")

        with_id = sum(1 for _, _, attrs in graph.edges(data=True) if "id" in attrs)
        if 0 < with_id < graph.number_of_edges():
            raise InvalidInputError(
                f"{with_id} of {graph.number_of_edges()} edges carry an 'id'; "
                "set it on every edge or on none",
                argument="graph",
            )

        vertices = []
        for node, attrs in graph.nodes(data=True):
            if "x" not in attrs or "y" not in attrs:
                raise InvalidInputError(f"Node {node} has no x/y coordinates", argument="graph")
            try:
                vertices.append(GraphVertex(id=node, x=attrs["x"], y=attrs["y"]))
            except ValidationError as exc:
                raise InvalidInputError(f"Node {node!r} is not a valid vertex", argument="graph") from exc

        edges = []
        for index, (u, v, attrs) in enumerate(graph.edges(data=True)):
            if "length" not in attrs:
                raise InvalidInputError(f"Edge {u}-{v} has no length", argument="graph")
            try:
                edges.append(GraphEdge(
                    id=attrs.get("id", index),
                    start_vertex_id=u,
                    end_vertex_id=v,
                    length=attrs["length"],
                    intermediate_points=attrs.get("intermediate_points", ()),
                ))
            except ValidationError as exc:
                raise InvalidInputError(f"Edge {u}-{v} is not a valid edge", argument="graph") from exc

        self.initialize(vertices, edges)

    def to_networkx(self) -> nx.Graph:
        """
        Export the current graph as an undirected NetworkX graph.

        Nodes carry 'x'/'y'; edges carry 'id', 'length' and
        'intermediate_points'.
        """
        snapshot = self._current()
        G = nx.Graph()
        for vertex_id, vertex in snapshot.vertices.items():
            G.add_node(vertex_id, x=vertex.x, y=vertex.y)
        for (u, v), edge in snapshot.edge_index.items():
            if (u, v) != edge.endpoints:
                continue
            G.add_edge(
                u, v,
                id=edge.id,
                length=edge.length,
                intermediate_points=[p.as_tuple() for p in edge.intermediate_points],
            )
        return G

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def vertex_exists(self, vertex_id: int) -> bool:
        """Check whether ``vertex_id`` is in the current graph."""
        return vertex_id in self._current().vertices

    def find_shortest_path(self, start_id: int, end_id: int) -> list[int]:
        """
        Find the minimum-weight path between two vertices.

        Dijkstra's algorithm with a linear scan for the closest unvisited
        vertex. Among equally close candidates the one that comes first in
        initialization order is taken. The search stops as soon as the
        target is settled.

        Parameters
        ----------
        start_id : int
            ID of the start vertex
        end_id : int
            ID of the end vertex

        Returns
        -------
        list[int]
            Vertex ids from ``start_id`` to ``end_id`` inclusive, or an
            empty list when ``end_id`` is unreachable

        Raises
        ------
        VertexNotFoundError
            If either vertex is missing (start is checked first)
        InvalidQueryError
            If ``start_id == end_id``
        """
        return self._search(self._current(), start_id, end_id)

    def find_route(self, start_id: int, end_id: int) -> RouteResult:
        """
        Shortest path plus its edge ids and total length.

        Path and edges come from the same snapshot even if initialize()
        runs concurrently. Raises the same errors as find_shortest_path();
        an unreachable target yields a result with ``found == False``.
        """
        snapshot = self._current()
        vertex_ids = self._search(snapshot, start_id, end_id)
        if not vertex_ids:
            return RouteResult(start_id=start_id, end_id=end_id)

        edges = self._route_edges(snapshot, vertex_ids)
        return RouteResult(
            start_id=start_id,
            end_id=end_id,
            vertex_ids=vertex_ids,
            edge_ids=[e.id for e in edges],
            length=sum(e.length for e in edges),
        )

    def get_route_edges(self, route_vertices: Optional[Sequence[int]]) -> list[GraphEdge]:
        """
        Edges traversed by a route, in route order.

        Parameters
        ----------
        route_vertices : sequence of int
            Vertex ids of a walk through the graph

        Returns
        -------
        list[GraphEdge]
            One edge per consecutive vertex pair; empty for None or fewer
            than two vertices

        Raises
        ------
        BrokenRouteError
            If a consecutive pair has no edge in either direction
        """
        return self._route_edges(self._current(), route_vertices)

    def get_route_edge_ids(self, route_vertices: Optional[Sequence[int]]) -> list[int]:
        """Edge ids traversed by a route. Fails like get_route_edges()."""
        return [edge.id for edge in self.get_route_edges(route_vertices)]

    def calculate_route_length(self, route_vertices: Optional[Sequence[int]]) -> float:
        """Total length of a route; 0.0 for fewer than two vertices."""
        return float(sum(edge.length for edge in self.get_route_edges(route_vertices)))

    def get_info(self) -> str:
        """Human-readable vertex and accepted edge counts."""
        snapshot = self._current()
        return f"Vertices: {snapshot.vertex_count}, Edges: {snapshot.edge_count}"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _current(self) -> GraphSnapshot:
        snapshot = self._snapshot
        if snapshot is None:
            raise EngineNotInitializedError()
        return snapshot

    def _search(self, snapshot: GraphSnapshot, start_id: int, end_id: int) -> list[int]:
        """Dijkstra with linear-scan selection over one snapshot."""
        self._validate_query(snapshot, start_id, end_id)

        distances = {vertex_id: math.inf for vertex_id in snapshot.vertices}
        previous: dict[int, Optional[int]] = {vertex_id: None for vertex_id in snapshot.vertices}
        # dict keeps initialization order for the tie-break
        unvisited = dict.fromkeys(snapshot.vertices)
        distances[start_id] = 0.0

        while unvisited:
            current = self._closest_unvisited(unvisited, distances)
            if current is None:
                break

            del unvisited[current]
            if current == end_id:
                break

            for neighbor, weight in snapshot.adjacency.get(current, ()):
                if neighbor not in unvisited:
                    continue
                candidate = distances[current] + weight
                if candidate < distances[neighbor]:
                    distances[neighbor] = candidate
                    previous[neighbor] = current

        return self._build_path(previous, start_id, end_id)

    def _route_edges(
        self,
        snapshot: GraphSnapshot,
        route_vertices: Optional[Sequence[int]],
    ) -> list[GraphEdge]:
        if route_vertices is None or len(route_vertices) < 2:
            return []

        route_edges = []
        for a, b in zip(route_vertices, route_vertices[1:]):
            edge = snapshot.find_edge(a, b)
            if edge is None:
                raise BrokenRouteError(a, b)
            route_edges.append(edge)
        return route_edges

    def _build_snapshot(
        self,
        vertices: list[GraphVertex],
        edges: list[GraphEdge],
    ) -> GraphSnapshot:
        """Build derived structures without touching published state."""
        reject = self._settings.duplicate_ids == "reject"

        vertex_map: dict[int, GraphVertex] = {}
        for vertex in vertices:
            if reject and vertex.id in vertex_map:
                raise InvalidInputError(f"Duplicate vertex id {vertex.id}", argument="vertices")
            vertex_map[vertex.id] = vertex

        # A later edge with the same id replaces the earlier one
        by_id: dict[int, GraphEdge] = {}
        skipped = 0
        for edge in edges:
            if edge.id in by_id:
                if reject:
                    raise InvalidInputError(f"Duplicate edge id {edge.id}", argument="edges")
                skipped += 1
            by_id[edge.id] = edge

        # One edge per unordered vertex pair; the shorter parallel edge wins
        by_pair: dict[tuple[int, int], GraphEdge] = {}
        for edge in by_id.values():
            start, end = edge.start_vertex_id, edge.end_vertex_id
            if start not in vertex_map or end not in vertex_map or start == end:
                skipped += 1
                continue

            pair = (min(start, end), max(start, end))
            existing = by_pair.get(pair)
            if existing is not None:
                skipped += 1
                if existing.length <= edge.length:
                    continue
            by_pair[pair] = edge

        adjacency: dict[int, list[tuple[int, float]]] = {}
        edge_index: dict[tuple[int, int], GraphEdge] = {}
        for edge in by_pair.values():
            start, end = edge.start_vertex_id, edge.end_vertex_id
            adjacency.setdefault(start, []).append((end, edge.length))
            adjacency.setdefault(end, []).append((start, edge.length))
            edge_index[(start, end)] = edge
            edge_index[(end, start)] = edge

        return GraphSnapshot(
            vertices=MappingProxyType(vertex_map),
            adjacency=MappingProxyType({
                vertex_id: tuple(neighbors) for vertex_id, neighbors in adjacency.items()
            }),
            edge_index=MappingProxyType(edge_index),
            skipped_edges=skipped,
        )

    def _validate_query(self, snapshot: GraphSnapshot, start_id: int, end_id: int) -> None:
        if start_id not in snapshot.vertices:
            raise VertexNotFoundError(start_id)
        if end_id not in snapshot.vertices:
            raise VertexNotFoundError(end_id)
        if start_id == end_id:
            raise InvalidQueryError(start_id)

    def _closest_unvisited(
        self,
        unvisited: dict[int, None],
        distances: dict[int, float],
    ) -> Optional[int]:
        """Unvisited vertex with the smallest finite distance, or None."""
        closest = None
        min_distance = math.inf
        for vertex_id in unvisited:
            if distances[vertex_id] < min_distance:
                min_distance = distances[vertex_id]
                closest = vertex_id
        return closest

    def _build_path(
        self,
        previous: dict[int, Optional[int]],
        start_id: int,
        end_id: int,
    ) -> list[int]:
        """Walk predecessor links back from ``end_id``."""
        path = []
        current: Optional[int] = end_id
        while current is not None:
            path.append(current)
            current = previous[current]
        path.reverse()

        if path[0] != start_id:
            return []
        return path

    def __repr__(self) -> str:
        if self._snapshot is None:
            return "PathEngine(uninitialized)"
        return (f"PathEngine(vertices={self._snapshot.vertex_count}, "
                f"edges={self._snapshot.edge_count})")
