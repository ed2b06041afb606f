"""
Tests for the mesh graph adapter and the per-brush graph cache.
"""
import numpy as np
import pytest

from manifoldbrush.errors import NoPathFoundError, InvalidVertexError
from manifoldbrush.model.graph import (
    GraphCache, build_graph, component_labels, geodesic_distance, mesh_edges, shortest_distances, shortest_path
)


class TestBuildGraph:

    def test_edges_are_unique_and_sorted(self):
        faces = np.array([[0, 1, 2], [2, 1, 3]])
        edges = mesh_edges(faces)
        assert edges.tolist() == [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]

    def test_degenerate_edges_are_dropped(self):
        edges = mesh_edges(np.array([[0, 1, 1]]))
        assert edges.tolist() == [[0, 1]]

    def test_weighted_graph_uses_edge_length(self, two_triangles):
        graph = build_graph(two_triangles, use_weighted=True)
        assert graph.shape == (6, 6)
        assert graph[1, 2] == pytest.approx(np.sqrt(2.0))
        assert graph[2, 1] == pytest.approx(np.sqrt(2.0))

    def test_unweighted_graph_uses_unit_weights(self, two_triangles):
        graph = build_graph(two_triangles, use_weighted=False)
        assert graph[1, 2] == 1.0
        assert graph.nnz == 12


class TestQueries:

    def test_distances_on_grid(self, grid_manifold):
        graph = build_graph(grid_manifold, use_weighted=False)
        d = shortest_distances(graph, 0)
        # opposite corner of a 5x5 grid with diagonals is 4 hops away
        assert d[24] == 4

    def test_unreachable_vertices_are_infinite(self, two_triangles):
        d = geodesic_distance(two_triangles, 0)
        assert np.all(np.isfinite(d[:3]))
        assert np.all(np.isinf(d[3:]))

    def test_components(self, two_triangles):
        labels = component_labels(build_graph(two_triangles))
        assert labels[0] == labels[1] == labels[2]
        assert labels[3] == labels[4] == labels[5]
        assert labels[0] != labels[3]

    def test_shortest_path_on_ring(self, small_ring):
        path = shortest_path(build_graph(small_ring), 0, 3)
        assert path.tolist() == [0, 1, 2, 3]

    def test_shortest_path_to_itself(self, small_ring):
        assert shortest_path(build_graph(small_ring), 5, 5).tolist() == [5]

    def test_disconnected_endpoints(self, two_triangles):
        with pytest.raises(NoPathFoundError):
            shortest_path(build_graph(two_triangles), 0, 4)

    def test_source_out_of_range(self, two_triangles):
        with pytest.raises(InvalidVertexError):
            shortest_distances(build_graph(two_triangles), 6)


class TestGraphCache:

    def test_reused_for_same_generation(self, grid_manifold):
        cache = GraphCache()
        first = cache.get(grid_manifold)
        second = cache.get(grid_manifold)
        assert first is second
        assert cache.builds == 1

    def test_rebuilt_after_invalidate(self, grid_manifold):
        cache = GraphCache()
        cache.get(grid_manifold)
        grid_manifold.invalidate()
        cache.get(grid_manifold)
        assert cache.builds == 2

    def test_rebuilt_when_weighting_changes(self, grid_manifold):
        cache = GraphCache()
        cache.get(grid_manifold, use_weighted=True)
        cache.get(grid_manifold, use_weighted=False)
        assert cache.builds == 2

    def test_custom_builder(self, path_manifold, path_graph_builder):
        cache = GraphCache(path_graph_builder)
        graph = cache.get(path_manifold)
        assert graph.nnz == 8
