"""Tests for the algorithm engine.

Tests: BFS, DFS, Dijkstra step sequences, the registry, run summaries.
Focus: determinism, reachability, shortest-path optimality (checked
against brute force on small graphs), rejected runs.
"""

import itertools
import math
import random
from typing import Dict, Set

import pytest

import algorithms
from algorithms import NegativeWeight, Step, StepKind, UnknownAlgorithm
from algorithms.step import path_edges, path_nodes, visited_nodes
from engine import summarize
from graph import EdgeKind, Graph


def reachable(graph: Graph, start: str) -> Set[str]:
    seen, frontier = {start}, [start]
    while frontier:
        node = frontier.pop()
        for _eid, nbr, _w in graph.neighbors(node):
            if nbr not in seen:
                seen.add(nbr)
                frontier.append(nbr)
    return seen


def hop_cost(graph: Graph, u: str, v: str) -> float:
    """Cheapest single edge usable from u to v (inf if none)."""
    best = math.inf
    for eid, nbr, weight in graph.neighbors(u):
        if nbr == v:
            best = min(best, weight)
    return best


def brute_force_distance(graph: Graph, start: str, end: str) -> float:
    """Minimum cost over every simple path start → end."""
    others = [n for n in graph.node_ids() if n not in (start, end)]
    best = math.inf
    for r in range(len(others) + 1):
        for middle in itertools.permutations(others, r):
            route = [start, *middle, end]
            cost = sum(hop_cost(graph, u, v) for u, v in zip(route, route[1:]))
            best = min(best, cost)
    return best


def random_graph(seed: int, n: int = 5) -> Graph:
    """Mixed weighted / directed graph with non-negative integer weights."""
    rng = random.Random(seed)
    graph = Graph()
    ids = [graph.add_node(rng.uniform(0, 800), rng.uniform(0, 600)).id for _ in range(n)]
    for u, v in itertools.combinations(ids, 2):
        roll = rng.random()
        if roll < 0.45:
            graph.add_or_replace_edge(u, v, EdgeKind.WEIGHTED, rng.randint(0, 9))
        elif roll < 0.65:
            src, dst = (u, v) if rng.random() < 0.5 else (v, u)
            graph.add_or_replace_edge(src, dst, EdgeKind.DIRECTED)
    return graph


@pytest.fixture
def diamond() -> dict:
    """A–B, A–C, B–D undirected, plus an isolated node E."""
    graph = Graph()
    ids = {label: graph.add_node(i * 60, 0, label=label).id for i, label in enumerate("ABCDE")}
    ids["AB"] = graph.add_or_replace_edge(ids["A"], ids["B"], EdgeKind.UNDIRECTED).id
    ids["AC"] = graph.add_or_replace_edge(ids["A"], ids["C"], EdgeKind.UNDIRECTED).id
    ids["BD"] = graph.add_or_replace_edge(ids["B"], ids["D"], EdgeKind.UNDIRECTED).id
    ids["graph"] = graph
    return ids


# =============================================================================
# TRAVERSALS
# =============================================================================


class TestBFS:
    """Breadth-first traversal order and reachability."""

    def test_layer_order(self, diamond) -> None:
        """Both children of A are visited before B's child D."""
        d = diamond
        steps = algorithms.run(d["graph"], "bfs", d["A"])
        assert steps == (
            Step.visit_node(d["A"]),
            Step.visit_edge(d["AB"]), Step.visit_node(d["B"]),
            Step.visit_edge(d["AC"]), Step.visit_node(d["C"]),
            Step.visit_edge(d["BD"]), Step.visit_node(d["D"]),
            Step.done(),
        )

    @pytest.mark.parametrize("seed", range(10))
    def test_visits_exactly_the_reachable_set(self, seed: int) -> None:
        graph = random_graph(seed)
        start = graph.node_ids()[0]
        steps = algorithms.run(graph, "bfs", start)
        visited = visited_nodes(steps)
        assert len(visited) == len(set(visited))
        assert set(visited) == reachable(graph, start)

    def test_respects_edge_direction(self) -> None:
        graph = Graph()
        a, b = graph.add_node(0, 0), graph.add_node(50, 0)
        graph.add_or_replace_edge(a.id, b.id, EdgeKind.DIRECTED)
        assert visited_nodes(algorithms.run(graph, "bfs", b.id)) == [b.id]
        assert visited_nodes(algorithms.run(graph, "bfs", a.id)) == [a.id, b.id]

    def test_missing_start_is_just_done(self) -> None:
        assert algorithms.run(Graph(), "bfs", "ghost") == (Step.done(),)


class TestDFS:
    """Depth-first traversal order and reachability."""

    def test_depth_first_order(self, diamond) -> None:
        """A's first child B is explored down to D before A's second child C."""
        d = diamond
        steps = algorithms.run(d["graph"], "dfs", d["A"])
        assert steps == (
            Step.visit_node(d["A"]),
            Step.visit_edge(d["AB"]), Step.visit_node(d["B"]),
            Step.visit_edge(d["BD"]), Step.visit_node(d["D"]),
            Step.visit_edge(d["AC"]), Step.visit_node(d["C"]),
            Step.done(),
        )

    @pytest.mark.parametrize("seed", range(10))
    def test_visits_exactly_the_reachable_set(self, seed: int) -> None:
        graph = random_graph(seed)
        start = graph.node_ids()[-1]
        visited = visited_nodes(algorithms.run(graph, "dfs", start))
        assert len(visited) == len(set(visited))
        assert set(visited) == reachable(graph, start)

    def test_isolated_start(self, diamond) -> None:
        d = diamond
        assert algorithms.run(d["graph"], "dfs", d["E"]) == (Step.visit_node(d["E"]), Step.done())


# =============================================================================
# DIJKSTRA
# =============================================================================


class TestDijkstra:
    """Shortest paths, unreachable targets, negative weights."""

    def test_triangle_takes_the_cheaper_detour(self, graph: Graph, triangle: Dict[str, str]) -> None:
        """A → C goes through B (1 + 2) instead of the direct edge (5)."""
        t = triangle
        steps = algorithms.run(graph, "dijkstra", t["A"], t["C"])
        assert steps == (
            Step.visit_node(t["A"]),
            Step.visit_edge(t["AB"]), Step.visit_node(t["B"]),
            Step.visit_edge(t["BC"]), Step.visit_node(t["C"]),
            Step.path_node(t["A"]), Step.path_edge(t["AB"]),
            Step.path_node(t["B"]), Step.path_edge(t["BC"]),
            Step.path_node(t["C"]),
            Step.done(),
        )

    def test_triangle_after_deleting_b(self, graph: Graph, triangle: Dict[str, str]) -> None:
        """With B gone only the direct A–C edge is left."""
        t = triangle
        graph.delete_node(t["B"])
        steps = algorithms.run(graph, "dijkstra", t["A"], t["C"])
        assert path_nodes(steps) == [t["A"], t["C"]]
        assert path_edges(steps) == [t["AC"]]
        assert summarize(graph, "dijkstra", steps).path_cost == 5.0

    @pytest.mark.parametrize("seed", range(25))
    def test_matches_brute_force(self, seed: int) -> None:
        """Path cost equals the brute-force optimum; no path exactly when unreachable."""
        graph = random_graph(seed)
        ids = graph.node_ids()
        start, end = ids[0], ids[-1]
        steps = algorithms.run(graph, "dijkstra", start, end)
        expected = brute_force_distance(graph, start, end)

        nodes, edges = path_nodes(steps), path_edges(steps)
        if math.isinf(expected):
            assert nodes == [] and edges == []
        else:
            assert nodes[0] == start and nodes[-1] == end
            assert len(edges) == len(nodes) - 1
            cost = sum(graph.get_edge(eid).weight for eid in edges)
            assert cost == pytest.approx(expected)
        assert steps[-1] == Step.done()

    def test_unreachable_target_is_not_an_error(self, diamond) -> None:
        d = diamond
        steps = algorithms.run(d["graph"], "dijkstra", d["A"], d["E"])
        assert path_nodes(steps) == []
        assert steps[-1].is_done
        assert not summarize(d["graph"], "dijkstra", steps).path_found

    def test_equal_distances_finalise_in_insertion_order(self) -> None:
        """B and C both sit at distance 1; C was inserted first, so it is finalised first."""
        graph = Graph()
        ids = {label: graph.add_node(i * 80, 0, label=label).id for i, label in enumerate("ACBT")}
        ab = graph.add_or_replace_edge(ids["A"], ids["B"], EdgeKind.WEIGHTED, 1).id
        ac = graph.add_or_replace_edge(ids["A"], ids["C"], EdgeKind.WEIGHTED, 1).id
        bt = graph.add_or_replace_edge(ids["B"], ids["T"], EdgeKind.WEIGHTED, 1).id

        steps = algorithms.run(graph, "dijkstra", ids["A"], ids["T"])
        assert visited_nodes(steps) == [ids["A"], ids["C"], ids["B"], ids["T"]]
        assert [s.element_id for s in steps if s.kind is StepKind.VISIT_EDGE] == [ac, ab, bt]
        assert path_nodes(steps) == [ids["A"], ids["B"], ids["T"]]

    def test_start_equals_end(self, graph: Graph, triangle: Dict[str, str]) -> None:
        a = triangle["A"]
        assert algorithms.run(graph, "dijkstra", a, a) == (Step.visit_node(a), Step.done())

    def test_negative_weight_is_rejected_before_any_step(self, graph: Graph, triangle: Dict[str, str]) -> None:
        """Even an edge far from the explored region rejects the whole run."""
        graph.set_edge_weight(triangle["BC"], -4)
        with pytest.raises(NegativeWeight) as info:
            algorithms.run(graph, "dijkstra", triangle["A"], triangle["B"])
        assert info.value.edge_id == triangle["BC"]

    def test_traversals_ignore_negative_weights(self, graph: Graph, triangle: Dict[str, str]) -> None:
        graph.set_edge_weight(triangle["BC"], -4)
        steps = algorithms.run(graph, "bfs", triangle["A"])
        assert len(visited_nodes(steps)) == 3


# =============================================================================
# ENGINE CONTRACT
# =============================================================================


class TestEngineContract:
    """run() is pure, deterministic and always ends with one DONE."""

    @pytest.mark.parametrize("key", ["bfs", "dfs", "dijkstra"])
    def test_deterministic_and_done_once(self, key: str) -> None:
        graph = random_graph(7)
        ids = graph.node_ids()
        first = algorithms.run(graph, key, ids[0], ids[-1])
        second = algorithms.run(graph, key, ids[0], ids[-1])
        assert first == second
        assert [s.kind for s in first].count(StepKind.DONE) == 1
        assert first[-1].is_done

    def test_run_does_not_mutate_graph(self, graph: Graph, triangle: Dict[str, str]) -> None:
        before = graph.to_dict()
        algorithms.run(graph, "dijkstra", triangle["A"], triangle["C"])
        assert graph.to_dict() == before

    def test_unknown_algorithm(self, graph: Graph) -> None:
        with pytest.raises(UnknownAlgorithm):
            algorithms.run(graph, "astar", "n0")

    def test_registry_anchor_counts(self) -> None:
        """Traversals need a start only; Dijkstra needs start and end."""
        anchors = {info.key: info.anchors for info in algorithms.list_algorithms()}
        assert anchors == {"bfs": 1, "dfs": 1, "dijkstra": 2}


# =============================================================================
# RUN SUMMARY
# =============================================================================


class TestSummary:
    def test_triangle_summary(self, graph: Graph, triangle: Dict[str, str]) -> None:
        t = triangle
        steps = algorithms.run(graph, "dijkstra", t["A"], t["C"])
        metrics = summarize(graph, "dijkstra", steps)
        assert metrics.path == [t["A"], t["B"], t["C"]]
        assert metrics.path_cost == 3.0
        assert metrics.path_found and metrics.path_expected
        assert metrics.nodes_visited == 3
        assert metrics.total_steps == len(steps)
