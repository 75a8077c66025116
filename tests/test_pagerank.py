"""Tests for the power-iteration PageRank engine."""

import numpy as np
import pytest

from datagen.data_utils import DEFAULT_EDGE_LIST, graph_to_adjacency, parse_edge_list
from pagerank.pagerank import (
    InvalidInput,
    PageRankResult,
    compute_pagerank,
    run_pagerank,
)

TWO_NODES = {1: [2], 2: [1]}
TRIANGLE = {1: [2, 3], 2: [1, 3], 3: [1, 2]}
STAR = {1: [2, 3, 4, 5], 2: [1], 3: [1], 4: [1], 5: [1]}
WITH_ISOLATED = {1: [2], 2: [1], 3: []}


@pytest.fixture
def karate() -> dict:
    return graph_to_adjacency(parse_edge_list(DEFAULT_EDGE_LIST))


class TestSmallGraphs:
    """Known results on tiny graphs."""

    def test_empty_graph(self) -> None:
        assert compute_pagerank({}) == {}

    def test_single_node(self) -> None:
        for iterations in (1, 5, 50):
            scores = compute_pagerank({1: []}, iterations, 0.85)
            assert list(scores) == [1]
            assert scores[1] == pytest.approx(1.0)

    def test_two_node_mutual(self) -> None:
        scores = compute_pagerank(TWO_NODES, 50, 0.85)
        assert scores[1] == pytest.approx(0.5, abs=1e-4)
        assert scores[2] == pytest.approx(0.5, abs=1e-4)

    def test_two_node_converges_immediately(self) -> None:
        result = run_pagerank(TWO_NODES, 50, 0.85)
        assert result.converged
        assert result.iterations == 1

    def test_triangle(self) -> None:
        scores = compute_pagerank(TRIANGLE, 50, 0.85)
        for node in TRIANGLE:
            assert scores[node] == pytest.approx(1 / 3, abs=1e-4)

    def test_star_hub_beats_leaves(self) -> None:
        scores = compute_pagerank(STAR, 50, 0.85)
        for leaf in (2, 3, 4, 5):
            assert scores[1] > scores[leaf]

    def test_star_leaves_equal(self) -> None:
        scores = compute_pagerank(STAR, 50, 0.85)
        assert scores[2] == pytest.approx(scores[3])
        assert scores[4] == pytest.approx(scores[5])

    def test_star_steady_state(self) -> None:
        """h = 0.03 + 0.85 * 4l and l = 0.03 + 0.85 * h / 4."""
        scores = compute_pagerank(STAR, 200, 0.85, tol=1e-12)
        hub, leaf = scores[1], scores[2]
        assert hub == pytest.approx(0.03 + 0.85 * 4 * leaf, abs=1e-9)
        assert leaf == pytest.approx(0.03 + 0.85 * hub / 4, abs=1e-9)


class TestInvariants:
    def test_conservation(self, karate) -> None:
        scores = compute_pagerank(karate, 50, 0.85)
        assert sum(scores.values()) == pytest.approx(1.0, abs=1e-6)

    def test_conservation_every_iteration_count(self, karate) -> None:
        for iterations in (1, 2, 3, 10):
            scores = compute_pagerank(karate, iterations, 0.85, tol=0.0)
            assert sum(scores.values()) == pytest.approx(1.0, abs=1e-6)

    def test_non_negative(self, karate) -> None:
        scores = compute_pagerank(karate)
        assert all(v >= 0 for v in scores.values())

    def test_node_set_preserved(self, karate) -> None:
        assert set(compute_pagerank(karate)) == set(karate)

    def test_deterministic(self, karate) -> None:
        first = compute_pagerank(karate, 50, 0.85)
        second = compute_pagerank(karate, 50, 0.85)
        assert first == second

    def test_rerun_on_unmutated_graph(self, karate) -> None:
        before = {k: list(v) for k, v in karate.items()}
        first = run_pagerank(karate)
        assert karate == before
        assert run_pagerank(karate) == first

    def test_relabel_invariance(self, karate) -> None:
        """Relabeling the nodes keeps the multiset of scores."""
        relabel = {node: 1000 - node for node in karate}
        relabeled = {
            relabel[node]: [relabel[nb] for nb in nbs] for node, nbs in karate.items()
        }
        original = compute_pagerank(karate)
        moved = compute_pagerank(relabeled)
        for node in karate:
            assert moved[relabel[node]] == pytest.approx(original[node], abs=1e-12)
        assert sorted(moved.values()) == pytest.approx(sorted(original.values()))

    def test_key_order_does_not_matter(self, karate) -> None:
        reversed_adj = {node: karate[node] for node in reversed(list(karate))}
        a = compute_pagerank(karate, 30, 0.85, tol=0.0)
        b = compute_pagerank(reversed_adj, 30, 0.85, tol=0.0)
        for node in karate:
            assert a[node] == pytest.approx(b[node], abs=1e-12)

    def test_higher_degree_ranks_higher_on_karate(self, karate) -> None:
        scores = compute_pagerank(karate)
        # node 34 has a single friend, node 3 has six
        assert scores[3] > scores[34]


class TestIterationControl:
    def test_stops_at_iteration_limit(self) -> None:
        path = {1: [2], 2: [1, 3], 3: [2, 4], 4: [3]}
        result = run_pagerank(path, 7, 0.85, tol=0.0)
        assert result.iterations == 7
        assert not result.converged
        assert result.complete

    def test_converges_before_limit(self, karate) -> None:
        result = run_pagerank(karate, 500, 0.85, tol=1e-6)
        assert result.converged
        assert result.iterations < 500

    def test_single_iteration_values(self) -> None:
        path = {1: [2], 2: [1, 3], 3: [2]}
        scores = compute_pagerank(path, 1, 0.5, tol=0.0)
        third = 1 / 3
        assert scores[1] == pytest.approx(0.5 / 3 + 0.5 * third / 2)
        assert scores[2] == pytest.approx(0.5 / 3 + 0.5 * (third + third))
        assert scores[3] == pytest.approx(scores[1])

    def test_cancel_before_first_iteration(self) -> None:
        result = run_pagerank(TRIANGLE, 50, 0.85, should_cancel=lambda: True)
        assert not result.complete
        assert result.iterations == 0
        assert result.scores == {1: 1 / 3, 2: 1 / 3, 3: 1 / 3}

    def test_cancel_returns_last_finished_iteration(self, karate) -> None:
        polls = []

        def should_cancel():
            polls.append(1)
            return len(polls) > 3

        result = run_pagerank(karate, 50, 0.85, tol=0.0, should_cancel=should_cancel)
        assert not result.complete
        assert result.iterations == 3
        assert result.scores == compute_pagerank(karate, 3, 0.85, tol=0.0)

    def test_result_type(self) -> None:
        assert isinstance(run_pagerank(TRIANGLE), PageRankResult)


class TestDanglingNodes:
    def test_redistribute_conserves_mass(self) -> None:
        scores = compute_pagerank(WITH_ISOLATED, 200, 0.85, tol=1e-12)
        assert sum(scores.values()) == pytest.approx(1.0, abs=1e-9)

    def test_redistribute_steady_state(self) -> None:
        scores = compute_pagerank(WITH_ISOLATED, 500, 0.85, tol=1e-14)
        isolated = 0.05 / (1 - 0.85 / 3)
        assert scores[3] == pytest.approx(isolated, abs=1e-9)
        assert scores[1] == pytest.approx((1 - isolated) / 2, abs=1e-9)

    def test_drop_loses_mass(self) -> None:
        scores = compute_pagerank(WITH_ISOLATED, 50, 0.85, dangling="drop")
        assert scores[3] == pytest.approx(0.15 / 3)
        assert scores[1] == pytest.approx(1 / 3)
        assert sum(scores.values()) < 1.0

    def test_all_dangling(self) -> None:
        scores = compute_pagerank({1: [], 2: [], 3: [], 4: []})
        for v in scores.values():
            assert v == pytest.approx(0.25)


class TestInvalidInput:
    @pytest.mark.parametrize("iterations", [0, -1])
    def test_non_positive_iterations(self, iterations) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, iterations, 0.85)

    def test_non_integer_iterations(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, 2.5, 0.85)

    def test_bool_iterations_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, True, 0.85)

    def test_numpy_float_iterations_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, np.float64(50.0), 0.85)

    def test_numpy_integer_iterations_accepted(self) -> None:
        result = run_pagerank(TWO_NODES, np.int64(50), 0.85)
        assert result.scores == compute_pagerank(TWO_NODES, 50, 0.85)
        assert result.scores[1] == pytest.approx(0.5, abs=1e-4)

    def test_numpy_zero_iterations_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, np.int64(0), 0.85)

    @pytest.mark.parametrize("damping", [1.0, 0.0, -0.1, 1.5])
    def test_damping_out_of_range(self, damping) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, 50, damping)

    def test_unknown_neighbor(self) -> None:
        with pytest.raises(InvalidInput, match="unknown neighbor"):
            compute_pagerank({1: [2]}, 50, 0.85)

    def test_negative_tolerance(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, 50, 0.85, tol=-1.0)

    def test_unknown_dangling_mode(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank(TRIANGLE, dangling="ignore")

    def test_invalid_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            compute_pagerank(TRIANGLE, 0, 0.85)

    def test_validated_before_empty_shortcut(self) -> None:
        with pytest.raises(InvalidInput):
            compute_pagerank({}, 0, 0.85)
