"""
pagerank.py

Power-iteration PageRank over an undirected friendship graph.

The graph is given as an adjacency dict ``{node: [neighbor, ...]}`` which is
assumed to be symmetric, so the score flowing *into* ``v`` can be pulled from
``v``'s own neighbor list instead of inverting the relation.
"""
import operator
from dataclasses import dataclass, field

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_DAMPING_FACTOR",
    "DEFAULT_TOLERANCE",
    "InvalidInput",
    "PageRankResult",
    "compute_pagerank",
    "run_pagerank",
    "validate_inputs",
]

DEFAULT_MAX_ITERATIONS = 50
DEFAULT_DAMPING_FACTOR = 0.85
DEFAULT_TOLERANCE = 1e-6

DANGLING_MODES = ("redistribute", "drop")


class InvalidInput(ValueError):
    """Bad PageRank parameters or an adjacency that references unknown nodes."""


@dataclass(frozen=True)
class PageRankResult:
    scores: dict = field(default_factory=dict)
    iterations: int = 0
    converged: bool = False
    complete: bool = True  # False when the run was cancelled early


def validate_inputs(adjacency, max_iterations, damping_factor, tol=DEFAULT_TOLERANCE):
    """
    パラメータと隣接リストの整合性をチェックする。問題があれば InvalidInput。
    """
    if isinstance(max_iterations, bool):
        raise InvalidInput(f"max_iterations must be an int, got {max_iterations!r}")
    try:
        max_iterations = operator.index(max_iterations)
    except TypeError:
        raise InvalidInput(f"max_iterations must be an int, got {max_iterations!r}") from None
    if max_iterations <= 0:
        raise InvalidInput(f"max_iterations must be positive, got {max_iterations}")
    if not 0.0 < damping_factor < 1.0:
        raise InvalidInput(f"damping_factor must be in (0, 1), got {damping_factor}")
    if tol < 0:
        raise InvalidInput(f"tol must be non-negative, got {tol}")
    for node, neighbors in adjacency.items():
        for nb in neighbors:
            if nb not in adjacency:
                raise InvalidInput(f"node {node} lists unknown neighbor {nb}")


def run_pagerank(
    adjacency: dict,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
    tol: float = DEFAULT_TOLERANCE,
    *,
    dangling: str = "redistribute",
    should_cancel=None,
) -> PageRankResult:
    """
    Run PageRank and report how the run ended.

    * ``dangling="redistribute"`` spreads the score held by degree-0 nodes
      uniformly over every node, so the scores always sum to 1.
      ``dangling="drop"`` lets that mass leak out instead.
    * ``should_cancel`` is polled once per iteration; when it returns True the
      scores of the last finished iteration come back with ``complete=False``.
    """
    if dangling not in DANGLING_MODES:
        raise InvalidInput(f"dangling must be one of {DANGLING_MODES}, got {dangling!r}")
    validate_inputs(adjacency, max_iterations, damping_factor, tol)

    n = len(adjacency)
    if n == 0:
        return PageRankResult(scores={}, iterations=0, converged=True)

    nodes = list(adjacency)
    degree = {v: len(adjacency[v]) for v in nodes}
    dangling_nodes = [v for v in nodes if degree[v] == 0]
    teleport = (1.0 - damping_factor) / n

    scores = {v: 1.0 / n for v in nodes}
    iterations = 0
    converged = False

    for _ in range(max_iterations):
        if should_cancel is not None and should_cancel():
            return PageRankResult(
                scores=scores, iterations=iterations, converged=False, complete=False
            )

        base = teleport
        if dangling == "redistribute" and dangling_nodes:
            base += damping_factor * sum(scores[u] for u in dangling_nodes) / n

        # 前回のスナップショットだけを読む (in-place 更新はしない)
        new_scores = {}
        for v in nodes:
            pulled = sum(scores[u] / degree[u] for u in adjacency[v])
            new_scores[v] = base + damping_factor * pulled

        delta = sum(abs(new_scores[v] - scores[v]) for v in nodes)
        scores = new_scores
        iterations += 1
        if delta < tol:
            converged = True
            break

    return PageRankResult(scores=scores, iterations=iterations, converged=converged)


def compute_pagerank(
    adjacency: dict,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
    tol: float = DEFAULT_TOLERANCE,
    *,
    dangling: str = "redistribute",
) -> dict:
    """
    隣接リストからPageRankスコア {node: score} を計算して返す
    """
    return run_pagerank(
        adjacency, max_iterations, damping_factor, tol, dangling=dangling
    ).scores
