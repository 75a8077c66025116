"""
run_experiment.py

Command-line runner: load (or generate) a friendship graph, compute PageRank
and print the most central nodes.

    python -m pagerank.run_experiment --csv data/karate.csv --node 1
"""
import argparse
import sys
import os

# プロジェクトルートをPythonのパスの先頭に追加 (pagerank/pagerank.py より優先させる)
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from datagen.data_utils import generate_graph, graph_to_adjacency, load_default_graph
from pagerank.pagerank import (
    DEFAULT_DAMPING_FACTOR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    InvalidInput,
    run_pagerank,
)
from recommendation.recommendation import get_recommendations, get_top_k_nodes_from_scores


def build_parser():
    p = argparse.ArgumentParser(description="PageRank Friend Graph Runner")
    p.add_argument("--csv", type=str, default=None, help="Edge list CSV (source,target per line). Defaults to data/karate.csv.")
    p.add_argument("--random", action="store_true", help="Use a random graph instead of a CSV file.")
    p.add_argument("--nodes", type=int, default=100, help="Number of nodes in the random graph.")
    p.add_argument("--edge_density", type=float, default=0.05, help="Edge density of the random graph.")
    p.add_argument("--seed", type=int, default=None, help="Random seed for the random graph.")
    p.add_argument("--iterations", type=int, default=DEFAULT_MAX_ITERATIONS, help="Maximum PageRank iterations.")
    p.add_argument("--damping", type=float, default=DEFAULT_DAMPING_FACTOR, help="Damping factor in (0, 1).")
    p.add_argument("--tol", type=float, default=DEFAULT_TOLERANCE, help="Convergence tolerance.")
    p.add_argument("--top", type=int, default=10, help="Number of top nodes to print.")
    p.add_argument("--node", type=int, default=None, help="Print friend recommendations for this node.")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    print("Step 1: Loading friendship graph...")
    if args.random:
        G = generate_graph(args.nodes, args.edge_density, seed=args.seed)
    else:
        G = load_default_graph(args.csv)
    print(f"Graph loaded with {G.number_of_nodes()} nodes and {G.number_of_edges()} edges.")

    adjacency = graph_to_adjacency(G)

    print(f"\nStep 2: Running PageRank (max {args.iterations} iterations, damping {args.damping})...")
    try:
        result = run_pagerank(adjacency, args.iterations, args.damping, args.tol)
    except InvalidInput as e:
        print(f"Error computing PageRank scores: {e}")
        return 1
    status = "converged" if result.converged else "stopped at the iteration limit"
    print(f"PageRank {status} after {result.iterations} iterations.")

    print(f"\nTop {args.top} nodes by PageRank:")
    for node_id in get_top_k_nodes_from_scores(result.scores, args.top):
        print(f"  Node {node_id}: {result.scores[node_id]:.4f} ({len(adjacency[node_id])} friends)")

    if args.node is not None:
        if args.node not in adjacency:
            print(f"\nNode {args.node} is not in the graph.")
            return 1
        recs = get_recommendations(adjacency, result.scores, args.node)
        print(f"\nRecommended new friends for node {args.node}:")
        if not recs:
            print("  No new friend recommendations available.")
        for node_id, score in recs:
            print(f"  Node {node_id} (PageRank: {score:.4f})")

    print("\nPageRank run finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
