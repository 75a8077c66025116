import os
import random
import networkx as nx

from pagerank.pagerank import InvalidInput

__all__ = [
    "DEFAULT_EDGE_LIST",
    "DEFAULT_CSV_PATH",
    "parse_edge_list",
    "graph_to_adjacency",
    "load_edge_list",
    "load_default_graph",
    "create_default_graph",
    "connect_nodes",
    "generate_graph",
]

DEFAULT_CSV_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", "karate.csv"
)

# data/karate.csv が読めないときに使う組み込みデータ
DEFAULT_EDGE_LIST = """1,2
1,3
2,3
2,4
2,5
2,6
2,7
3,4
3,8
3,9
3,10
4,6
5,6
5,7
6,7
8,9
8,10
8,11
8,12
9,10
9,12
9,13
10,11
10,13
11,12
11,13
12,13
12,14
12,15
13,14
13,15
14,15
14,16
15,16
16,17
16,18
17,18
18,19
19,20
19,21
20,21
21,22
22,23
22,24
23,24
24,25
25,26
25,27
26,27
27,28
27,29
27,30
28,29
28,30
29,30
30,31
31,32
31,33
32,33
33,34"""


# ------------------------------------------------------------------ #
# 1.  Edge list  ->  graph                                            #
# ------------------------------------------------------------------ #
def parse_edge_list(text: str) -> nx.Graph:
    """
    ``source,target`` 形式のテキストから無向グラフを作る。

    * Only the first two fields are read, so ``source,target,weight`` rows
      keep their edge.
    * Blank lines, lines whose first two fields are not integers and
      self-loops are skipped silently.
    * Repeated edges (in either direction) collapse into one.
    """
    G = nx.Graph()
    for line in text.strip().splitlines():
        parts = line.split(",")
        if len(parts) < 2:
            continue
        try:
            u, v = int(parts[0]), int(parts[1])
        except ValueError:
            continue
        if u == v:
            continue                            # no self loops
        G.add_edge(u, v)
    return G


def graph_to_adjacency(G: nx.Graph) -> dict:
    """
    Adjacency dict for the PageRank engine: keys in ascending id order,
    neighbors in the order their edges were added.
    """
    return {node: list(G.neighbors(node)) for node in sorted(G.nodes())}


def load_edge_list(path: str) -> nx.Graph:
    with open(path, "r", encoding="utf-8") as f:
        return parse_edge_list(f.read())


def create_default_graph() -> nx.Graph:
    """10ノードのリング + 弦 (最後のフォールバック用)"""
    G = nx.Graph()
    G.add_nodes_from(range(1, 11))
    G.add_edges_from(
        [(1, 2), (1, 3), (2, 3), (2, 4), (3, 4), (4, 5),
         (5, 6), (6, 7), (7, 8), (8, 9), (9, 10), (1, 10)]
    )
    return G


def load_default_graph(path: str | None = None) -> nx.Graph:
    """
    Load the sample friendship graph.

    Tries ``path`` (default ``data/karate.csv``), then the built-in
    ``DEFAULT_EDGE_LIST``, then the 10-node ring.
    """
    path = path or DEFAULT_CSV_PATH
    try:
        G = load_edge_list(path)
    except (OSError, UnicodeDecodeError):
        print("Using default graph data")
        G = parse_edge_list(DEFAULT_EDGE_LIST)
    if G.number_of_nodes() == 0:
        print(f"No edges found in {path}, falling back to the default graph")
        G = create_default_graph()
    return G


# ------------------------------------------------------------------ #
# 2.  Mutation                                                        #
# ------------------------------------------------------------------ #
def connect_nodes(G: nx.Graph, source, target) -> bool:
    """
    二つの既存ノードを友達としてつなぐ。

    Returns False when the two were already friends.
    Raises InvalidInput for unknown nodes or source == target.
    """
    for node in (source, target):
        if node not in G:
            raise InvalidInput(f"unknown node {node}")
    if source == target:
        raise InvalidInput(f"cannot connect node {source} to itself")
    if G.has_edge(source, target):
        return False
    G.add_edge(source, target)
    return True


# ------------------------------------------------------------------ #
# 3.  Random friendship graph                                         #
# ------------------------------------------------------------------ #
def generate_graph(
    num_nodes: int = 100,
    edge_density: float = 0.05,
    seed: int | None = None,
) -> nx.Graph:
    """
    Erdős–Rényi G(n, p) generator, undirected, nodes numbered from 1.
    """
    rng = random.Random(seed)
    G = nx.Graph()
    G.add_nodes_from(range(1, num_nodes + 1))
    for u in range(1, num_nodes + 1):
        for v in range(u + 1, num_nodes + 1):
            if rng.random() < edge_density:
                G.add_edge(u, v)
    return G
