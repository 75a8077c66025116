"""
recommendation.py

Friend recommendations ranked by PageRank score.
"""

RECOMMENDATION_COUNT = 3


def _rank_key(item):
    node_id, score = item
    return (-score, node_id)


def get_top_k_nodes_from_scores(scores, k):
    """
    スコアに基づいて上位k個のノードを返す (同点はノードID昇順)
    """
    sorted_nodes = sorted(scores.items(), key=_rank_key)
    top_k = [node_id for node_id, score in sorted_nodes[:k]]
    return top_k


def get_recommendations(adjacency: dict, scores, node, k: int = RECOMMENDATION_COUNT):
    """
    まだ友達でないノードのうち、PageRank上位k個を (node_id, score) で返す

    Returns an empty list while no scores have been computed.
    Raises KeyError when ``node`` is not in the graph.
    """
    if scores is None:
        return []
    excluded = set(adjacency[node])
    excluded.add(node)
    candidates = [
        (other, scores[other]) for other in adjacency if other not in excluded
    ]
    return sorted(candidates, key=_rank_key)[:k]
