"""
state.py

Explicit application state for the friend-graph page, plus the helpers that
turn a graph and its scores into the sortable node table.
"""
from dataclasses import dataclass

import networkx as nx
import pandas as pd

SORT_COLUMNS = {
    "id": "ID",
    "pagerank": "PageRank",
    "friends": "Friends",
}


@dataclass
class AppState:
    graph: nx.Graph | None = None
    scores: dict | None = None
    selected_node: int | None = None
    sort_by: str = "id"
    ascending: bool = True
    last_error: str | None = None


def format_score(value) -> str:
    return "N/A" if value is None else f"{value:.4f}"


def toggle_sort(state: AppState, column: str) -> AppState:
    """
    ヘッダーをクリックしたときのソート切替。同じ列なら昇順/降順を反転する。
    """
    key = column.strip().lower()
    if key not in SORT_COLUMNS:
        key = "id"
    if state.sort_by == key:
        state.ascending = not state.ascending
    else:
        state.sort_by = key
        state.ascending = True
    return state


def reset_state(state: AppState) -> AppState:
    state.scores = None
    state.selected_node = None
    state.sort_by = "id"
    state.ascending = True
    state.last_error = None
    return state


def apply_scores(state: AppState, scores: dict) -> AppState:
    state.scores = scores
    state.last_error = None
    return state


def record_failure(state: AppState, exc: Exception) -> AppState:
    # 失敗しても前回のスコアはそのまま残す
    state.last_error = str(exc)
    return state


def build_node_table(
    adjacency: dict, scores=None, sort_by: str = "id", ascending: bool = True
) -> pd.DataFrame:
    """
    Node table for display.

    Columns: ``ID``, ``PageRank`` (formatted), ``Friends`` (comma list) plus
    the numeric helpers ``score`` and ``friend_count`` used for sorting.
    Rows with equal sort keys keep ascending ID order.
    """
    rows = []
    for node_id in sorted(adjacency):
        friends = adjacency[node_id]
        score = scores.get(node_id) if scores is not None else None
        rows.append(
            {
                "ID": node_id,
                "PageRank": format_score(score),
                "Friends": ", ".join(str(f) for f in friends),
                "score": 0.0 if score is None else score,
                "friend_count": len(friends),
            }
        )
    df = pd.DataFrame(rows, columns=["ID", "PageRank", "Friends", "score", "friend_count"])
    sort_key = {"id": "ID", "pagerank": "score", "friends": "friend_count"}.get(sort_by, "ID")
    if sort_key == "ID":
        df = df.sort_values(by="ID", ascending=ascending)
    else:
        # 同点はID昇順
        df = df.sort_values(by=[sort_key, "ID"], ascending=[ascending, True])
    return df.reset_index(drop=True)
