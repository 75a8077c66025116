import streamlit as st
import sys
import os
from streamlit_agraph import agraph, Node, Edge, Config


# --- パス設定とモジュールのインポート ---
try:
    current_file_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.abspath(os.path.join(current_file_dir, "..", ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)

    from datagen.data_utils import (
        connect_nodes,
        graph_to_adjacency,
        load_default_graph,
        parse_edge_list,
    )
    from pagerank.pagerank import (
        DEFAULT_DAMPING_FACTOR,
        DEFAULT_MAX_ITERATIONS,
        DEFAULT_TOLERANCE,
        InvalidInput,
    )
    from pagerank.runner import ComputationInProgress, PageRankRunner
    from recommendation.recommendation import RECOMMENDATION_COUNT, get_recommendations
    from viewer.state import (
        SORT_COLUMNS,
        AppState,
        apply_scores,
        build_node_table,
        format_score,
        record_failure,
        reset_state,
        toggle_sort,
    )
except (ImportError, ModuleNotFoundError) as e:
    st.error(f"必要なモジュールの読み込みに失敗しました: {e}")
    st.info("プロジェクトのディレクトリ構造が正しいか、必要なファイルが存在するか確認してください。")
    st.stop()


st.set_page_config(layout="wide", page_title="友達グラフ & PageRank")

# --- セッションステートの初期化 ---
# このページ専用のキーを使用
if "fg_state" not in st.session_state:
    st.session_state.fg_state = AppState(graph=load_default_graph())
if "fg_runner" not in st.session_state:
    st.session_state.fg_runner = PageRankRunner()
if "fg_graph_name" not in st.session_state:
    st.session_state.fg_graph_name = "karate.csv (デフォルト)"

state: AppState = st.session_state.fg_state
runner: PageRankRunner = st.session_state.fg_runner


# --- ヘルパー関数 ---
def run_pagerank_for_state(iterations, damping, tol):
    """
    現在のグラフでPageRankを計算し、stateに反映します。
    失敗した場合は前回のスコアを残したままエラーを表示します。
    """
    adjacency = graph_to_adjacency(state.graph)
    try:
        future = runner.submit(adjacency, iterations, damping, tol)
        with st.spinner("Computing..."):
            result = future.result()
        apply_scores(state, result.scores)
        if result.converged:
            st.toast(f"PageRankが {result.iterations} 回の反復で収束しました。", icon="✅")
        else:
            st.toast(f"{result.iterations} 回の反復上限に達しました。", icon="⚠️")
    except ComputationInProgress:
        st.warning("PageRankを計算中です。しばらくお待ちください。")
    except InvalidInput as e:
        record_failure(state, e)
        st.error(f"Error computing PageRank scores: {e}")


# --- サイドバー ---
st.sidebar.title("Friend Graph")

# --- 1. グラフ読込セクション ---
st.sidebar.header("Step 1: グラフを読み込み")
uploaded = st.sidebar.file_uploader("エッジリストCSV (source,target)", type=["csv", "txt"])
if st.sidebar.button("アップロードしたCSVを読み込み", disabled=uploaded is None):
    graph = parse_edge_list(uploaded.getvalue().decode("utf-8", errors="replace"))
    if graph.number_of_nodes() == 0:
        st.sidebar.error("有効なエッジが見つかりませんでした。")
    else:
        state.graph = graph
        reset_state(state)
        st.session_state.fg_graph_name = uploaded.name
        st.toast(f"`{uploaded.name}` を読み込みました。", icon="✅")
        st.rerun()

if st.sidebar.button("リセット (デフォルトグラフに戻す)"):
    state.graph = load_default_graph()
    reset_state(state)
    st.session_state.fg_graph_name = "karate.csv (デフォルト)"
    st.rerun()

st.sidebar.markdown("---")

# --- 2. PageRankセクション ---
st.sidebar.header("Step 2: PageRankを計算")
iterations = st.sidebar.slider("最大反復回数", 1, 200, DEFAULT_MAX_ITERATIONS, key="fg_iterations")
damping = st.sidebar.slider("減衰係数 (damping)", 0.05, 0.95, DEFAULT_DAMPING_FACTOR, 0.01, key="fg_damping")
tol = st.sidebar.select_slider(
    "収束判定の閾値", options=[1e-4, 1e-5, 1e-6, 1e-8, 1e-10], value=DEFAULT_TOLERANCE, key="fg_tol"
)

# 計算中はボタンを無効化
compute_label = "Computing..." if runner.is_computing else "Compute PageRank"
if st.sidebar.button(compute_label, disabled=runner.is_computing, key="fg_compute"):
    run_pagerank_for_state(iterations, damping, tol)
    st.rerun()

if state.last_error:
    st.sidebar.error(f"前回の計算でエラーが発生しました: {state.last_error}")


# --- メインエリア ---
st.title("友達グラフ & PageRank")

G = state.graph
adjacency = graph_to_adjacency(G)
scores = state.scores

st.success(f"**表示中のグラフ:** `{st.session_state.fg_graph_name}`")
cols = st.columns(3)
cols[0].metric("ノード数", G.number_of_nodes())
cols[1].metric("エッジ数", G.number_of_edges())
cols[2].metric("PageRank", "計算済み" if scores else "未計算")

graph_col, detail_col = st.columns([3, 2])

# --- グラフ描画 ---
with graph_col:
    st.subheader("グラフ")
    max_score = max(scores.values()) if scores else 0.0
    nodes_vis = []
    for node_id in adjacency:
        size = 12
        if scores and max_score > 0:
            size = 10 + 30 * scores[node_id] / max_score  # スコアに比例して大きく
        color = "red" if node_id == state.selected_node else "#4A90D9"
        title = f"Node {node_id} | PageRank: {format_score(scores.get(node_id) if scores else None)}"
        nodes_vis.append(Node(id=str(node_id), label=str(node_id), size=size, color=color, title=title))

    edges_vis = [Edge(source=str(u), target=str(v), color="#B0B0B0") for u, v in G.edges()]

    config = Config(
        width="100%",
        height=600,
        directed=False,
        physics=True,
        hierarchical=False,
    )
    clicked = agraph(nodes=nodes_vis, edges=edges_vis, config=config)
    # agraph は最後にクリックされたノードを返し続けるので、新しいクリックだけを扱う
    if clicked is not None and clicked != st.session_state.get("fg_last_click"):
        st.session_state.fg_last_click = clicked
        try:
            clicked_id = int(clicked)
        except (TypeError, ValueError):
            clicked_id = None
        if clicked_id in adjacency and clicked_id != state.selected_node:
            state.selected_node = clicked_id
            st.rerun()

# --- ノード詳細 & おすすめ ---
with detail_col:
    st.subheader("ノード詳細")
    node_ids = list(adjacency)
    index = node_ids.index(state.selected_node) if state.selected_node in adjacency else None
    picked = st.selectbox(
        "ノードを選択:",
        node_ids,
        index=index,
        placeholder="グラフまたはここでノードを選択...",
    )
    if picked is not None and picked != state.selected_node:
        state.selected_node = picked
        st.rerun()

    node_id = state.selected_node
    if node_id is None or node_id not in adjacency:
        st.info("Click on a node in the graph or pick one above to see details")
    else:
        friends = adjacency[node_id]
        st.markdown(f"#### Node {node_id}")
        st.write(f"**PageRank Score:** {format_score(scores.get(node_id) if scores else None)}")
        st.write(
            f"**Current Friends ({len(friends)}):** "
            + (", ".join(str(f) for f in friends) if friends else "None")
        )

        if scores is None:
            st.info("Compute PageRank to see friend recommendations.")
        else:
            recs = get_recommendations(adjacency, scores, node_id, RECOMMENDATION_COUNT)
            if not recs:
                st.info("No new friend recommendations available (you might already be connected to everyone).")
            else:
                st.markdown(f"**Recommended New Friends (Top {RECOMMENDATION_COUNT} by PageRank):**")
                for rec_id, rec_score in recs:
                    rec_cols = st.columns([3, 1])
                    rec_cols[0].write(f"Node {rec_id} (PageRank: {rec_score:.4f})")
                    if rec_cols[1].button("Connect", key=f"fg_connect_{node_id}_{rec_id}"):
                        try:
                            connect_nodes(G, node_id, rec_id)
                        except InvalidInput as e:
                            st.error(f"接続できませんでした: {e}")
                        else:
                            st.toast(f"Connected node {node_id} with node {rec_id}! PageRank will be recomputed.")
                            run_pagerank_for_state(iterations, damping, tol)
                            st.rerun()

st.markdown("---")

# --- ノード一覧テーブル ---
st.subheader("ノード一覧")
st.caption("列名のボタンをクリックするとソートします。同じ列をもう一度押すと昇順/降順が切り替わります。")
header_cols = st.columns(len(SORT_COLUMNS))
for col, (key, label) in zip(header_cols, SORT_COLUMNS.items()):
    arrow = ""
    if state.sort_by == key:
        arrow = " ▲" if state.ascending else " ▼"
    if col.button(f"{label}{arrow}", key=f"fg_sort_{key}"):
        toggle_sort(state, key)
        st.rerun()

table = build_node_table(adjacency, scores, state.sort_by, state.ascending)
st.dataframe(table[["ID", "PageRank", "Friends"]], hide_index=True, use_container_width=True)
