import streamlit as st
import pandas as pd
import networkx as nx
import matplotlib.pyplot as plt
import japanize_matplotlib  # 日本語フォントのサポート
import numpy as np
import sys
import os

# --- パス設定とモジュールのインポート ---
try:
    current_file_dir = os.path.dirname(os.path.abspath(__file__))
    project_root = os.path.abspath(os.path.join(current_file_dir, "..", ".."))
    if project_root not in sys.path:
        sys.path.insert(0, project_root)

    from datagen.data_utils import graph_to_adjacency, load_default_graph
    from pagerank.pagerank import (
        DEFAULT_DAMPING_FACTOR,
        DEFAULT_MAX_ITERATIONS,
        InvalidInput,
        run_pagerank,
    )
except (ImportError, ModuleNotFoundError) as e:
    st.error(f"必要なモジュールの読み込みに失敗しました: {e}")
    st.stop()


# --- サイドバー ---
st.sidebar.title("PageRank Check")
st.sidebar.header("比較の設定")
damping = st.sidebar.slider("減衰係数 (damping)", 0.05, 0.95, DEFAULT_DAMPING_FACTOR, 0.01, key="pc_damping")
iterations = st.sidebar.slider("最大反復回数", 1, 500, DEFAULT_MAX_ITERATIONS, key="pc_iterations")
k_top = st.sidebar.slider("グラフに表示する上位ノード数", 5, 50, 15, key="pc_top")

# --- メインエリア ---
st.title("🔍 PageRank 検証 (NetworkX との比較)")

# 友達グラフのページで読み込んだグラフがあればそれを使う
app_state = st.session_state.get("fg_state")
if app_state is not None and app_state.graph is not None:
    G = app_state.graph
    st.header(f"対象グラフ: `{st.session_state.get('fg_graph_name', '友達グラフ')}`")
else:
    G = load_default_graph()
    st.header("対象グラフ: `karate.csv (デフォルト)`")

if G.number_of_nodes() == 0:
    st.info("ノードがないため、PageRankを計算できません。")
    st.stop()

adjacency = graph_to_adjacency(G)

with st.spinner("PageRankを計算中..."):
    try:
        ours = run_pagerank(adjacency, iterations, damping, tol=1e-10)
    except InvalidInput as e:
        st.error(f"PageRankの計算中にエラー: {e}")
        st.stop()
    try:
        reference = nx.pagerank(G, alpha=damping, max_iter=max(iterations, 100), tol=1e-10)
    except nx.PowerIterationFailedConvergence as e:
        st.warning(f"nx.pagerank が収束しませんでした: {e}")
        reference = {node: np.nan for node in G.nodes()}

df = pd.DataFrame(
    {
        "Node": list(adjacency),
        "PageRank (ours)": [ours.scores[n] for n in adjacency],
        "PageRank (networkx)": [reference[n] for n in adjacency],
        "Friends": [len(adjacency[n]) for n in adjacency],
    }
)
df["Abs Diff"] = (df["PageRank (ours)"] - df["PageRank (networkx)"]).abs()

col1, col2, col3 = st.columns(3)
col1.metric("反復回数", ours.iterations)
col2.metric("スコア合計", f"{df['PageRank (ours)'].sum():.6f}")
col3.metric("最大絶対誤差", f"{np.nanmax(df['Abs Diff'].to_numpy()):.2e}")
if not ours.converged:
    st.warning("反復回数の上限に達したため、収束していない可能性があります。")

st.markdown("---")

st.subheader("上位ノードの比較")
top_df = df.sort_values(by=["PageRank (ours)", "Node"], ascending=[False, True]).head(k_top)
fig, ax = plt.subplots(figsize=(10, 4))
x = np.arange(len(top_df))
ax.bar(x - 0.2, top_df["PageRank (ours)"], width=0.4, label="自前実装", color="skyblue", edgecolor="black")
ax.bar(x + 0.2, top_df["PageRank (networkx)"], width=0.4, label="networkx", color="lightcoral", edgecolor="black")
ax.set_xticks(x)
ax.set_xticklabels([str(n) for n in top_df["Node"]])
ax.set_xlabel("ノード")
ax.set_ylabel("PageRank")
ax.set_title(f"PageRank 上位{len(top_df)}ノード")
ax.legend()
st.pyplot(fig)

st.subheader("全ノードのスコア")
st.dataframe(df.style.format({"PageRank (ours)": "{:.6f}", "PageRank (networkx)": "{:.6f}", "Abs Diff": "{:.2e}"}), hide_index=True)
st.caption("注: 次数0のノードのスコアは全ノードに均等に再分配しています (nx.pagerank と同じ扱い)。")
