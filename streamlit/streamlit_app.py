"""
streamlit_app.py

Main Streamlit application file for navigation.
Located in the streamlit folder.
"""
import streamlit as st

st.set_page_config(
    page_title="友達グラフ PageRank",
    page_icon="🕸️",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.sidebar.success("上のメニューからページを選択してください。")

st.title("友達グラフ PageRank エクスプローラー")
st.write("""
ようこそ！このアプリでは、以下の機能を利用できます。

- **友達グラフ**: 友達関係のグラフ (デフォルトは空手クラブのデータ、またはアップロードしたCSV) を表示し、PageRankで各ノードの中心性を計算します。ノードを選ぶと、まだ友達でないノードのうちPageRank上位3件をおすすめとして表示し、その場でつなぐことができます。
- **PageRank検証**: 自前のPageRank計算結果を NetworkX の `nx.pagerank` と比較できます。

CSVは1行に1本のエッジを `source,target` (整数) で記述します。空行や不正な行は読み飛ばされます。
""")
st.markdown("---")
st.caption("エッジは無向 (友達関係は相互) として扱います。")
