"""
履歴ページ
- 保存済みの統計から、(サイズ, 順序) ごとの集計とセッション履歴を表示します。
"""

import streamlit as st

from src.schulte_trainer.adapters.session_store_streamlit import StSessionStore
from src.schulte_trainer.app.entrypoint import bootstrap
from src.schulte_trainer.domain import format_time_short
from src.schulte_trainer.services.gameplay import leave_game
from src.schulte_trainer.services.history import history_frame, summary_by_key

# ページ設定
st.set_page_config(page_title="履歴", layout="wide")
st.title("履歴")

service = bootstrap()
# プレイ中に移動してきた場合は放棄として記録してから読み込む
if leave_game(StSessionStore()) is not None:
    st.info("プレイ中のセッションを中断しました。")
stats = service.load()

c1, c2, c3 = st.columns(3)
c1.metric("セッション", stats.total_sessions)
c2.metric("連続完了", stats.current_streak)
c3.metric("最長連続", stats.longest_streak)

if not stats.history:
    st.info("まだ記録がありません。トップページからトレーニングを始めてください。")
    st.stop()

st.subheader("ベストタイム")
summary = summary_by_key(stats)
summary["ベスト"] = summary["ベスト"].map(format_time_short)
summary["平均"] = summary["平均"].map(format_time_short)
st.dataframe(summary, hide_index=True, use_container_width=True)

st.subheader("セッション履歴")
st.dataframe(history_frame(stats), hide_index=True, use_container_width=True)
