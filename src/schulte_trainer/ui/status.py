from __future__ import annotations

import streamlit as st

from src.schulte_trainer.adapters.session_store_streamlit import StSessionStore
from src.schulte_trainer.domain import (
    Outcome,
    SessionResult,
    SessionSnapshot,
    SessionState,
    format_time_short,
)
from src.schulte_trainer.domain.constants import TICK_INTERVAL
from src.schulte_trainer.services.gameplay import on_tick as _svc_on_tick


def render_progress(snapshot: SessionSnapshot) -> None:
    """ステータス（次の数・残り時間・ミス）を描画する。"""
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("次", snapshot.next_value if snapshot.next_value is not None else "-")
    with c2:
        remaining = snapshot.remaining_seconds
        st.metric("残り時間", format_time_short(remaining))
    with c3:
        st.metric("ミス", snapshot.mistakes)
    if snapshot.total:
        st.progress(snapshot.target_index / snapshot.total, text=f"{snapshot.target_index}/{snapshot.total}")


@st.fragment(run_every=TICK_INTERVAL)
def render_timer(store: StSessionStore) -> None:
    """一定間隔で tick し、時間切れになったら全体を再描画する。"""
    engine = store.get("engine")
    if engine.state is not SessionState.RUNNING:
        return
    if _svc_on_tick(store) is not None:
        st.rerun(scope="app")
    render_progress(engine.snapshot())


def render_result(result: SessionResult | None, is_new_best: bool = False) -> None:
    """終了したセッションの結果を描画する。is_new_best は記録前のベストとの比較結果。"""
    if result is None:
        return
    elapsed = format_time_short(result.elapsed_seconds)
    if result.outcome is Outcome.COMPLETED:
        if is_new_best:
            st.success(f"完了！ {elapsed}（ベスト更新）")
        else:
            st.success(f"完了！ {elapsed}")
    elif result.outcome is Outcome.TIMED_OUT:
        st.warning(f"時間切れです（{elapsed}）。")
    else:
        st.info(f"中断しました（{elapsed}）。")
    st.metric("ミス", result.mistake_count)
