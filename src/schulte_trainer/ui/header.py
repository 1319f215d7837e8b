from __future__ import annotations

import streamlit as st

from src.schulte_trainer.adapters.session_store_streamlit import StSessionStore
from src.schulte_trainer.domain import InvalidConfig, OrderMode, SessionState, Stats, best_time_key, format_time_short
from src.schulte_trainer.services.gameplay import abandon_game as _svc_abandon_game
from src.schulte_trainer.services.gameplay import current_config
from src.schulte_trainer.services.gameplay import start_game as _svc_start_game


def render_stats_summary(stats: Stats, size: int, order: OrderMode | str) -> None:
    """セッション数・連続完了・現在の設定でのベストを並べて表示する。"""
    best = stats.best_times.get(best_time_key(size, order))
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("セッション", stats.total_sessions)
    with c2:
        st.metric("連続完了", stats.current_streak)
    with c3:
        st.metric("ベスト", format_time_short(best))


def render_header(store: StSessionStore) -> None:
    """メインヘッダー（統計サマリー + スタート/中断ボタン）を描画する。"""
    cfg = current_config(store)
    render_stats_summary(store.get("stats"), cfg.size, cfg.order)

    running = store.get("engine").state is SessionState.RUNNING
    c1, c2 = st.columns([1, 1])
    with c1:
        label = "やり直す" if running else "スタート"
        if st.button(label, type="primary", use_container_width=True):
            try:
                _svc_start_game(store)
            except InvalidConfig as e:
                st.error(f"設定が正しくありません: {e}")
                return
            st.rerun()
    with c2:
        if st.button("中断", use_container_width=True, disabled=not running):
            _svc_abandon_game(store)
            st.rerun()
