from __future__ import annotations

from collections.abc import Callable

import streamlit as st
import streamlit.components.v1 as components

from src.schulte_trainer.adapters.session_store_streamlit import StSessionStore
from src.schulte_trainer.app.state import Preferences
from src.schulte_trainer.domain import SessionSnapshot, TapResult
from src.schulte_trainer.services.gameplay import handle_cell_click as _svc_handle_cell_click


def render_board(
    snapshot: SessionSnapshot,
    preferences: Preferences,
    on_click: Callable[[int, int], None],
) -> None:
    """盤面を描画し、クリックで on_click(r, c) を呼び出す。

    - show_hints が有効なら次にタップする数のセルを強調する。
    - show_fixation_dot が有効なら盤面の下に中央の注視点を描く。
    """
    if snapshot.grid is None:
        return
    hint = snapshot.next_position if preferences.show_hints else None
    for r, row in enumerate(snapshot.grid):
        cols = st.columns(len(row))
        for c, value in enumerate(row):
            if cols[c].button(
                str(value),
                key=f"cell-{r}-{c}",
                use_container_width=True,
                type="primary" if hint == (r, c) else "secondary",
            ):
                on_click(r, c)
                st.rerun()
    if preferences.show_fixation_dot:
        st.markdown(
            '<div style="text-align:center; font-size:1.4rem; color:#d00; line-height:1;">●</div>',
            unsafe_allow_html=True,
        )


def render_tap_feedback(last_tap: TapResult | None, preferences: Preferences) -> None:
    """ミスしたタップの直後に振動（対応端末のみ）を要求する。"""
    if last_tap is None or last_tap.correct or not preferences.haptic_feedback:
        return
    components.html(
        "<script>if (window.parent.navigator.vibrate) { window.parent.navigator.vibrate(60); }</script>",
        height=0,
    )


def handle_click(store: StSessionStore, r: int, c: int) -> None:
    """盤面セルクリック時の処理をサービスに委譲する。"""
    _svc_handle_cell_click(store, r, c)
