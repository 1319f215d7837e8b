from __future__ import annotations

import streamlit as st

from src.schulte_trainer.adapters.session_store_streamlit import StSessionStore
from src.schulte_trainer.app.state import Preferences
from src.schulte_trainer.domain import GRID_SIZES, MAX_MAX_TIME, MAX_TIME_STEP, MIN_MAX_TIME, SessionState
from src.schulte_trainer.services.gameplay import order_label
from src.schulte_trainer.services.gameplay import save_current_as_default as _svc_save_current_as_default
from src.schulte_trainer.services.gameplay import update_game_config as _svc_update_game_config
from src.schulte_trainer.services.gameplay import update_preference as _svc_update_preference

# 表示設定のトグル（属性名, ラベル, 説明）
_TOGGLES: list[tuple[str, str, str]] = [
    ("haptic_feedback", "振動", "ミスしたときに振動する"),
    ("show_hints", "ヒント", "次の数を強調表示する"),
    ("show_fixation_dot", "注視点", "盤面中央の目印を表示する"),
]


def render_sidebar(store: StSessionStore) -> None:
    """サイドバーの設定 UI を描画する。

    - プレイ中は盤面サイズ/制限時間/順序を無効化する。
    - 表示設定のトグルは常に反映する（プレイ中でも可）。
    """
    with st.sidebar:
        st.subheader("ゲーム設定")
        controls_disabled = store.get("engine").state is SessionState.RUNNING
        cfg = store.get("game_config", {}) or {}
        size = st.radio(
            "盤面サイズ",
            options=list(GRID_SIZES),
            index=list(GRID_SIZES).index(cfg.get("size")) if cfg.get("size") in GRID_SIZES else 0,
            format_func=lambda n: f"{n}×{n}",
            horizontal=True,
            disabled=controls_disabled,
        )
        max_time = st.slider(
            "制限時間（秒）",
            min_value=MIN_MAX_TIME,
            max_value=MAX_MAX_TIME,
            value=int(cfg.get("max_time", MIN_MAX_TIME)),
            step=MAX_TIME_STEP,
            disabled=controls_disabled,
        )
        order = st.radio(
            "順序",
            options=["ASC", "DESC"],
            index=0 if cfg.get("order", "ASC") == "ASC" else 1,
            format_func=lambda o: order_label(o, int(size)),
            horizontal=True,
            disabled=controls_disabled,
        )
        if not controls_disabled:
            _svc_update_game_config(store, size=int(size), max_time=int(max_time), order=str(order))

        st.divider()
        st.subheader("表示設定")
        prefs: Preferences = store.get("preferences")
        for name, label, help_text in _TOGGLES:
            new_value = st.toggle(label, value=bool(getattr(prefs, name)), help=help_text, key=f"pref-{name}")
            prefs = _svc_update_preference(store, name, bool(new_value))

        if st.button("現在の設定を既定にする", use_container_width=True, disabled=controls_disabled):
            _svc_save_current_as_default(store)
            st.success("既定の設定を保存しました。")

        error = store.get("save_error")
        if error:
            st.warning(error)

        # ページ移動リンク（Streamlit が対応している場合はサイドバーに表示）
        if hasattr(st.sidebar, "page_link"):
            st.divider()
            st.page_link("pages/history.py", label="履歴")
