"""Streamlit セッション状態アダプタ。

`st.session_state` はブラウザタブごとに分かれるため、エンジン（進行中のセッション）や
表示用の結果はタブ単位で保持される。統計サービスだけは `st.cache_resource` で共有する。
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from src.schulte_trainer.app.ports.session_store import SessionStore


class StSessionStore(SessionStore):
    """`st.session_state` を SessionStore として扱う。"""

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        return st.session_state.get(key, default)

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        st.session_state[key] = value

    def pop(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        return st.session_state.pop(key, default)
