"""
アプリケーション層のポート: セッションストア

サービス層（gameplay / app_state）はタブ単位の状態をこのポート経由でのみ読み書きする。
保持するキー:
- engine, stats_service, stats, preferences, game_config
- last_result, last_result_new_best, last_tap, save_error
"""

from __future__ import annotations

from typing import Any, Protocol


class SessionStore(Protocol):
    """タブ単位の状態への dict 風アクセス。

    契約:
    - get: 未設定のキーは default を返す。
    - set: 値の型は任意（エンジンや統計をそのまま保持する）。
    - pop: キーを取り除き、その値（未設定なら default）を返す。
    """

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        ...

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401
        ...

    def pop(self, key: str, default: Any = None) -> Any:  # noqa: ANN401
        ...
