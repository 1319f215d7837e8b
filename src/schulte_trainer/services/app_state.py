from __future__ import annotations

from src.schulte_trainer.app.ports.session_store import SessionStore
from src.schulte_trainer.app.state import Preferences
from src.schulte_trainer.domain import SessionEngine, SessionResult, improves_best
from src.schulte_trainer.services.config_loader import load_default_preferences
from src.schulte_trainer.services.stats_service import StatsService


def initialize_state(store: SessionStore, service: StatsService, engine: SessionEngine | None = None) -> None:
    """アプリ起動時に必要なセッション状態を初期化する。

    既に存在するキーは上書きせず、未定義のときのみ初期値を設定する。
    - preferences: 保存済みの設定 > TOML の既定 > コード既定値
    - game_config: 設定画面の現在値（preferences の既定から開始）
    - engine: 結果発行時に統計へ記録するよう配線したセッションエンジン
    """
    if store.get("stats_service") is None:
        store.set("stats_service", service)

    if store.get("preferences") is None:
        stored = service.repository.load_preferences()
        prefs: Preferences = stored if stored is not None else load_default_preferences()
        store.set("preferences", prefs)

    if store.get("game_config") is None:
        prefs = store.get("preferences")
        store.set(
            "game_config",
            {
                "size": prefs.default_grid_size,
                "max_time": prefs.default_max_time,
                "order": "ASC",
            },
        )

    if store.get("stats") is None:
        store.set("stats", service.current())

    if store.get("engine") is None:
        eng = engine if engine is not None else SessionEngine()
        eng.set_result_listener(lambda result: on_session_result(store, result))
        store.set("engine", eng)

    if store.get("last_result") is None:
        store.set("last_result", None)
    if store.get("last_tap") is None:
        store.set("last_tap", None)


def on_session_result(store: SessionStore, result: SessionResult) -> None:
    """エンジンが発行した結果を統計に記録し、表示用の状態を更新する。

    - 保存に失敗しても結果表示は行う（統計は前回のまま）。
    - last_result_new_best: 記録前のベストより厳密に速い完了なら True
    """
    store.set("last_result", result)
    service: StatsService | None = store.get("stats_service")
    if service is None:
        store.set("last_result_new_best", False)
        return
    previous = service.best_time(result.config.size, result.config.order)
    store.set("last_result_new_best", improves_best(result, previous))
    try:
        store.set("stats", service.record(result))
    except OSError:
        store.set("save_error", "統計の保存に失敗しました。")
    else:
        store.set("save_error", None)


def reset_game(store: SessionStore) -> None:
    """進行中のセッションを放棄し、結果表示と保存失敗の警告を消して設定画面に戻す。"""
    engine: SessionEngine | None = store.get("engine")
    if engine is not None:
        engine.abandon()
    store.set("last_result", None)
    store.set("last_result_new_best", False)
    store.set("last_tap", None)
    store.pop("save_error")
