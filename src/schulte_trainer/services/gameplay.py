from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from src.schulte_trainer.app.ports.session_store import SessionStore
from src.schulte_trainer.app.state import Preferences, coerce_preference
from src.schulte_trainer.domain import (
    GridConfig,
    OrderMode,
    Session,
    SessionEngine,
    SessionResult,
    SessionState,
    TapResult,
    parse_order,
)
from src.schulte_trainer.services.stats_service import StatsService

# UI コンポーネントからのイベント（開始、セルのタップ、タイマー、設定変更）を受け取り、
# セッション状態の更新とドメイン操作を一箇所に集約する。
# 本モジュールは UI フレームワークに依存しない。状態アクセスは SessionStore 経由で行う。

logger = logging.getLogger(__name__)


def _engine(store: SessionStore) -> SessionEngine:
    engine: SessionEngine | None = store.get("engine")
    if engine is None:
        raise RuntimeError("engine is not initialized; call initialize_state first")
    return engine


def current_config(store: SessionStore) -> GridConfig:
    """設定画面の現在値から GridConfig を作る（検証は start 側で行う）。"""
    cfg: dict[str, Any] = store.get("game_config", {}) or {}
    return GridConfig(
        size=cfg.get("size"),  # type: ignore[arg-type]
        max_time_seconds=cfg.get("max_time"),  # type: ignore[arg-type]
        order=cfg.get("order", "ASC"),  # type: ignore[arg-type]
    )


def update_game_config(store: SessionStore, *, size: int, max_time: int, order: str) -> None:
    """設定画面の入力値を保持する。プレイ中のセッションには影響しない。"""
    store.set("game_config", {"size": int(size), "max_time": int(max_time), "order": str(order)})


def start_game(store: SessionStore) -> Session:
    """現在の設定でセッションを開始する。

    - 設定が不正なら InvalidConfig を送出する（UI で入力検証として表示する）。
    - 実行中のセッションがあれば放棄として記録される。
    """
    session = _engine(store).start(current_config(store))
    store.set("last_result", None)
    store.set("last_tap", None)
    return session


def handle_cell_click(store: SessionStore, r: int, c: int) -> TapResult | None:
    """盤面セルクリック時の処理を行う。

    振る舞い:
    - 実行中でなければ何もしない（再描画前の古いクリック）。
    - 制限時間を過ぎてから届いたクリックはタップせず、時間切れとして確定させる。
    - 制限時間ちょうどのクリックはタップを優先し、その後に時間切れを判定する。
    - 正解/不正解はエンジンが判定し、完了時の記録は結果リスナーが行う。
    """
    engine = _engine(store)
    if engine.state is not SessionState.RUNNING:
        return None
    session = engine.session
    assert session is not None
    if not (0 <= r < len(session.grid) and 0 <= c < len(session.grid[r])):
        return None
    now = engine.now()
    if now - session.start_time > session.config.max_time_seconds:
        engine.tick(now)
        store.set("last_tap", None)
        return None
    result = engine.tap(session.grid[r][c], now=now)
    if not result.finished:
        engine.tick(now)
    store.set("last_tap", result)
    return result


def on_tick(store: SessionStore, now: float | None = None) -> SessionResult | None:
    """タイマー更新。制限時間に達していれば時間切れの結果を返す。"""
    engine = _engine(store)
    return engine.tick(engine.now() if now is None else now)


def abandon_game(store: SessionStore) -> SessionResult | None:
    """プレイ中のセッションを中断する。何も実行中でなければ None。"""
    return _engine(store).abandon()


def leave_game(store: SessionStore) -> SessionResult | None:
    """別ページへ移動したときに呼ぶ。実行中のセッションを放棄として記録する。

    - エンジン未初期化（トップページを経ずに直接開いた場合）でも例外にしない。
    """
    engine: SessionEngine | None = store.get("engine")
    if engine is None:
        return None
    result = engine.abandon()
    if result is not None:
        store.set("last_tap", None)
    return result


def update_preference(store: SessionStore, name: str, value: Any) -> Preferences:  # noqa: ANN401 - 項目ごとに型が異なる
    """設定を 1 項目更新して保存する。不正な値は ValueError。"""
    prefs: Preferences = store.get("preferences") or Preferences()
    coerced = coerce_preference(name, value)
    if getattr(prefs, name) == coerced:
        return prefs
    updated = replace(prefs, **{name: coerced})
    _save_preferences(store, updated)
    return updated


def save_current_as_default(store: SessionStore) -> Preferences:
    """設定画面の盤面サイズと制限時間を既定値として保存する。"""
    cfg = current_config(store)
    prefs: Preferences = store.get("preferences") or Preferences()
    updated = replace(
        prefs,
        default_grid_size=coerce_preference("default_grid_size", cfg.size),
        default_max_time=coerce_preference("default_max_time", cfg.max_time_seconds),
    )
    _save_preferences(store, updated)
    return updated


def order_label(order: str, size: int) -> str:
    """順序の表示ラベル（例: 1 → 25）。"""
    total = size * size
    return f"1 → {total}" if parse_order(order) is OrderMode.ASC else f"{total} → 1"


def _save_preferences(store: SessionStore, prefs: Preferences) -> None:
    store.set("preferences", prefs)
    service: StatsService | None = store.get("stats_service")
    if service is None:
        return
    try:
        service.repository.save_preferences(prefs)
    except OSError:
        logger.exception("failed to save preferences")
        store.set("save_error", "設定の保存に失敗しました。")
