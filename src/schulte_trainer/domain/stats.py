"""統計の集計（純粋ロジック）と直列化。

- record_result は入力を変更せず、新しい Stats を返す。
- 直列化形式は JSON 互換の dict（キーは camelCase、bestTimes のキーは "<size>-<order>"）。
- 読み込み時の不正値は項目単位で既定値に置き換え、例外にはしない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from src.schulte_trainer.domain.constants import GRID_SIZES
from src.schulte_trainer.domain.game import GridConfig, OrderMode, validate_config
from src.schulte_trainer.domain.session import Outcome, SessionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stats:
    """永続化される統計。

    現状の契約:
    - total_sessions: 放棄を含む全セッション数
    - current_streak: 連続完了数（時間切れ・放棄で 0）
    - longest_streak: current_streak の過去最高
    - best_times: "<size>-<order>" -> 最短完了秒
    - history: 結果の記録（古い順）
    """

    total_sessions: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    best_times: dict[str, float] = field(default_factory=dict)
    history: tuple[SessionResult, ...] = ()


def best_time_key(size: int, order: OrderMode | str) -> str:
    value = order.value if isinstance(order, OrderMode) else str(order)
    return f"{size}-{value}"


def improves_best(result: SessionResult, best: float | None) -> bool:
    """完了した結果が既存のベストより厳密に速いか（同タイムは更新しない）。"""
    if result.outcome is not Outcome.COMPLETED:
        return False
    return best is None or result.elapsed_seconds < best


class StatsAggregator:
    """完了したセッション結果を統計へ畳み込む。状態を持たない。"""

    def record_result(self, result: SessionResult, prior_stats: Stats) -> Stats:
        completed = result.outcome is Outcome.COMPLETED
        streak = prior_stats.current_streak + 1 if completed else 0

        best_times = dict(prior_stats.best_times)
        if completed:
            key = best_time_key(result.config.size, result.config.order)
            if improves_best(result, best_times.get(key)):
                best_times[key] = result.elapsed_seconds

        return Stats(
            total_sessions=prior_stats.total_sessions + 1,
            current_streak=streak,
            longest_streak=max(prior_stats.longest_streak, streak),
            best_times=best_times,
            history=prior_stats.history + (result,),
        )


def record_result(result: SessionResult, prior_stats: Stats) -> Stats:
    """StatsAggregator().record_result の関数版。"""
    return StatsAggregator().record_result(result, prior_stats)


def merge_stats(local: Stats, incoming: Stats) -> Stats:
    """並行して書かれた 2 つの Stats を統合する。

    - total_sessions / streak: incoming を採用（後勝ち）
    - best_times: キーごとに小さい方
    - history: 和集合を finished_at 順に並べる（finished_at 無しは先頭側）
    """
    best_times = dict(local.best_times)
    for key, value in incoming.best_times.items():
        current = best_times.get(key)
        if current is None or value < current:
            best_times[key] = value

    history = list(incoming.history)
    for entry in local.history:
        if entry not in history:
            history.append(entry)
    history.sort(key=lambda r: r.finished_at if r.finished_at is not None else float("-inf"))

    return replace(
        incoming,
        longest_streak=max(local.longest_streak, incoming.longest_streak),
        best_times=best_times,
        history=tuple(history),
    )


# ---- Serialization ----


def result_to_dict(result: SessionResult) -> dict[str, Any]:
    return {
        "size": result.config.size,
        "order": result.config.order.value,
        "maxTime": result.config.max_time_seconds,
        "elapsedSeconds": result.elapsed_seconds,
        "mistakeCount": result.mistake_count,
        "outcome": result.outcome.value,
        "finishedAt": result.finished_at,
    }


def result_from_dict(data: dict[str, Any]) -> SessionResult:
    """dict から SessionResult を復元する。不正なら ValueError / InvalidConfig / KeyError / TypeError。"""
    config = validate_config(
        GridConfig(
            size=data["size"],
            max_time_seconds=data["maxTime"],
            order=data["order"],  # type: ignore[arg-type]
        )
    )
    elapsed = _as_non_negative_float(data["elapsedSeconds"])
    mistakes = data.get("mistakeCount", 0)
    if isinstance(mistakes, bool) or not isinstance(mistakes, int) or mistakes < 0:
        raise ValueError(f"invalid mistakeCount: {mistakes!r}")
    finished_at = data.get("finishedAt")
    if finished_at is not None:
        finished_at = _as_non_negative_float(finished_at)
    return SessionResult(
        config=config,
        elapsed_seconds=elapsed,
        mistake_count=mistakes,
        outcome=Outcome(data["outcome"]),
        finished_at=finished_at,
    )


def stats_to_dict(stats: Stats) -> dict[str, Any]:
    return {
        "totalSessions": stats.total_sessions,
        "currentStreak": stats.current_streak,
        "longestStreak": stats.longest_streak,
        "bestTimes": dict(stats.best_times),
        "history": [result_to_dict(r) for r in stats.history],
    }


def stats_from_dict(data: object) -> Stats:
    """永続化データから Stats を復元する。壊れた項目は既定値で置き換える。"""
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("stats data is not a mapping (%s); using defaults", type(data).__name__)
        return Stats()

    total = _as_count(data.get("totalSessions"), "totalSessions")
    streak = _as_count(data.get("currentStreak"), "currentStreak")
    longest = max(_as_count(data.get("longestStreak"), "longestStreak"), streak)

    best_times: dict[str, float] = {}
    raw_best = data.get("bestTimes")
    if isinstance(raw_best, dict):
        for key, value in raw_best.items():
            if not _is_valid_key(key):
                logger.warning("dropping best time with invalid key %r", key)
                continue
            try:
                best_times[key] = _as_non_negative_float(value)
            except (TypeError, ValueError):
                logger.warning("dropping malformed best time %r=%r", key, value)
    elif raw_best is not None:
        logger.warning("bestTimes is not a mapping; using empty")

    history: list[SessionResult] = []
    raw_history = data.get("history")
    if isinstance(raw_history, list):
        for entry in raw_history:
            try:
                history.append(result_from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("dropping malformed history entry: %s", e)
    elif raw_history is not None:
        logger.warning("history is not a list; using empty")

    return Stats(
        total_sessions=total,
        current_streak=streak,
        longest_streak=longest,
        best_times=best_times,
        history=tuple(history),
    )


def _as_count(value: object, name: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        logger.warning("invalid %s=%r; using 0", name, value)
        return 0
    return value


def _as_non_negative_float(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"not a number: {value!r}")
    f = float(value)
    if f != f or f < 0 or f == float("inf"):
        raise ValueError(f"not a finite non-negative number: {value!r}")
    return f


def _is_valid_key(key: object) -> bool:
    if not isinstance(key, str):
        return False
    size_text, _, order_text = key.partition("-")
    try:
        size = int(size_text)
        order = OrderMode(order_text)
    except ValueError:
        return False
    return size in GRID_SIZES and best_time_key(size, order) == key
