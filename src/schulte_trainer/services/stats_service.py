"""
統計サービス — 結果の記録と保存の窓口。

- 記録は「読み込み → 集計 → 保存」を 1 つのロックで直列化する（単一ライター）。
- 保存済みの統計が他の書き手により更新されていた場合は merge_stats で統合してから集計する。
"""

from __future__ import annotations

import logging
import threading

from src.schulte_trainer.app.ports.stats_repository import StatsRepository
from src.schulte_trainer.domain import (
    OrderMode,
    SessionResult,
    Stats,
    StatsAggregator,
    best_time_key,
    merge_stats,
)

logger = logging.getLogger(__name__)


class StatsService:
    """統計の読み込み・記録を担うアプリケーションサービス。

    Args:
        repository: 永続化ポート。
        aggregator: 集計器。未指定なら既定の StatsAggregator。
    """

    def __init__(self, repository: StatsRepository, aggregator: StatsAggregator | None = None) -> None:
        self._repo = repository
        self._aggregator = aggregator or StatsAggregator()
        self._lock = threading.Lock()
        self._stats: Stats | None = None

    @property
    def repository(self) -> StatsRepository:
        return self._repo

    def load(self) -> Stats:
        """保存済みの統計を読み込み直して返す。"""
        with self._lock:
            self._stats = self._repo.load_stats()
            return self._stats

    def current(self) -> Stats:
        """直近に読み込んだ（または記録した）統計。未読込なら読み込む。"""
        if self._stats is None:
            return self.load()
        return self._stats

    def record(self, result: SessionResult) -> Stats:
        """結果を統計へ畳み込み、保存して返す。

        保存に失敗した場合はメモリ上の統計も更新せず、例外を送出する。
        """
        with self._lock:
            stored = self._repo.load_stats()
            prior = merge_stats(self._stats, stored) if self._stats is not None else stored
            updated = self._aggregator.record_result(result, prior)
            try:
                self._repo.save_stats(updated)
            except OSError:
                logger.exception("failed to save stats")
                raise
            self._stats = updated
        logger.info(
            "recorded %s result; total=%d streak=%d",
            result.outcome.value,
            updated.total_sessions,
            updated.current_streak,
        )
        return updated

    def best_time(self, size: int, order: OrderMode | str) -> float | None:
        return self.current().best_times.get(best_time_key(size, order))
