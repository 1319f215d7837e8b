"""
アプリケーション層のポート: 統計・設定の永続化

目的:
- 保存形式や保存先（ファイル等）をサービス層から切り離す。
- load 系は壊れたデータでも例外を出さず、既定値を返すこと。
"""

from __future__ import annotations

from typing import Protocol

from src.schulte_trainer.app.state import Preferences
from src.schulte_trainer.domain import Stats


class StatsRepository(Protocol):
    """統計と設定の読み書き。

    実装:
    - JsonFileRepository: データディレクトリ内の JSON ファイル
    """

    def load_stats(self) -> Stats:
        """保存済みの統計を返す。無い/壊れている場合は Stats()。"""

    def save_stats(self, stats: Stats) -> None:
        """統計を保存する。"""

    def load_preferences(self) -> Preferences | None:
        """保存済みの設定を返す。未保存なら None。"""

    def save_preferences(self, preferences: Preferences) -> None:
        """設定を保存する。"""
