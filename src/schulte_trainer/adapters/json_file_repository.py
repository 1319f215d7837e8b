"""JSON ファイルによる統計・設定の永続化アダプタ。

目的:
- アプリ層ポート `StatsRepository` のファイル実装を提供する。

契約:
- 保存は一時ファイルへ書いてから置き換える（途中で落ちても既存ファイルは壊れない）。
- 読み込みで JSON が壊れている場合は警告を出し、既定値を返す。
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import tempfile
from typing import Any

from src.schulte_trainer.app.ports.stats_repository import StatsRepository
from src.schulte_trainer.app.state import Preferences, preferences_from_dict, preferences_to_dict
from src.schulte_trainer.domain import Stats, stats_from_dict, stats_to_dict
from src.schulte_trainer.domain.constants import PREFERENCES_FILE_NAME, STATS_FILE_NAME

logger = logging.getLogger(__name__)


class JsonFileRepository(StatsRepository):
    """データディレクトリ配下の stats.json / preferences.json を読み書きする。"""

    def __init__(self, data_dir: str | pathlib.Path) -> None:
        self.data_dir = pathlib.Path(data_dir)

    @property
    def stats_path(self) -> pathlib.Path:
        return self.data_dir / STATS_FILE_NAME

    @property
    def preferences_path(self) -> pathlib.Path:
        return self.data_dir / PREFERENCES_FILE_NAME

    def load_stats(self) -> Stats:
        return stats_from_dict(self._read_json(self.stats_path))

    def save_stats(self, stats: Stats) -> None:
        self._write_json(self.stats_path, stats_to_dict(stats))

    def load_preferences(self) -> Preferences | None:
        data = self._read_json(self.preferences_path)
        if data is None:
            return None
        return preferences_from_dict(data)

    def save_preferences(self, preferences: Preferences) -> None:
        self._write_json(self.preferences_path, preferences_to_dict(preferences))

    def _read_json(self, path: pathlib.Path) -> Any:  # noqa: ANN401 - JSON の任意値
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("could not read %s (%s); using defaults", path, e)
            return None

    def _write_json(self, path: pathlib.Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            pathlib.Path(tmp_name).unlink(missing_ok=True)
            raise
