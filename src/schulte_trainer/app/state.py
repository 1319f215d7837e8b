"""アプリケーションの状態モデル定義。

目的:
- UI とドメインの境界で用いる明示的な設定構造を提供する。
- 保存された設定の復元では、型や範囲が不正な項目だけ既定値に戻す。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any

from src.schulte_trainer.domain import (
    DEFAULT_GRID_SIZE,
    DEFAULT_MAX_TIME,
    GRID_SIZES,
    MAX_MAX_TIME,
    MIN_MAX_TIME,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preferences:
    """利用者の既定設定。

    現状の契約:
    - default_grid_size / default_max_time は設定画面の初期値にのみ使う。
    - haptic_feedback はタップ時の振動（対応端末のみ）。
    - show_hints は次にタップする数の強調表示。
    - show_fixation_dot は盤面中央の注視点の表示。
    """

    default_grid_size: int = DEFAULT_GRID_SIZE
    default_max_time: int = DEFAULT_MAX_TIME
    haptic_feedback: bool = True
    show_hints: bool = False
    show_fixation_dot: bool = True


# 永続化時のキー（camelCase）と属性名の対応
_PREFERENCE_KEYS: dict[str, str] = {
    "defaultGridSize": "default_grid_size",
    "defaultMaxTime": "default_max_time",
    "hapticFeedback": "haptic_feedback",
    "showHints": "show_hints",
    "showFixationDot": "show_fixation_dot",
}


def preferences_to_dict(preferences: Preferences) -> dict[str, Any]:
    values = asdict(preferences)
    return {key: values[attr] for key, attr in _PREFERENCE_KEYS.items()}


def coerce_preference(name: str, value: Any) -> Any:  # noqa: ANN401 - 項目ごとに型が異なる
    """属性名 name に対して value が妥当ならそれを返し、不正なら ValueError。"""
    if name == "default_grid_size":
        if isinstance(value, bool) or not isinstance(value, int) or value not in GRID_SIZES:
            raise ValueError(f"invalid default_grid_size: {value!r}")
        return value
    if name == "default_max_time":
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_MAX_TIME <= value <= MAX_MAX_TIME:
            raise ValueError(f"invalid default_max_time: {value!r}")
        return value
    if name in ("haptic_feedback", "show_hints", "show_fixation_dot"):
        if not isinstance(value, bool):
            raise ValueError(f"invalid {name}: {value!r}")
        return value
    raise ValueError(f"unknown preference: {name}")


def preferences_from_dict(data: object, base: Preferences | None = None) -> Preferences:
    """保存データから Preferences を復元する。不正な項目は base（既定値）のまま残す。"""
    result = base or Preferences()
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("preferences data is not a mapping; using defaults")
        return result
    updates: dict[str, Any] = {}
    for key, attr in _PREFERENCE_KEYS.items():
        if key not in data:
            continue
        try:
            updates[attr] = coerce_preference(attr, data[key])
        except ValueError as e:
            logger.warning("ignoring stored preference: %s", e)
    return replace(result, **updates)
