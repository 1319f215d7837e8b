from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

from src.schulte_trainer.domain.constants import GRID_SIZES, MAX_MAX_TIME, MIN_MAX_TIME
from src.schulte_trainer.domain.errors import InvalidConfig

# Grid の型は、1..size² の整数を要素とする二次元配列（行優先）
Grid = list[list[int]]


class OrderMode(str, Enum):
    """タップ順序。ASC は 1→N²、DESC は N²→1。"""

    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class GridConfig:
    """1 セッション分の設定。開始後は変更しない。

    現状の契約:
    - size: 盤面の一辺（5〜7）
    - max_time_seconds: 制限時間（30〜300 秒）
    - order: タップ順序
    """

    size: int
    max_time_seconds: int
    order: OrderMode = OrderMode.ASC

    @property
    def total_cells(self) -> int:
        return self.size * self.size


def _check_size(size: object) -> int:
    # bool は int のサブクラスなので明示的に除外する
    if isinstance(size, bool) or not isinstance(size, int) or size not in GRID_SIZES:
        raise InvalidConfig(f"盤面サイズは {', '.join(map(str, GRID_SIZES))} のいずれかです: {size!r}")
    return size


def parse_order(order: object) -> OrderMode:
    """文字列または OrderMode を OrderMode に変換する。未知の値は InvalidConfig。"""
    if isinstance(order, OrderMode):
        return order
    if isinstance(order, str):
        try:
            return OrderMode(order.strip().upper())
        except ValueError:
            pass
    raise InvalidConfig(f"順序モードは ASC または DESC です: {order!r}")


def validate_config(config: GridConfig) -> GridConfig:
    """設定を検証し、順序モードを正規化した GridConfig を返す。"""
    size = _check_size(config.size)
    max_time = config.max_time_seconds
    if isinstance(max_time, bool) or not isinstance(max_time, int):
        raise InvalidConfig(f"制限時間は整数秒で指定してください: {max_time!r}")
    if not MIN_MAX_TIME <= max_time <= MAX_MAX_TIME:
        raise InvalidConfig(f"制限時間は {MIN_MAX_TIME}〜{MAX_MAX_TIME} 秒です: {max_time}")
    order = parse_order(config.order)
    return GridConfig(size=size, max_time_seconds=max_time, order=order)


def generate_grid(size: int, rng: random.Random | None = None) -> Grid:
    """1..size² を一様ランダムに並べ替え、size×size に行優先で配置する。

    - rng を渡せばシード固定で再現できる。未指定なら毎回新しい乱数源を使う。
    """
    size = _check_size(size)
    source = rng if rng is not None else random.Random()
    values = list(range(1, size * size + 1))
    source.shuffle(values)
    return [values[r * size : (r + 1) * size] for r in range(size)]


def grid_positions(grid: Grid) -> Iterator[Tuple[int, int]]:
    """grid の実サイズに基づく走査位置を返す。"""
    for r, row in enumerate(grid):
        for c, _ in enumerate(row):
            yield r, c


def is_permutation(grid: Grid) -> bool:
    """grid が 1..n²（n は行数）の並べ替えになっているかを返す。"""
    n = len(grid)
    if any(len(row) != n for row in grid):
        return False
    values = sorted(grid[r][c] for r, c in grid_positions(grid))
    return values == list(range(1, n * n + 1))


def expected_value(config: GridConfig, index: int) -> int:
    """index 番目（0 始まり）にタップすべき数を返す。"""
    if parse_order(config.order) is OrderMode.DESC:
        return config.total_cells - index
    return index + 1


def expected_sequence(config: GridConfig) -> list[int]:
    """盤面の配置に依存しない、正しいタップ順の全体。"""
    return [expected_value(config, i) for i in range(config.total_cells)]


def find_position(grid: Grid, value: int) -> Tuple[int, int] | None:
    """value が置かれたセル (r, c) を返す。無ければ None。"""
    for r, c in grid_positions(grid):
        if grid[r][c] == value:
            return r, c
    return None


def format_time_short(seconds: float | None) -> str:
    """経過秒を短く整形する（1 分未満は 12.3s、以上は 1:02.5）。"""
    if seconds is None or seconds != seconds:
        return "--"
    seconds = round(max(0.0, float(seconds)), 1)
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    rest = seconds - minutes * 60
    return f"{minutes}:{rest:04.1f}"
