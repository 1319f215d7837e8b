"""ドメイン層（純粋ロジック/データモデル）。

提供物:
- 盤面生成（GridGenerator 相当の generate_grid）
- セッションエンジン（SessionEngine）
- 統計集計（StatsAggregator）
"""

from src.schulte_trainer.domain.constants import (
    DEFAULT_GRID_SIZE,
    DEFAULT_MAX_TIME,
    GRID_SIZES,
    MAX_MAX_TIME,
    MAX_TIME_STEP,
    MIN_MAX_TIME,
)
from src.schulte_trainer.domain.errors import InvalidConfig, InvalidState
from src.schulte_trainer.domain.game import (
    Grid,
    GridConfig,
    OrderMode,
    expected_sequence,
    expected_value,
    find_position,
    format_time_short,
    generate_grid,
    grid_positions,
    is_permutation,
    parse_order,
    validate_config,
)
from src.schulte_trainer.domain.session import (
    Outcome,
    Session,
    SessionEngine,
    SessionResult,
    SessionSnapshot,
    SessionState,
    TapResult,
)
from src.schulte_trainer.domain.stats import (
    Stats,
    StatsAggregator,
    best_time_key,
    improves_best,
    merge_stats,
    record_result,
    stats_from_dict,
    stats_to_dict,
)

__all__ = [
    # constants
    "GRID_SIZES",
    "MIN_MAX_TIME",
    "MAX_MAX_TIME",
    "MAX_TIME_STEP",
    "DEFAULT_GRID_SIZE",
    "DEFAULT_MAX_TIME",
    # errors
    "InvalidConfig",
    "InvalidState",
    # game
    "Grid",
    "GridConfig",
    "OrderMode",
    "parse_order",
    "validate_config",
    "generate_grid",
    "grid_positions",
    "is_permutation",
    "expected_value",
    "expected_sequence",
    "find_position",
    "format_time_short",
    # session
    "Outcome",
    "Session",
    "SessionEngine",
    "SessionResult",
    "SessionSnapshot",
    "SessionState",
    "TapResult",
    # stats
    "Stats",
    "StatsAggregator",
    "best_time_key",
    "improves_best",
    "record_result",
    "merge_stats",
    "stats_to_dict",
    "stats_from_dict",
]
