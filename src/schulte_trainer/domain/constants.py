"""
共通定数
- コメントは現状の目的・契約・使い方のみを記載する。
"""

# 選択可能な盤面サイズ（一辺のマス数）
GRID_SIZES: tuple[int, ...] = (5, 6, 7)

# 制限時間（秒）の範囲と UI スライダーの刻み
MIN_MAX_TIME: int = 30
MAX_MAX_TIME: int = 300
MAX_TIME_STEP: int = 10

# 設定の既定値
DEFAULT_GRID_SIZE: int = 5
DEFAULT_MAX_TIME: int = 120

# タイマー表示の更新間隔（秒）
TICK_INTERVAL: float = 0.5

# 永続化ファイル名
STATS_FILE_NAME: str = "stats.json"
PREFERENCES_FILE_NAME: str = "preferences.json"
