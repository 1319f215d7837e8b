"""セッションエンジン（1 回分の計測付きプレイ）。

状態遷移:
    Idle -> Running -> {Completed, TimedOut, Abandoned}

- 終了状態は確定であり、結果（SessionResult）はセッションごとに 1 回だけ発行される。
- start はどの状態からでも新しいセッションを Running で開始する（実行中なら先に放棄する）。
- エンジン自身はタイマーを持たない。時刻は tick(now) の呼び出し側が与える。
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.schulte_trainer.domain.errors import InvalidState
from src.schulte_trainer.domain.game import (
    Grid,
    GridConfig,
    expected_value,
    find_position,
    generate_grid,
    validate_config,
)

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    COMPLETED = "Completed"
    TIMED_OUT = "TimedOut"
    ABANDONED = "Abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.TIMED_OUT, SessionState.ABANDONED)


class Outcome(str, Enum):
    COMPLETED = "Completed"
    TIMED_OUT = "TimedOut"
    ABANDONED = "Abandoned"


@dataclass(frozen=True)
class TapResult:
    correct: bool
    finished: bool


@dataclass(frozen=True)
class SessionResult:
    """終了したセッションの結果。

    現状の契約:
    - elapsed_seconds: 完了時は実測、時間切れ時は制限時間ちょうど、放棄時はそれまでの経過
    - finished_at: 終了時の壁時計（epoch 秒）。履歴表示用で、古いデータでは None
    """

    config: GridConfig
    elapsed_seconds: float
    mistake_count: int
    outcome: Outcome
    finished_at: float | None = None


@dataclass
class Session:
    """進行中（または終了済み）のセッション。SessionEngine だけが更新する。"""

    config: GridConfig
    grid: Grid
    start_time: float
    current_target_index: int = 0
    mistake_count: int = 0
    state: SessionState = SessionState.RUNNING


@dataclass(frozen=True)
class SessionSnapshot:
    """描画用の読み取り専用ビュー。"""

    state: SessionState
    grid: Grid | None
    size: int
    total: int
    target_index: int
    next_value: int | None
    next_position: tuple[int, int] | None
    mistakes: int
    elapsed_seconds: float
    remaining_seconds: float | None


class SessionEngine:
    """1 つのアクティブなセッションを保持し、タップを検証する。

    Args:
        rng: 盤面生成用の乱数源（テストではシード固定）。
        clock: 単調増加する時刻関数。start/tap/abandon の既定時刻に使う。
        wall_clock: 結果の finished_at 用の壁時計。
        on_result: 結果発行時に 1 度だけ呼ばれるコールバック。
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        on_result: Callable[[SessionResult], None] | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._wall_clock = wall_clock
        self._on_result = on_result
        self._session: Session | None = None
        self._result: SessionResult | None = None

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.IDLE
        return self._session.state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def result(self) -> SessionResult | None:
        """現在のセッションの結果（未終了なら None）。"""
        return self._result

    def now(self) -> float:
        """エンジンの時計による現在時刻（tick に渡す値と同じ基準）。"""
        return self._clock()

    def set_result_listener(self, on_result: Callable[[SessionResult], None] | None) -> None:
        self._on_result = on_result

    def start(self, config: GridConfig) -> Session:
        """新しいセッションを開始する。設定が不正なら既存セッションには触れずに InvalidConfig。"""
        config = validate_config(config)
        grid = generate_grid(config.size, self._rng)
        if self.state is SessionState.RUNNING:
            self.abandon()
        self._session = Session(config=config, grid=grid, start_time=self._clock())
        self._result = None
        logger.info(
            "session started size=%d order=%s max_time=%ds",
            config.size,
            config.order.value,
            config.max_time_seconds,
        )
        return self._session

    def tap(self, value: int, now: float | None = None) -> TapResult:
        """タップされた数を検証する。

        - 期待値と一致すれば次へ進み、最後の 1 つなら Completed で結果を発行する。
        - 不一致（範囲外の値を含む）はミスとして数えるだけで、進行は止めない。
        """
        session = self._require_running("tap")
        config = session.config
        if value != expected_value(config, session.current_target_index):
            session.mistake_count += 1
            return TapResult(correct=False, finished=False)

        next_index = session.current_target_index + 1
        if next_index < config.total_cells:
            session.current_target_index = next_index
            return TapResult(correct=True, finished=False)

        at = self._clock() if now is None else now
        elapsed = max(0.0, at - session.start_time)
        session.current_target_index = next_index
        self._finish(Outcome.COMPLETED, elapsed)
        return TapResult(correct=True, finished=True)

    def tick(self, now: float) -> SessionResult | None:
        """制限時間を判定する。実行中でなければ何もしない。"""
        session = self._session
        if session is None or session.state is not SessionState.RUNNING:
            return None
        limit = session.config.max_time_seconds
        if now - session.start_time < limit:
            return None
        return self._finish(Outcome.TIMED_OUT, float(limit))

    def abandon(self, now: float | None = None) -> SessionResult | None:
        """実行中のセッションを放棄する。それ以外の状態では何もしない（例外は出さない）。"""
        session = self._session
        if session is None or session.state is not SessionState.RUNNING:
            return None
        at = self._clock() if now is None else now
        elapsed = min(max(0.0, at - session.start_time), float(session.config.max_time_seconds))
        return self._finish(Outcome.ABANDONED, elapsed)

    def snapshot(self, now: float | None = None) -> SessionSnapshot:
        session = self._session
        if session is None:
            return SessionSnapshot(
                state=SessionState.IDLE,
                grid=None,
                size=0,
                total=0,
                target_index=0,
                next_value=None,
                next_position=None,
                mistakes=0,
                elapsed_seconds=0.0,
                remaining_seconds=None,
            )
        config = session.config
        running = session.state is SessionState.RUNNING
        if running:
            at = self._clock() if now is None else now
            elapsed = min(max(0.0, at - session.start_time), float(config.max_time_seconds))
        else:
            elapsed = self._result.elapsed_seconds if self._result is not None else 0.0
        next_value = expected_value(config, session.current_target_index) if running else None
        return SessionSnapshot(
            state=session.state,
            grid=[list(row) for row in session.grid],
            size=config.size,
            total=config.total_cells,
            target_index=session.current_target_index,
            next_value=next_value,
            next_position=find_position(session.grid, next_value) if next_value is not None else None,
            mistakes=session.mistake_count,
            elapsed_seconds=elapsed,
            remaining_seconds=max(0.0, config.max_time_seconds - elapsed),
        )

    def _require_running(self, operation: str) -> Session:
        session = self._session
        if session is None or session.state is not SessionState.RUNNING:
            raise InvalidState(f"{operation} は実行中のセッションでのみ有効です（現在: {self.state.value}）")
        return session

    def _finish(self, outcome: Outcome, elapsed: float) -> SessionResult:
        session = self._session
        assert session is not None and session.state is SessionState.RUNNING
        result = SessionResult(
            config=session.config,
            elapsed_seconds=elapsed,
            mistake_count=session.mistake_count,
            outcome=outcome,
            finished_at=self._wall_clock(),
        )
        session.state = SessionState(outcome.value)
        self._result = result
        logger.info(
            "session finished outcome=%s elapsed=%.2fs mistakes=%d",
            outcome.value,
            elapsed,
            session.mistake_count,
        )
        if self._on_result is not None:
            self._on_result(result)
        return result
