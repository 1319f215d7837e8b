import pytest

from src.schulte_trainer.domain import (
    GridConfig,
    InvalidConfig,
    InvalidState,
    OrderMode,
    Outcome,
    SessionEngine,
    SessionState,
    expected_sequence,
    find_position,
    is_permutation,
)


def _config(size=5, max_time=60, order=OrderMode.ASC):
    return GridConfig(size=size, max_time_seconds=max_time, order=order)


def _collect(engine):
    results = []
    engine.set_result_listener(results.append)
    return results


def test_new_engine_is_idle(engine):
    assert engine.state is SessionState.IDLE
    assert engine.result is None
    snap = engine.snapshot()
    assert snap.state is SessionState.IDLE
    assert snap.grid is None


def test_start_initializes_running_session(engine, clock):
    session = engine.start(_config(size=6))
    assert engine.state is SessionState.RUNNING
    assert session.current_target_index == 0
    assert session.mistake_count == 0
    assert session.start_time == clock.t
    assert is_permutation(session.grid)
    assert len(session.grid) == 6


def test_start_rejects_invalid_config_without_creating_session(engine):
    with pytest.raises(InvalidConfig):
        engine.start(_config(size=8))
    assert engine.state is SessionState.IDLE
    assert engine.session is None


def test_invalid_config_does_not_touch_running_session(engine):
    results = _collect(engine)
    session = engine.start(_config())
    with pytest.raises(InvalidConfig):
        engine.start(_config(max_time=10))
    assert engine.session is session
    assert engine.state is SessionState.RUNNING
    assert results == []


def test_ascending_sequence_completes(engine, clock):
    results = _collect(engine)
    engine.start(_config(size=5, order=OrderMode.ASC))
    taps = []
    for value in range(1, 26):
        clock.advance(0.5)
        taps.append(engine.tap(value))
    assert all(t.correct for t in taps)
    assert [t.finished for t in taps] == [False] * 24 + [True]
    assert engine.state is SessionState.COMPLETED
    assert len(results) == 1
    assert results[0].outcome is Outcome.COMPLETED
    assert results[0].elapsed_seconds == pytest.approx(12.5)
    assert results[0].mistake_count == 0
    assert results[0].finished_at == 1_700_000_000.0
    assert engine.result == results[0]


def test_descending_sequence_completes(engine):
    cfg = _config(size=7, order=OrderMode.DESC)
    engine.start(cfg)
    taps = [engine.tap(v) for v in expected_sequence(cfg)]
    assert all(t.correct for t in taps)
    assert taps[-1].finished
    assert engine.state is SessionState.COMPLETED


def test_mistake_is_counted_without_progress(engine):
    engine.start(_config())
    result = engine.tap(7)
    assert result.correct is False
    assert result.finished is False
    assert engine.session.mistake_count == 1
    assert engine.session.current_target_index == 0
    assert engine.state is SessionState.RUNNING


def test_mistakes_do_not_block_progress(engine):
    engine.start(_config())
    engine.tap(3)
    engine.tap(3)
    assert engine.tap(1).correct
    assert engine.session.current_target_index == 1
    assert engine.session.mistake_count == 2


@pytest.mark.parametrize("value", [0, 26, -1, 1000])
def test_out_of_range_tap_is_a_mistake(engine, value):
    engine.start(_config())
    assert engine.tap(value).correct is False
    assert engine.session.mistake_count == 1


def test_descending_skip_ahead_is_rejected(engine):
    engine.start(_config(size=5, max_time=60, order=OrderMode.DESC))
    assert engine.tap(25).correct is True
    second = engine.tap(1)
    assert second.correct is False
    assert engine.session.current_target_index == 1


def test_completed_mistakes_are_reported(engine):
    results = _collect(engine)
    engine.start(_config())
    engine.tap(2)
    for value in range(1, 26):
        engine.tap(value)
    assert results[0].mistake_count == 1


def test_tap_before_start_raises(engine):
    with pytest.raises(InvalidState):
        engine.tap(1)


def test_tap_after_completion_raises_and_changes_nothing(engine):
    results = _collect(engine)
    engine.start(_config())
    for value in range(1, 26):
        engine.tap(value)
    with pytest.raises(InvalidState):
        engine.tap(1)
    assert engine.session.mistake_count == 0
    assert engine.session.current_target_index == 25
    assert len(results) == 1


def test_tick_times_out_at_limit(engine, clock):
    results = _collect(engine)
    engine.start(_config(max_time=30))
    engine.tap(1)
    assert engine.tick(clock.t + 29.999) is None
    assert engine.state is SessionState.RUNNING
    result = engine.tick(clock.t + 30)
    assert engine.state is SessionState.TIMED_OUT
    assert result.outcome is Outcome.TIMED_OUT
    assert result.elapsed_seconds == 30
    assert results == [result]


def test_tick_after_late_call_still_reports_limit(engine, clock):
    engine.start(_config(max_time=45))
    result = engine.tick(clock.t + 300)
    assert result.elapsed_seconds == 45


def test_tick_is_noop_when_not_running(engine, clock):
    results = _collect(engine)
    assert engine.tick(clock.t + 1000) is None
    engine.start(_config(max_time=30))
    engine.tick(clock.t + 30)
    assert engine.tick(clock.t + 60) is None
    assert len(results) == 1


def test_tap_after_timeout_raises(engine, clock):
    engine.start(_config(max_time=30))
    engine.tick(clock.t + 30)
    with pytest.raises(InvalidState):
        engine.tap(1)


def test_final_tap_wins_over_tick_at_same_instant(engine, clock):
    results = _collect(engine)
    engine.start(_config(max_time=30))
    for value in range(1, 25):
        engine.tap(value)
    now = clock.t + 30
    assert engine.tap(25, now=now).finished
    assert engine.tick(now) is None
    assert engine.state is SessionState.COMPLETED
    assert [r.outcome for r in results] == [Outcome.COMPLETED]
    assert results[0].elapsed_seconds == 30


def test_abandon_reports_elapsed(engine, clock):
    results = _collect(engine)
    engine.start(_config())
    clock.advance(7.25)
    result = engine.abandon()
    assert engine.state is SessionState.ABANDONED
    assert result.outcome is Outcome.ABANDONED
    assert result.elapsed_seconds == pytest.approx(7.25)
    assert results == [result]


def test_abandon_is_safe_when_not_running(engine):
    results = _collect(engine)
    assert engine.abandon() is None
    engine.start(_config())
    engine.abandon()
    assert engine.abandon() is None
    assert len(results) == 1


def test_start_while_running_abandons_previous(engine, clock):
    results = _collect(engine)
    first = engine.start(_config())
    engine.tap(1)
    clock.advance(3)
    second = engine.start(_config(size=6))
    assert second is not first
    assert engine.state is SessionState.RUNNING
    assert engine.result is None
    assert len(results) == 1
    assert results[0].outcome is Outcome.ABANDONED
    assert results[0].config.size == 5


def test_start_after_terminal_state_resets(engine, clock):
    results = _collect(engine)
    engine.start(_config(max_time=30))
    engine.tick(clock.t + 30)
    engine.start(_config())
    assert engine.state is SessionState.RUNNING
    assert engine.session.current_target_index == 0
    assert len(results) == 1


def test_snapshot_while_running(engine, clock):
    engine.start(_config(size=5, max_time=60, order=OrderMode.DESC))
    engine.tap(25)
    engine.tap(3)
    clock.advance(10)
    snap = engine.snapshot()
    assert snap.state is SessionState.RUNNING
    assert snap.size == 5
    assert snap.total == 25
    assert snap.target_index == 1
    assert snap.next_value == 24
    assert snap.next_position == find_position(engine.session.grid, 24)
    assert snap.mistakes == 1
    assert snap.elapsed_seconds == pytest.approx(10)
    assert snap.remaining_seconds == pytest.approx(50)


def test_snapshot_grid_is_a_copy(engine):
    engine.start(_config())
    snap = engine.snapshot()
    snap.grid[0][0] = -1
    assert engine.session.grid[0][0] != -1


def test_snapshot_after_timeout(engine, clock):
    engine.start(_config(max_time=30))
    engine.tick(clock.t + 30)
    snap = engine.snapshot(now=clock.t + 100)
    assert snap.state is SessionState.TIMED_OUT
    assert snap.next_value is None
    assert snap.next_position is None
    assert snap.elapsed_seconds == 30
    assert snap.remaining_seconds == 0


def test_engines_are_independent(clock):
    a = SessionEngine(clock=clock.now)
    b = SessionEngine(clock=clock.now)
    a.start(_config())
    assert b.state is SessionState.IDLE
