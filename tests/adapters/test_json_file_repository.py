import json

from src.schulte_trainer.app.state import Preferences
from src.schulte_trainer.domain import GridConfig, OrderMode, Outcome, SessionResult, Stats, record_result


def test_missing_files_give_defaults(repo):
    assert repo.load_stats() == Stats()
    assert repo.load_preferences() is None


def test_stats_save_and_load(repo):
    result = SessionResult(
        config=GridConfig(size=6, max_time_seconds=90, order=OrderMode.DESC),
        elapsed_seconds=41.75,
        mistake_count=3,
        outcome=Outcome.COMPLETED,
        finished_at=1_700_000_123.5,
    )
    stats = record_result(result, Stats())
    repo.save_stats(stats)
    assert repo.load_stats() == stats
    on_disk = json.loads(repo.stats_path.read_text(encoding="utf-8"))
    assert on_disk["bestTimes"] == {"6-DESC": 41.75}
    assert on_disk["totalSessions"] == 1


def test_corrupt_stats_file_recovers(repo):
    repo.stats_path.parent.mkdir(parents=True, exist_ok=True)
    repo.stats_path.write_text("{not json", encoding="utf-8")
    assert repo.load_stats() == Stats()


def test_save_overwrites_without_leftovers(repo):
    repo.save_stats(Stats(total_sessions=1))
    repo.save_stats(Stats(total_sessions=2))
    assert repo.load_stats().total_sessions == 2
    leftovers = [p.name for p in repo.data_dir.iterdir() if p.name.endswith(".tmp")]
    assert leftovers == []


def test_preferences_save_and_load(repo):
    prefs = Preferences(default_grid_size=6, default_max_time=150, haptic_feedback=False, show_hints=True)
    repo.save_preferences(prefs)
    assert repo.load_preferences() == prefs
    on_disk = json.loads(repo.preferences_path.read_text(encoding="utf-8"))
    assert on_disk["defaultGridSize"] == 6
    assert on_disk["showHints"] is True


def test_invalid_preference_values_fall_back(repo):
    repo.preferences_path.parent.mkdir(parents=True, exist_ok=True)
    repo.preferences_path.write_text(
        json.dumps({"defaultGridSize": 12, "defaultMaxTime": 200, "showHints": "yes"}), encoding="utf-8"
    )
    prefs = repo.load_preferences()
    assert prefs.default_grid_size == Preferences().default_grid_size
    assert prefs.default_max_time == 200
    assert prefs.show_hints is Preferences().show_hints
