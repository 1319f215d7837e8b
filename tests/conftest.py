import random
from dataclasses import dataclass
from typing import Any

import pytest

from src.schulte_trainer.adapters.json_file_repository import JsonFileRepository
from src.schulte_trainer.domain import SessionEngine
from src.schulte_trainer.services.stats_service import StatsService


@dataclass
class FakeClock:
    t: float = 1000.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += float(dt)


class DictSessionStore:
    """st.session_state の代わりに dict を使う SessionStore。"""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def pop(self, key: str, default: Any = None) -> Any:
        return self.data.pop(key, default)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return SessionEngine(rng=random.Random(1234), clock=clock.now, wall_clock=lambda: 1_700_000_000.0)


@pytest.fixture
def store():
    return DictSessionStore()


@pytest.fixture
def repo(tmp_path):
    return JsonFileRepository(tmp_path / "data")


@pytest.fixture
def stats_service(repo):
    return StatsService(repo)


@pytest.fixture(autouse=True)
def _reset_runtime_config(monkeypatch):
    from src.schulte_trainer.services import config_loader

    monkeypatch.delenv(config_loader.CONFIG_ENV, raising=False)
    monkeypatch.delenv(config_loader.DATA_DIR_ENV, raising=False)
    config_loader.set_runtime_config(None)
    yield
    config_loader.set_runtime_config(None)
