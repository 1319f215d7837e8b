from __future__ import annotations

import logging
import os
import pathlib
import tomllib
from typing import Any

from src.schulte_trainer.app.state import Preferences, coerce_preference

logger = logging.getLogger(__name__)

# 設定ファイルとデータディレクトリの環境変数
CONFIG_ENV = "SCHULTE_TRAINER_CONFIG"
DATA_DIR_ENV = "SCHULTE_TRAINER_DATA_DIR"
DEFAULT_CONFIG_PATH = "config.toml"
DEFAULT_DATA_DIR = "~/.schulte_trainer"


class _RuntimeStore:
    config: dict[str, Any] | None = None


_RUNTIME_STORE = _RuntimeStore()


def set_runtime_config(cfg: dict[str, Any] | None) -> None:
    """実行時に与えられた設定を保持する。None で解除。"""
    _RUNTIME_STORE.config = cfg if isinstance(cfg, dict) else None


def set_runtime_toml_bytes(data: bytes) -> None:
    """TOML バイト列から実行時設定を反映する。読めなければ解除する。"""
    try:
        cfg = tomllib.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("invalid config TOML: %s", e)
        set_runtime_config(None)
        return
    set_runtime_config(cfg)


def load_config_file(path: str | pathlib.Path | None = None) -> bool:
    """TOML ファイルを読み込んで実行時設定にする。

    - path 未指定時は環境変数 SCHULTE_TRAINER_CONFIG、無ければ config.toml。
    - ファイルが無い場合は何もしない（False を返す）。
    """
    src = pathlib.Path(path or os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH).expanduser()
    if not src.is_file():
        return False
    try:
        set_runtime_toml_bytes(src.read_bytes())
    except OSError as e:
        logger.warning("could not read config %s: %s", src, e)
        return False
    logger.info("loaded config from %s", src)
    return _RUNTIME_STORE.config is not None


def _get_config() -> dict[str, Any]:
    """現在有効な設定を返す。

    方針: 実行時設定があればそれを返し、無ければ空辞書を返して各呼び出し側で default 値にフォールバックさせる。
    """
    if isinstance(_RUNTIME_STORE.config, dict):
        return _RUNTIME_STORE.config
    return {}


def _section(name: str) -> dict[str, Any]:
    section = _get_config().get(name)
    return section if isinstance(section, dict) else {}


def get_app_title(default: str = "シュルテ・テーブル") -> str:
    title = _get_config().get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return default


def get_data_dir() -> pathlib.Path:
    """統計・設定の保存先。[storage] data_dir > 環境変数 > ~/.schulte_trainer の順。"""
    v = _section("storage").get("data_dir")
    if not (isinstance(v, str) and v.strip()):
        v = os.environ.get(DATA_DIR_ENV) or DEFAULT_DATA_DIR
    return pathlib.Path(v.strip()).expanduser()


def get_log_level(default: str = "INFO") -> str:
    v = _section("logging").get("level")
    if isinstance(v, str) and v.strip().upper() in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        return v.strip().upper()
    return default


def load_default_preferences_values() -> dict[str, int | bool]:
    """[preferences] から妥当な値だけを取り出す。不正な型・範囲は各呼び出し側でコード既定値へフォールバックする。"""
    result: dict[str, int | bool] = {}
    for key, value in _section("preferences").items():
        try:
            result[key] = coerce_preference(key, value)
        except ValueError:
            logger.warning("ignoring config preference %s=%r", key, value)
    return result


def load_default_preferences() -> Preferences:
    return Preferences(**load_default_preferences_values())
