"""
ロギング設定
- パッケージ `src.schulte_trainer` 配下のロガー（各モジュールの getLogger(__name__)）にコンソール出力を設定する。
"""

from __future__ import annotations

import logging
import sys

_PACKAGE_LOGGER = "src.schulte_trainer"


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> logging.Logger:
    """パッケージのロガーを構成して返す。

    Streamlit の再実行で何度呼ばれてもハンドラが重複しないよう、既存ハンドラは入れ替える。
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
