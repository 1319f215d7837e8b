"""ドメイン例外。

- InvalidConfig: 盤面サイズ・制限時間・順序モードが範囲外。UI では入力検証として表示する。
- InvalidState: 実行中でないセッションへの操作。呼び出し側のバグであり、利用者向けではない。
"""

from __future__ import annotations


class InvalidConfig(ValueError):
    """セッション設定が不正。"""


class InvalidState(RuntimeError):
    """現在のセッション状態では許可されない操作。"""
