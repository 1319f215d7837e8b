"""履歴表示用の集計（Streamlit 非依存）。

戻り値の契約:
- history_frame: 1 行 1 セッション、新しい順。列は HISTORY_COLUMNS。
- summary_by_key: 1 行 1 (サイズ, 順序)。列は SUMMARY_COLUMNS。
"""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from src.schulte_trainer.domain import Outcome, Stats, best_time_key

HISTORY_COLUMNS = ["日時", "盤面", "順序", "制限時間", "タイム", "ミス", "結果"]
SUMMARY_COLUMNS = ["盤面", "順序", "回数", "完了", "ベスト", "平均"]

# 結果の表示ラベル
OUTCOME_LABELS: dict[Outcome, str] = {
    Outcome.COMPLETED: "完了",
    Outcome.TIMED_OUT: "時間切れ",
    Outcome.ABANDONED: "中断",
}


def _format_finished_at(ts: float | None) -> str:
    if ts is None:
        return "-"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M")


def history_frame(stats: Stats) -> pd.DataFrame:
    rows = [
        {
            "日時": _format_finished_at(r.finished_at),
            "盤面": f"{r.config.size}×{r.config.size}",
            "順序": r.config.order.value,
            "制限時間": r.config.max_time_seconds,
            "タイム": round(r.elapsed_seconds, 2),
            "ミス": r.mistake_count,
            "結果": OUTCOME_LABELS[r.outcome],
        }
        for r in reversed(stats.history)
    ]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def summary_by_key(stats: Stats) -> pd.DataFrame:
    """(サイズ, 順序) ごとの回数・完了数・ベスト・完了時の平均タイム。"""
    if not stats.history:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.DataFrame(
        [
            {
                "size": r.config.size,
                "order": r.config.order.value,
                "elapsed": r.elapsed_seconds,
                "completed": r.outcome is Outcome.COMPLETED,
            }
            for r in stats.history
        ]
    )
    rows = []
    for (size, order), group in df.groupby(["size", "order"], sort=True):
        done = group[group["completed"]]
        # ベストは統計側の値を優先（履歴が外部で間引かれていても正しく出す）
        best = stats.best_times.get(best_time_key(int(size), str(order)))
        if best is None and not done.empty:
            best = float(done["elapsed"].min())
        rows.append(
            {
                "盤面": f"{size}×{size}",
                "順序": order,
                "回数": int(len(group)),
                "完了": int(len(done)),
                "ベスト": round(best, 2) if best is not None else None,
                "平均": round(float(done["elapsed"].mean()), 2) if not done.empty else None,
            }
        )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
