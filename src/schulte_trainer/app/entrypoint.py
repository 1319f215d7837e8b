import streamlit as st

from src.schulte_trainer.adapters.json_file_repository import JsonFileRepository
from src.schulte_trainer.adapters.session_store_streamlit import StSessionStore
from src.schulte_trainer.domain import SessionState
from src.schulte_trainer.logging_config import setup_logging
from src.schulte_trainer.services import app_state
from src.schulte_trainer.services.config_loader import get_app_title, get_data_dir, get_log_level, load_config_file
from src.schulte_trainer.services.stats_service import StatsService
from src.schulte_trainer.ui.board import handle_click, render_board, render_tap_feedback
from src.schulte_trainer.ui.header import render_header
from src.schulte_trainer.ui.sidebar import render_sidebar
from src.schulte_trainer.ui.status import render_result, render_timer


@st.cache_resource
def get_stats_service(data_dir: str) -> StatsService:
    """データディレクトリごとに 1 つの StatsService を共有する（記録は単一ライターで直列化）。"""
    return StatsService(JsonFileRepository(data_dir))


def bootstrap() -> StatsService:
    """設定ファイルとロギングを反映し、統計サービスを返す。"""
    load_config_file()
    setup_logging(get_log_level())
    return get_stats_service(str(get_data_dir()))


def main():
    # set_page_config は最初に 1 度だけ呼ぶ必要があるため、既定タイトルで固定する。
    default_title = "シュルテ・テーブル"
    st.set_page_config(page_title=default_title, layout="centered")

    try:
        service = bootstrap()
        store = StSessionStore()
        app_state.initialize_state(store, service)
    except OSError as e:
        st.error(f"データ読み込みに失敗しました: {e}")
        return

    st.title(get_app_title(default_title))

    # サイドバー: 設定 UI
    render_sidebar(store)

    # ヘッダー: 統計サマリーとスタート/中断
    render_header(store)
    st.divider()

    engine = store.get("engine")
    prefs = store.get("preferences")
    if engine.state is SessionState.RUNNING:
        render_timer(store)
        render_tap_feedback(store.get("last_tap"), prefs)
        render_board(engine.snapshot(), prefs, lambda r, c: handle_click(store, r, c))
        return

    result = store.get("last_result")
    if result is None:
        st.caption("数字を順番にできるだけ速くタップしてください。視線は中央に置いたまま探します。")
        return

    render_result(result, bool(store.get("last_result_new_best")))
    if st.button("閉じる"):
        app_state.reset_game(store)
        st.rerun()
