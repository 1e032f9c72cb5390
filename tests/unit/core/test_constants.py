"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 기본값이 유효한지 확인
"""

from pathlib import Path

from core.constants import PROJECT_ROOT, Defaults, MoneyScale, Paths


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_is_absolute_path(self) -> None:
        assert isinstance(PROJECT_ROOT, Path)
        assert PROJECT_ROOT.is_absolute()

    def test_contains_core_directory(self) -> None:
        assert (PROJECT_ROOT / "core").is_dir()


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        for name in ("CONFIG_DIR", "DATA_DIR", "LOGS_DIR", "WORKER_LOGS_DIR",
                     "WEB_LOGS_DIR", "SETTINGS_FILE", "PROD_DB", "DEV_DB"):
            assert isinstance(getattr(Paths, name), Path), name

    def test_db_files_in_data_dir(self) -> None:
        assert Paths.PROD_DB.parent == Paths.DATA_DIR
        assert Paths.DEV_DB.parent == Paths.DATA_DIR
        assert Paths.PROD_DB != Paths.DEV_DB

    def test_log_dirs_under_logs(self) -> None:
        assert Paths.WORKER_LOGS_DIR.parent == Paths.LOGS_DIR
        assert Paths.WEB_LOGS_DIR.parent == Paths.LOGS_DIR


class TestDefaults:
    """Defaults 테스트"""

    def test_sweep_schedule_format(self) -> None:
        hour, minute = Defaults.SWEEP_SCHEDULE.split(":")
        assert 0 <= int(hour) < 24
        assert 0 <= int(minute) < 60

    def test_positive_limits(self) -> None:
        assert Defaults.LEDGER_MAX_RETRIES >= 1
        assert Defaults.WORKER_TICK_INTERVAL_SEC > 0
        assert 0 < Defaults.PAGE_SIZE <= Defaults.MAX_PAGE_SIZE

    def test_money_scale(self) -> None:
        assert MoneyScale.DECIMAL_PLACES == 2
