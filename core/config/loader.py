"""
설정 로더

settings.yaml 로드 및 섹션별 설정 생성.
파일이 없으면 기본값 사용.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from adapters.db.sqlite_adapter import get_db_path
from core.constants import Defaults, Paths
from core.types import AppMode


@dataclass(frozen=True)
class SweepSettings:
    """반복 거래 Sweep 설정"""

    schedule: str = Defaults.SWEEP_SCHEDULE  # "HH:MM" (UTC)
    batch_limit: int = Defaults.SWEEP_BATCH_LIMIT
    run_on_startup: bool = False


@dataclass(frozen=True)
class WorkerSettings:
    """Worker 프로세스 설정"""

    tick_interval_sec: float = Defaults.WORKER_TICK_INTERVAL_SEC


@dataclass(frozen=True)
class LedgerSettings:
    """Ledger 설정"""

    max_retries: int = Defaults.LEDGER_MAX_RETRIES


@dataclass(frozen=True)
class WebSettings:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class AppConfig:
    """전체 설정 (불변)"""

    mode: AppMode = AppMode.DEVELOPMENT
    db_path: Path = field(default_factory=lambda: get_db_path(AppMode.DEVELOPMENT))
    log_level: str = Defaults.LOG_LEVEL
    sweep: SweepSettings = field(default_factory=SweepSettings)
    worker: WorkerSettings = field(default_factory=WorkerSettings)
    ledger: LedgerSettings = field(default_factory=LedgerSettings)
    web: WebSettings = field(default_factory=WebSettings)


class SettingsLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def load_settings(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스 (파일이 없으면 기본값)

    Raises:
        SettingsLoadError: 형식이 잘못되었거나 값이 유효하지 않은 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return AppConfig()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    # mode 검증
    mode_str = str(data.get("mode", AppMode.DEVELOPMENT.value)).lower()
    try:
        mode = AppMode(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in AppMode]
        raise SettingsLoadError(
            f"유효하지 않은 mode입니다: '{mode_str}'. 유효한 값: {valid_modes}"
        ) from e

    database = _section(data, "database")
    db_path = Path(database["path"]) if database.get("path") else get_db_path(mode)

    sweep_data = _section(data, "sweep")
    sweep = SweepSettings(
        schedule=str(sweep_data.get("schedule", Defaults.SWEEP_SCHEDULE)),
        batch_limit=_int(sweep_data, "sweep.batch_limit", Defaults.SWEEP_BATCH_LIMIT, minimum=0),
        run_on_startup=_bool(sweep_data, "sweep.run_on_startup", False),
    )
    _validate_schedule(sweep.schedule)

    worker_data = _section(data, "worker")
    tick = worker_data.get("tick_interval_sec", Defaults.WORKER_TICK_INTERVAL_SEC)
    if not isinstance(tick, (int, float)) or isinstance(tick, bool) or tick <= 0:
        raise SettingsLoadError(f"worker.tick_interval_sec는 양수여야 합니다: {tick!r}")

    ledger_data = _section(data, "ledger")
    web_data = _section(data, "web")

    return AppConfig(
        mode=mode,
        db_path=db_path,
        log_level=str(data.get("log_level", Defaults.LOG_LEVEL)).upper(),
        sweep=sweep,
        worker=WorkerSettings(tick_interval_sec=float(tick)),
        ledger=LedgerSettings(
            max_retries=_int(ledger_data, "ledger.max_retries", Defaults.LEDGER_MAX_RETRIES, minimum=1),
        ),
        web=WebSettings(
            host=str(web_data.get("host", Defaults.WEB_HOST)),
            port=_int(web_data, "web.port", Defaults.WEB_PORT, minimum=1),
        ),
    )


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return section


def _int(section: dict[str, Any], key: str, default: int, minimum: int) -> int:
    value = section.get(key.split(".")[-1], default)
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise SettingsLoadError(f"{key}는 {minimum} 이상의 정수여야 합니다: {value!r}")
    return value


def _bool(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key.split(".")[-1], default)
    if not isinstance(value, bool):
        raise SettingsLoadError(f"{key}는 true/false여야 합니다: {value!r}")
    return value


def _validate_schedule(schedule: str) -> None:
    parts = schedule.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise SettingsLoadError(f"sweep.schedule 형식 오류 (HH:MM): {schedule!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise SettingsLoadError(f"sweep.schedule 범위 오류 (HH:MM): {schedule!r}")


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_settings(settings_path)

    @property
    def config(self) -> AppConfig:
        assert self._config is not None
        return self._config

    @property
    def mode(self) -> AppMode:
        """현재 실행 모드"""
        return self.config.mode

    @property
    def db_path(self) -> Path:
        """현재 모드의 DB 경로"""
        return self.config.db_path

    @property
    def log_level(self) -> str:
        return self.config.log_level

    @property
    def sweep(self) -> SweepSettings:
        return self.config.sweep

    @property
    def worker(self) -> WorkerSettings:
        return self.config.worker

    @property
    def ledger(self) -> LedgerSettings:
        return self.config.ledger

    @property
    def web(self) -> WebSettings:
        return self.config.web

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
