"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → spendledger/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    # Recurring Sweep 스케줄 (UTC, 매일 02:00)
    SWEEP_SCHEDULE: str = "02:00"
    SWEEP_BATCH_LIMIT: int = 0  # 0 = 제한 없음
    WORKER_TICK_INTERVAL_SEC: int = 30

    # 잔액 CAS 충돌 시 작업 전체 재시도 횟수
    LEDGER_MAX_RETRIES: int = 3

    # 목록 조회 페이지 크기
    PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 200


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WORKER_LOGS_DIR: Path = LOGS_DIR / "worker"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    PROD_DB: Path = DATA_DIR / "spendledger_prod.db"
    DEV_DB: Path = DATA_DIR / "spendledger_dev.db"


class MoneyScale:
    """금액 자릿수 상수"""

    DECIMAL_PLACES: int = 2
    # 19자리 정밀도 (정수부 17 + 소수부 2)
    MAX_DIGITS: int = 19
