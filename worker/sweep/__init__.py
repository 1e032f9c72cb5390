"""
Sweep 모듈

반복 거래 템플릿을 주기적으로 실체화.
"""

from worker.sweep.engine import RecurringSweepEngine, SweepResult
from worker.sweep.schedule import DailySchedule, SweepScheduler

__all__ = [
    "RecurringSweepEngine",
    "SweepResult",
    "DailySchedule",
    "SweepScheduler",
]
