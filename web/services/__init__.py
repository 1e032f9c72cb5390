"""
Web 서비스 패키지

비즈니스 로직 처리
"""

from web.services.sweep_service import SweepService

__all__ = [
    "SweepService",
]
