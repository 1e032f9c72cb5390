"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- users: 사용자
- accounts: 계좌
- transactions: 거래 (잔액 반영)
- sweep: 반복 거래 Sweep 실행/상태
"""
