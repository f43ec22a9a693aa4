"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계정과목
- journal_entries: 분개
- opening_balances: 기초잔액
- accounting: 재무상태표 합계, Auto-Balancer, 업무 이벤트, 검증
"""
