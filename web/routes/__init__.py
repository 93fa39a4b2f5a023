"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- memos: 일일 현금 메모 원장 API
"""
