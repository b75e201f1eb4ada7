"""
Infrastructure 계층 -- 모든 I/O 관련 모듈

서브패키지:
- database: DB 커넥션, Repository, 스키마
- identity: Bearer 토큰 검증 (인증 서버)
- ai: 재고 위험도 분류 (AI 게이트웨이)
"""
