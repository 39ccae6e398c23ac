"""서비스 패키지 — 쿼리 조합 계층.

Service package — Query composition layer.
Services call repositories for DB operations and emit one query event per call.
"""
