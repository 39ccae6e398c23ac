"""Axiom 쿼리 이벤트 로깅 모듈.

Axiom query event logging module.
Sends one structured event per query-layer call (operation, condition,
paging, row counts, duration, error) to Axiom. When Axiom is not
configured the logger is a pass-through.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from axiom_py import Client as AxiomClient

from member_search.config import settings


def _truncate(value: Any, max_len: int = 500) -> Any:
    """로그 크기 제한 — Truncate large values to prevent oversized logs."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


class QueryEventLogger:
    """쿼리 호출 결과를 Axiom에 기록하는 로거.

    Logger that ingests query-layer events into Axiom.
    Usage:
        async with query_logger.track("search", condition=cond.model_dump()) as event:
            ...
            event["row_count"] = len(rows)
    """

    def __init__(self, token: str | None = None, dataset: str | None = None) -> None:
        token = settings.AXIOM_API_TOKEN if token is None else token
        self._dataset: str = settings.AXIOM_DATASET if dataset is None else dataset
        self._client: AxiomClient | None = None

        if token and self._dataset:
            self._client = AxiomClient(token=token)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def emit(self, event: dict[str, Any]) -> None:
        """이벤트 하나를 전송합니다 (Send one event)."""
        # Axiom 미설정시 패스스루 — Pass through if Axiom not configured
        if not self._client:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            pass  # 로깅 실패가 쿼리 처리에 영향주지 않도록 — Never break a query on log failure

    @asynccontextmanager
    async def track(self, operation: str, **fields: Any) -> AsyncIterator[dict[str, Any]]:
        """블록 실행 시간과 오류를 포함한 이벤트를 기록합니다.

        Record an event covering the wrapped block: duration in ms, any
        extra fields the block sets, and the error type/message if it raised.
        The error itself is re-raised.

        Args:
            operation: 작업 이름 (Operation name, e.g. "search")
            **fields: 이벤트 추가 필드 (Extra event fields)

        Yields:
            dict[str, Any]: 블록에서 채울 수 있는 이벤트 (Mutable event dict)
        """
        event: dict[str, Any] = {"app": settings.APP_NAME, "operation": operation, **fields}
        start_time = time.perf_counter()
        try:
            yield event
        except Exception as exc:
            event["error"] = _truncate(f"{type(exc).__name__}: {exc}")
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            # 동기 HTTP 전송은 스레드에서 — the Axiom client is blocking, keep it off the event loop
            if self.enabled:
                await asyncio.to_thread(self.emit, event)


# 싱글턴 인스턴스 — Singleton instance
query_logger: QueryEventLogger = QueryEventLogger()
