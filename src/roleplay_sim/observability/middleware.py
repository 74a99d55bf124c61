"""Middlewares e contexto de observabilidade (correlation_id / session_id)."""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_session_id: ContextVar[str] = ContextVar("session_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente (ou vazio)."""

    return _correlation_id.get()


def get_session_id() -> str:
    """Retorna o prefixo do session_id em processamento (ou vazio)."""

    return _session_id.get()


def short_session_id(session_id: str) -> str:
    """Trunca o session_id para logs."""

    return session_id[:8] + "..." if len(session_id) > 8 else session_id


@contextmanager
def bind_session_id(session_id: str) -> Iterator[None]:
    """Associa o session_id ao contexto de log durante um turno."""

    token = _session_id.set(short_session_id(session_id))
    try:
        yield
    finally:
        _session_id.reset(token)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Gera ou propaga correlation_id em cada request."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        incoming = request.headers.get("x-correlation-id")
        correlation_id = incoming or str(uuid.uuid4())
        token = _correlation_id.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            _correlation_id.reset(token)

        response.headers["x-correlation-id"] = correlation_id
        return response
