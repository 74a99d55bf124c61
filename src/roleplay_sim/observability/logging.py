"""Configuração de logging estruturado (JSON)."""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from roleplay_sim.observability.middleware import get_correlation_id, get_session_id


class ContextFilter(logging.Filter):
    """Insere correlation_id, session_id e service no record de log.

    Importante: nunca adicionar falas do rep ou respostas do cliente nos logs.
    """

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # Preserva valores passados explicitamente via `extra`
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        if not getattr(record, "session_id", None):
            record.session_id = get_session_id()
        record.service = self._service_name
        return True


def configure_logging(level: str, service_name: str) -> None:
    """Configura logging JSON com campos padrão do serviço."""

    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s "
        "%(correlation_id)s %(session_id)s %(service)s",
        rename_fields={"levelname": "level", "name": "logger"},
    )

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter(service_name))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger simples; o filtro injeta service/correlation_id/session_id."""

    return logging.getLogger(name)


def log_override(
    logger: logging.Logger,
    event: str,
    component: str,
    reason: str,
    **fields: object,
) -> None:
    """Log observável de quando o core sobrepõe a saída do serviço de geração.

    Args:
        logger: Logger instance
        event: Nome do evento (ex: "stall_breaker_fired", "intent_coerced")
        component: Componente que aplicou a sobreposição
        reason: Razão da sobreposição (ex: "objection_loop_saturated")
        fields: Campos adicionais sem falas

    Exemplo:
        log_override(
            logger, "stall_breaker_fired", "stall_breaker", "objection_loop_saturated",
            forced_intent="SOFT_YES_METER",
        )
    """
    extra: dict[str, object] = {
        "override_applied": True,
        "component": component,
        "reason": reason,
    }
    extra.update(fields)

    logger.info(event, extra=extra)
