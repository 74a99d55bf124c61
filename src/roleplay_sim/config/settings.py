"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars (ou .env em desenvolvimento).
Nunca hardcode a chave da API de geração.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# TTL padrão de sessão ociosa (6h) e capacidade padrão do store em memória
DEFAULT_SESSION_TTL_SECONDS: int = 6 * 60 * 60
DEFAULT_SESSION_MAX_SESSIONS: int = 500


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "roleplay_sim"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Serviço de geração (OpenAI)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7  # Respostas do homeowner
    coach_temperature: float = 0.4  # Dicas de coaching
    generation_timeout_seconds: float = 30.0
    generation_max_retries: int = 0  # Retry pertence ao colaborador, não ao core

    # Sessão
    session_store_backend: str = "memory"  # memory | redis
    redis_url: str | None = None
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    session_max_sessions: int = DEFAULT_SESSION_MAX_SESSIONS
    session_id_header: str = "X-Session-ID"
    allow_default_session_id: bool = False  # Fallback compartilhado é opt-in
    default_session_id: str = "default"

    # Entrada do rep
    max_rep_line_chars: int = 2000

    def validate_session_store_config(self) -> list[str]:
        """Valida backend e limites do session store.

        Retorna lista de erros (vazia = tudo OK).
        """
        errors: list[str] = []
        backend = self.session_store_backend.lower()
        valid_backends = {"memory", "redis"}

        if backend not in valid_backends:
            errors.append(
                f"SESSION_STORE_BACKEND '{backend}' inválido. Valores válidos: {valid_backends}"
            )

        if backend == "redis" and not self.redis_url:
            errors.append("SESSION_STORE_BACKEND=redis requer REDIS_URL configurado")

        if self.session_ttl_seconds <= 0:
            errors.append("SESSION_TTL_SECONDS deve ser > 0")

        if self.session_max_sessions <= 0:
            errors.append("SESSION_MAX_SESSIONS deve ser > 0")

        if self.allow_default_session_id and not self.default_session_id.strip():
            errors.append("DEFAULT_SESSION_ID não pode ser vazio com ALLOW_DEFAULT_SESSION_ID")

        return errors

    def validate_generation_config(self) -> list[str]:
        """Valida configuração do serviço de geração."""
        errors: list[str] = []
        if self.is_production and not self.openai_api_key:
            errors.append("OPENAI_API_KEY obrigatório em produção")
        if self.generation_timeout_seconds <= 0:
            errors.append("GENERATION_TIMEOUT_SECONDS deve ser > 0")
        if self.generation_max_retries < 0:
            errors.append("GENERATION_MAX_RETRIES deve ser >= 0")
        for name in ("openai_temperature", "coach_temperature"):
            if not 0.0 <= getattr(self, name) <= 2.0:
                errors.append(f"{name.upper()} deve estar entre 0 e 2")
        if self.max_rep_line_chars <= 0:
            errors.append("MAX_REP_LINE_CHARS deve ser > 0")
        return errors

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings.

    A cache garante que mesmo múltiplas injeções não criam novos objetos.
    """
    return Settings()
