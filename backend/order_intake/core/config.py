"""Configuración central basada en variables de entorno."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Valores globales leídos desde `.env` o el entorno."""

    environment: str = "development"
    log_level: str | None = Field(
        default=None,
        description="Nivel de logging global (ej. debug, info, warning). Cuando no se define, usa un valor por ambiente.",
    )
    request_log_level: str = Field(
        default="info",
        description=(
            "Nivel mínimo para registrar solicitudes en middleware. "
            "Valores más altos (warning/error) reducen registros de peticiones exitosas."
        ),
    )
    request_log_skip_prefixes: tuple[str, ...] = Field(
        default=("/health", "/favicon", "/docs", "/openapi"),
        description="Prefijos de ruta para los que no se registrarán eventos de request.started/completed.",
    )
    log_file_path: str | None = None
    host: str = "0.0.0.0"
    port: int = Field(
        default=3000,
        validation_alias=AliasChoices("ORDER_INTAKE_PORT", "PORT"),
    )
    # Despliegues previos usaban API_KEY para el endpoint de Groq
    extraction_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ORDER_INTAKE_EXTRACTION_API_KEY", "GROQ_API_KEY", "API_KEY"
        ),
    )
    extraction_base_url: str = "https://api.groq.com/openai/v1"
    extraction_model: str = "llama3-8b-8192"
    extraction_temperature: float = 0.2
    transcript_window_chars: int = Field(
        default=3000,
        ge=1,
        description="Número de caracteres finales de la transcripción enviados al extractor.",
    )
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ORDER_INTAKE_SUPABASE_URL", "SUPABASE_URL"),
    )
    supabase_service_role: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ORDER_INTAKE_SUPABASE_SERVICE_ROLE", "SUPABASE_SERVICE_ROLE_KEY"
        ),
    )
    supabase_table: str = "vapi_call"
    storage_timeout_seconds: float = 10.0
    vapi_webhook_secret: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ORDER_INTAKE_VAPI_WEBHOOK_SECRET", "VAPI_WEBHOOK_SECRET"
        ),
        description="Secreto compartido esperado en el encabezado `x-vapi-secret`; vacío desactiva la validación.",
    )
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="ORDER_INTAKE_", extra="ignore", populate_by_name=True
    )


settings = Settings()
