import os
import logging
from pydantic import BaseModel, Field
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class AISettings(BaseModel):
    openrouter_api_key: Optional[str] = Field(default=os.getenv("OPENROUTER_API_KEY"))
    base_url: str = os.getenv("AI_BASE_URL", "https://openrouter.ai/api/v1/chat/completions")
    model_name: str = Field(default=os.getenv("AI_MODEL_NAME", "openai/gpt-4o"))
    fallback_model: str = os.getenv("AI_FALLBACK_MODEL", "openai/gpt-4o-mini")
    kill_switch: bool = Field(default=_env_flag("AI_KILL_SWITCH", "false"))
    timeout_seconds: float = float(os.getenv("AI_TIMEOUT_SECONDS", "60"))
    temperature: float = 0.7
    # Language the model is asked to answer in
    response_language: str = os.getenv("AI_RESPONSE_LANGUAGE", "Brazilian Portuguese")


class Config(BaseModel):
    app_name: str = "Assessment Hub"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Storage: "memory" keeps everything in process, "sql" uses DATABASE_URL
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./assessments.db")

    # Auth
    secret_key: str = os.getenv("SECRET_KEY", "dev-only-insecure-key-DO-NOT-USE-IN-PROD")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "assessment_session")
    session_cookie_secure: bool = _env_flag("SESSION_COOKIE_SECURE", "false")

    # AI Components
    ai: AISettings = AISettings()

    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

    # Rate limiting
    rate_limit_enabled: bool = _env_flag("RATE_LIMIT_ENABLED", "true")
    ai_rate_limit: str = os.getenv("AI_RATE_LIMIT", "10/minute")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    access_log: bool = _env_flag("ACCESS_LOG", "true")

    # Demo data
    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA", "false")


settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment not in ("development", "testing"):
    if "dev-only" in settings.secret_key:
        raise RuntimeError(
            "FATAL: SECRET_KEY must be set for non-development environments. "
            "Set it as an environment variable."
        )
elif "dev-only" in settings.secret_key:
    _logger.warning("⚠ Using insecure default SECRET_KEY, only acceptable in development.")
