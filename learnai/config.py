from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from the environment (and .env)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./learnai.db"

    # Bearer tokens are issued by the external auth provider and signed with its JWT secret.
    AUTH_JWT_SECRET: str = "change-me-in-production"
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str | None = "authenticated"

    OLLAMA_BASE_URL: str = "http://localhost:11434"
    LLM_MODEL: str = "qwen:latest"
    LLM_TEMPERATURE: float = 0.7
    LLM_TIMEOUT_SECONDS: float = 60.0

    TUTOR_HISTORY_TOKEN_BUDGET: int = 3000
    TOPIC_MAX_LENGTH: int = 100
    MESSAGE_MAX_LENGTH: int = 2000
    SESSION_WRITE_ATTEMPTS: int = 3

    GENERAL_RATE_LIMIT: int = 100
    AI_RATE_LIMIT: int = 10
    RATE_LIMIT_WINDOW_SECONDS: float = 15 * 60
    # Reverse proxies in front of the app. 0 means X-Forwarded-For is ignored.
    TRUSTED_PROXY_HOPS: int = 0

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_CONSOLE: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()


def _engine_kwargs(url: str) -> dict:
    # FastAPI runs sync dependencies in a threadpool; sqlite connections must be shareable.
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


settings = get_settings()
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def reset_db():
    Base.metadata.drop_all(bind=engine)
    create_db()


def create_db():
    # Import for side effect: registers every table on Base.metadata.
    import learnai.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
