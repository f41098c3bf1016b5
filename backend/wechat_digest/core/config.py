import logging
import os
from pathlib import Path
import warnings
from typing import Annotated, Any, Literal

from pydantic import (
    AnyUrl,
    BeforeValidator,
    computed_field,
)
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def get_env_files() -> list[str]:
    """Get the appropriate .env files based on the environment.
    Returns a list of env files in order of precedence (later files override earlier ones).
    """
    working_dir = Path(os.getcwd())
    env_files = []

    # A mounted .env file in the working directory wins
    mounted_env = working_dir / ".env"
    if mounted_env.exists():
        logger.debug(f"Found mounted .env file at: {mounted_env}")
        env_files.append(str(mounted_env))
        return env_files

    env_type = os.getenv("ENVIRONMENT", "local")
    if env_type in ["local", "staging", "production"]:
        env_file = working_dir / "env-config" / env_type / ".env"
        if env_file.exists():
            logger.debug(f"Found environment specific file at: {env_file}")
            env_files.append(str(env_file))

    if not env_files and env_type != "local":
        warnings.warn("No .env files found!", stacklevel=2)

    return env_files


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=get_env_files(),
        env_ignore_empty=True,
        extra="ignore",
    )

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    PROJECT_NAME: str = "wechat-digest"
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # Debug settings
    DEBUG_SQL: bool = False

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    FRONTEND_HOST: str = "http://localhost:5173"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # DeepSeek (OpenAI compatible) chat completions
    DEEPSEEK_API_URL: str | None = None
    DEEPSEEK_API_KEY: str | None = None
    DEEPSEEK_MODEL: str = "deepseek-chat"
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_MAX_TOKENS: int = 1000
    LLM_TEMPERATURE: float = 0.3

    # WeChat article scraping
    WECHAT_ARTICLE_HOST: str = "mp.weixin.qq.com"
    WECHAT_ARTICLE_PATH_PREFIX: str = "/s/"
    FETCH_TIMEOUT_SECONDS: float = 20.0
    FETCH_CONCURRENCY: int = 2
    FETCH_BATCH_DELAY_SECONDS: float = 3.0
    MAX_CONTENT_LENGTH: int = 15000
    MIN_CONTENT_LENGTH: int = 50

    # Batch summarization
    SUMMARY_DELAY_SECONDS: float = 1.0
    BATCH_MAX_URLS: int = 20
    DEFAULT_ACCOUNT_NAME: str = "批量导入"

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "wechat_digest"
    # Full SQLAlchemy URL, takes precedence over the POSTGRES_* fields
    DATABASE_URL: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return str(
            MultiHostUrl.build(
                scheme="postgresql+psycopg",
                username=self.POSTGRES_USER,
                password=self.POSTGRES_PASSWORD,
                host=self.POSTGRES_SERVER,
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,
            )
        )


settings = Settings()  # type: ignore
