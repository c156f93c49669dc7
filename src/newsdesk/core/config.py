from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[3]
ENV_PATH = BASE_DIR / ".env"


class Settings(BaseSettings):
    server_host: str = Field(
        "0.0.0.0", validation_alias=AliasChoices("NEWSDESK_SERVER_HOST", "server_host")
    )
    server_port: int = Field(
        8000, validation_alias=AliasChoices("NEWSDESK_SERVER_PORT", "server_port")
    )
    server_reload: bool = Field(
        False, validation_alias=AliasChoices("NEWSDESK_SERVER_RELOAD", "server_reload")
    )
    server_log_level: str = Field(
        "info",
        validation_alias=AliasChoices("NEWSDESK_SERVER_LOG_LEVEL", "server_log_level"),
    )

    database_url: str = Field(
        "sqlite+aiosqlite:///./newsdesk.db",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )
    database_echo: bool = Field(
        False, validation_alias=AliasChoices("NEWSDESK_DATABASE_ECHO", "database_echo")
    )

    news_table: str = Field(
        "tl_news", validation_alias=AliasChoices("NEWSDESK_NEWS_TABLE", "news_table")
    )
    archive_table: str = Field(
        "tl_news_archive",
        validation_alias=AliasChoices("NEWSDESK_ARCHIVE_TABLE", "archive_table"),
    )

    # пустой токен = back end доступ через API выключен
    backend_token: str = Field(
        "", validation_alias=AliasChoices("NEWSDESK_BACKEND_TOKEN", "backend_token")
    )

    log_level: str = Field(
        "INFO", validation_alias=AliasChoices("NEWSDESK_LOG_LEVEL", "log_level")
    )
    log_dir: str = Field(
        "logs", validation_alias=AliasChoices("NEWSDESK_LOG_DIR", "log_dir")
    )
    log_file: str = Field(
        "newsdesk.log", validation_alias=AliasChoices("NEWSDESK_LOG_FILE", "log_file")
    )

    @property
    def backend_access_enabled(self) -> bool:
        return bool(self.backend_token.strip())

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )


settings = Settings()
config = settings
