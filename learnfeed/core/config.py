from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn


class PostgresSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    host: Optional[str] = Field(default=None, alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_DB_PORT")
    db_name: str = Field(default="learnfeed", alias="POSTGRES_DB_NAME")
    user: str = Field(default="postgres", alias="POSTGRES_DB_USER")
    password: str = Field(default="", alias="POSTGRES_DB_PASSWORD")

    @computed_field
    def is_configured(self) -> bool:
        return bool(self.host)

    @computed_field
    def connection_string(self) -> Optional[PostgresDsn]:
        if not self.host:
            return None
        return PostgresDsn(
            f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db_name}"
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="learnfeed", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # "auto" checks the database at startup; "in_memory" skips it
    storage_mode: str = Field(default="auto", alias="STORAGE_MODE")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"

    @computed_field
    def is_testing(self) -> bool:
        return self.mode == "test"


class LLMSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # Model provider selection: "deepseek", "openrouter" or "google"
    provider: str = Field(default="deepseek", alias="MODEL_PROVIDER")

    deepseek_api_key: Optional[str] = Field(default=None, alias="DEEPSEEK_API_KEY")
    deepseek_model: str = Field(default="deepseek-chat", alias="DEEPSEEK_MODEL")
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com/v1", alias="DEEPSEEK_BASE_URL"
    )

    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")
    openrouter_model: str = Field(
        default="deepseek/deepseek-chat", alias="OPENROUTER_MODEL"
    )

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")

    retries: int = Field(default=1, alias="LLM_RETRIES")


class LearningSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    xp_per_correct: int = Field(default=10, alias="LEARNING_XP_PER_CORRECT")
    xp_per_level: int = Field(default=100, alias="LEARNING_XP_PER_LEVEL")
    book_item_count: int = Field(default=20, alias="BOOK_ITEM_COUNT")
    seconds_per_video_item: int = Field(default=180, alias="SECONDS_PER_VIDEO_ITEM")
    default_video_duration: int = Field(default=600, alias="DEFAULT_VIDEO_DURATION")
    youtube_api_key: Optional[str] = Field(default=None, alias="YOUTUBE_API_KEY")
    youtube_timeout_seconds: float = Field(default=10.0, alias="YOUTUBE_TIMEOUT")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    postgres: PostgresSettings = Field(default_factory=lambda: PostgresSettings())
    llm: LLMSettings = Field(default_factory=lambda: LLMSettings())
    learning: LearningSettings = Field(default_factory=lambda: LearningSettings())


settings = Settings()
