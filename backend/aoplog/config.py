from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    app_name: str = "aoplog"
    environment: str = "development"
    log_level: str = "DEBUG"
    log_queue_size: int = 1000
    log_drain_timeout_seconds: float = 5.0
    log_arguments: bool = True
    log_results: bool = True
    pointcut_include: str = "aoplog"
    pointcut_exclude: str = "aoplog.config"


settings = Settings()
