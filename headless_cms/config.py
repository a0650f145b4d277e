from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Headless CMS"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./headless_cms.db"
    create_tables: bool = True

    # Logging settings
    log_level: str = "INFO"
    json_logs: bool = True

    # Headless GraphQL settings
    operation_timeout: float = 30.0
    resolved_value_timeout: float = 5.0
    plugins_config_file: str = "data/plugins_config.json"
    default_per_page: int = 10
    max_per_page: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
