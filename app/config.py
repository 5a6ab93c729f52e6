from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "CMS Content Types"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Database settings
    database_url: str = "sqlite+aiosqlite:///./cms.db"

    # Issue CREATE/ALTER TABLE when content types or their fields change
    schema_sync_enabled: bool = True

    # Logging settings
    log_level: str = "INFO"
    log_json: bool = False

    # Rendering settings
    default_locale: str = "en"
    asset_base_url: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
