from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Upload handler defaults loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    upload_dir: str = "uploads/"
    upload_field_name: str = "file"
    auto_rename: bool = True
    overwrite: bool = False
    sanitize_filename: bool = True

    allowed_extensions: list[str] = []
    allowed_mime_types: list[str] = []
    max_file_size_bytes: int = 0
