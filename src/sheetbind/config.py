from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

class AppSettings(BaseSettings):
    name: str = "sheetbind"
    version: str = "0.3.0"

class MappingSettings(BaseSettings):
    # Plain (non-column) record fields populated while reading a table.
    id_field: str = "row_id"
    saved_field: str = "saved"

class GoogleSettings(BaseSettings):
    service_account_file: Optional[Path] = None
    api_key: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    max_retries: int = 3
    backoff_seconds: float = 1.0
    value_render_option: str = "UNFORMATTED_VALUE"  # FORMATTED_VALUE | FORMULA
    value_input_option: str = "USER_ENTERED"

class LoggingSettings(BaseSettings):
    format: str = "console"  # console | json
    level: str = "INFO"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")
    app: AppSettings = AppSettings()
    mapping: MappingSettings = MappingSettings()
    google: GoogleSettings = GoogleSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        default_path = Path("config/settings.yaml")
        path = config_path or (default_path if default_path.exists() else None)

        if not path:
            return cls()

        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

settings = Settings.load()
