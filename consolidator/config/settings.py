from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

SQL_IDENTIFIER = r"^[A-Za-z_][A-Za-z0-9_]*$"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables and config.yaml."""

    model_config = SettingsConfigDict(
        env_file=".env",
        yaml_file="config.yaml",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_path: Path | None = None

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "archive"
    db_username: str = "archive"
    db_password: str = "secret"

    table_cases: str = Field(default="file_input", pattern=SQL_IDENTIFIER)
    table_case_details: str = Field(default="eam_file", pattern=SQL_IDENTIFIER)
    table_records: str = Field(default="eam_record", pattern=SQL_IDENTIFIER)
    table_record_paths: str = Field(default="input_pdf", pattern=SQL_IDENTIFIER)

    image_root: Path = Path("/data/images")
    storage_root: Path = Path("/data/pdf")
    backup_root: Path = Path("/data/images_backup")
    image_action: Literal["move", "delete", "keep"] = "keep"
    inner_zone_dirname: str = "内部"

    max_per_dir: int = Field(default=1000, gt=0)
    concurrency: int = Field(default=4, gt=0)
    progress_interval_seconds: float = Field(default=5.0, gt=0)

    pdf_engine: str = "pymupdf"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Environment wins over .env, which wins over config.yaml."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
