from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CHECKPOINT_")

    app_name: str = "Checkpoint"
    debug: bool = False

    # SQLite file backing the store; created on first use
    database_path: str = "checkpoint.db"

    log_level: str = "INFO"

    # Default number of entries in the backlog report
    report_top_n: int = 5


settings = Settings()


# =============================================================================
# IMPORT FILE FORMAT
# =============================================================================

# id|name|platform|status|priority|ownership
IMPORT_FIELD_SEPARATOR = "|"
IMPORT_FIELD_COUNT = 6
IMPORT_COMMENT_PREFIX = "#"
IMPORT_ENCODING = "utf-8"
