"""Application settings, read once from the environment / .env."""
from __future__ import annotations
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATA_DIR: Path = Path("data")
    DATABASE_URL: str | None = None
    LOG_LEVEL: str = "INFO"

    # Ingestion
    INGESTION_TIMEOUT_MS: int = Field(default=60000, gt=0)
    # Left unset on purpose: automatic and manual triggers default differently.
    USE_MOCK_INGEST: bool | None = None
    MOCK_INGEST_SUCCESS_RATE: float = Field(default=0.85, ge=0.0, le=1.0)
    MOCK_INGEST_SEED: int | None = None
    INGEST_SERVICE_URL: str | None = None
    CHUNK_SIZE: int = Field(default=500, gt=0)

    @field_validator("USE_MOCK_INGEST", "INGEST_SERVICE_URL", "MOCK_INGEST_SEED", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def data_dir(self) -> Path:
        return self.DATA_DIR

    @property
    def upload_dir(self) -> Path:
        return self.DATA_DIR / "uploads"

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL or f"sqlite:///{self.DATA_DIR / 'docqa.db'}"

    @property
    def automatic_ingest_uses_mock(self) -> bool:
        """Upload-time ingestion stays on the mock backend unless explicitly disabled."""
        return self.USE_MOCK_INGEST is not False

    @property
    def manual_ingest_uses_mock(self) -> bool:
        """Manual triggers only use the mock backend when explicitly enabled."""
        return self.USE_MOCK_INGEST is True


settings = Settings()
