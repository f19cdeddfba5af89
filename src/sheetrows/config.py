"""Configuration loaded from SHEETROWS_* environment variables or a .env file."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .sheets.client import API_BASE
from .sheets.transport import DEFAULT_TIMEOUT


class SheetRowsSettings(BaseSettings):
    """Where the spreadsheet is and how to reach it.

    Only spreadsheet_id and api_key are needed to read a shared spreadsheet.
    Writing needs an authorized session, configured by the secrets, cache and
    scopes entries which feed SheetsAccess.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETROWS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    spreadsheet_id: str = ""
    api_key: str = ""
    base_url: str = API_BASE
    timeout: float = DEFAULT_TIMEOUT
    key_column: str = "id"

    client_secrets: Path | None = None
    cred_cache: Path | None = None
    # comma separated scope labels or urls, e.g. "sheets,drive-file"
    scopes: str = "sheets"

    @field_validator("timeout")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    def scope_list(self) -> list[str]:
        return [s.strip() for s in self.scopes.split(",") if s.strip()]

    def access_config(self) -> dict:
        """Settings in the form SheetsAccess.config takes"""
        return {
            "secrets": self.client_secrets,
            "cache": self.cred_cache,
            "scopes": self.scope_list(),
        }
