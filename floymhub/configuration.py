"""Mini README: Centralised configuration for the FLOYM ledger.

Structure:
    * FloymSettings - Pydantic settings model read from ``FLOYM_*`` variables.
    * get_settings - cached accessor so validation runs once per process.

Usage:
    ``get_settings().data_directory`` locates the file-backed key-value store,
    ``storage_key_prefix`` namespaces the five collection keys and
    ``invoice_number_base`` seeds the ``INV-`` sequence.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class FloymSettings(BaseSettings):
    """Runtime configuration for the institute dashboard."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles and logging levels.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding one JSON document per ledger collection.",
    )
    storage_key_prefix: str = Field(
        "floym_",
        description="Prefix applied to the students/services/invoices/exams/expenses keys.",
    )
    invoice_number_base: int = Field(
        1000,
        description="Offset added to the invoice count when numbering new invoices.",
        ge=0,
    )
    upcoming_exam_limit: int = Field(
        5,
        description="How many upcoming exams the dashboard lists.",
        ge=1,
    )
    currency_symbol: str = Field("₹", description="Symbol prefixed to formatted amounts.")
    log_level: str = Field("INFO", description="Root logging level name.")
    interface_host: str = Field(
        "127.0.0.1",
        description="Network interface for the JSON API to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the JSON API exposes.",
        ge=1,
        le=65535,
    )

    class Config:
        env_prefix = "FLOYM_"
        env_file = ".env"
        case_sensitive = False

    @validator("data_directory", pre=True)
    def _expand_path(cls, value: str | Path) -> Path:
        """Expand user directories; the storage backend creates the folder."""

        return Path(value).expanduser().resolve()


@lru_cache()
def get_settings() -> FloymSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return FloymSettings()
