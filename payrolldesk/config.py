"""
config.py — PayrollDesk application settings.

Usage:
    from payrolldesk.config import settings
    print(settings.test_run_item_delay_ms)

Never use FastAPI Depends() for settings; import directly as a module-level singleton.
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAYROLLDESK_",
        case_sensitive=False,
        extra="ignore",
    )

    # --- CORS ---
    # Comma-separated list of allowed frontend origins
    cors_origins: str = "http://localhost:5173,http://localhost:5174"

    # --- Payroll test run ---
    # Pause between employees so the UI can show progress. 0 disables it.
    test_run_item_delay_ms: int = 100

    # --- CTC calculator ---
    # Allocation above 100% only warns; above this it is rejected outright.
    max_allocation_percent: float = 200.0

    # --- Leave register (Form 20) ---
    factory_name: str = "ASN HR Consultancy & Services"

    # --- Application ---
    debug: bool = True
    app_version: str = "0.1.0"

    @property
    def cors_origins_list(self) -> List[str]:
        """Split comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Module-level singleton: import this throughout the codebase
settings = Settings()
