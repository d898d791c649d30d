"""
config.py — Runtime Configuration

All options are read from the environment (no prefix), e.g. `PORT=8080`
or `ADMIN_KEY=...`. Unknown variables are ignored.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Environment-sourced settings of the generator service.

    Attributes:
        db_path (str): SQLite file holding the orders table.
        keys_file (str | None): JSON snapshot of the generated API registry.
            An empty value disables persistence.
        host (str): Interface uvicorn binds to.
        port (int): Listening port.
        cors_origin (str): Allowed cross-origin value(s), comma-separated.
        admin_key (str | None): Enables `/_admin/generated-apis` when set.
        public_dir (str): Directory containing `ui.html` and its assets.
        log_level (str): Root log level.
        log_file (str | None): Optional log file in addition to stdout.
    """
    model_config = SettingsConfigDict(extra="ignore")

    db_path: str = "data.db"
    keys_file: Optional[str] = "keys.json"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origin: str = "*"  # in Produktion z.B. https://your-domain.com
    admin_key: Optional[str] = None
    public_dir: str = "public"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.db_path}"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
