import logging
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Remote store (Supabase / PostgREST)
    supabase_url: Optional[str] = os.getenv("SUPABASE_URL")
    supabase_key: Optional[str] = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY")
    books_table: str = os.getenv("BOOKS_TABLE", "books")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # Web view
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    session_cookie: str = os.getenv("SESSION_COOKIE", "catalog_session")
    max_sessions: int = int(os.getenv("MAX_SESSIONS", "256"))

    # Application
    app_name: str = os.getenv("APP_NAME", "Books Catalog")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def rest_url(self) -> str:
        """Base URL of the PostgREST endpoint for the configured project."""
        base = (self.supabase_url or "").rstrip("/")
        return f"{base}/rest/v1"


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging once for the CLI and the web app."""
    level_name = (level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
