"""
Configuración centralizada de la aplicación

Settings are read once (environment + .env) and handed to
bootstrap.build_services(); nothing below the composition root reads
the environment on its own.
"""
import json
from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings


class DatabaseBackend(str, Enum):
    """Storage backends an adapter can be built for"""

    SQL = "sql"
    SUPABASE = "supabase"


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Invoice Processor API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "API para listar, importar y exportar facturas"
    API_DEBUG: bool = False

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    # Database
    DATABASE_BACKEND: DatabaseBackend = DatabaseBackend.SQL
    DATABASE_URL: str = "sqlite:///./database/invoices.db"
    DB_CONNECT_RETRIES: int = 3
    DB_RETRY_DELAY: float = 1.0
    DB_ECHO: bool = False

    # Supabase (only used when DATABASE_BACKEND=supabase)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 1000
    EXPORT_PAGE_SIZE: int = 200

    LOG_LEVEL: str = "INFO"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Settings for the running process (memoised)"""
    return Settings()
