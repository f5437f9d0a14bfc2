"""
Configuration module for the notes application.
Loads environment variables and provides centralized config access.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

# ============================================================
# Centralized Data Paths
# ============================================================
# All user data lives under <project>/data/ for easy backup/deletion.
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# SQLite item store
SQLITE_DB_PATH = DATA_DIR / "notes.db"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses pydantic-settings for validation and type coercion.
    """

    # ============================================================
    # Item Store
    # ============================================================
    database_path: str = str(SQLITE_DB_PATH)
    # Insert a welcome note on first startup (empty store only)
    seed_welcome_note: bool = True

    # ============================================================
    # Hierarchy Limits
    # ============================================================
    # Ancestor-walk bound for circular reference checks. Exceeding it
    # counts as circular.
    max_folder_depth: int = 100
    # Recursion bound for subtree queries
    max_tree_depth: int = 1000

    # ============================================================
    # LLM Provider (text generation collaborator)
    # ============================================================
    llm_provider: str = "anthropic"
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 4096
    llm_temperature: float = 0.7
    llm_timeout_seconds: float = 120.0

    # Offline mock, overrides llm_provider when set
    use_mock_llm: bool = False
    mock_llm_delay_seconds: float = 0.0

    # Anthropic
    anthropic_api_key: Optional[str] = None
    anthropic_base_url: str = "https://api.anthropic.com"

    # OpenAI (or any compatible endpoint)
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"

    # Ollama (local)
    ollama_base_url: str = "http://localhost:11434"

    # ============================================================
    # Server Configuration
    # ============================================================
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # ============================================================
    # CORS Configuration
    # ============================================================
    # Comma-separated origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse the comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def effective_llm_provider(self) -> str:
        """Provider name after applying the mock override."""
        if self.use_mock_llm:
            return "mock"
        return self.llm_provider.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reloading env vars on every call.
    """
    return Settings()
