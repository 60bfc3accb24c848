from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote


def _csv_env(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [part.strip().lower() for part in raw.split(",") if part.strip()]


@dataclass
class Settings:
    app_name: str = "LockIn Edge"
    environment: str = os.getenv("ENV", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./db/lockin.db")
    upload_dir: str = os.getenv("UPLOAD_DIR", "./uploads/resumes")
    max_resume_size_mb: int = int(os.getenv("MAX_RESUME_SIZE_MB", "10"))
    cors_origins: list[str] = field(
        default_factory=lambda: _csv_env("CORS_ORIGINS", "http://localhost:5173,https://lockin-edge.vercel.app")
    )

    llm_api_key: str = os.getenv("LLM_API_KEY", os.getenv("OPENROUTER_API_KEY", ""))
    llm_base_url: str = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")
    llm_model: str = os.getenv("LLM_MODEL", "deepseek/deepseek-r1:free")
    llm_timeout_seconds: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))

    serpapi_key: str = os.getenv("SERPAPI_KEY", "")
    enabled_sources: list[str] = field(
        default_factory=lambda: _csv_env(
            "ENABLED_SOURCES", "serpapi,indeed,remoteok,stepstone,berlinstartupjobs,arbeitnow"
        )
    )
    scrape_delay_seconds: float = float(os.getenv("SCRAPE_DELAY_SECONDS", "1.2"))
    max_jobs_per_source: int = int(os.getenv("MAX_JOBS_PER_SOURCE", "15"))
    max_scrape_pages: int = int(os.getenv("MAX_SCRAPE_PAGES", "2"))
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

    recommendation_threshold: float = float(os.getenv("RECOMMENDATION_THRESHOLD", "20"))
    recommendation_limit: int = int(os.getenv("RECOMMENDATION_LIMIT", "10"))
    description_prompt_chars: int = int(os.getenv("DESCRIPTION_PROMPT_CHARS", "500"))
    resume_prompt_chars: int = int(os.getenv("RESUME_PROMPT_CHARS", "12000"))

    auth_secret: str = os.getenv("AUTH_SECRET", "lockin-dev-secret")
    auth_token_ttl_seconds: int = int(os.getenv("AUTH_TOKEN_TTL_SECONDS", str(60 * 60 * 24 * 7)))

    def ensure_directories(self) -> None:
        Path(self.upload_dir).mkdir(parents=True, exist_ok=True)
        self._ensure_sqlite_directory()

    def _ensure_sqlite_directory(self) -> None:
        if not self.database_url.startswith("sqlite:///"):
            return
        raw_path = self.database_url.replace("sqlite:///", "", 1)
        if not raw_path or raw_path == ":memory:":
            return
        db_path = Path(unquote(raw_path))
        if not db_path.is_absolute():
            db_path = Path(".") / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
