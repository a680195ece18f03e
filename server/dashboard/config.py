from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application configuration settings"""

    # Application
    app_name: str = "Institution Admin Dashboard"
    debug: bool = True
    api_version: str = "v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Institution backend
    backend_base_url: str = "http://localhost:3000/api/v1"
    backend_domain: str = "institution-admin"
    backend_timeout_seconds: Optional[float] = None  # None = wait forever
    backend_page_limit: int = 10
    institution_id: Optional[str] = None

    # OpenAI (AI-assisted question drafting)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-2024-08-06"

    # Wizard session
    session_cookie_name: str = "wizard_session"
    session_header_name: str = "X-Wizard-Session"
    session_idle_minutes: int = 120
    redirect_delay_seconds: int = 2
    quiz_due_days: int = 7

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
