from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """
    Application settings and configuration management.
    Loads environment variables from .env file.
    """

    # ============ API Configuration ============
    API_TITLE: str = "Live Coding Interview API"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # ============ Server Configuration ============
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # ============ Database Configuration ============
    DATABASE_URL: str = "sqlite:///./interview_rooms.db"
    """Database connection string (PostgreSQL in production)"""

    # ============ Identity Provider Configuration ============
    SECRET_KEY: str = "your-secret-key-change-in-production"
    """Shared secret used to verify identity provider JWTs"""

    ALGORITHM: str = "HS256"
    """JWT algorithm for token verification"""

    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    """Lifetime of locally minted tokens (development only)"""

    # ============ Code Execution Configuration ============
    PISTON_API_URL: str = "https://emkc.org/api/v2/piston/execute"
    """Remote sandboxed execution endpoint"""

    EXECUTION_CLIENT_TIMEOUT: float = 30.0
    """Client-side ceiling in seconds for one execution round trip"""

    EXECUTION_HISTORY_LIMIT: int = 10
    """Number of executions returned by the history query"""

    # ============ Code Editor Sync Configuration ============
    CODE_SYNC_DEBOUNCE_MS: int = 500
    """Inactivity window before a local edit is pushed to the session store"""

    # ============ Email Configuration ============
    RESEND_API_KEY: Optional[str] = None
    """Transactional email API key; emails are skipped when unset"""

    RESEND_API_URL: str = "https://api.resend.com/emails"

    EMAIL_FROM: str = "InterLink Interviews <onboarding@resend.dev>"

    # ============ CORS Configuration ============
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Next.js frontend
        "http://localhost:8000",  # Same origin
    ]
    """Allowed origins for CORS requests"""

    class Config:
        env_file = ".env"
        """Load environment variables from .env file"""

        env_file_encoding = "utf-8"
        case_sensitive = False

# Create global settings instance
settings = Settings()
