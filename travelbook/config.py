"""
Travelbook Service Configuration
Loads settings from environment variables
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment"""

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_ENV: str = os.getenv("API_ENV", "development")
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:5173")

    # CORS Configuration
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")

    # MongoDB Configuration (document store)
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB: str = os.getenv("MONGO_DB", "travelbook")
    USE_MEMORY_STORE: bool = os.getenv("USE_MEMORY_STORE", "false").lower() == "true"

    # Redis Configuration (sessions)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "336"))
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "travelbook_session")
    RECOVERY_TTL_MINUTES: int = int(os.getenv("RECOVERY_TTL_MINUTES", "60"))

    # LLM Configuration
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-flash-latest")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OLLAMA_BASE_URL: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "llama3.2")
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "120"))

    # Photo search (Unsplash)
    UNSPLASH_ACCESS_KEY: str = os.getenv("UNSPLASH_ACCESS_KEY", "")
    UNSPLASH_API_URL: str = os.getenv("UNSPLASH_API_URL", "https://api.unsplash.com")
    IMAGE_TIMEOUT: float = float(os.getenv("IMAGE_TIMEOUT", "10"))

    # Currency
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "HUF")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def redis_url(self) -> str:
        """Get Redis connection URL"""
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def llm_provider(self) -> str:
        """
        Resolve which LLM backend to use.

        An explicit LLM_PROVIDER wins; otherwise Gemini if its key is set,
        then OpenAI, then a local Ollama.
        """
        if self.LLM_PROVIDER:
            return self.LLM_PROVIDER.lower()
        if self.GEMINI_API_KEY:
            return "gemini"
        if self.OPENAI_API_KEY:
            return "openai"
        return "ollama"


# Global settings instance
settings = Settings()
