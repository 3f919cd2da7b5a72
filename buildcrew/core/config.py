from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Build orchestration settings loaded from environment variables."""

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

    # LLM provider configuration
    MODEL_PROVIDER: str = Field(default="mistral")
    MODEL_NAME: str | None = Field(default=None, description="Overrides the provider default model")
    LLM_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    LLM_REQUEST_TIMEOUT: float | None = Field(default=None, description="Per-request timeout in seconds")

    MISTRAL_API_KEY: str | None = None
    GROQ_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    GEMINI_API_KEY: str | None = None
    OPENROUTER_API_KEY: str | None = None
    OPENROUTER_BASE_URL: str = Field(default="https://openrouter.ai/api/v1")

    # Pipeline
    MAX_COMPONENT_FILES: int = Field(default=3, ge=0, description="Frontend components turned into files")
    MAX_MODEL_FILES: int = Field(default=2, ge=0, description="Backend models turned into files")
    MAX_REQUIREMENT_LENGTH: int = Field(default=10000, gt=0)
    PROJECT_TYPE: Literal["web", "mobile"] = Field(default="web")

    # Runtime
    LOG_LEVEL: str = Field(default="INFO")


settings = Settings()
