"""
Chat model configuration.

Dependencies: pydantic_settings
System role: Answer generation configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Settings for the chat completion model."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="gemini-2.5-flash", description="Google Gemini chat model ID")
    temperature: float = Field(default=0.0, ge=0.0, le=2.0, description="Sampling temperature")
