"""
Upload policy settings.

Per-owner document limit and accepted file size for PDF uploads.

Dependencies: pydantic_settings
System role: Upload validation configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UploadSettings(BaseSettings):
    """Limits applied by the document service before anything is stored."""

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        case_sensitive=False,
        extra="ignore",
    )

    max_documents_per_owner: int = Field(
        default=10,
        description="Maximum number of documents a single owner may keep",
    )
    max_file_size_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted PDF size in bytes",
    )
