"""Service configuration."""

import os

from pydantic import BaseModel, Field, field_validator


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data/collab.db"


class AuthConfig(BaseModel):
    """Settings consumed by the credential resolver and its collaborators.

    Built once by the service entrypoint and passed explicitly to whatever
    needs it; nothing below the entrypoint reads the environment.
    """

    cloud_url: str
    api_token: str
    database_url: str = DEFAULT_DATABASE_URL
    authority_timeout_seconds: float = Field(default=5.0, gt=0)

    @field_validator("cloud_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls) -> "AuthConfig":
        return cls(
            cloud_url=os.getenv("COLLAB_CLOUD_URL", "http://localhost:8787"),
            api_token=os.getenv("COLLAB_API_TOKEN", ""),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            authority_timeout_seconds=float(os.getenv("AUTHORITY_TIMEOUT_SECONDS", "5.0")),
        )
