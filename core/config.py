# =============================================================================
# core/config.py  -  Runtime settings
# =============================================================================
#
# Everything configurable comes from environment variables, optionally
# read from a .env file (pydantic-settings, which uses python-dotenv for
# the file).  Nothing here is a credential: API keys are supplied by the
# caller on every tool call and forwarded upstream, never read from the
# environment.
#
#   RJINA_READER_URL   Jina Reader base URL          (https://r.jina.ai/)
#   RJINA_SEARCH_URL   Jina Search endpoint          (https://s.jina.ai/search)
#   RJINA_FLIGHTS_URL  SerpApi search endpoint       (https://serpapi.com/search.json)
#   RJINA_TRANSPORT    "stdio" or "http"             (stdio)
#   RJINA_HOST         bind address for http         (127.0.0.1)
#   RJINA_PORT         port for http                 (8000)
#   RJINA_PATH         MCP endpoint path for http    (/mcp)
#   RJINA_LOG_LEVEL    logging level name            (INFO)
#   RJINA_ENV_FILE     .env file to read instead of ./.env
# =============================================================================

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.content_fetch import READER_URL
from core.flight_search import FLIGHTS_URL
from core.search import SEARCH_URL

Transport = Literal["stdio", "http"]


class Settings(BaseSettings):
    """Server settings.  Defaults point at the public APIs.

    All fields are environment-configurable with the `RJINA_` prefix.
    Invalid values (an unknown transport, a non-integer port) raise
    pydantic's ValidationError, which is a ValueError.
    """

    model_config = SettingsConfigDict(
        env_prefix="RJINA_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    reader_url: str = Field(default=READER_URL)
    search_url: str = Field(default=SEARCH_URL)
    flights_url: str = Field(default=FLIGHTS_URL)

    # Hosting
    transport: Transport = Field(default="stdio")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=0, le=65535)
    path: str = Field(default="/mcp")

    log_level: str = Field(default="INFO")

    @field_validator("transport", mode="before")
    @classmethod
    def _normalise_transport(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Build Settings from the environment.

    Args:
        env_file: .env file to read.  Defaults to $RJINA_ENV_FILE, then
            ./.env if it exists.  Real environment variables win over the
            file.

    Raises:
        ValueError: a RJINA_* variable holds an invalid value.
    """
    if env_file is None:
        override = os.getenv("RJINA_ENV_FILE")
        if override:
            env_file = Path(override)
        elif (Path.cwd() / ".env").exists():
            env_file = Path.cwd() / ".env"

    if env_file is not None:
        return Settings(_env_file=env_file)
    return Settings()
