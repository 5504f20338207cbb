# =============================================================================
# core/config.py  —  Startup Configuration
# =============================================================================
#
# The server needs exactly one secret: a LinkedIn OAuth access token.  It is
# read from the environment (a .env file is loaded first by the server via
# python-dotenv).  Obtaining or refreshing the token is someone else's job.
#
#   LINKEDIN_ACCESS_TOKEN   required  bearer token for api.linkedin.com
#   LINKEDIN_MCP_LOG_LEVEL  optional  logging level name (default INFO)
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.errors import ConfigurationError

ACCESS_TOKEN_ENV = "LINKEDIN_ACCESS_TOKEN"
LOG_LEVEL_ENV = "LINKEDIN_MCP_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    access_token: str
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the process environment.

    Raises:
        ConfigurationError: if LINKEDIN_ACCESS_TOKEN is unset or blank.
    """
    env = os.environ if environ is None else environ

    token = (env.get(ACCESS_TOKEN_ENV) or "").strip()
    if not token:
        raise ConfigurationError(f"{ACCESS_TOKEN_ENV} environment variable is required")

    log_level = (env.get(LOG_LEVEL_ENV) or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"{LOG_LEVEL_ENV} must be a logging level name, got {log_level!r}")

    return Settings(access_token=token, log_level=log_level)
