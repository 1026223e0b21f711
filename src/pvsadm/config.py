"""Runtime settings loaded from the environment.

A ``.env`` file in the working directory is honoured through
python-dotenv; explicit command-line values always win over the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from pvsadm.exceptions import AuthenticationError, InvalidOptionError

API_KEY_ENV: str = "IBMCLOUD_API_KEY"
LOG_LEVEL_ENV: str = "PVSADM_LOG_LEVEL"
TIMEOUT_ENV: str = "PVSADM_TIMEOUT"

DEFAULT_LOG_LEVEL: str = "INFO"
DEFAULT_TIMEOUT: float = 60.0


@dataclass(frozen=True, slots=True)
class Settings:
    """Process-wide settings for a single pvsadm invocation."""

    api_key: str | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, *, api_key: str | None = None, log_level: str | None = None) -> Settings:
        """Build settings from the environment, applying CLI overrides."""
        load_dotenv()
        raw_timeout = os.getenv(TIMEOUT_ENV)
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError as exc:
            raise InvalidOptionError(
                f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}",
            ) from exc

        settings = cls(
            api_key=os.getenv(API_KEY_ENV) or None,
            log_level=(os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper(),
            timeout=timeout,
        )
        if api_key:
            settings = replace(settings, api_key=api_key)
        if log_level:
            settings = replace(settings, log_level=log_level.upper())
        return settings

    def require_api_key(self) -> str:
        """Return the API key or raise :class:`AuthenticationError`."""
        if not self.api_key:
            raise AuthenticationError(
                "IBM Cloud API key is not set.",
                hint=f"Export {API_KEY_ENV}=<IBM_CLOUD_API_KEY> or pass --api-key.",
            )
        return self.api_key
