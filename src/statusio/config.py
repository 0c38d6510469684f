"""Request configuration: provider secrets, options and cache lifetime.

Explicit values (tool arguments) win; anything left blank falls back to the
matching environment variable.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from .core.models import AuthScheme, Credential, Provider

logger = logging.getLogger(__name__)

DEFAULT_CACHE_MINUTES = 45
MIN_CACHE_MINUTES = 1
MS_PER_MINUTE = 60 * 1000

ENV_VARS: dict[str, str] = {
    "rd_token": "RD_TOKEN",
    "ad_key": "AD_KEY",
    "pm_key": "PM_KEY",
    "pm_oauth": "PM_OAUTH",
    "tb_token": "TB_TOKEN",
    "dl_key": "DL_KEY",
    "dl_auth": "DL_AUTH",
    "dl_endpoint": "DL_ENDPOINT",
    "cache_minutes": "CACHE_MINUTES",
}

SECRET_FIELDS: dict[Provider, str] = {
    Provider.REALDEBRID: "rd_token",
    Provider.ALLDEBRID: "ad_key",
    Provider.PREMIUMIZE: "pm_key",
    Provider.TORBOX: "tb_token",
    Provider.DEBRIDLINK: "dl_key",
}


class StatusioConfig(BaseModel):
    """Secrets and options for one status request."""

    cache_minutes: float = DEFAULT_CACHE_MINUTES
    rd_token: str = ""
    ad_key: str = ""
    pm_key: str = ""
    pm_oauth: bool = False
    tb_token: str = ""
    dl_key: str = ""
    dl_auth: AuthScheme = AuthScheme.BEARER
    dl_endpoint: Optional[str] = None

    @field_validator("cache_minutes", mode="before")
    @classmethod
    def _clamp_cache_minutes(cls, value):
        try:
            minutes = float(value)
        except (TypeError, ValueError):
            return DEFAULT_CACHE_MINUTES
        if not math.isfinite(minutes):
            return DEFAULT_CACHE_MINUTES
        return max(MIN_CACHE_MINUTES, minutes)

    @field_validator("rd_token", "ad_key", "pm_key", "tb_token", "dl_key", mode="before")
    @classmethod
    def _strip(cls, value):
        return "" if value is None else str(value).strip()

    @field_validator("dl_auth", mode="before")
    @classmethod
    def _auth_scheme(cls, value):
        if isinstance(value, AuthScheme):
            return value
        if value is None or str(value).strip().lower() in ("", "bearer"):
            return AuthScheme.BEARER
        return AuthScheme.QUERY

    @field_validator("pm_oauth", mode="before")
    @classmethod
    def _flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)

    @classmethod
    def load(cls, overrides: Optional[Mapping[str, Any]] = None) -> StatusioConfig:
        """Merge non-blank ``overrides`` over environment variables."""
        values: dict[str, Any] = {}
        for field, env_var in ENV_VARS.items():
            env_value = os.environ.get(env_var, "")
            if env_value.strip():
                values[field] = env_value
        for field, value in (overrides or {}).items():
            if field not in ENV_VARS:
                logger.debug("Ignoring unknown config key %s", field)
                continue
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            values[field] = value
        return cls(**values)

    @property
    def ttl_ms(self) -> int:
        return int(self.cache_minutes * MS_PER_MINUTE)

    def enabled(self) -> list[Provider]:
        """Providers with a secret configured, in canonical order."""
        return [p for p in Provider if getattr(self, SECRET_FIELDS[p])]

    def credentials(self) -> dict[Provider, Credential]:
        creds = {p: Credential(secret=getattr(self, SECRET_FIELDS[p])) for p in self.enabled()}
        if Provider.PREMIUMIZE in creds:
            creds[Provider.PREMIUMIZE] = Credential(secret=self.pm_key, oauth=self.pm_oauth)
        if Provider.DEBRIDLINK in creds:
            creds[Provider.DEBRIDLINK] = Credential(
                secret=self.dl_key,
                auth_scheme=self.dl_auth,
                endpoint=self.dl_endpoint,
            )
        return creds
