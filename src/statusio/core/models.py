"""Pydantic data models shared by clients, cache and tools.

Provider adapters produce these, the aggregator caches them, and the
classifier and MCP tools read them. Statuses are frozen so a cached result
can be handed to any number of callers without copying.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Provider(str, Enum):
    """Supported subscription services, in canonical enable order."""

    REALDEBRID = "realdebrid"
    ALLDEBRID = "alldebrid"
    PREMIUMIZE = "premiumize"
    TORBOX = "torbox"
    DEBRIDLINK = "debridlink"

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]


DISPLAY_NAMES: dict[Provider, str] = {
    Provider.REALDEBRID: "Real-Debrid",
    Provider.ALLDEBRID: "AllDebrid",
    Provider.PREMIUMIZE: "Premiumize",
    Provider.TORBOX: "TorBox",
    Provider.DEBRIDLINK: "Debrid-Link",
}


class PremiumState(str, Enum):
    """Tri-state premium flag."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    UNKNOWN = "unknown"


class AuthScheme(str, Enum):
    """How the secret is sent to the provider."""

    BEARER = "Bearer"
    QUERY = "query"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


class FailureKind(str, Enum):
    """Why a lookup could not produce a confirmed state."""

    CREDENTIAL_MISSING = "credential_missing"
    TRANSPORT_FAILURE = "transport_failure"
    UNEXPECTED_STATUS = "unexpected_status"
    MALFORMED_RESPONSE = "malformed_response"
    AMBIGUOUS_STATE = "ambiguous_state"


class Credential(BaseModel):
    """One provider secret plus its per-provider request options."""

    model_config = ConfigDict(frozen=True)

    secret: str = Field(default="", repr=False)
    auth_scheme: Optional[AuthScheme] = Field(None, description="Provider default when unset")
    endpoint: Optional[str] = Field(None, description="Account-info URL override, used verbatim")
    oauth: bool = Field(False, description="Premiumize: send the secret as access_token")

    @field_validator("secret", mode="before")
    @classmethod
    def _strip_secret(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("endpoint", mode="before")
    @classmethod
    def _blank_endpoint(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class ProviderStatus(BaseModel):
    """Normalized result of one adapter invocation."""

    model_config = ConfigDict(frozen=True)

    name: Provider
    premium_state: PremiumState = PremiumState.UNKNOWN
    days_remaining: Optional[int] = Field(None, ge=0)
    expiry: Optional[datetime] = None
    username: Optional[str] = None
    note: Optional[str] = None
    error: bool = False
    failure: Optional[FailureKind] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> ProviderStatus:
        if self.premium_state == PremiumState.INACTIVE:
            if self.days_remaining != 0 or self.expiry is not None:
                raise ValueError("inactive status must have days_remaining=0 and no expiry")
        if self.error != (self.failure is not None):
            raise ValueError("error flag and failure kind must be set together")
        if self.error:
            if self.premium_state != PremiumState.UNKNOWN:
                raise ValueError("failed lookup must have unknown premium state")
            if self.days_remaining is not None or self.expiry is not None:
                raise ValueError("failed lookup cannot carry time remaining")
        return self

    @property
    def display_name(self) -> str:
        return self.name.display_name

    @property
    def resolved(self) -> bool:
        return self.premium_state != PremiumState.UNKNOWN


class CacheEntry(BaseModel):
    """A cached result sequence and its lifetime."""

    model_config = ConfigDict(frozen=True)

    value: tuple[ProviderStatus, ...]
    created_at: datetime
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at


class AggregationResult(BaseModel):
    """Merged statuses for one request, in enable order."""

    model_config = ConfigDict(frozen=True)

    results: tuple[ProviderStatus, ...] = ()
    error: Optional[str] = Field(None, description="Request-level failure, distinct from per-provider errors")
    cached: bool = False

    @property
    def has_data(self) -> bool:
        return any(r.resolved or r.username for r in self.results)
