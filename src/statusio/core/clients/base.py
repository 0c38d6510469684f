"""Shared request and result helpers for the provider account-info clients.

Every client exposes ``fetch_status(credential, client=None)`` and never
raises: request and parsing problems are raised internally as
:class:`ProviderFailure` and turned into an error status by
:func:`provider_adapter`.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

import httpx

from ... import __version__
from ..fingerprint import redact
from ..models import AuthScheme, Credential, FailureKind, PremiumState, Provider, ProviderStatus
from ..timeleft import TimeLeft

logger = logging.getLogger(__name__)

USER_AGENT = f"statusio/{__version__}"
DEFAULT_TIMEOUT = httpx.Timeout(20.0, connect=10.0)

Adapter = Callable[[Credential, Optional[httpx.AsyncClient]], Awaitable[ProviderStatus]]


class ProviderFailure(Exception):
    """A lookup that could not confirm or deny premium status."""

    def __init__(self, kind: FailureKind, note: str, username: Optional[str] = None):
        super().__init__(note)
        self.kind = kind
        self.note = note
        self.username = username

    def to_status(self, provider: Provider) -> ProviderStatus:
        return failed(provider, self.kind, self.note, self.username)


def failed(
    provider: Provider,
    kind: FailureKind,
    note: str,
    username: Optional[str] = None,
) -> ProviderStatus:
    return ProviderStatus(
        name=provider,
        premium_state=PremiumState.UNKNOWN,
        username=username,
        note=note,
        error=True,
        failure=kind,
    )


def active(
    provider: Provider,
    time_left: Optional[TimeLeft],
    username: Optional[str] = None,
) -> ProviderStatus:
    return ProviderStatus(
        name=provider,
        premium_state=PremiumState.ACTIVE,
        days_remaining=time_left.days if time_left else None,
        expiry=time_left.expiry if time_left else None,
        username=username,
    )


def inactive(
    provider: Provider,
    username: Optional[str] = None,
    note: Optional[str] = None,
) -> ProviderStatus:
    """Confirmed non-premium account; stray time fields are ignored."""
    return ProviderStatus(
        name=provider,
        premium_state=PremiumState.INACTIVE,
        days_remaining=0,
        expiry=None,
        username=username,
        note=note,
    )


def text(value: Any) -> Optional[str]:
    """Best-effort display string from a JSON scalar."""
    if value is None or value == "" or isinstance(value, (dict, list, bool)):
        return None
    return str(value)


def bad_response(username: Optional[str] = None) -> ProviderFailure:
    return ProviderFailure(FailureKind.MALFORMED_RESPONSE, "bad response", username)


def build_request(
    credential: Credential,
    default_endpoint: str,
    default_scheme: AuthScheme,
    query_param: str,
) -> tuple[str, dict[str, str], dict[str, str]]:
    """Resolve URL, headers and query parameters for one account lookup."""
    url = credential.endpoint or default_endpoint
    headers = {"User-Agent": USER_AGENT}
    params: dict[str, str] = {}
    scheme = credential.auth_scheme or default_scheme
    if scheme == AuthScheme.BEARER:
        headers["Authorization"] = f"Bearer {credential.secret}"
    else:
        params[query_param] = credential.secret
    return url, headers, params


async def get_account_json(
    credential: Credential,
    *,
    endpoint: str,
    default_scheme: AuthScheme,
    query_param: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """GET the account-info endpoint and decode its JSON body."""
    url, headers, params = build_request(credential, endpoint, default_scheme, query_param)

    try:
        # httpx replaces an existing query string when params are passed
        url = httpx.URL(url).copy_merge_params(params)
        if client is None:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as own_client:
                response = await own_client.get(url, headers=headers)
        else:
            response = await client.get(url, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise ProviderFailure(FailureKind.TRANSPORT_FAILURE, f"network {str(exc) or type(exc).__name__}") from exc

    if not response.is_success:
        raise ProviderFailure(FailureKind.UNEXPECTED_STATUS, f"HTTP {response.status_code}")

    try:
        return response.json()
    except ValueError as exc:
        raise bad_response() from exc


def provider_adapter(provider: Provider, missing_note: str = "missing key"):
    """Wrap a client coroutine so every failure becomes an error status."""

    def decorate(fetch: Adapter) -> Adapter:
        @functools.wraps(fetch)
        async def fetch_status(
            credential: Credential,
            client: Optional[httpx.AsyncClient] = None,
        ) -> ProviderStatus:
            if not credential.secret:
                return failed(provider, FailureKind.CREDENTIAL_MISSING, missing_note)
            try:
                return await fetch(credential, client)
            except ProviderFailure as exc:
                logger.warning(
                    "%s lookup failed for %s: %s (%s)",
                    provider.display_name, redact(credential.secret), exc.note, exc.kind.value,
                )
                return exc.to_status(provider)

        return fetch_status

    return decorate
