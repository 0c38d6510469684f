"""Cache keys derived from the active credential set.

A key must change whenever any secret byte, option or the enabled set
changes, and must never contain a usable secret. The redacted form keeps
keys readable in logs; a truncated digest makes them sensitive to changes in
the masked middle of a secret.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping, Sequence

from .models import Credential, Provider

MASK = "..."
DIGEST_CHARS = 12


def redact(secret: str) -> str:
    """Keep the first and last four characters, mask the rest."""
    if not secret:
        return "(none)"
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}{MASK}{secret[-4:]}"


def _digest(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()[:DIGEST_CHARS]


def _part(provider: Provider, credential: Credential) -> str:
    scheme = credential.auth_scheme.value if credential.auth_scheme else ""
    return ":".join([
        provider.value,
        redact(credential.secret),
        _digest(credential.secret) if credential.secret else "",
        scheme,
        credential.endpoint or "",
        "oauth" if credential.oauth else "",
    ])


def fingerprint(enabled: Sequence[Provider], credentials: Mapping[Provider, Credential]) -> str:
    """Deterministic memoization key for one request."""
    parts = [",".join(p.value for p in enabled)]
    for provider in enabled:
        parts.append(_part(provider, credentials.get(provider) or Credential()))
    return "|".join(parts)
