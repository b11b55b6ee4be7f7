"""Credential lookup for generation providers.

The service never persists API keys. A store only answers "which key does
this provider use right now", returning ``None`` when none is configured.
"""

from typing import Protocol

from sommelier_service.config import Settings


class CredentialStore(Protocol):
    def get_credential(self, provider: str) -> str | None: ...


class SettingsCredentialStore:
    """Reads ``<provider>_api_key`` fields from application settings."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def get_credential(self, provider: str) -> str | None:
        key = getattr(self.settings, f"{provider}_api_key", "")
        return key or None


class InMemoryCredentialStore:
    """Dict-backed store for tests and embedding applications."""

    def __init__(self, keys: dict[str, str] | None = None):
        self._keys = dict(keys or {})

    def get_credential(self, provider: str) -> str | None:
        return self._keys.get(provider) or None

    def set_credential(self, provider: str, key: str) -> None:
        self._keys[provider] = key
