"""Thread-safe registry of credentials keyed by caller-defined identities.

The registry lock is always taken before any credential lock. ``lookup``
holds the registry lock while refreshing, so lookups on different keys
serialize with each other.
"""

from __future__ import annotations

import logging
import threading
from typing import Generic, Hashable, TypeVar

from .errors import RefreshError
from .token import Credential

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)


class CredentialRegistry(Generic[K]):
    """In-memory map from an identity key (e.g. a team name) to a Credential.

    Lookups refresh expired tokens before returning them. A credential that
    fails to refresh is evicted rather than served stale.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[K, Credential] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def contains(self, key: K) -> bool:
        """Return True if a credential is stored under key."""
        with self._lock:
            return key in self._entries

    def keys(self) -> list[K]:
        """Return a snapshot of the registered keys."""
        with self._lock:
            return list(self._entries)

    def lookup(self, key: K) -> Credential | None:
        """Return the credential for key with a fresh token, or None.

        Missing entries and credentials that fail to refresh both yield
        None; the latter are removed from the registry.
        """
        with self._lock:
            credential = self._entries.get(key)
            if credential is None:
                self._entries.pop(key, None)
                return None
            try:
                credential.refresh_if_expired()
            except Exception as exc:
                logger.warning("Evicting credential %r: refresh failed: %s", key, exc)
                del self._entries[key]
                return None
            return credential

    def insert(self, key: K, credential: Credential) -> None:
        """Store credential under key, replacing any existing entry."""
        with self._lock:
            self._entries[key] = credential

    def remove(self, key: K) -> None:
        """Remove the entry for key if there is one."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def refresh_all_expired(self) -> None:
        """Refresh every expired credential in the registry.

        Stops at the first failure; entries after it are not visited.

        Raises:
            RefreshError: Wrapping the first failure and naming its key.
        """
        with self._lock:
            for key, credential in self._entries.items():
                with credential.lock:
                    try:
                        credential.refresh_if_expired()
                    except Exception as exc:
                        logger.warning("Refresh sweep stopped at %r: %s", key, exc)
                        raise RefreshError(key, exc) from exc
