"""APNs provider authentication tokens.

A :class:`Credential` holds one signing identity (key, key ID, team ID) and
the bearer token most recently signed with it. APNs rejects tokens whose
``iat`` is more than an hour old, so tokens are regenerated after
``TOKEN_TIMEOUT`` seconds.
"""

from __future__ import annotations

import logging
import os
import threading
import time

import jwt
from cryptography.hazmat.primitives.asymmetric import ec

from .errors import AuthKeyMissingError
from .keys import auth_key_from_bytes, auth_key_from_file

logger = logging.getLogger(__name__)

# Seconds a token stays usable; kept under APNs' one-hour limit
TOKEN_TIMEOUT = 3000
ALGORITHM = "ES256"


def now_seconds() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())


class Credential:
    """A signing identity plus its current bearer token.

    ``bearer`` and ``issued_at`` always change together. Use
    :meth:`refresh_if_expired` (or a :class:`~apns_token.registry.CredentialRegistry`)
    to obtain a usable token; :meth:`sign` is the unguarded primitive.
    """

    def __init__(
        self,
        signing_key: ec.EllipticCurvePrivateKey | None,
        key_id: str,
        team_id: str,
        timeout: int = TOKEN_TIMEOUT,
    ) -> None:
        self.signing_key = signing_key
        self._key_id = key_id
        self._team_id = team_id
        self.timeout = timeout
        self.issued_at = 0
        self.bearer: str | None = None
        # Re-entrant: a registry sweep holds it around refresh_if_expired()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        key_id: str,
        team_id: str,
        timeout: int = TOKEN_TIMEOUT,
    ) -> "Credential":
        """Build a credential from in-memory .p8 contents.

        Key loading errors propagate; no credential is created.
        """
        return cls(auth_key_from_bytes(data), key_id, team_id, timeout=timeout)

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike[str],
        key_id: str,
        team_id: str,
        timeout: int = TOKEN_TIMEOUT,
    ) -> "Credential":
        """Build a credential from a .p8 file on disk."""
        return cls(auth_key_from_file(path), key_id, team_id, timeout=timeout)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def key_id(self) -> str:
        """The 10-character key identifier, sent as ``kid``."""
        return self._key_id

    @property
    def team_id(self) -> str:
        """The developer team identifier, sent as ``iss``."""
        return self._team_id

    @property
    def lock(self) -> "threading.RLock":
        """The re-entrant lock guarding ``bearer``, ``issued_at`` and signing.

        Readers that need ``bearer`` and ``issued_at`` as a consistent pair
        must hold it, or use :meth:`snapshot`.
        """
        return self._lock

    def __repr__(self) -> str:
        return (
            f"Credential(key_id={self._key_id!r}, team_id={self._team_id!r}, "
            f"issued_at={self.issued_at})"
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def is_expired(self) -> bool:
        """Return True once ``timeout`` seconds have passed since signing."""
        return now_seconds() - self.issued_at >= self.timeout

    def sign(self) -> bool:
        """Sign a new token unconditionally.

        Bypasses both the expiry check and the lock; callers wanting a
        usable token should call :meth:`refresh_if_expired` instead.

        Returns:
            True once the new token is stored.

        Raises:
            AuthKeyMissingError: If no signing key is set.
        """
        if self.signing_key is None:
            raise AuthKeyMissingError()
        issued_at = now_seconds()
        bearer = jwt.encode(
            {"iss": self._team_id, "iat": issued_at},
            self.signing_key,
            algorithm=ALGORITHM,
            # typ=None drops PyJWT's default "typ" header
            headers={"kid": self._key_id, "typ": None},
        )
        self.issued_at = issued_at
        self.bearer = bearer
        logger.debug("Generated token for key %s (team %s)", self._key_id, self._team_id)
        return True

    def refresh_if_expired(self) -> bool:
        """Sign a new token if the current one has expired.

        Returns:
            True if a new token was signed, False if the current one is
            still valid.
        """
        with self._lock:
            if self.is_expired():
                return self.sign()
            return False

    def snapshot(self) -> tuple[str | None, int]:
        """Return ``(bearer, issued_at)`` read together under the lock."""
        with self._lock:
            return self.bearer, self.issued_at

    def authorization_header(self) -> dict[str, str]:
        """Return the ``authorization`` header for an APNs request."""
        with self._lock:
            self.refresh_if_expired()
            return {"authorization": f"bearer {self.bearer}"}
