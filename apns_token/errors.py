"""Exceptions raised by the apns-token package."""

from __future__ import annotations

from typing import Hashable


class TokenError(Exception):
    """Base class for all apns-token errors."""


class AuthKeyNotPemError(TokenError):
    """Raised when key bytes contain no PEM block."""

    def __init__(self, message: str = "AuthKey must be a valid .p8 PEM file") -> None:
        super().__init__(message)


class AuthKeyNotECDSAError(TokenError):
    """Raised when the decoded key is not an ECDSA P-256 private key."""

    def __init__(self, message: str = "AuthKey must be an ECDSA P-256 private key") -> None:
        super().__init__(message)


class AuthKeyMissingError(TokenError):
    """Raised when signing is attempted without a key."""

    def __init__(self, message: str = "AuthKey was None") -> None:
        super().__init__(message)


class RefreshError(TokenError):
    """Raised when a registry sweep fails to refresh a credential.

    The failing key is available as ``key`` and the original exception as
    ``error`` (also chained as ``__cause__``).
    """

    def __init__(self, key: Hashable, error: BaseException) -> None:
        super().__init__(f"{key!r} - {error}")
        self.key = key
        self.error = error

    def __reduce__(self):
        return (self.__class__, (self.key, self.error))
