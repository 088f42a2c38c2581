"""APNs provider token SDK.

Sign, cache, and refresh ES256 provider authentication tokens for the
Apple Push Notification service.
"""

from .token import Credential, TOKEN_TIMEOUT, ALGORITHM
from .registry import CredentialRegistry
from .keys import (
    auth_key_from_bytes,
    auth_key_from_file,
    generate_auth_key,
    auth_key_to_pem,
)
from .errors import (
    TokenError,
    AuthKeyNotPemError,
    AuthKeyNotECDSAError,
    AuthKeyMissingError,
    RefreshError,
)

__all__ = [
    "Credential",
    "CredentialRegistry",
    "TOKEN_TIMEOUT",
    "ALGORITHM",
    "auth_key_from_bytes",
    "auth_key_from_file",
    "generate_auth_key",
    "auth_key_to_pem",
    "TokenError",
    "AuthKeyNotPemError",
    "AuthKeyNotECDSAError",
    "AuthKeyMissingError",
    "RefreshError",
]
__version__ = "0.1.0"
