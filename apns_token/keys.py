"""Loading of APNs .p8 authentication keys.

Apple issues provider keys as PKCS#8 private keys on the P-256 curve,
wrapped in a single PEM block.
"""

from __future__ import annotations

import base64
import binascii
import os
import re

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .errors import AuthKeyNotECDSAError, AuthKeyNotPemError

# First PEM block: BEGIN marker at the start of a line, base64 body, matching END
_PEM_RE = re.compile(
    rb"^-----BEGIN ([A-Z0-9 ]+)-----\s*(.*?)\s*-----END \1-----",
    re.DOTALL | re.MULTILINE,
)

# .p8 files are unencrypted PKCS#8
_PKCS8_LABEL = b"PRIVATE KEY"


def _pem_block(data: bytes) -> tuple[bytes, bytes]:
    """Return (label, DER bytes) of the first PEM block in data."""
    m = _PEM_RE.search(data)
    if m is None:
        raise AuthKeyNotPemError()
    body = b"".join(m.group(2).split())
    try:
        return m.group(1), base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise AuthKeyNotPemError() from exc


def auth_key_from_bytes(data: bytes) -> ec.EllipticCurvePrivateKey:
    """Load an APNs auth key from in-memory .p8 contents.

    Args:
        data: PEM-encoded PKCS#8 private key.

    Returns:
        The EC P-256 private key.

    Raises:
        AuthKeyNotPemError: If data holds no PEM block.
        AuthKeyNotECDSAError: If the key is not an EC key on P-256.
        ValueError: If the block is not PKCS#8 or the DER body cannot
            be parsed.
    """
    label, der = _pem_block(data)
    if label != _PKCS8_LABEL:
        raise ValueError(f"AuthKey PEM block is {label.decode()!r}, expected PKCS#8 'PRIVATE KEY'")
    key = serialization.load_der_private_key(der, password=None)
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise AuthKeyNotECDSAError()
    if not isinstance(key.curve, ec.SECP256R1):
        raise AuthKeyNotECDSAError()
    return key


def auth_key_from_file(path: str | os.PathLike[str]) -> ec.EllipticCurvePrivateKey:
    """Load an APNs auth key from a .p8 file on disk."""
    with open(path, "rb") as fh:
        data = fh.read()
    return auth_key_from_bytes(data)


def generate_auth_key() -> ec.EllipticCurvePrivateKey:
    """Generate a fresh P-256 private key."""
    return ec.generate_private_key(ec.SECP256R1())


def auth_key_to_pem(key: ec.EllipticCurvePrivateKey) -> bytes:
    """Serialize a private key the way Apple ships .p8 files (PKCS#8 PEM)."""
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
