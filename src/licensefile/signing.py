"""SHA-256 signatures over canonical license bytes."""

from __future__ import annotations

import base64
import binascii

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from licensefile.errors import FormatError, InputError
from licensefile.keys import KeySource, load_private_key, load_public_key


def sign(message: bytes, private_key: KeySource, password: bytes | None = None) -> str:
    """Sign ``message`` and return the base64 signature.

    RSA keys use PKCS#1 v1.5 with SHA-256; EC keys use ECDSA with SHA-256.
    """
    if not isinstance(message, bytes):
        raise InputError("message must be bytes")
    key = load_private_key(private_key, password=password)
    if isinstance(key, rsa.RSAPrivateKey):
        signature = key.sign(message, padding.PKCS1v15(), hashes.SHA256())
    else:
        signature = key.sign(message, ec.ECDSA(hashes.SHA256()))
    return base64.b64encode(signature).decode("ascii")


def decode_signature(signature: str) -> bytes:
    if not isinstance(signature, str) or not signature.strip():
        raise FormatError("signature must be a non-empty base64 string")
    try:
        return base64.b64decode(signature.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FormatError(f"signature is not valid base64: {exc}") from exc


def verify(message: bytes, signature: str, public_key: KeySource) -> bool:
    """Return whether ``signature`` matches ``message`` under ``public_key``.

    A mismatch, including a signature made with another scheme, is ``False``.
    Undecodable signatures and unusable keys raise.
    """
    if not isinstance(message, bytes):
        raise InputError("message must be bytes")
    raw = decode_signature(signature)
    key = load_public_key(public_key)
    try:
        if isinstance(key, rsa.RSAPublicKey):
            key.verify(raw, message, padding.PKCS1v15(), hashes.SHA256())
        else:
            key.verify(raw, message, ec.ECDSA(hashes.SHA256()))
    except InvalidSignature:
        return False
    return True
