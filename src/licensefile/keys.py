"""Key material loading for the signer and verifier.

A key reference is either an already-loaded ``cryptography`` key object, PEM
or DER bytes, PEM text, or a filesystem path to a key file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from licensefile.errors import InputError, KeyMaterialError

PrivateKey = Union[rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey]
PublicKey = Union[rsa.RSAPublicKey, ec.EllipticCurvePublicKey]
KeySource = Union[PrivateKey, PublicKey, bytes, str, "os.PathLike[str]"]

_PEM_PREFIX = "-----BEGIN"
_LOAD_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


def is_key_reference(source: object) -> bool:
    """Cheap shape check used before any key I/O happens."""
    if source is None:
        return False
    if isinstance(source, (str, bytes)):
        return bool(source.strip())
    if isinstance(source, os.PathLike):
        return True
    return isinstance(
        source,
        (
            rsa.RSAPrivateKey,
            rsa.RSAPublicKey,
            ec.EllipticCurvePrivateKey,
            ec.EllipticCurvePublicKey,
        ),
    )


def _read_material(source: object, *, kind: str) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, str) and source.lstrip().startswith(_PEM_PREFIX):
        return source.encode("utf-8")
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            return path.read_bytes()
        except (OSError, ValueError) as exc:
            raise KeyMaterialError(f"{kind} key file unreadable: {path}") from exc
    raise InputError(f"{kind} key must be a key object, bytes or a path, got {type(source).__name__}")


def _check_private(key: object) -> PrivateKey:
    if not isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        raise KeyMaterialError(f"unsupported private key type: {type(key).__name__}")
    return key


def _check_public(key: object) -> PublicKey:
    if not isinstance(key, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        raise KeyMaterialError(f"unsupported public key type: {type(key).__name__}")
    return key


def load_private_key(source: KeySource, password: bytes | None = None) -> PrivateKey:
    """Load an RSA or EC private key from ``source``."""
    if isinstance(source, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        return source
    material = _read_material(source, kind="private")
    if material.lstrip().startswith(_PEM_PREFIX.encode("ascii")):
        loader = serialization.load_pem_private_key
    else:
        loader = serialization.load_der_private_key
    try:
        key = loader(material, password=password)
    except _LOAD_ERRORS as exc:
        raise KeyMaterialError(f"private key could not be parsed: {exc}") from exc
    return _check_private(key)


def load_public_key(source: KeySource) -> PublicKey:
    """Load an RSA or EC public key, or take it from an X.509 certificate.

    A private key object is also accepted; its public half is used.
    """
    if isinstance(source, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        return source.public_key()
    if isinstance(source, (rsa.RSAPublicKey, ec.EllipticCurvePublicKey)):
        return source
    material = _read_material(source, kind="public")
    if material.lstrip().startswith(_PEM_PREFIX.encode("ascii")):
        key_loader = serialization.load_pem_public_key
        cert_loader = x509.load_pem_x509_certificate
    else:
        key_loader = serialization.load_der_public_key
        cert_loader = x509.load_der_x509_certificate
    try:
        key = key_loader(material)
    except _LOAD_ERRORS as key_exc:
        try:
            key = cert_loader(material).public_key()
        except _LOAD_ERRORS:
            raise KeyMaterialError(f"public key could not be parsed: {key_exc}") from key_exc
    return _check_public(key)
