"""Turn partner-supplied key text into RSA key objects.

Partners hand over key material in whatever shape their tooling produced:
PEM armoured or bare base64, PKCS#1 or PKCS#8 private keys, SubjectPublicKeyInfo
public keys or whole X.509 certificates. Everything is decoded to DER first and
parsed with ``cryptography``; legacy PKCS#1 structures are rewrapped so the
parsers only ever see PKCS#8 / SubjectPublicKeyInfo.
"""
from __future__ import annotations

import base64
import binascii
import re
from typing import Final

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..exceptions import InvalidCertificate, InvalidKeyEncoding, MalformedKeyText
from . import der

PKCS1_PRIVATE_LABEL: Final[str] = "RSA PRIVATE KEY"
PKCS8_PRIVATE_LABEL: Final[str] = "PRIVATE KEY"
PKCS1_PUBLIC_LABEL: Final[str] = "RSA PUBLIC KEY"
SPKI_PUBLIC_LABEL: Final[str] = "PUBLIC KEY"
CERTIFICATE_LABEL: Final[str] = "CERTIFICATE"

_BEGIN_RE = re.compile(r"-----BEGIN ([A-Z0-9 ]+)-----")
_HEADER_LINE_RE = re.compile(r"^[A-Za-z0-9-]+:.*$", re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")
_PADDED_BODY_RE = re.compile(r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")


def _as_text(text: str | bytes) -> str:
    if isinstance(text, bytes):
        try:
            return text.decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedKeyText("Key text must be ASCII") from exc
    return text


def pem_label(text: str | bytes) -> str | None:
    """Label of the first PEM block in ``text``, or ``None`` for bare base64"""
    match = _BEGIN_RE.search(_as_text(text))
    return match.group(1) if match else None


def decode_key_text(text: str | bytes) -> bytes:
    """Strip PEM armour when present and base64-decode the body.

    Text without a ``-----BEGIN ...-----`` line is treated as bare base64.
    Raises :class:`MalformedKeyText` for anything that does not decode to a
    non-empty byte string.
    """

    source = _as_text(text)
    if not source.strip():
        raise MalformedKeyText("Key text is empty")

    match = _BEGIN_RE.search(source)
    if match:
        label = match.group(1)
        end_marker = f"-----END {label}-----"
        end = source.find(end_marker, match.end())
        if end < 0:
            raise MalformedKeyText(f"PEM block '{label}' has no END line")
        body = _HEADER_LINE_RE.sub("", source[match.end() : end])
    else:
        body = source

    body = _WHITESPACE_RE.sub("", body)
    if not _PADDED_BODY_RE.fullmatch(body):
        raise MalformedKeyText("Key text is not canonically padded base64")
    try:
        decoded = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedKeyText("Key text is not valid base64") from exc
    if not decoded:
        raise MalformedKeyText("Key text decoded to zero bytes")
    return decoded


def wrap_pkcs1_private_key(pkcs1: bytes) -> bytes:
    """Wrap a PKCS#1 RSAPrivateKey in a PKCS#8 PrivateKeyInfo"""
    if not pkcs1:
        raise InvalidKeyEncoding("PKCS#1 private key is empty")
    return der.sequence(
        der.tlv(der.TAG_INTEGER, b"\x00"),
        der.rsa_algorithm_identifier(),
        der.tlv(der.TAG_OCTET_STRING, pkcs1),
    )


def wrap_pkcs1_public_key(pkcs1: bytes) -> bytes:
    """Wrap a PKCS#1 RSAPublicKey in a SubjectPublicKeyInfo"""
    if not pkcs1:
        raise InvalidKeyEncoding("PKCS#1 public key is empty")
    return der.sequence(
        der.rsa_algorithm_identifier(),
        der.tlv(der.TAG_BIT_STRING, b"\x00" + pkcs1),
    )


def load_private_key(text: str | bytes) -> rsa.RSAPrivateKey:
    """Load an unencrypted RSA private key given as PKCS#1 or PKCS#8 text"""
    source = _as_text(text)
    label = pem_label(source)
    if label not in (None, PKCS1_PRIVATE_LABEL, PKCS8_PRIVATE_LABEL):
        raise InvalidKeyEncoding(f"Unsupported PEM label for a private key: {label}")
    key_bytes = decode_key_text(source)
    if label == PKCS1_PRIVATE_LABEL:
        key_bytes = wrap_pkcs1_private_key(key_bytes)
    try:
        key = serialization.load_der_private_key(key_bytes, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise InvalidKeyEncoding("Private key is not a valid PKCS#8 structure") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKeyEncoding(f"Expected RSA private key, got {type(key).__name__}")
    return key


def load_public_key(text: str | bytes) -> rsa.RSAPublicKey:
    """Load an RSA public key given as SubjectPublicKeyInfo (or PKCS#1) text"""
    source = _as_text(text)
    key_bytes = decode_key_text(source)
    if pem_label(source) == PKCS1_PUBLIC_LABEL:
        key_bytes = wrap_pkcs1_public_key(key_bytes)
    try:
        key = serialization.load_der_public_key(key_bytes)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise InvalidKeyEncoding("Public key is not a valid SubjectPublicKeyInfo structure") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKeyEncoding(f"Expected RSA public key, got {type(key).__name__}")
    return key


def load_public_key_from_certificate(text: str | bytes) -> rsa.RSAPublicKey:
    """Parse an X.509 certificate and return its RSA public key"""
    cert_bytes = decode_key_text(text)
    try:
        certificate = x509.load_der_x509_certificate(cert_bytes)
    except ValueError as exc:
        raise InvalidCertificate("Certificate is not a valid X.509 structure") from exc
    try:
        key = certificate.public_key()
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise InvalidCertificate("Certificate public key cannot be read") from exc
    if key is None:
        raise InvalidCertificate("Certificate carries no public key")
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidCertificate(f"Certificate key is not RSA ({type(key).__name__})")
    return key


def load_any_public_key(text: str | bytes) -> rsa.RSAPublicKey:
    """Load a public key from a certificate or a bare public key, by PEM label"""
    source = _as_text(text)
    label = pem_label(source)
    if label == CERTIFICATE_LABEL:
        return load_public_key_from_certificate(source)
    if label in (SPKI_PUBLIC_LABEL, PKCS1_PUBLIC_LABEL):
        return load_public_key(source)
    if label is not None:
        raise InvalidKeyEncoding(f"Unsupported PEM label for a public key: {label}")

    try:
        return load_public_key(source)
    except InvalidKeyEncoding:
        return load_public_key_from_certificate(source)


__all__ = [
    "CERTIFICATE_LABEL",
    "PKCS1_PRIVATE_LABEL",
    "PKCS1_PUBLIC_LABEL",
    "PKCS8_PRIVATE_LABEL",
    "SPKI_PUBLIC_LABEL",
    "decode_key_text",
    "load_any_public_key",
    "load_private_key",
    "load_public_key",
    "load_public_key_from_certificate",
    "pem_label",
    "wrap_pkcs1_private_key",
    "wrap_pkcs1_public_key",
]
