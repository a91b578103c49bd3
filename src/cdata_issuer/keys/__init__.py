"""Key material loading."""
from .loader import (
    CERTIFICATE_LABEL,
    PKCS1_PRIVATE_LABEL,
    PKCS1_PUBLIC_LABEL,
    PKCS8_PRIVATE_LABEL,
    SPKI_PUBLIC_LABEL,
    decode_key_text,
    load_any_public_key,
    load_private_key,
    load_public_key,
    load_public_key_from_certificate,
    pem_label,
    wrap_pkcs1_private_key,
    wrap_pkcs1_public_key,
)

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
