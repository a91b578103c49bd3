"""Issue signed, encrypted CDATA tokens for wallet card data."""
from __future__ import annotations

from .config import AppConfig, IssuerConfig, config_from_env, load_config
from .exceptions import (
    CDataError,
    ConfigError,
    EncryptionFailure,
    InvalidCertificate,
    InvalidKeyEncoding,
    IssuanceError,
    KeyMaterialError,
    LinkError,
    MalformedKeyText,
    MalformedToken,
    SigningFailure,
)
from .keys import (
    decode_key_text,
    load_any_public_key,
    load_private_key,
    load_public_key,
    load_public_key_from_certificate,
)
from .token import CDataIssuer, CardEvent, LinkType, TokenInfo, inspect_token, issue

__version__ = "1.1.2"

__all__ = [
    "AppConfig",
    "CDataError",
    "CDataIssuer",
    "CardEvent",
    "ConfigError",
    "EncryptionFailure",
    "InvalidCertificate",
    "InvalidKeyEncoding",
    "IssuanceError",
    "IssuerConfig",
    "KeyMaterialError",
    "LinkError",
    "LinkType",
    "MalformedKeyText",
    "MalformedToken",
    "SigningFailure",
    "TokenInfo",
    "config_from_env",
    "decode_key_text",
    "inspect_token",
    "issue",
    "load_any_public_key",
    "load_config",
    "load_private_key",
    "load_public_key",
    "load_public_key_from_certificate",
]
