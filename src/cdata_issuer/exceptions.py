"""Central exception hierarchy"""
from __future__ import annotations


class CDataError(Exception):
    """Base exception for all failures"""


class KeyMaterialError(CDataError):
    """Raised when partner key text cannot be turned into a usable key"""


class MalformedKeyText(KeyMaterialError):
    """Raised when PEM armour or base64 body cannot be decoded"""


class InvalidKeyEncoding(KeyMaterialError):
    """Raised when decoded bytes are not a valid PKCS#8 / SubjectPublicKeyInfo RSA key"""


class InvalidCertificate(KeyMaterialError):
    """Raised when a certificate cannot be parsed or carries no usable public key"""


class IssuanceError(CDataError):
    """Raised when a token cannot be produced"""

    stage: str = "input"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class EncryptionFailure(IssuanceError):
    """Raised when the JWE (confidentiality) layer fails"""

    stage = "encrypt"


class SigningFailure(IssuanceError):
    """Raised when the JWS (authenticity) layer fails"""

    stage = "sign"


class LinkError(CDataError):
    """Raised when an Add-to-Wallet link cannot be built from the given identifiers"""


class MalformedToken(CDataError):
    """Raised when a compact token cannot be split or decoded"""


class ConfigError(CDataError):
    """Raised when configuration cannot be loaded or validated"""


__all__ = [
    "CDataError",
    "ConfigError",
    "EncryptionFailure",
    "InvalidCertificate",
    "InvalidKeyEncoding",
    "IssuanceError",
    "KeyMaterialError",
    "LinkError",
    "MalformedKeyText",
    "MalformedToken",
    "SigningFailure",
]
