"""Claim names and protected headers of the two CDATA layers."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Final

from ..exceptions import IssuanceError

SIGNING_ALG: Final[str] = "RS256"
CONTENT_TYPE: Final[str] = "CARD"
FORMAT_VERSION: Final[str] = "3"
CERTIFICATE_ID: Final[str] = "YMtt"

KEY_ENCRYPTION_ALG: Final[str] = "RSA1_5"
CONTENT_ENCRYPTION_ALG: Final[str] = "A128GCM"

PARTNER_ID_KEY: Final[str] = "partnerId"
VERSION_KEY: Final[str] = "ver"
CERTIFICATE_ID_KEY: Final[str] = "certificateId"
UTC_KEY: Final[str] = "utc"


@dataclass(frozen=True, slots=True)
class CardHeader:
    """Protected header of the outer JWS"""

    partner_id: str
    utc: int
    certificate_id: str = CERTIFICATE_ID
    version: str = FORMAT_VERSION

    def validate(self) -> None:
        if not isinstance(self.partner_id, str) or not self.partner_id:
            raise IssuanceError("partnerId must be a non-empty string")
        if not self.certificate_id:
            raise IssuanceError("certificateId must be non-empty")
        if not self.version:
            raise IssuanceError("ver must be non-empty")
        if isinstance(self.utc, bool) or not isinstance(self.utc, int) or self.utc < 0:
            raise IssuanceError("utc must be a non-negative integer (epoch milliseconds)")

    def to_dict(self) -> Dict[str, Any]:
        self.validate()
        return {
            "alg": SIGNING_ALG,
            "cty": CONTENT_TYPE,
            PARTNER_ID_KEY: self.partner_id,
            VERSION_KEY: self.version,
            CERTIFICATE_ID_KEY: self.certificate_id,
            UTC_KEY: self.utc,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), sort_keys=True)


def encryption_header() -> Dict[str, str]:
    return {"alg": KEY_ENCRYPTION_ALG, "enc": CONTENT_ENCRYPTION_ALG}


__all__ = [
    "CERTIFICATE_ID",
    "CERTIFICATE_ID_KEY",
    "CONTENT_ENCRYPTION_ALG",
    "CONTENT_TYPE",
    "CardHeader",
    "FORMAT_VERSION",
    "KEY_ENCRYPTION_ALG",
    "PARTNER_ID_KEY",
    "SIGNING_ALG",
    "UTC_KEY",
    "VERSION_KEY",
    "encryption_header",
]
