"""Signed callback tokens describing a card state change.

A callback token is a plain RS256 JWT signed with the partner key. Its
claims identify the card and the event and expire one hour after issue.
"""
from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Final, Optional

from cryptography.hazmat.primitives.asymmetric import rsa
from jwcrypto import jwk, jwt
from jwcrypto.common import JWException

from ..exceptions import IssuanceError, SigningFailure
from .header import SIGNING_ALG

CALLBACK_TTL_SECONDS: Final[int] = 3600


class CardEvent(str, Enum):
    ADDED = "ADDED"
    DELETED = "DELETED"
    CANCELED = "CANCELED"


@dataclass(frozen=True)
class CardStateCallback:
    partner_id: str
    card_id: str
    event: CardEvent
    country_code: str
    timestamp: int

    def validate(self) -> None:
        for name in ("partner_id", "card_id", "country_code"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise IssuanceError(f"{name} must be a non-empty string")
        try:
            CardEvent(self.event)
        except ValueError as exc:
            raise IssuanceError(f"Unknown card event: {self.event}") from exc
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise IssuanceError("timestamp must be epoch seconds")


def callback_claims(callback: CardStateCallback, *, issued_at: int, token_id: str) -> Dict[str, Any]:
    callback.validate()
    return {
        "partner_id": callback.partner_id,
        "card_id": callback.card_id,
        "event": CardEvent(callback.event).value,
        "country_code": callback.country_code,
        "timestamp": callback.timestamp,
        "iat": issued_at,
        "exp": issued_at + CALLBACK_TTL_SECONDS,
        "jti": token_id,
    }


def create_callback_token(
    callback: CardStateCallback,
    private_key: rsa.RSAPrivateKey,
    *,
    now: Optional[Callable[[], int]] = None,
    token_id: Optional[str] = None,
) -> str:
    """Sign ``callback`` as an RS256 JWT.

    ``now`` returns epoch seconds and defaults to the wall clock; ``token_id``
    becomes the ``jti`` claim and defaults to a random UUID.
    """
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise SigningFailure("Callback signing key must be an RSA private key")
    issued_at = int(now()) if now is not None else int(time.time())
    claims = callback_claims(callback, issued_at=issued_at, token_id=token_id or str(uuid.uuid4()))
    try:
        token = jwt.JWT(header={"alg": SIGNING_ALG, "typ": "JWT"}, claims=claims)
        token.make_signed_token(jwk.JWK.from_pyca(private_key))
        return token.serialize()
    except (JWException, ValueError, TypeError) as exc:
        raise SigningFailure(f"Callback token signing failed: {exc}") from exc


__all__ = [
    "CALLBACK_TTL_SECONDS",
    "CardEvent",
    "CardStateCallback",
    "callback_claims",
    "create_callback_token",
]
