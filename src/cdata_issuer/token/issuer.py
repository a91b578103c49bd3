"""Two-stage CDATA pipeline: JWE for the platform, wrapped in a partner-signed JWS."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa
from jwcrypto import jwe, jwk, jws
from jwcrypto.common import JWException, json_encode

from ..exceptions import EncryptionFailure, IssuanceError, LinkError, SigningFailure
from ..keys import load_any_public_key, load_private_key
from .callback import CardEvent, CardStateCallback, create_callback_token
from .header import (
    CERTIFICATE_ID,
    CONTENT_ENCRYPTION_ALG,
    FORMAT_VERSION,
    KEY_ENCRYPTION_ALG,
    SIGNING_ALG,
    CardHeader,
    encryption_header,
)
from .links import LinkType, data_fetch_link, data_transmit_link

if TYPE_CHECKING:
    from ..config import IssuerConfig

logger = structlog.get_logger(__name__)

Clock = Callable[[], int]

_CRYPTO_ERRORS = (JWException, ValueError, TypeError, UnsupportedAlgorithm)
_PUBLIC_MEMBERS = ("kty", "n", "e")
_PRIVATE_MEMBERS = ("d", "p", "q", "dp", "dq", "qi")


def current_millis() -> int:
    return time.time_ns() // 1_000_000


def encrypt_payload(recipient_public_key: rsa.RSAPublicKey, plaintext: str) -> str:
    """Compact JWE (RSA1_5 / A128GCM) of ``plaintext`` for the recipient"""
    try:
        recipient = jwk.JWK.from_pyca(recipient_public_key)
        envelope = jwe.JWE(
            plaintext.encode("utf-8"),
            protected=json_encode(encryption_header()),
            algs=[KEY_ENCRYPTION_ALG, CONTENT_ENCRYPTION_ALG],
        )
        envelope.add_recipient(recipient)
        compact = envelope.serialize(compact=True)
    except _CRYPTO_ERRORS as exc:
        raise EncryptionFailure(f"JWE encryption failed: {exc}") from exc

    if compact.count(".") != 4:
        raise EncryptionFailure("JWE compact serialization must have 5 segments")
    return compact


def signer_key(public_key: rsa.RSAPublicKey, private_key: rsa.RSAPrivateKey) -> jwk.JWK:
    """Assemble a signing JWK from the public members of one key and the private members of the other.

    Whether the two halves belong together is not checked here; a mismatch is
    rejected by the backend when the private numbers are loaded, or results in
    a token that fails verification downstream.
    """
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise SigningFailure("Signer public key must be an RSA public key")
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise SigningFailure("Signer private key must be an RSA private key")
    try:
        public = jwk.JWK.from_pyca(public_key).export_public(as_dict=True)
        private = jwk.JWK.from_pyca(private_key).export_private(as_dict=True)
        members = {name: public[name] for name in _PUBLIC_MEMBERS}
        members.update({name: private[name] for name in _PRIVATE_MEMBERS})
        return jwk.JWK(**members)
    except (*_CRYPTO_ERRORS, KeyError) as exc:
        raise SigningFailure(f"Cannot assemble signer key: {exc}") from exc


def sign_payload(key: jwk.JWK, header: CardHeader, payload: str) -> str:
    """Compact RS256 JWS over ``payload`` with ``header`` as protected header"""
    try:
        protected = header.to_json()
    except IssuanceError as exc:
        raise SigningFailure(str(exc)) from exc
    try:
        envelope = jws.JWS(payload.encode("utf-8"))
        envelope.add_signature(key, alg=SIGNING_ALG, protected=protected)
        compact = envelope.serialize(compact=True)
    except _CRYPTO_ERRORS as exc:
        raise SigningFailure(f"JWS signing failed: {exc}") from exc

    if compact.count(".") != 2:
        raise SigningFailure("JWS compact serialization must have 3 segments")
    return compact


def issue(
    partner_id: str,
    recipient_public_key: rsa.RSAPublicKey,
    signer_public_key: rsa.RSAPublicKey,
    signer_private_key: rsa.RSAPrivateKey,
    plaintext: str,
    *,
    certificate_id: str = CERTIFICATE_ID,
    version: str = FORMAT_VERSION,
    now: Optional[Clock] = None,
) -> str:
    """Issue a CDATA token.

    The plaintext is first encrypted for ``recipient_public_key``; the
    resulting compact JWE becomes the payload of a JWS signed with the
    partner's key pair. ``utc`` in the JWS header is read from ``now`` (epoch
    milliseconds) or the wall clock at call time.

    Raises
    ------
    IssuanceError
        Invalid ``partner_id`` or ``plaintext``.
    EncryptionFailure
        The JWE layer failed.
    SigningFailure
        The JWS layer failed.
    """

    if not isinstance(partner_id, str) or not partner_id:
        raise IssuanceError("partner_id must be a non-empty string")
    if not isinstance(plaintext, str):
        raise IssuanceError(f"plaintext must be str, got {type(plaintext).__name__}")

    log = logger.bind(partner_id=partner_id, certificate_id=certificate_id)
    try:
        if not isinstance(recipient_public_key, rsa.RSAPublicKey):
            raise EncryptionFailure("Recipient key must be an RSA public key")
        inner = encrypt_payload(recipient_public_key, plaintext)

        key = signer_key(signer_public_key, signer_private_key)
        header = CardHeader(
            partner_id=partner_id,
            utc=(now or current_millis)(),
            certificate_id=certificate_id,
            version=version,
        )
        token = sign_payload(key, header, inner)
    except IssuanceError as exc:
        log.error("cdata.issue_failed", stage=exc.stage, error=str(exc))
        raise

    log.info("cdata.issued", utc=header.utc, token_length=len(token))
    return token


@dataclass(frozen=True)
class CDataIssuer:
    """Issuer bound to one partner configuration and its key material"""

    config: IssuerConfig
    recipient_public_key: rsa.RSAPublicKey
    signer_public_key: rsa.RSAPublicKey
    signer_private_key: rsa.RSAPrivateKey
    clock: Optional[Clock] = None

    @classmethod
    def from_key_text(
        cls,
        config: IssuerConfig,
        *,
        recipient_key: str | bytes,
        signer_public_key: str | bytes,
        signer_private_key: str | bytes,
        clock: Optional[Clock] = None,
    ) -> "CDataIssuer":
        return cls(
            config=config,
            recipient_public_key=load_any_public_key(recipient_key),
            signer_public_key=load_any_public_key(signer_public_key),
            signer_private_key=load_private_key(signer_private_key),
            clock=clock,
        )

    def issue(self, plaintext: str) -> str:
        return issue(
            self.config.partner_id,
            self.recipient_public_key,
            self.signer_public_key,
            self.signer_private_key,
            plaintext,
            certificate_id=self.config.certificate_id,
            version=self.config.version,
            now=self.clock,
        )

    def issue_card(self, card: Mapping[str, Any]) -> str:
        try:
            plaintext = json.dumps(card, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise IssuanceError(f"Card data is not JSON serialisable: {exc}") from exc
        return self.issue(plaintext)

    def transmit_link(self, card_id: str, plaintext: str) -> str:
        """Issue ``plaintext`` and embed the token in a data-transmit link"""
        if not isinstance(card_id, str) or not card_id.strip():
            raise LinkError("card id is required")
        return data_transmit_link(card_id, self.issue(plaintext))

    def fetch_link(self, card_id: str, ref_id: str) -> str:
        return data_fetch_link(self.config.certificate_id, card_id, ref_id)

    def atw_link(
        self,
        card_id: str,
        link_type: LinkType | str | None = None,
        *,
        plaintext: Optional[str] = None,
        ref_id: Optional[str] = None,
    ) -> str:
        """Build either link shape; ``link_type`` defaults to data transmit"""
        kind = LinkType.parse(link_type)
        if kind is LinkType.DATA_FETCH:
            if ref_id is None:
                raise LinkError("reference id is required for data fetch links")
            return self.fetch_link(card_id, ref_id)
        if plaintext is None:
            raise LinkError("plaintext is required for data transmit links")
        return self.transmit_link(card_id, plaintext)

    def callback_token(
        self,
        card_id: str,
        event: CardEvent | str,
        country_code: str,
        *,
        timestamp: Optional[int] = None,
    ) -> str:
        """RS256 JWT describing a card state change, valid for one hour"""
        issued_at = (self.clock or current_millis)() // 1000
        try:
            card_event = CardEvent(event)
        except ValueError as exc:
            raise IssuanceError(f"Unknown card event: {event}") from exc
        callback = CardStateCallback(
            partner_id=self.config.partner_id,
            card_id=card_id,
            event=card_event,
            country_code=country_code,
            timestamp=issued_at if timestamp is None else timestamp,
        )
        return create_callback_token(callback, self.signer_private_key, now=lambda: issued_at)


__all__ = [
    "CDataIssuer",
    "Clock",
    "current_millis",
    "encrypt_payload",
    "issue",
    "sign_payload",
    "signer_key",
]
