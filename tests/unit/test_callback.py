from __future__ import annotations

import json

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from jwcrypto import jwk, jws

from cdata_issuer.config import IssuerConfig
from cdata_issuer.exceptions import IssuanceError, SigningFailure
from cdata_issuer.token import CDataIssuer, CardEvent, CardStateCallback, create_callback_token
from cdata_issuer.token.callback import CALLBACK_TTL_SECONDS

PARTNER_ID = "4059557693262156416"


def _claims(token: str, public_key) -> tuple[dict, dict]:
    verified = jws.JWS()
    verified.deserialize(token, key=jwk.JWK.from_pyca(public_key))
    return verified.jose_header, json.loads(verified.payload)


@pytest.fixture()
def issuer(platform_key, partner_key) -> CDataIssuer:
    return CDataIssuer(
        config=IssuerConfig(partner_id=PARTNER_ID),
        recipient_public_key=platform_key.public_key,
        signer_public_key=partner_key.public_key,
        signer_private_key=partner_key.private_key,
        clock=lambda: 1_700_000_000_750,
    )


def test_callback_token_claims(issuer, partner_key) -> None:
    token = issuer.callback_token("card-7", "ADDED", "US", timestamp=1_699_999_990)
    header, claims = _claims(token, partner_key.public_key)

    assert header["alg"] == "RS256"
    assert header["typ"] == "JWT"
    jti = claims.pop("jti")
    assert len(jti) == 36
    assert claims == {
        "partner_id": PARTNER_ID,
        "card_id": "card-7",
        "event": "ADDED",
        "country_code": "US",
        "timestamp": 1_699_999_990,
        "iat": 1_700_000_000,
        "exp": 1_700_000_000 + CALLBACK_TTL_SECONDS,
    }


def test_callback_timestamp_defaults_to_issue_time(issuer, partner_key) -> None:
    _, claims = _claims(issuer.callback_token("card-7", CardEvent.DELETED, "KR"), partner_key.public_key)
    assert claims["timestamp"] == claims["iat"] == 1_700_000_000
    assert claims["event"] == "DELETED"


def test_callback_tokens_get_distinct_ids(issuer, partner_key) -> None:
    first = _claims(issuer.callback_token("card-7", "CANCELED", "US"), partner_key.public_key)[1]
    second = _claims(issuer.callback_token("card-7", "CANCELED", "US"), partner_key.public_key)[1]
    assert first["jti"] != second["jti"]


def test_non_rsa_key_cannot_sign_callbacks() -> None:
    private_key = ec.generate_private_key(ec.SECP256R1())
    callback = CardStateCallback(PARTNER_ID, "card-7", CardEvent.ADDED, "US", 1)
    with pytest.raises(SigningFailure):
        create_callback_token(callback, private_key, now=lambda: 10, token_id="fixed")


def test_callback_token_with_fixed_id(partner_key) -> None:
    callback = CardStateCallback(PARTNER_ID, "card-7", CardEvent.ADDED, "US", 1)
    token = create_callback_token(callback, partner_key.private_key, now=lambda: 10, token_id="fixed")
    _, claims = _claims(token, partner_key.public_key)
    assert claims["jti"] == "fixed"
    assert claims["iat"] == 10
    assert claims["exp"] == 10 + CALLBACK_TTL_SECONDS


def test_callback_token_does_not_verify_with_another_key(issuer, other_partner_key) -> None:
    token = issuer.callback_token("card-7", "ADDED", "US")
    with pytest.raises(jws.InvalidJWSSignature):
        _claims(token, other_partner_key.public_key)


def test_unknown_event_is_rejected(issuer) -> None:
    with pytest.raises(IssuanceError):
        issuer.callback_token("card-7", "UPDATED", "US")


@pytest.mark.parametrize("card_id, country_code", [("", "US"), ("card-7", "")])
def test_blank_identifiers_are_rejected(issuer, card_id: str, country_code: str) -> None:
    with pytest.raises(IssuanceError):
        issuer.callback_token(card_id, "ADDED", country_code)
