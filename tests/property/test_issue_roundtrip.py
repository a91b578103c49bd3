from hypothesis import HealthCheck, given, settings, strategies as st
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from jwcrypto.common import base64url_decode as b64d

from cdata_issuer.token import issue


@settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(plaintext=st.text(min_size=1, max_size=512), partner_id=st.text(min_size=1, max_size=32))
def test_plaintext_survives_the_pipeline(platform_key, partner_key, plaintext: str, partner_id: str) -> None:
    token = issue(
        partner_id,
        platform_key.public_key,
        partner_key.public_key,
        partner_key.private_key,
        plaintext,
    )
    header_b64, payload_b64, signature_b64 = token.split(".")
    partner_key.public_key.verify(
        b64d(signature_b64),
        f"{header_b64}.{payload_b64}".encode("ascii"),
        padding.PKCS1v15(),
        hashes.SHA256(),
    )

    segments = b64d(payload_b64).decode("ascii").split(".")
    assert len(segments) == 5
    cek = platform_key.private_key.decrypt(b64d(segments[1]), padding.PKCS1v15())
    recovered = AESGCM(cek).decrypt(
        b64d(segments[2]),
        b64d(segments[3]) + b64d(segments[4]),
        segments[0].encode("ascii"),
    )
    assert recovered == plaintext.encode("utf-8")
